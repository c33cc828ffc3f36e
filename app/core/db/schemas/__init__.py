# Import models so Base metadata is aware of them
from .quiz import QuizRecord, QuestionRecord, QuestionOptionRecord  # noqa: F401
