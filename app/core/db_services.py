"""Database service classes for persisting generated quizzes."""

from __future__ import annotations

import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from app.core.db.schemas.quiz import (
    QuestionOptionRecord,
    QuestionRecord,
    QuizRecord,
)
from app.core.logging import get_logger
from app.modules.flows.models import GeneratedQuiz, QuizQuestion, SaveQuizResult

logger = get_logger(__name__)

DUPLICATE_QUIZ_MESSAGE = "A quiz already exists for this topic."
SAVE_FAILED_MESSAGE = "Failed to save the generated quiz to the database."


def _is_unique_violation(error: IntegrityError) -> bool:
    orig = error.orig
    return getattr(orig, "sqlstate", None) == "23505" or "unique" in str(orig).lower()


class QuizPersistenceService:
    """Service for saving and loading topic quizzes."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_quiz_for_topic(
        self, topic_id: uuid.UUID, questions: list[QuizQuestion]
    ) -> SaveQuizResult:
        """Save a quiz with its questions and options in one transaction."""
        quiz = QuizRecord(id=uuid.uuid4(), topic_id=topic_id)
        for order, q in enumerate(questions, start=1):
            answer = q.correct_answer.strip()
            quiz.questions.append(
                QuestionRecord(
                    question_text=q.question,
                    question_type="single",
                    order=order,
                    options=[
                        QuestionOptionRecord(
                            option_text=option,
                            is_correct=option.strip() == answer,
                            position=position,
                        )
                        for position, option in enumerate(q.options)
                    ],
                )
            )

        self.session.add(quiz)
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.error(f"Error creating quiz for topic {topic_id}: {e}")
            if _is_unique_violation(e):
                return SaveQuizResult(success=False, error=DUPLICATE_QUIZ_MESSAGE)
            return SaveQuizResult(success=False, error=SAVE_FAILED_MESSAGE)
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Error creating quiz for topic {topic_id}: {e}")
            return SaveQuizResult(success=False, error=SAVE_FAILED_MESSAGE)

        return SaveQuizResult(success=True, quiz_id=str(quiz.id))

    async def get_quiz_for_topic(self, topic_id: uuid.UUID) -> Optional[GeneratedQuiz]:
        result = await self.session.execute(
            select(QuizRecord)
            .options(
                selectinload(QuizRecord.questions).selectinload(QuestionRecord.options)
            )
            .where(QuizRecord.topic_id == topic_id)
        )
        quiz = result.scalar_one_or_none()
        if not quiz:
            return None

        questions = []
        for q in quiz.questions:
            correct = next((o.option_text for o in q.options if o.is_correct), "")
            questions.append(
                QuizQuestion(
                    question=q.question_text,
                    options=[o.option_text for o in q.options],
                    correct_answer=correct,
                )
            )
        return GeneratedQuiz(questions=questions)


class SqlQuizStore:
    """Quiz store for the flows; opens a short-lived session per call."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def create_quiz_for_topic(
        self, topic_id: uuid.UUID, questions: list[QuizQuestion]
    ) -> SaveQuizResult:
        async with self.session_maker() as session:
            db = QuizPersistenceService(session)
            return await db.create_quiz_for_topic(topic_id, questions)

    async def get_quiz_for_topic(self, topic_id: uuid.UUID) -> Optional[GeneratedQuiz]:
        async with self.session_maker() as session:
            db = QuizPersistenceService(session)
            return await db.get_quiz_for_topic(topic_id)
