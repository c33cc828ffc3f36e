from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.db.base import Base


class QuizRecord(Base):
    __tablename__ = "quizzes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # One quiz per topic
    topic_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, nullable=False, unique=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, server_default=func.now(), index=True
    )

    questions: Mapped[list["QuestionRecord"]] = relationship(
        "QuestionRecord",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="QuestionRecord.order",
    )


class QuestionRecord(Base):
    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    quiz_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("quizzes.id", ondelete="CASCADE"), index=True
    )
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str] = mapped_column(String, nullable=False, default="single")
    order: Mapped[int] = mapped_column(Integer, nullable=False)

    quiz: Mapped["QuizRecord"] = relationship("QuizRecord", back_populates="questions")
    options: Mapped[list["QuestionOptionRecord"]] = relationship(
        "QuestionOptionRecord",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="QuestionOptionRecord.position",
    )


class QuestionOptionRecord(Base):
    __tablename__ = "question_options"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    question_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("questions.id", ondelete="CASCADE"), index=True
    )
    option_text: Mapped[str] = mapped_column(Text, nullable=False)
    # Order the options were generated in
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    explanation: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    question: Mapped["QuestionRecord"] = relationship(
        "QuestionRecord", back_populates="options"
    )


__all__ = [
    "QuizRecord",
    "QuestionRecord",
    "QuestionOptionRecord",
]
