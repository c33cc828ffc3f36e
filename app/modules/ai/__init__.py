"""AI layer exports."""

from .client import AIClient, build_model
from .errors import (
    ChatStreamError,
    EmptyResult,
    FlowError,
    FlowErrorCategory,
    GenerationFailed,
    PersistenceFailed,
    SchemaMismatch,
    TranscriptUnavailable,
)
from .templates import PromptTemplate, TemplateError
from .validation import FieldKind, FieldSpec, FlowRecord, describe, validate

__all__ = [
    "AIClient",
    "build_model",
    "ChatStreamError",
    "EmptyResult",
    "FlowError",
    "FlowErrorCategory",
    "GenerationFailed",
    "PersistenceFailed",
    "SchemaMismatch",
    "TranscriptUnavailable",
    "PromptTemplate",
    "TemplateError",
    "FieldKind",
    "FieldSpec",
    "FlowRecord",
    "describe",
    "validate",
]
