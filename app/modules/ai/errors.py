"""Error taxonomy shared by the AI client, the transcript tool and the flows."""

from __future__ import annotations

from enum import Enum


class FlowErrorCategory(str, Enum):
    """Stable categories reported in failed flow results."""

    SCHEMA_MISMATCH = "schema_mismatch"
    GENERATION_FAILED = "generation_failed"
    EMPTY_RESULT = "empty_result"
    TRANSCRIPT_UNAVAILABLE = "transcript_unavailable"
    PERSISTENCE_FAILED = "persistence_failed"
    STREAM_FAILED = "stream_failed"


class FlowError(Exception):
    """Base class for failures a flow reports to its caller.

    ``str(err)`` is always a user-facing message.
    """

    category: FlowErrorCategory = FlowErrorCategory.GENERATION_FAILED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SchemaMismatch(FlowError):
    """A record does not match its declared schema."""

    category = FlowErrorCategory.SCHEMA_MISMATCH

    def __init__(self, message: str, *, fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.fields = fields or []


class GenerationFailed(FlowError):
    """The model declined, errored or returned unparsable output."""

    category = FlowErrorCategory.GENERATION_FAILED


class EmptyResult(GenerationFailed):
    """The model answered but the answer has no usable content."""

    category = FlowErrorCategory.EMPTY_RESULT


class TranscriptUnavailable(FlowError):
    """Captions for a video could not be retrieved."""

    category = FlowErrorCategory.TRANSCRIPT_UNAVAILABLE

    def __init__(self, message: str, *, captions_disabled: bool = False) -> None:
        super().__init__(message)
        self.captions_disabled = captions_disabled


class PersistenceFailed(FlowError):
    """Saving generated content failed downstream."""

    category = FlowErrorCategory.PERSISTENCE_FAILED


class ChatStreamError(FlowError):
    """The chat stream was terminated by an error after it started."""

    category = FlowErrorCategory.STREAM_FAILED
