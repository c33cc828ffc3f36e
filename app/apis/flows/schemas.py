from __future__ import annotations

from pydantic import BaseModel, Field

from app.modules.ai.validation import FieldSpec


class FlowDescription(BaseModel):
    name: str
    description: str
    streaming: bool = False
    input: list[FieldSpec] = Field(default_factory=list)
    output: list[FieldSpec] = Field(default_factory=list)
