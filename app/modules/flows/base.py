"""Shared flow plumbing.

A flow validates its input, renders a prompt, calls the model and checks the
answer. ``invoke`` raises ``FlowError`` subclasses; ``run`` wraps the same
work into a ``FlowResult`` so every caller handles failures the same way.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.logging import get_logger
from app.modules.ai.client import AIClient
from app.modules.ai.errors import EmptyResult, FlowError, FlowErrorCategory
from app.modules.ai.templates import PromptTemplate
from app.modules.ai.validation import validate

logger = get_logger(__name__)

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


class FlowResult(BaseModel, Generic[OutputT]):
    """Success/failure envelope returned by ``Flow.run``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    data: Optional[OutputT] = None
    error: Optional[str] = None
    error_code: Optional[FlowErrorCategory] = None


@dataclass
class FlowDeps:
    """Collaborators a flow may need; flows pick what they use."""

    client: AIClient
    transcripts: Optional[Any] = None
    store: Optional[Any] = None


class Flow(Generic[InputT, OutputT]):
    name: ClassVar[str]
    description: ClassVar[str] = ""
    input_type: ClassVar[type[BaseModel]]
    output_type: ClassVar[type[BaseModel]]

    def __init__(self, client: AIClient) -> None:
        self.client = client

    @classmethod
    def from_deps(cls, deps: FlowDeps) -> "Flow[Any, Any]":
        return cls(deps.client)

    async def invoke(self, data: Any) -> OutputT:
        payload = validate(self.input_type, data)
        logger.debug("Running flow %s", self.name, extra={"flow": self.name})
        return await self._execute(payload)  # type: ignore[arg-type]

    async def _execute(self, payload: InputT) -> OutputT:
        raise NotImplementedError

    async def run(self, data: Any) -> FlowResult[OutputT]:
        result_type = FlowResult[self.output_type]  # type: ignore[name-defined,valid-type]
        try:
            output = await self.invoke(data)
        except FlowError as e:
            logger.warning(
                "Flow %s failed (%s): %s",
                self.name,
                e.category.value,
                e,
                extra={"flow": self.name},
            )
            return result_type(success=False, error=e.message, error_code=e.category)
        return result_type(success=True, data=output)


class PromptFlow(Flow[InputT, OutputT]):
    """Single prompt, single structured answer with one required text field."""

    template: ClassVar[PromptTemplate]
    answer_field: ClassVar[str]
    empty_message: ClassVar[str]

    async def _execute(self, payload: InputT) -> OutputT:
        prompt = self.template.render(payload)
        output = await self.client.generate(prompt, self.output_type)
        answer = getattr(output, self.answer_field, None)
        if not answer or not str(answer).strip():
            raise EmptyResult(self.empty_message)
        return output  # type: ignore[return-value]
