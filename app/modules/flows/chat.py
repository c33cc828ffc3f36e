"""Multi-modal streaming chat.

``ChatFlow.open`` validates the conversation up front and returns an async
generator of UTF-8 encoded text chunks. The generator ends when the model is
done; if the model fails midway, chunks already yielded stay delivered and
the consumer receives ``ChatStreamError``.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any, AsyncIterator, Union
from urllib.parse import unquote_to_bytes

from pydantic_ai.messages import (
    AudioUrl,
    BinaryContent,
    DocumentUrl,
    ImageUrl,
    ModelMessage,
    ModelRequest,
    ModelResponse,
    TextPart,
    UserContent,
    UserPromptPart,
    VideoUrl,
)

from app.core.logging import get_logger
from app.modules.ai.client import AIClient
from app.modules.ai.errors import ChatStreamError, SchemaMismatch
from app.modules.ai.validation import FlowRecord, validate
from app.modules.flows.base import Flow
from app.modules.flows.models import ChatInput, ChatMessage, MediaContent

logger = get_logger(__name__)

STREAM_FAILED_MESSAGE = "The chat response was interrupted. Please try again."


class ChatReply(FlowRecord):
    text: str


def _media_content(media: MediaContent) -> Union[BinaryContent, ImageUrl, AudioUrl, VideoUrl, DocumentUrl]:
    if media.url.startswith("data:"):
        header, _, encoded = media.url.partition(",")
        try:
            if header.endswith(";base64"):
                data = base64.b64decode(encoded, validate=True)
            else:
                data = unquote_to_bytes(encoded)
        except binascii.Error as e:
            raise SchemaMismatch(
                "Chat attachment is not valid base64 data.", fields=["media.url"]
            ) from e
        return BinaryContent(data=data, media_type=media.content_type)

    kind = media.content_type.split("/", 1)[0].lower()
    if kind == "image":
        return ImageUrl(url=media.url)
    if kind == "audio":
        return AudioUrl(url=media.url)
    if kind == "video":
        return VideoUrl(url=media.url)
    return DocumentUrl(url=media.url)


def _user_content(message: ChatMessage) -> list[UserContent]:
    content: list[UserContent] = []
    for part in message.content:
        if part.text:
            content.append(part.text)
        if part.media is not None:
            content.append(_media_content(part.media))
    return content


def to_model_messages(
    messages: list[ChatMessage],
) -> tuple[list[ModelMessage], list[UserContent]]:
    """Split a conversation into model history and the final user prompt."""
    history: list[ModelMessage] = []
    for message in messages[:-1]:
        if message.role == "user":
            history.append(ModelRequest(parts=[UserPromptPart(content=_user_content(message))]))
        else:
            text = "".join(part.text for part in message.content if part.text)
            history.append(ModelResponse(parts=[TextPart(content=text)]))
    return history, _user_content(messages[-1])


class ChatFlow(Flow[ChatInput, ChatReply]):
    name = "chat"
    description = "Stream a reply to a multi-modal conversation."
    input_type = ChatInput
    output_type = ChatReply

    def open(self, data: Any) -> AsyncIterator[bytes]:
        payload = validate(ChatInput, data)
        history, prompt = to_model_messages(payload.messages)
        return self._stream(prompt, history)

    async def _stream(
        self, prompt: list[UserContent], history: list[ModelMessage]
    ) -> AsyncIterator[bytes]:
        try:
            async for chunk in self.client.stream(prompt, message_history=history):
                yield chunk.encode("utf-8")
        except Exception as e:
            logger.error("Streaming error in chat: %s", e, extra={"flow": self.name})
            raise ChatStreamError(STREAM_FAILED_MESSAGE) from e

    async def _execute(self, payload: ChatInput) -> ChatReply:
        chunks = [chunk async for chunk in self.open(payload)]
        return ChatReply(text=b"".join(chunks).decode("utf-8"))


async def chat(data: Any, *, client: AIClient) -> AsyncIterator[bytes]:
    """Validate ``data`` and return the live byte stream of the reply."""
    return ChatFlow(client).open(data)
