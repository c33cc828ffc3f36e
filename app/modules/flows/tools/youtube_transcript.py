"""YouTube transcript tool used by the video insight and quiz flows.

Caption tracks are discovered with yt-dlp (metadata only, nothing is
downloaded), the chosen track is fetched with httpx and WebVTT tracks are
read with webvtt-py. The transcript is the caption segment texts joined by
single spaces.
"""

from __future__ import annotations

import asyncio
import json
import re
from io import StringIO
from typing import Any, Optional, Protocol

import httpx
import webvtt
import yt_dlp
from pydantic_ai import Tool
from webvtt.errors import MalformedFileError
from yt_dlp.utils import YoutubeDLError

from app.core.config import settings
from app.core.logging import get_logger
from app.modules.ai.errors import TranscriptUnavailable

logger = get_logger(__name__)

CAPTIONS_DISABLED_MARKER = "subtitles are disabled"

CAPTIONS_DISABLED_MESSAGE = (
    "Could not retrieve transcript: subtitles are disabled for this YouTube video."
)
RETRIEVAL_FAILED_MESSAGE = (
    "Could not retrieve transcript. Please ensure the video has captions "
    "and the URL is correct."
)
EMPTY_TRANSCRIPT_MESSAGE = (
    "Failed to get transcript. The video may not have captions or the URL is invalid."
)

# YouTube-native JSON captions first, then text formats
_PREFERRED_EXTS = ("json3", "srt", "vtt")
_INLINE_TAG = re.compile(r"<[^>]+>")


class CaptionSourceError(Exception):
    """Raised by caption sources; the message is the upstream error text."""


class CaptionSource(Protocol):
    async def fetch_segments(self, video_url: str) -> list[str]: ...


def normalize_youtube_url(url: str) -> str:
    """Convert youtu.be short links to the canonical watch URL."""
    if "youtu.be" in url:
        video_id = url.split("/")[-1].split("?")[0]
        if video_id:
            return f"https://www.youtube.com/watch?v={video_id}"
    return url


def _json3_segments(content: str) -> list[str]:
    data = json.loads(content)
    return [
        "".join(seg.get("utf8", "") for seg in event.get("segs") or [])
        for event in data.get("events") or []
    ]


def _vtt_segments(content: str) -> list[str]:
    try:
        return [caption.text for caption in webvtt.read_buffer(StringIO(content))]
    except MalformedFileError as e:
        raise ValueError(f"malformed WebVTT: {e}") from e


def _srt_segments(content: str) -> list[str]:
    segments = []
    for block in re.split(r"\n\s*\n", content.replace("\r\n", "\n").strip()):
        lines = [line.strip() for line in block.split("\n")]
        # Skip sequence numbers and timestamp lines
        text = " ".join(line for line in lines if line and not line.isdigit() and "-->" not in line)
        segments.append(text)
    return segments


def parse_caption_segments(content: str, ext: Optional[str]) -> list[str]:
    """Extract caption texts from a json3, SRT or WebVTT document."""
    if ext == "json3":
        raw = _json3_segments(content)
    elif ext == "vtt":
        raw = _vtt_segments(content)
    else:
        raw = _srt_segments(content)

    segments: list[str] = []
    for text in raw:
        text = " ".join(_INLINE_TAG.sub("", text).split())
        # Auto-generated captions repeat the previous cue as a rolling line
        if text and (not segments or segments[-1] != text):
            segments.append(text)
    return segments


class YtDlpCaptionSource:
    """Caption lookup through yt-dlp metadata and an httpx track download."""

    def __init__(
        self, *, languages: Optional[list[str]] = None, timeout: Optional[float] = None
    ) -> None:
        self.languages = languages or settings.transcripts.languages
        self.timeout = timeout or settings.transcripts.timeout

    def _extract_info(self, video_url: str) -> dict[str, Any]:
        ydl_opts = {
            "skip_download": True,
            "quiet": True,
            "no_warnings": True,
        }
        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                return ydl.extract_info(video_url, download=False) or {}
        except YoutubeDLError as e:
            raise CaptionSourceError(str(e)) from e

    def _pick_track(self, info: dict[str, Any]) -> Optional[dict[str, Any]]:
        # Prefer manual subtitles over automatic ones
        for captions in (info.get("subtitles") or {}, info.get("automatic_captions") or {}):
            for lang in self.languages:
                tracks = captions.get(lang) or []
                for ext in _PREFERRED_EXTS:
                    for track in tracks:
                        if track.get("ext") == ext and track.get("url"):
                            return track
        return None

    async def fetch_segments(self, video_url: str) -> list[str]:
        info = await asyncio.to_thread(self._extract_info, video_url)
        if not info.get("subtitles") and not info.get("automatic_captions"):
            raise CaptionSourceError(
                f"Transcript is disabled on this video ({info.get('id') or video_url}): "
                f"{CAPTIONS_DISABLED_MARKER}"
            )

        track = self._pick_track(info)
        if not track:
            raise CaptionSourceError(
                f"No captions available in {', '.join(self.languages)} for {video_url}"
            )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(track["url"])
                response.raise_for_status()
        except httpx.HTTPError as e:
            raise CaptionSourceError(f"HTTP error downloading captions: {e}") from e

        try:
            return parse_caption_segments(response.text, track.get("ext"))
        except ValueError as e:
            raise CaptionSourceError(f"Unreadable caption track: {e}") from e


class TranscriptFetcher:
    """Normalizes the URL, fetches captions and maps failures to user messages."""

    def __init__(self, source: Optional[CaptionSource] = None) -> None:
        self.source = source or YtDlpCaptionSource()

    async def fetch(self, video_url: str) -> str:
        standard_url = normalize_youtube_url(video_url)
        try:
            segments = await self.source.fetch_segments(standard_url)
        except CaptionSourceError as e:
            logger.error("Failed to fetch transcript for %s: %s", standard_url, e)
            if CAPTIONS_DISABLED_MARKER in str(e):
                raise TranscriptUnavailable(
                    CAPTIONS_DISABLED_MESSAGE, captions_disabled=True
                ) from e
            raise TranscriptUnavailable(RETRIEVAL_FAILED_MESSAGE) from e

        transcript = " ".join(s.strip() for s in segments if s and s.strip())
        if not transcript:
            raise TranscriptUnavailable(EMPTY_TRANSCRIPT_MESSAGE)
        return transcript


def build_transcript_tool(fetcher: TranscriptFetcher) -> Tool:
    """Expose ``fetcher`` as a pydantic-ai tool the model can call.

    The video flows fetch the transcript themselves before prompting, so they
    can stop early on missing captions. This helper is for callers that build
    their own agent or pass ``tools=`` to ``AIClient.generate``.
    """

    async def get_youtube_transcript(video_url: str) -> str:
        """Fetches the transcript of a given YouTube video URL.

        Args:
            video_url: The URL of the YouTube video.
        """
        return await fetcher.fetch(video_url)

    return Tool(get_youtube_transcript, takes_ctx=False)
