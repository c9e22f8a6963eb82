from __future__ import annotations

import logging
from typing import Any, Callable

from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from soniox_transcriber.errors import SonioxError
from soniox_transcriber.services.formatting import render
from soniox_transcriber.services.transcriber import SonioxTranscriber
from soniox_transcriber.types import (
    JobParameters,
    OneWayTranslation,
    OutputFormat,
    TranscriptionOptions,
)

logger = logging.getLogger(__name__)

TranscriberFactory = Callable[[JobParameters, TranscriptionOptions], SonioxTranscriber]


class ToolRegistry:
    def __init__(self, transcriber_factory: TranscriberFactory) -> None:
        self.transcriber_factory = transcriber_factory

    def register(self, mcp: FastMCP) -> None:
        @mcp.tool(annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=True))
        async def transcribe(
            audio_url: str,
            language_hints: list[str] | None = None,
            enable_speaker_diarization: bool = False,
            enable_language_identification: bool = False,
            translate_to: str | None = None,
            model: str | None = None,
            format: OutputFormat = "markdown",
        ) -> dict[str, Any]:
            """Transcribe audio from a public URL with Soniox.

            Args:
                audio_url: Publicly reachable URL of the audio file
                language_hints: Expected language codes (e.g. ["en", "es"])
                enable_speaker_diarization: Label tokens with speaker numbers
                enable_language_identification: Tag tokens with detected language
                translate_to: Target language for one-way translation
                model: Soniox model id (default: stt-async-v3)
                format: Output format - "markdown", "text", or "json" (default: "markdown")
            """
            options = TranscriptionOptions(
                model=model,
                language_hints=tuple(language_hints) if language_hints else None,
                enable_speaker_diarization=enable_speaker_diarization or None,
                enable_language_identification=enable_language_identification or None,
                translation=OneWayTranslation(translate_to) if translate_to else None,
            )
            try:
                transcriber = self.transcriber_factory(JobParameters(audio=audio_url), options)
                transcript = await transcriber.transcribe()
            except SonioxError as exc:
                logger.warning("Transcription of %s failed: %s", audio_url, exc)
                return {"error": (exc.code or "error").lower(), "message": str(exc)}

            return {
                "id": transcript.id,
                "format": format,
                "content": render(transcript, format),
            }
