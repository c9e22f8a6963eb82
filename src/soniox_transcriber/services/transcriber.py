from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx

from soniox_transcriber.config import Settings, load_settings
from soniox_transcriber.errors import SonioxAPIError, SonioxTimeoutError, SonioxValidationError
from soniox_transcriber.services.client import SonioxClient, open_client
from soniox_transcriber.types import (
    DEFAULT_MODEL,
    Document,
    JobParameters,
    Transcript,
    TranscriptionOptions,
)

logger = logging.getLogger(__name__)

MIN_POLLING_INTERVAL_MS = 1000


class SonioxTranscriber:
    """Transcribe one audio resource through the Soniox async API.

    The audio is uploaded (bytes) or referenced (URL string), a transcription
    job is created and polled until it completes, and the transcript is
    fetched. Any file or job created on the server is deleted before
    ``transcribe`` returns or raises.

    Example::

        transcriber = SonioxTranscriber(
            JobParameters(audio=audio_bytes, audio_format="mp3"),
            TranscriptionOptions(language_hints=["en"], enable_speaker_diarization=True),
        )
        docs = await transcriber.load()
    """

    def __init__(
        self,
        params: JobParameters | None,
        options: TranscriptionOptions | None = None,
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if params is None:
            raise SonioxValidationError("No configuration provided")
        if settings is None:
            settings = load_settings()

        api_key = params.api_key or settings.api_key
        if not api_key:
            raise SonioxValidationError("No API key provided")

        if not isinstance(params.audio, (str, bytes, bytearray, memoryview)):
            raise SonioxValidationError("Audio must be bytes or a URL string")

        interval_ms = (
            params.polling_interval_ms
            if params.polling_interval_ms is not None
            else settings.polling_interval_ms
        )
        if interval_ms < MIN_POLLING_INTERVAL_MS:
            raise SonioxValidationError("Polling interval should be longer than 1000 ms")

        timeout_ms = (
            params.polling_timeout_ms
            if params.polling_timeout_ms is not None
            else settings.polling_timeout_ms
        )
        if timeout_ms <= 0:
            raise SonioxValidationError("Polling timeout should be positive")

        self.params = params
        self.options = options or TranscriptionOptions()
        self.api_key = api_key
        self.api_base_url = (params.api_base_url or settings.api_base_url).rstrip("/")
        self.polling_interval_seconds = interval_ms / 1000.0
        self.polling_timeout_seconds = timeout_ms / 1000.0
        self.request_timeout_seconds = settings.request_timeout_seconds
        self.transport = transport
        self._clock = time.monotonic
        self._sleep = asyncio.sleep

    @property
    def mode(self) -> str:
        return "url" if isinstance(self.params.audio, str) else "file"

    async def load(self) -> list[Document]:
        transcript = await self.transcribe()
        return [Document(page_content=transcript.text, metadata=transcript)]

    async def transcribe(self) -> Transcript:
        mode = self.mode
        if mode == "file" and len(self.params.audio) == 0:
            raise SonioxValidationError("Audio buffer is empty")

        async with open_client(
            self.api_key,
            self.api_base_url,
            timeout_seconds=self.request_timeout_seconds,
            transport=self.transport,
        ) as client:
            file_id: str | None = None
            transcription_id: str | None = None
            try:
                if mode == "file":
                    file_id = await client.upload_file(
                        self.params.audio,  # type: ignore[arg-type]
                        self.params.audio_format,
                    )
                    logger.info("Uploaded audio as file %s", file_id)

                transcription_id = await client.create_transcription(
                    self._build_request(file_id=file_id)
                )
                logger.info("Created transcription %s", transcription_id)

                await self._wait_for_completion(client, transcription_id)
                transcript = await client.get_transcript(transcription_id)
                logger.info(
                    "Transcription %s completed with %d tokens",
                    transcription_id,
                    len(transcript.tokens),
                )
                return transcript
            finally:
                await self._cleanup(client, file_id, transcription_id)

    def _build_request(self, *, file_id: str | None) -> dict[str, Any]:
        body: dict[str, Any] = {"model": self.options.model or DEFAULT_MODEL}
        body.update(self.options.to_payload())
        body.pop("file_id", None)
        body.pop("audio_url", None)
        if file_id is not None:
            body["file_id"] = file_id
        else:
            body["audio_url"] = self.params.audio
        return body

    async def _wait_for_completion(self, client: SonioxClient, transcription_id: str) -> None:
        started = self._clock()
        while True:
            if self._clock() - started > self.polling_timeout_seconds:
                raise SonioxTimeoutError("Transcription job polling timed out")

            status = await client.get_transcription(transcription_id)
            logger.debug("Transcription %s status: %s", transcription_id, status.status)
            if status.is_completed:
                return
            if status.is_error:
                raise SonioxAPIError(
                    f"Transcription failed: {status.error_message or 'Unknown error'}"
                )

            await self._sleep(self.polling_interval_seconds)

    async def _cleanup(
        self,
        client: SonioxClient,
        file_id: str | None,
        transcription_id: str | None,
    ) -> list[Exception]:
        failures: list[Exception] = []
        if file_id is not None:
            try:
                await client.delete_file(file_id)
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Failed to delete file %s: %s", file_id, exc)
                failures.append(exc)

        if transcription_id is not None:
            try:
                await client.delete_transcription(transcription_id)
            except Exception as exc:  # pylint: disable=broad-except
                logger.warning("Failed to delete transcription %s: %s", transcription_id, exc)
                failures.append(exc)
        return failures
