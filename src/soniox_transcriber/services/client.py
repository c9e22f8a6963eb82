from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from soniox_transcriber.errors import SonioxAPIError
from soniox_transcriber.types import Transcript, TranscriptionStatus

logger = logging.getLogger(__name__)

DEFAULT_AUDIO_FORMAT = "wav"

MIME_TYPES: dict[str, str] = {
    "aac": "audio/aac",
    "aiff": "audio/aiff",
    "amr": "audio/amr",
    "asf": "video/x-ms-asf",
    "flac": "audio/flac",
    "mp3": "audio/mpeg",
    "ogg": "audio/ogg",
    "wav": "audio/wav",
    "webm": "audio/webm",
}


def content_type_for(audio_format: str | None) -> tuple[str, str]:
    """Return the (extension, content type) pair used for an upload."""
    extension = audio_format or DEFAULT_AUDIO_FORMAT
    return extension, MIME_TYPES.get(extension, MIME_TYPES[DEFAULT_AUDIO_FORMAT])


class SonioxClient:
    """Thin async wrapper over the six Soniox endpoints used by a transcription job.

    Every failure is raised as ``SonioxAPIError`` carrying the step's message;
    nothing is retried.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str) -> None:
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def upload_file(self, audio: bytes, audio_format: str | None = None) -> str:
        extension, mime_type = content_type_for(audio_format)
        files = {"file": (f"audio.{extension}", bytes(audio), mime_type)}
        response = await self._request("POST", "/files", "File upload failed", files=files)
        return self._require_id(response)

    async def delete_file(self, file_id: str) -> None:
        await self._request("DELETE", f"/files/{file_id}", "File deletion failed")

    async def create_transcription(self, body: dict[str, Any]) -> str:
        response = await self._request(
            "POST", "/transcriptions", "Transcription creation failed", json=body
        )
        return self._require_id(response)

    async def get_transcription(self, transcription_id: str) -> TranscriptionStatus:
        response = await self._request(
            "GET", f"/transcriptions/{transcription_id}", "Transcription query failed"
        )
        payload = self._json(response)
        try:
            return TranscriptionStatus.from_payload(payload, default_id=transcription_id)
        except (TypeError, ValueError) as exc:
            raise SonioxAPIError("Failed to parse API response", response.status_code, exc) from exc

    async def get_transcript(self, transcription_id: str) -> Transcript:
        response = await self._request(
            "GET",
            f"/transcriptions/{transcription_id}/transcript",
            "Transcription transcript query failed",
        )
        payload = self._json(response)
        try:
            return Transcript.from_payload(payload, default_id=transcription_id)
        except (TypeError, ValueError) as exc:
            raise SonioxAPIError("Failed to parse API response", response.status_code, exc) from exc

    async def delete_transcription(self, transcription_id: str) -> None:
        await self._request(
            "DELETE", f"/transcriptions/{transcription_id}", "Transcription deletion failed"
        )

    async def _request(self, method: str, path: str, failure: str, **kwargs: Any) -> httpx.Response:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise SonioxAPIError(failure, None, exc, detail=str(exc) or type(exc).__name__) from exc

        if response.status_code >= 400:
            raise SonioxAPIError(
                failure,
                response.status_code,
                detail=response.text[:400] or response.reason_phrase,
            )
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    @staticmethod
    def _json(response: httpx.Response) -> dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise SonioxAPIError("Failed to parse API response", response.status_code, exc) from exc
        if not isinstance(payload, dict):
            raise SonioxAPIError(
                "Failed to parse API response",
                response.status_code,
                detail=f"expected an object, got {type(payload).__name__}",
            )
        return payload

    def _require_id(self, response: httpx.Response) -> str:
        resource_id = self._json(response).get("id")
        if not resource_id:
            raise SonioxAPIError(
                "Failed to parse API response", response.status_code, detail="response missing id"
            )
        return str(resource_id)


@asynccontextmanager
async def open_client(
    api_key: str,
    base_url: str,
    *,
    timeout_seconds: float = 60.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[SonioxClient]:
    """Yield a ``SonioxClient`` whose HTTP connection pool is closed on exit."""
    headers = {"Authorization": f"Bearer {api_key}"}
    async with httpx.AsyncClient(
        headers=headers, timeout=timeout_seconds, transport=transport
    ) as http:
        yield SonioxClient(http, base_url)
