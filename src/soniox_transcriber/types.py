from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Union

AudioFormat = Literal["aac", "aiff", "amr", "asf", "flac", "mp3", "ogg", "wav", "webm"]
OutputFormat = Literal["markdown", "json", "text"]
AudioSource = Union[bytes, bytearray, memoryview, str]

DEFAULT_MODEL = "stt-async-v3"


@dataclass(frozen=True, slots=True)
class JobParameters:
    audio: AudioSource
    audio_format: AudioFormat | None = None
    api_key: str | None = None
    api_base_url: str | None = None
    polling_interval_ms: int | None = None
    polling_timeout_ms: int | None = None


@dataclass(frozen=True, slots=True)
class OneWayTranslation:
    target_language: str

    def to_payload(self) -> dict[str, Any]:
        return {"type": "one_way", "target_language": self.target_language}


@dataclass(frozen=True, slots=True)
class TwoWayTranslation:
    language_a: str
    language_b: str

    def to_payload(self) -> dict[str, Any]:
        return {"type": "two_way", "language_a": self.language_a, "language_b": self.language_b}


Translation = Union[OneWayTranslation, TwoWayTranslation]


@dataclass(frozen=True, slots=True)
class ContextEntry:
    key: str
    value: str


@dataclass(frozen=True, slots=True)
class TranslationTerm:
    source: str
    target: str


@dataclass(frozen=True, slots=True)
class TranscriptionContext:
    general: tuple[ContextEntry, ...] = ()
    text: str | None = None
    terms: tuple[str, ...] = ()
    translation_terms: tuple[TranslationTerm, ...] = ()

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.general:
            payload["general"] = [{"key": item.key, "value": item.value} for item in self.general]
        if self.text is not None:
            payload["text"] = self.text
        if self.terms:
            payload["terms"] = list(self.terms)
        if self.translation_terms:
            payload["translation_terms"] = [
                {"source": term.source, "target": term.target} for term in self.translation_terms
            ]
        return payload


@dataclass(frozen=True, slots=True)
class TranscriptionOptions:
    model: str | None = None
    language_hints: tuple[str, ...] | None = None
    language_hints_strict: bool | None = None
    enable_language_identification: bool | None = None
    enable_speaker_diarization: bool | None = None
    context: str | TranscriptionContext | None = None
    client_reference_id: str | None = None
    webhook_url: str | None = None
    webhook_auth_header_name: str | None = None
    webhook_auth_header_value: str | None = None
    translation: Translation | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize the options that were set into the request body shape."""
        payload: dict[str, Any] = {}
        for name in (
            "model",
            "language_hints_strict",
            "enable_language_identification",
            "enable_speaker_diarization",
            "client_reference_id",
            "webhook_url",
            "webhook_auth_header_name",
            "webhook_auth_header_value",
        ):
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        if self.language_hints is not None:
            payload["language_hints"] = list(self.language_hints)
        if isinstance(self.context, TranscriptionContext):
            payload["context"] = self.context.to_payload()
        elif self.context is not None:
            payload["context"] = self.context
        if self.translation is not None:
            payload["translation"] = self.translation.to_payload()
        return payload


@dataclass(frozen=True, slots=True)
class TranscriptionStatus:
    id: str
    status: str
    created_at: str | None = None
    model: str | None = None
    audio_url: str | None = None
    file_id: str | None = None
    filename: str | None = None
    language_hints: tuple[str, ...] | None = None
    audio_duration_ms: int | None = None
    error_message: str | None = None
    webhook_url: str | None = None
    webhook_status_code: int | None = None
    client_reference_id: str | None = None

    @property
    def is_completed(self) -> bool:
        return self.status == "completed"

    @property
    def is_error(self) -> bool:
        return self.status == "error"

    @classmethod
    def from_payload(cls, payload: dict[str, Any], default_id: str = "") -> TranscriptionStatus:
        hints = payload.get("language_hints")
        return cls(
            id=str(payload.get("id") or default_id),
            status=str(payload.get("status") or "").lower(),
            created_at=payload.get("created_at"),
            model=payload.get("model"),
            audio_url=payload.get("audio_url"),
            file_id=payload.get("file_id"),
            filename=payload.get("filename"),
            language_hints=tuple(hints) if isinstance(hints, list) else None,
            audio_duration_ms=_as_int(payload.get("audio_duration_ms")),
            error_message=payload.get("error_message") or None,
            webhook_url=payload.get("webhook_url"),
            webhook_status_code=_as_int(payload.get("webhook_status_code")),
            client_reference_id=payload.get("client_reference_id"),
        )


@dataclass(frozen=True, slots=True)
class TranscriptToken:
    text: str
    start_ms: int | None = None
    end_ms: int | None = None
    confidence: float | None = None
    speaker: str | None = None
    language: str | None = None
    translation_status: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TranscriptToken:
        speaker = payload.get("speaker")
        confidence = payload.get("confidence")
        return cls(
            text=str(payload.get("text") or ""),
            start_ms=_as_int(payload.get("start_ms")),
            end_ms=_as_int(payload.get("end_ms")),
            confidence=float(confidence) if confidence is not None else None,
            speaker=str(speaker) if speaker is not None else None,
            language=payload.get("language"),
            translation_status=payload.get("translation_status"),
        )


@dataclass(frozen=True, slots=True)
class Transcript:
    id: str
    text: str
    tokens: tuple[TranscriptToken, ...] = ()

    @classmethod
    def from_payload(cls, payload: dict[str, Any], default_id: str = "") -> Transcript:
        tokens = payload.get("tokens")
        if not isinstance(tokens, list):
            tokens = []
        return cls(
            id=str(payload.get("id") or default_id),
            text=str(payload.get("text") or ""),
            tokens=tuple(TranscriptToken.from_payload(item) for item in tokens if isinstance(item, dict)),
        )


@dataclass(frozen=True, slots=True)
class Document:
    page_content: str
    metadata: Transcript


def _as_int(value: object) -> int | None:
    try:
        return int(value) if value is not None else None  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None
