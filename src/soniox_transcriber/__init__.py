from soniox_transcriber.errors import (
    SonioxAPIError,
    SonioxError,
    SonioxTimeoutError,
    SonioxValidationError,
)
from soniox_transcriber.services.transcriber import SonioxTranscriber
from soniox_transcriber.types import (
    ContextEntry,
    Document,
    JobParameters,
    OneWayTranslation,
    Transcript,
    TranscriptionContext,
    TranscriptionOptions,
    TranscriptToken,
    TranslationTerm,
    TwoWayTranslation,
)

__all__ = [
    "ContextEntry",
    "Document",
    "JobParameters",
    "OneWayTranslation",
    "SonioxAPIError",
    "SonioxError",
    "SonioxTimeoutError",
    "SonioxTranscriber",
    "SonioxValidationError",
    "Transcript",
    "TranscriptionContext",
    "TranscriptionOptions",
    "TranscriptToken",
    "TranslationTerm",
    "TwoWayTranslation",
]
