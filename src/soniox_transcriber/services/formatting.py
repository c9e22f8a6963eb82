from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from soniox_transcriber.types import OutputFormat, Transcript, TranscriptToken


@dataclass(slots=True)
class Segment:
    start_ms: int
    end_ms: int
    text: str
    speaker: str | None = None
    language: str | None = None


def _format_timestamp(milliseconds: int) -> str:
    whole = max(milliseconds, 0) // 1000
    hours, rem = divmod(whole, 3600)
    minutes, secs = divmod(rem, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


def _is_original(token: TranscriptToken) -> bool:
    return token.translation_status != "translation"


def group_segments(transcript: Transcript) -> list[Segment]:
    """Collapse consecutive tokens from the same speaker into segments.

    Translated tokens are skipped so segments always carry the spoken text.
    """
    segments: list[Segment] = []
    current: Segment | None = None
    for token in transcript.tokens:
        if not _is_original(token):
            continue
        start = token.start_ms or 0
        end = token.end_ms if token.end_ms is not None else start
        if current is None or token.speaker != current.speaker:
            current = Segment(
                start_ms=start,
                end_ms=end,
                text=token.text,
                speaker=token.speaker,
                language=token.language,
            )
            segments.append(current)
            continue
        current.text += token.text
        current.end_ms = max(current.end_ms, end)

    for segment in segments:
        segment.text = segment.text.strip()
    return [segment for segment in segments if segment.text]


def to_markdown(transcript: Transcript) -> str:
    lines: list[str] = ["## Transcript", ""]

    segments = group_segments(transcript)
    if not segments:
        lines.append(transcript.text or "")
        return "\n".join(lines).strip() + "\n"

    for segment in segments:
        label = f"Speaker {segment.speaker}" if segment.speaker else "Speaker"
        timestamp = _format_timestamp(segment.start_ms)
        lines.append(f"- [{timestamp}] **{label}**: {segment.text}")

    return "\n".join(lines).strip() + "\n"


def to_text(transcript: Transcript) -> str:
    return (transcript.text or "").strip() + "\n"


def to_json(transcript: Transcript) -> dict[str, Any]:
    return {
        "id": transcript.id,
        "text": transcript.text,
        "segments": [
            {
                "start_ms": segment.start_ms,
                "end_ms": segment.end_ms,
                "speaker": segment.speaker,
                "language": segment.language,
                "text": segment.text,
            }
            for segment in group_segments(transcript)
        ],
        "tokens": [
            {
                "text": token.text,
                "start_ms": token.start_ms,
                "end_ms": token.end_ms,
                "confidence": token.confidence,
                "speaker": token.speaker,
                "language": token.language,
                "translation_status": token.translation_status,
            }
            for token in transcript.tokens
        ],
    }


def render(transcript: Transcript, output: OutputFormat) -> str | dict[str, Any]:
    if output == "markdown":
        return to_markdown(transcript)
    if output == "text":
        return to_text(transcript)
    if output == "json":
        return to_json(transcript)
    raise ValueError(f"Unsupported output format: {output}")
