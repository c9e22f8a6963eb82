from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from soniox_transcriber.config import Settings, load_settings
from soniox_transcriber.errors import SonioxError
from soniox_transcriber.mcp_tools import ToolRegistry
from soniox_transcriber.services.client import MIME_TYPES
from soniox_transcriber.services.formatting import render
from soniox_transcriber.services.transcriber import SonioxTranscriber
from soniox_transcriber.types import (
    JobParameters,
    OneWayTranslation,
    TranscriptionOptions,
    TwoWayTranslation,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="soniox-transcribe",
        description="Transcribe an audio file or URL with the Soniox async API.",
    )
    parser.add_argument("audio", help="http(s) URL of the audio, or a local file path")
    parser.add_argument("--format", dest="audio_format", choices=sorted(MIME_TYPES))
    parser.add_argument("--model")
    parser.add_argument("--language-hint", dest="language_hints", action="append")
    parser.add_argument("--strict-language-hints", action="store_true")
    parser.add_argument("--diarize", action="store_true", help="enable speaker diarization")
    parser.add_argument("--identify-language", action="store_true")
    translation = parser.add_mutually_exclusive_group()
    translation.add_argument("--translate-to", metavar="LANG")
    translation.add_argument("--two-way", nargs=2, metavar=("LANG_A", "LANG_B"))
    parser.add_argument("--context", help="free-text context for the recognizer")
    parser.add_argument("--client-reference-id")
    parser.add_argument("--polling-interval-ms", type=int)
    parser.add_argument("--polling-timeout-ms", type=int)
    parser.add_argument(
        "--output", choices=["markdown", "text", "json"], default="text", help="output format"
    )
    return parser


def _is_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def params_from_args(args: argparse.Namespace) -> JobParameters:
    if _is_url(args.audio):
        return JobParameters(
            audio=args.audio,
            audio_format=args.audio_format,
            polling_interval_ms=args.polling_interval_ms,
            polling_timeout_ms=args.polling_timeout_ms,
        )

    path = Path(args.audio)
    audio_format = args.audio_format
    if audio_format is None:
        suffix = path.suffix.lower().lstrip(".")
        audio_format = suffix if suffix in MIME_TYPES else None
    return JobParameters(
        audio=path.read_bytes(),
        audio_format=audio_format,
        polling_interval_ms=args.polling_interval_ms,
        polling_timeout_ms=args.polling_timeout_ms,
    )


def options_from_args(args: argparse.Namespace) -> TranscriptionOptions:
    translation: OneWayTranslation | TwoWayTranslation | None = None
    if args.translate_to:
        translation = OneWayTranslation(args.translate_to)
    elif args.two_way:
        translation = TwoWayTranslation(*args.two_way)

    return TranscriptionOptions(
        model=args.model,
        language_hints=tuple(args.language_hints) if args.language_hints else None,
        language_hints_strict=True if args.strict_language_hints else None,
        enable_speaker_diarization=True if args.diarize else None,
        enable_language_identification=True if args.identify_language else None,
        context=args.context,
        client_reference_id=args.client_reference_id,
        translation=translation,
    )


def run(argv: Sequence[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    if settings is None:
        settings = load_settings()

    try:
        params = params_from_args(args)
    except OSError as exc:
        print(f"error: cannot read {args.audio}: {exc}", file=sys.stderr)
        return 1

    try:
        transcriber = SonioxTranscriber(params, options_from_args(args), settings=settings)
        transcript = asyncio.run(transcriber.transcribe())
    except SonioxError as exc:
        logger.debug("Transcription failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    output = render(transcript, args.output)
    if isinstance(output, dict):
        print(json.dumps(output, indent=2, ensure_ascii=False))
    else:
        sys.stdout.write(output)
    return 0


def cli() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    raise SystemExit(run(settings=settings))


def create_app(settings: Settings) -> FastMCP:
    mcp = FastMCP(name="soniox-transcriber")

    def factory(params: JobParameters, options: TranscriptionOptions) -> SonioxTranscriber:
        return SonioxTranscriber(params, options, settings=settings)

    ToolRegistry(factory).register(mcp)

    @mcp.custom_route(settings.health_path, methods=["GET"])
    async def health(_: Request) -> JSONResponse:
        return JSONResponse(
            {
                "ok": True,
                "api_key_configured": bool(settings.api_key),
                "api_base_url": settings.api_base_url,
                "mcp_path": settings.mcp_path,
            }
        )

    return mcp


def serve() -> None:
    settings = load_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    if not settings.api_key:
        raise RuntimeError("SONIOX_API_KEY is required")

    app = create_app(settings)
    logger.info("Starting MCP server on %s:%s%s", settings.host, settings.port, settings.mcp_path)
    app.run(
        transport="http",
        host=settings.host,
        port=settings.port,
        path=settings.mcp_path,
    )


if __name__ == "__main__":
    cli()
