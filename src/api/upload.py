"""
src/api/upload.py
==================
API Upload Endpoint - Nova Voice Relay

Responsibility:
    - Expose POST /ask
    - Accept one audio clip via multipart/form-data (field "file")
    - Delegate to src.pipeline.run_pipeline
    - Return {"text": ..., "audio_b64": ...}
    - Convert fatal provider failures into a 502, anything else into a 500
    - Own the shared outbound clients for the lifetime of the process

Status codes:
    200  every normal path, including the empty-result and degraded ones
    502  transcription or completion provider failed
    500  unexpected error
"""

import logging
from contextlib import asynccontextmanager

import aiohttp
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI

from src.api.multipart import MultipartBodyError, read_file_part
from src.audio.upload import AudioUpload
from src.config import DEFAULT_FILENAME, Settings, load_cors_origins, load_settings
from src.pipeline import run_pipeline
from src.provider_errors import ProviderError

logger = logging.getLogger("nova.api")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Settings are loaded from the environment at startup unless given; a
    missing GROQ_API_KEY therefore fails the process during startup rather
    than on the first request.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        resolved = settings or load_settings()
        app.state.settings = resolved
        app.state.chat_client = AsyncOpenAI(
            api_key=resolved.groq_api_key,
            base_url=resolved.groq_base_url,
            timeout=resolved.provider_timeout_seconds,
            max_retries=0,
        )
        app.state.http_session = aiohttp.ClientSession()
        logger.info(
            "Nova relay ready (synthesis %s).",
            "enabled" if resolved.synthesis_enabled else "disabled, browser voice fallback",
        )
        try:
            yield
        finally:
            await app.state.http_session.close()
            await app.state.chat_client.close()

    app = FastAPI(
        title="Nova Voice Relay",
        description="Speech in, reply text and synthesized speech out.",
        version="1.0.0",
        lifespan=lifespan,
    )

    origins = settings.cors_allow_origins if settings else load_cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_api_route("/ask", ask, methods=["POST"])
    app.add_api_route("/health", health, methods=["GET"])
    return app


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


async def ask(request: Request):
    """
    Run one clip through STT -> chat -> TTS.

    The "file" part is read as raw bytes with or without a filename
    (default audio.webm). A request with no file part is treated as an
    empty recording and returns empty fields.
    """
    state = request.app.state

    try:
        part = await read_file_part(request, "file")
    except MultipartBodyError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if part is None:
        upload = AudioUpload(payload=b"", filename=DEFAULT_FILENAME)
    else:
        upload = AudioUpload(payload=part.payload, filename=part.filename or DEFAULT_FILENAME)

    try:
        result = await run_pipeline(
            upload, state.settings, state.chat_client, state.http_session
        )
    except ProviderError as exc:
        logger.error("Provider failure: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc))
    except Exception as exc:
        logger.error("Pipeline unexpected error: %s", exc, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error.")

    return JSONResponse(status_code=200, content=result.to_dict())


async def health(request: Request):
    settings: Settings = request.app.state.settings
    return {"status": "ok", "synthesis_enabled": settings.synthesis_enabled}


app = create_app()
