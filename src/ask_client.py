"""
src/ask_client.py
==================
Command-line Ask Client - Nova Voice Relay

Responsibility:
    - Post a recorded clip to a running relay's /ask endpoint
    - Print Nova's reply text
    - Write the synthesized audio to disk when the relay returned any;
      otherwise report that a local voice should speak the reply

Usage:
    python -m src.ask_client clip.webm --url http://localhost:8000/ask --out reply.mp3
"""

import argparse
import base64
import logging
import os
import sys

import requests

from src.audio.upload import infer_mime_type

logger = logging.getLogger("nova.ask_client")

DEFAULT_URL = "http://localhost:8000/ask"
DEFAULT_OUTPUT = "reply.mp3"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def ask(audio_path: str, url: str = DEFAULT_URL, timeout: float = 120) -> dict:
    """
    Upload one clip and return the decoded JSON response.

    Raises:
        RuntimeError: If the request fails or the relay answers non-2xx.
    """
    filename = os.path.basename(audio_path)
    with open(audio_path, "rb") as fh:
        files = {"file": (filename, fh, infer_mime_type(filename))}
        try:
            resp = requests.post(url, files=files, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise RuntimeError(f"Ask request failed: {exc}") from exc

    return resp.json()


def save_audio(audio_b64: str, out_path: str) -> int:
    """Decode base64 audio to `out_path`; returns bytes written (0 if none)."""
    if not audio_b64:
        return 0
    audio = base64.b64decode(audio_b64)
    with open(out_path, "wb") as fh:
        fh.write(audio)
    return len(audio)


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Ask Nova with a recorded clip.")
    parser.add_argument("audio", help="Path to a .webm / .ogg / .mp4 / .wav / .mp3 clip")
    parser.add_argument("--url", default=DEFAULT_URL, help="Relay /ask URL")
    parser.add_argument("--out", default=DEFAULT_OUTPUT, help="Where to write reply audio")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")

    try:
        body = ask(args.audio, args.url)
    except (OSError, RuntimeError) as exc:
        logger.error("%s", exc)
        return 1

    text = body.get("text", "")
    if not text:
        logger.info("No reply (nothing heard or clip too short).")
        return 0

    print(text)

    written = save_audio(body.get("audio_b64", ""), args.out)
    if written:
        logger.info("Reply audio: %d bytes -> %s", written, args.out)
    else:
        logger.info("No synthesized audio; use a local voice for the reply.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
