"""
tests/test_providers.py
========================
Provider Client Tests - Nova Voice Relay

Covers the three outbound clients in isolation:
    - src.stt.groq_client      (request shape, text extraction, failures)
    - src.llm.chat             (persona messages, reply extraction, failures)
    - src.tts.elevenlabs_client (URL / headers / payload, status handling)

All tests are offline; the OpenAI client and aiohttp session are mocked.
"""

import asyncio
import os
import sys
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import aiohttp

# Ensure project root is on sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from src.audio.upload import AudioUpload
from src.config import PERSONA_PROMPT, TTS_VOICE_SETTINGS, Settings
from src.llm.chat import build_messages, complete
from src.provider_errors import ProviderError
from src.stt.groq_client import transcribe
from src.tts.elevenlabs_client import build_payload, synthesize


def _settings(**overrides) -> Settings:
    return Settings(groq_api_key="gsk-test", **overrides)


def _completion(content):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )


def _session(status: int = 200, body: bytes = b"") -> MagicMock:
    resp = MagicMock()
    resp.status = status
    resp.read = AsyncMock(return_value=body)

    session = MagicMock()
    session.post.return_value.__aenter__.return_value = resp
    session.post.return_value.__aexit__.return_value = False
    return session


# ===================================================================
# STT client
# ===================================================================


class TestGroqTranscribe(unittest.IsolatedAsyncioTestCase):

    async def test_request_carries_file_model_language_and_format(self):
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(
            return_value=SimpleNamespace(text="hello")
        )
        upload = AudioUpload(payload=b"a" * 2000, filename="voice.ogg")

        await transcribe(client, upload, _settings(provider_timeout_seconds=5))

        kwargs = client.audio.transcriptions.create.await_args.kwargs
        self.assertEqual(kwargs["model"], "whisper-large-v3-turbo")
        self.assertEqual(kwargs["file"], ("voice.ogg", b"a" * 2000, "audio/ogg"))
        self.assertEqual(kwargs["language"], "en")
        self.assertEqual(kwargs["response_format"], "json")
        self.assertEqual(kwargs["timeout"], 5)

    async def test_text_is_trimmed(self):
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(
            return_value=SimpleNamespace(text="  what time is it? \n")
        )
        text = await transcribe(client, AudioUpload(b"a" * 2000), _settings())
        self.assertEqual(text, "what time is it?")

    async def test_dict_response_supported(self):
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(return_value={"text": "hi"})
        text = await transcribe(client, AudioUpload(b"a" * 2000), _settings())
        self.assertEqual(text, "hi")

    async def test_missing_text_field_is_provider_error(self):
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(return_value={"error": "nope"})
        with self.assertRaises(ProviderError):
            await transcribe(client, AudioUpload(b"a" * 2000), _settings())

    async def test_transport_failure_is_provider_error(self):
        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(side_effect=OSError("reset"))
        with self.assertRaises(ProviderError) as ctx:
            await transcribe(client, AudioUpload(b"a" * 2000), _settings())
        self.assertIn("reset", ctx.exception.message)
        self.assertIsNone(ctx.exception.status_code)

    async def test_status_code_is_preserved(self):
        class FakeStatusError(Exception):
            status_code = 401

        client = MagicMock()
        client.audio.transcriptions.create = AsyncMock(side_effect=FakeStatusError("bad key"))
        with self.assertRaises(ProviderError) as ctx:
            await transcribe(client, AudioUpload(b"a" * 2000), _settings())
        self.assertEqual(ctx.exception.status_code, 401)


# ===================================================================
# Chat client
# ===================================================================


class TestBuildMessages(unittest.TestCase):

    def test_system_then_user(self):
        messages = build_messages("hello", PERSONA_PROMPT)
        self.assertEqual(
            messages,
            [
                {"role": "system", "content": PERSONA_PROMPT},
                {"role": "user", "content": "hello"},
            ],
        )

    def test_persona_mentions_nova_and_length(self):
        self.assertIn("Nova", PERSONA_PROMPT)
        self.assertIn("1-2 sentences", PERSONA_PROMPT)


class TestChatComplete(unittest.IsolatedAsyncioTestCase):

    async def test_request_shape(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_completion("Hi!"))

        await complete(client, "hello", _settings(persona_prompt="Be brief."))

        kwargs = client.chat.completions.create.await_args.kwargs
        self.assertEqual(kwargs["model"], "llama-3.1-8b-instant")
        self.assertEqual(kwargs["temperature"], 0.7)
        self.assertEqual(kwargs["max_tokens"], 100)
        self.assertEqual(kwargs["messages"][0], {"role": "system", "content": "Be brief."})
        self.assertEqual(kwargs["messages"][1], {"role": "user", "content": "hello"})

    async def test_reply_is_trimmed(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_completion("  Hi there!\n"))
        self.assertEqual(await complete(client, "hello", _settings()), "Hi there!")

    async def test_none_content_is_empty(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_completion(None))
        self.assertEqual(await complete(client, "hello", _settings()), "")

    async def test_no_choices_is_provider_error(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=SimpleNamespace(choices=[]))
        with self.assertRaises(ProviderError):
            await complete(client, "hello", _settings())

    async def test_non_string_content_is_provider_error(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(return_value=_completion(42))
        with self.assertRaises(ProviderError):
            await complete(client, "hello", _settings())

    async def test_transport_failure_is_provider_error(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=RuntimeError("boom"))
        with self.assertRaises(ProviderError) as ctx:
            await complete(client, "hello", _settings())
        self.assertEqual(ctx.exception.provider, "Groq chat")


# ===================================================================
# TTS client
# ===================================================================


class TestElevenLabsSynthesize(unittest.IsolatedAsyncioTestCase):

    async def test_success_returns_exact_bytes(self):
        session = _session(200, b"\x01\x02")
        audio = await synthesize(session, "Hi there!", _settings(elevenlabs_api_key="el"))
        self.assertEqual(audio, b"\x01\x02")

    async def test_request_url_headers_and_payload(self):
        session = _session(200, b"\x00")
        await synthesize(session, "Hi there!", _settings(elevenlabs_api_key="el-key"))

        args, kwargs = session.post.call_args
        self.assertEqual(
            args[0],
            "https://api.elevenlabs.io/v1/text-to-speech/21m00Tcm4TlvDq8ikWAM",
        )
        self.assertEqual(kwargs["headers"]["xi-api-key"], "el-key")
        self.assertEqual(
            kwargs["json"],
            {
                "text": "Hi there!",
                "model_id": "eleven_turbo_v2_5",
                "voice_settings": TTS_VOICE_SETTINGS,
            },
        )
        self.assertIsInstance(kwargs["timeout"], aiohttp.ClientTimeout)

    async def test_non_success_status_is_provider_error(self):
        session = _session(401)
        with self.assertRaises(ProviderError) as ctx:
            await synthesize(session, "Hi", _settings(elevenlabs_api_key="el"))
        self.assertEqual(ctx.exception.status_code, 401)

    async def test_client_error_is_provider_error(self):
        session = MagicMock()
        session.post.side_effect = aiohttp.ClientConnectionError("refused")
        with self.assertRaises(ProviderError):
            await synthesize(session, "Hi", _settings(elevenlabs_api_key="el"))

    async def test_timeout_is_provider_error(self):
        session = MagicMock()
        session.post.side_effect = asyncio.TimeoutError()
        with self.assertRaises(ProviderError) as ctx:
            await synthesize(session, "Hi", _settings(elevenlabs_api_key="el"))
        self.assertEqual(ctx.exception.message, "TimeoutError")

    async def test_missing_key_is_provider_error(self):
        session = _session()
        with self.assertRaises(ProviderError):
            await synthesize(session, "Hi", _settings())
        session.post.assert_not_called()


class TestBuildPayload(unittest.TestCase):

    def test_voice_settings_are_copied(self):
        settings = _settings()
        payload = build_payload("Hi", settings)
        payload["voice_settings"]["stability"] = 0.0
        self.assertEqual(dict(settings.tts_voice_settings)["stability"], 0.5)


if __name__ == "__main__":
    unittest.main()
