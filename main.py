"""
main.py
========
Central entry point for the Nova voice relay.

Run with:
    uvicorn main:app
or:
    python main.py          (binds HOST:PORT, default 0.0.0.0:8000)
"""

import logging

from dotenv import load_dotenv

load_dotenv()  # Load .env before any module reads env vars

# Configure logging for the entire application
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Keep OpenAI SDK / HTTP transport chatter out of the request logs.
for _transport_logger_name in (
    "openai",
    "openai._base_client",
    "httpx",
    "httpcore",
):
    logging.getLogger(_transport_logger_name).setLevel(logging.WARNING)

from src.api.upload import app  # noqa: F401, E402

if __name__ == "__main__":
    import uvicorn

    from src.config import load_settings

    settings = load_settings()
    uvicorn.run("main:app", host=settings.host, port=settings.port)
