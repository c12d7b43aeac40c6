"""Main application entry point.

Runs FastAPI (port 8000) with NiceGUI mounted for the chat interface.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def _storage_secret() -> str:
    return os.getenv("NICEGUI_STORAGE_SECRET", "chat-client-secret")


def run_integrated() -> None:
    """Run FastAPI with NiceGUI mounted on the same server.

    FastAPI serves the health check and, unless DEV_BACKEND is off, the
    development chat backend under /chat. NiceGUI serves the UI.
    Both accessible on port 8000.
    """
    import uvicorn
    from nicegui import ui

    from src.api.app import create_app
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    app = create_app()

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="Chat",
        favicon="💬",
        storage_secret=_storage_secret(),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Starting integrated server on http://localhost:{port}")
    logger.info(f"Chat backend expected at {os.getenv('API_BASE_URL', 'http://localhost:8000/chat')}")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def run_separate() -> None:
    """Run the FastAPI backend and the NiceGUI UI as separate servers.

    FastAPI on port 8000, NiceGUI on port 8080.
    """
    import asyncio
    import subprocess

    async def run_servers() -> None:
        logger.info("Starting FastAPI on http://localhost:8000")
        logger.info("Starting NiceGUI on http://localhost:8080")

        fastapi_proc = subprocess.Popen(
            [
                sys.executable,
                "-m",
                "uvicorn",
                "src.api.app:app",
                "--host",
                os.getenv("HOST", "0.0.0.0"),
                "--port",
                "8000",
            ]
        )

        nicegui_proc = subprocess.Popen(
            [sys.executable, "-c", "from src.ui.chat_page import main; main()"]
        )

        try:
            while True:
                await asyncio.sleep(1)
                if fastapi_proc.poll() is not None or nicegui_proc.poll() is not None:
                    break
        except KeyboardInterrupt:
            logger.info("Shutting down servers...")
        finally:
            fastapi_proc.terminate()
            nicegui_proc.terminate()
            fastapi_proc.wait()
            nicegui_proc.wait()

    asyncio.run(run_servers())


def main() -> None:
    """Application entry point.

    Set RUN_MODE=separate to run FastAPI and NiceGUI on different ports.
    Default is integrated mode (both on port 8000).
    """
    mode = os.getenv("RUN_MODE", "integrated").lower()

    logger.info(f"Starting chat client in {mode} mode")

    if mode == "separate":
        run_separate()
    else:
        run_integrated()


if __name__ == "__main__":
    main()
