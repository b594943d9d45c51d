"""Main entry point for the Multichat API."""

from pathlib import Path

import uvicorn
from dotenv import load_dotenv

from multichat.api import create_fastapi_app
from multichat.app import Application
from multichat.config import Settings
from multichat.logging_config import setup_logging


def main():
    """Run the application."""
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")

    settings = Settings.from_env()
    setup_logging(settings.log_level)

    app = create_fastapi_app(Application(settings))

    # log_config=None keeps the JSON logging configured above
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
