"""FastAPI application entrypoint for ``uvicorn lunchbot.main:app``."""

from lunchbot.application import create_app

app = create_app()
