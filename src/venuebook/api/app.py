"""ASGI entrypoint: ``uvicorn venuebook.api.app:app``."""

from venuebook.api.factory import create_app

app = create_app()
