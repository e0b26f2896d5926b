"""ASGI entrypoint for the sticker converter API."""

from sticker_converter.api.app import create_app
from sticker_converter.containers import build_container

app = create_app(build_container())
