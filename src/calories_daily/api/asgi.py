"""ASGI entrypoint for the calories daily API."""

from calories_daily.api.app import create_app
from calories_daily.containers import build_container

app = create_app(build_container())
