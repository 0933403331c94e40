"""ASGI entrypoint for the MerryStyle API."""

from merry_style.api.app import create_app
from merry_style.containers import build_container

app = create_app(build_container())
