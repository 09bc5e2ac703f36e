"""ASGI entrypoint for the meal scoring API."""

from meal_scoring.api.app import create_app
from meal_scoring.containers import build_container

app = create_app(build_container())
