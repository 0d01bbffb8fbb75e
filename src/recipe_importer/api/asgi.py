"""ASGI entrypoint for the recipe importer API."""

from recipe_importer.api.app import create_app
from recipe_importer.containers import build_container

app = create_app(build_container())
