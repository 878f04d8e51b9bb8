"""ASGI entrypoint for the invitation store API."""

from invitation_store.api.app import create_app
from invitation_store.containers import build_container

app = create_app(build_container())
