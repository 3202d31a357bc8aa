"""ASGI entrypoint for the ozendate API."""

from ozendate.api.app import create_app
from ozendate.containers import build_container

app = create_app(build_container())
