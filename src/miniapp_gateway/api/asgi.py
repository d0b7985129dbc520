"""ASGI entrypoint for the Mini-App gateway."""

from miniapp_gateway.api.app import create_app
from miniapp_gateway.containers import build_container

app = create_app(build_container())
