"""ASGI entrypoint for the catering orders API."""

from catering_orders.api.app import create_app
from catering_orders.containers import build_container

app = create_app(build_container())
