"""Static application description; never calls out."""

from __future__ import annotations

from ..clients import ServiceClients
from ..types import Fragment, TimeWindow
from .specs import AppDescription

TITLE = "App Description"


def fetch(
    spec: AppDescription, window: TimeWindow, clients: ServiceClients
) -> Fragment:
    return Fragment(order_no=spec.order_no, title=TITLE, body=spec.description.strip())


__all__ = ["fetch"]
