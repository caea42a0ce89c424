"""EC2 instance description datasource."""

from __future__ import annotations

import logging

from ..clients import ServiceClients
from ..errors import NotFoundError
from ..types import ComputeInstance, Fragment, TimeWindow
from .specs import ComputeInstanceDescription

LOGGER = logging.getLogger(__name__)

TITLE = "EC2 Instance"


def resolve_instance(
    clients: ServiceClients, name: str, *, source: str | None = None
) -> ComputeInstance:
    """Return the single instance tagged ``name``.

    Raises ``NotFoundError`` when the name matches no instance or several.
    """

    matches = list(clients.lookup_compute_instance(name))
    LOGGER.debug("EC2 name %s matched %d instance(s)", name, len(matches))
    if not matches:
        raise NotFoundError(f"no EC2 instance named {name!r}", source=source)
    if len(matches) > 1:
        ids = ", ".join(instance.instance_id for instance in matches)
        raise NotFoundError(
            f"EC2 instance name {name!r} is ambiguous: matches {ids}",
            source=source,
        )
    return matches[0]


def _optional(value: int | None) -> str:
    return "unknown" if value is None else str(value)


def render(instance: ComputeInstance, name: str) -> str:
    lines = [
        f"Instance name: [`{name}`]",
        f"Instance id: [`{instance.instance_id}`]",
        f"Instance type: [`{instance.instance_type}`]",
        f"Cpu core count: [{_optional(instance.cpu_core_count)}]",
        f"Cpu threads per core: [{_optional(instance.threads_per_core)}]",
        f"State: [{instance.state}]",
    ]
    return "\n".join(lines)


def fetch(
    spec: ComputeInstanceDescription, window: TimeWindow, clients: ServiceClients
) -> Fragment:
    instance = resolve_instance(clients, spec.instance_name, source=spec.label())
    return Fragment(
        order_no=spec.order_no,
        title=TITLE,
        body=render(instance, spec.instance_name),
    )


__all__ = ["fetch", "render", "resolve_instance"]
