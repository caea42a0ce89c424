"""RDS instance description datasource."""

from __future__ import annotations

from ..clients import ServiceClients
from ..errors import NotFoundError
from ..types import DatabaseInstance, Fragment, TimeWindow
from .specs import DatabaseInstanceDescription

TITLE = "RDS Instance"


def render(instance: DatabaseInstance) -> str:
    lines = [
        f"DB identifier: [`{instance.identifier}`]",
        f"Class: [`{instance.instance_class}`]",
        f"Engine: [{instance.engine} {instance.engine_version}]",
        f"Storage type: [{instance.storage_type}]",
        f"Status: [{instance.status}]",
        f"Multi AZ: [{str(instance.multi_az).lower()}]",
    ]
    return "\n".join(lines)


def fetch(
    spec: DatabaseInstanceDescription, window: TimeWindow, clients: ServiceClients
) -> Fragment:
    matches = list(clients.lookup_database_instance(spec.db_identifier))
    if len(matches) != 1:
        raise NotFoundError(
            f"expected exactly one DB instance {spec.db_identifier!r}, "
            f"found {len(matches)}",
            source=spec.label(),
        )
    return Fragment(order_no=spec.order_no, title=TITLE, body=render(matches[0]))


__all__ = ["fetch", "render"]
