import pytest
from conftest import FakeClients, web_instance

from autodiag.datasource import (
    AppDescription,
    ComputeInstanceDescription,
    DatabaseInstanceDescription,
    fetch,
)
from autodiag.errors import NotFoundError
from autodiag.types import DatabaseInstance, TimeWindow


def _db(identifier: str = "db-identifier-name") -> DatabaseInstance:
    return DatabaseInstance(
        identifier=identifier,
        instance_class="db.t4g.medium",
        engine="postgres",
        engine_version="16.1",
        storage_type="gp3",
        status="available",
        multi_az=True,
    )


def test_app_description_makes_no_calls(
    fake_clients: FakeClients, window: TimeWindow
) -> None:
    spec = AppDescription(order_no=3, description="  demo app\n")
    fragment = fetch(spec, window, fake_clients)
    assert fragment.order_no == 3
    assert fragment.title == "App Description"
    assert fragment.body == "demo app"
    assert fake_clients.calls == []


def test_compute_instance(window: TimeWindow) -> None:
    clients = FakeClients(instances={"web-1": [web_instance()]})
    spec = ComputeInstanceDescription(order_no=1, instance_name="web-1")
    fragment = fetch(spec, window, clients)
    assert fragment.title == "EC2 Instance"
    assert fragment.body.splitlines() == [
        "Instance name: [`web-1`]",
        "Instance id: [`i-0abc`]",
        "Instance type: [`t3a.medium`]",
        "Cpu core count: [1]",
        "Cpu threads per core: [2]",
        "State: [running]",
    ]


@pytest.mark.parametrize("matches", [0, 2])
def test_compute_instance_must_match_exactly_one(
    matches: int, window: TimeWindow
) -> None:
    found = [web_instance(f"i-{n}") for n in range(matches)]
    clients = FakeClients(instances={"web-1": found})
    spec = ComputeInstanceDescription(order_no=1, instance_name="web-1")
    with pytest.raises(NotFoundError) as info:
        fetch(spec, window, clients)
    assert info.value.source == "EC2 instance web-1"
    assert "web-1" in str(info.value)


def test_database_instance(window: TimeWindow) -> None:
    clients = FakeClients(databases={"db-identifier-name": [_db()]})
    spec = DatabaseInstanceDescription(order_no=1, db_identifier="db-identifier-name")
    fragment = fetch(spec, window, clients)
    assert fragment.title == "RDS Instance"
    assert fragment.body.splitlines() == [
        "DB identifier: [`db-identifier-name`]",
        "Class: [`db.t4g.medium`]",
        "Engine: [postgres 16.1]",
        "Storage type: [gp3]",
        "Status: [available]",
        "Multi AZ: [true]",
    ]


def test_database_instance_not_found(
    fake_clients: FakeClients, window: TimeWindow
) -> None:
    spec = DatabaseInstanceDescription(order_no=1, db_identifier="missing")
    with pytest.raises(NotFoundError):
        fetch(spec, window, fake_clients)
    assert fake_clients.calls == [("rds", "missing")]
