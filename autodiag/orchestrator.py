"""Fan out datasource fetches and collect their outcomes in order."""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .clients import ServiceClients
from .datasource import DatasourceSpec, fetch
from .errors import DatasourceError, NoUsableDataError
from .types import Fragment, TimeWindow

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


class FetchFn(Protocol):
    def __call__(
        self,
        spec: DatasourceSpec,
        window: TimeWindow,
        clients: ServiceClients,
        *,
        cancel: threading.Event | None = None,
    ) -> Fragment: ...


@dataclass(slots=True, frozen=True)
class FetchFailure:
    """A datasource that could not contribute, with its original position."""

    position: int
    spec: DatasourceSpec
    error: DatasourceError


@dataclass(slots=True, frozen=True)
class FetchOutcome:
    """Result of one fetch: exactly one of ``fragment`` or ``failure``."""

    position: int
    fragment: Fragment | None = None
    failure: FetchFailure | None = None


@dataclass(slots=True, frozen=True)
class RunOutcome:
    """Fragments in prompt order plus the failures collected on the way."""

    fragments: list[Fragment] = field(default_factory=list)
    failures: list[FetchFailure] = field(default_factory=list)


def order_specs(specs: Sequence[DatasourceSpec]) -> list[tuple[int, DatasourceSpec]]:
    """Return ``(position, spec)`` pairs sorted by ``order_no``.

    ``sorted`` is stable, so specs sharing an ``order_no`` keep their
    original relative order.
    """

    return sorted(enumerate(specs), key=lambda item: item[1].order_no)


class Orchestrator:
    """Run every datasource fetch of a diagnosis over one time window."""

    def __init__(
        self,
        clients: ServiceClients,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        fetch_fn: FetchFn = fetch,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.clients = clients
        self.max_workers = max_workers
        self._fetch = fetch_fn

    async def _fetch_one(
        self,
        position: int,
        spec: DatasourceSpec,
        window: TimeWindow,
        semaphore: asyncio.Semaphore,
    ) -> FetchOutcome:
        cancel = threading.Event()
        async with semaphore:
            LOGGER.debug("fetching %s", spec.label())
            try:
                fragment = await asyncio.to_thread(
                    self._fetch, spec, window, self.clients, cancel=cancel
                )
            except asyncio.CancelledError:
                # The worker thread keeps running until it sees the event.
                cancel.set()
                raise
            except DatasourceError as exc:
                if exc.source is None:
                    exc.source = spec.label()
                return _failed(position, spec, exc)
            except Exception as exc:
                LOGGER.debug("unexpected error fetching %s", spec.label(), exc_info=True)
                error = DatasourceError(
                    f"unexpected error: {exc}", source=spec.label()
                )
                error.__cause__ = exc
                return _failed(position, spec, error)
        LOGGER.debug("fetched %s", spec.label())
        return FetchOutcome(position=position, fragment=fragment)

    async def run(
        self, specs: Sequence[DatasourceSpec], window: TimeWindow
    ) -> RunOutcome:
        """Fetch all ``specs`` and return fragments sorted by ``order_no``.

        A failing datasource is recorded and skipped. ``NoUsableDataError``
        is raised only when no datasource produced a fragment. Cancelling
        the run cancels every pending fetch and signals in-flight ones to
        stop their remote work; no results are returned.
        """

        ordered = order_specs(specs)
        LOGGER.info(
            "fetching %d datasource(s) for %s", len(ordered), window.describe()
        )
        semaphore = asyncio.Semaphore(self.max_workers)
        tasks = [
            asyncio.create_task(self._fetch_one(position, spec, window, semaphore))
            for position, spec in ordered
        ]
        results = await asyncio.gather(*tasks)

        fragments: list[Fragment] = []
        failures: list[FetchFailure] = []
        for result in results:
            if result.fragment is not None:
                fragments.append(result.fragment)
            elif result.failure is not None:
                failures.append(result.failure)

        for failure in failures:
            LOGGER.warning("datasource skipped: %s", failure.error)
        LOGGER.info(
            "fetched %d of %d datasource(s)", len(fragments), len(ordered)
        )
        if not fragments:
            raise NoUsableDataError(failures)
        return RunOutcome(fragments=fragments, failures=failures)

    def run_sync(
        self, specs: Sequence[DatasourceSpec], window: TimeWindow
    ) -> RunOutcome:
        """Blocking wrapper around :meth:`run`."""

        return asyncio.run(self.run(specs, window))


def _failed(position: int, spec: DatasourceSpec, error: DatasourceError) -> FetchOutcome:
    return FetchOutcome(
        position=position, failure=FetchFailure(position, spec, error)
    )


__all__ = [
    "DEFAULT_MAX_WORKERS",
    "FetchFailure",
    "FetchOutcome",
    "Orchestrator",
    "RunOutcome",
    "order_specs",
]
