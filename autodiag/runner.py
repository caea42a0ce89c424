"""Run one diagnosis: resolve the window, fetch, assemble, diagnose."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from .clients import ServiceClients
from .config import Config
from .diagnosis import DiagnosisClient
from .errors import DiagnosisError
from .orchestrator import DEFAULT_MAX_WORKERS, FetchFailure, Orchestrator
from .prompt_builder import INSTRUCTION, build_prompt
from .timewindow import load_time_zone, resolve_window
from .types import Prompt, TimeWindow

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class RunResult:
    """Everything a caller may report after a run."""

    window: TimeWindow
    prompt: Prompt
    failures: list[FetchFailure] = field(default_factory=list)
    diagnosis: str | None = None


async def run_async(
    config: Config,
    clients: ServiceClients,
    diagnosis_client: DiagnosisClient | None,
    *,
    now: datetime | None = None,
    duration: float | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    dry_run: bool = False,
    print_prompt: bool = False,
    emit: Callable[[str], None] = print,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> RunResult:
    """Execute a diagnosis run and return its result.

    ``ConfigError`` is raised before any fetch when the window cannot be
    resolved. ``NoUsableDataError`` propagates from the orchestrator. A
    ``DiagnosisError`` propagates with the assembled prompt attached as
    ``error.prompt`` so it can still be inspected.
    """

    time_zone = load_time_zone(config.general.time_zone)
    window = resolve_window(
        now or datetime.now(UTC),
        duration=duration,
        start=start,
        end=end,
        time_zone=time_zone,
    )
    orchestrator = Orchestrator(clients, max_workers=max_workers)
    outcome = await orchestrator.run(config.datasources(), window)
    prompt = build_prompt(outcome.fragments)
    LOGGER.info("assembled prompt with %d section(s)", prompt.sections)
    if print_prompt:
        emit(prompt.text)

    if dry_run or diagnosis_client is None:
        LOGGER.info("dry run, skipping diagnosis")
        return RunResult(window=window, prompt=prompt, failures=outcome.failures)

    LOGGER.info("requesting diagnosis")
    try:
        diagnosis = await asyncio.to_thread(
            diagnosis_client.diagnose,
            prompt.text,
            model=config.open_ai.model,
            max_tokens=config.open_ai.max_token,
            instruction=INSTRUCTION,
        )
    except DiagnosisError as exc:
        exc.prompt = prompt
        raise
    LOGGER.info("diagnosis succeeded")
    return RunResult(
        window=window,
        prompt=prompt,
        failures=outcome.failures,
        diagnosis=diagnosis,
    )


def run(
    config: Config,
    clients: ServiceClients,
    diagnosis_client: DiagnosisClient | None,
    *,
    now: datetime | None = None,
    duration: float | None = None,
    start: datetime | None = None,
    end: datetime | None = None,
    dry_run: bool = False,
    print_prompt: bool = False,
    emit: Callable[[str], None] = print,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> RunResult:
    """Blocking wrapper around :func:`run_async`."""

    return asyncio.run(
        run_async(
            config,
            clients,
            diagnosis_client,
            now=now,
            duration=duration,
            start=start,
            end=end,
            dry_run=dry_run,
            print_prompt=print_prompt,
            emit=emit,
            max_workers=max_workers,
        )
    )


__all__ = ["RunResult", "run", "run_async"]
