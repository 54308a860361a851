"""Analyzer engine: discovery, resolution, curation and aggregation."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import structlog

from dependency_analyzer.aggregator import AnalyzerResultBuilder
from dependency_analyzer.config import AnalyzerConfiguration, AnalyzerSettings
from dependency_analyzer.curation.pipeline import curate_result
from dependency_analyzer.curation.provider import NoCurationProvider, PackageCurationProvider
from dependency_analyzer.discovery import discover
from dependency_analyzer.managers.base import distinct_results, error_result
from dependency_analyzer.managers.registry import (
    PackageManagerDescriptor,
    PackageManagerRegistry,
    create_default_registry,
)
from dependency_analyzer.models.result import AnalyzerResult, ProjectAnalyzerResult
from dependency_analyzer.progress import ProgressTracker
from dependency_analyzer.vcs import get_clone_info

log = structlog.get_logger("dependency_analyzer.engine")

_Resolved = tuple[PackageManagerDescriptor, dict[Path, ProjectAnalyzerResult]]


def _run_in_thread(
    loop: asyncio.AbstractEventLoop, name: str, fn: Callable[..., Any], *args: Any
) -> asyncio.Future:
    """Run *fn* on its own daemon thread and return a future for its outcome.

    A caller that stops waiting (timeout) abandons the thread; being a daemon
    thread, it cannot hold up interpreter exit.
    """
    future = loop.create_future()

    def _deliver(outcome: Any, error: Exception | None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(outcome)

    def _target() -> None:
        outcome, error = None, None
        try:
            outcome = fn(*args)
        except Exception as e:
            error = e
        try:
            loop.call_soon_threadsafe(_deliver, outcome, error)
        except RuntimeError:
            # The event loop is already closed: the run gave up on this call.
            log.debug("analyzer.late_result_dropped", thread=name)

    threading.Thread(target=_target, name=name, daemon=True).start()
    return future


class Analyzer:
    """
    Run one analysis of a project tree.

    Phase 1: discovery of definition files per package manager
    Phase 2: resolution, at most max_workers package managers at a time, each
             on its own thread with its own timeout
    Phase 3: curation of every result, in completion order
    Phase 4: aggregation into a single validated AnalyzerResult

    ``progress`` is kept across runs; listeners attached to it see every run.
    """

    def __init__(
        self,
        config: AnalyzerConfiguration | None = None,
        registry: PackageManagerRegistry | None = None,
        curation_provider: PackageCurationProvider | None = None,
        settings: AnalyzerSettings | None = None,
    ) -> None:
        self.config = config or AnalyzerConfiguration()
        self.registry = registry or create_default_registry()
        self.curation_provider = curation_provider or NoCurationProvider()
        self.settings = settings or AnalyzerSettings()
        self.progress = ProgressTracker()

    def analyze(
        self,
        path: Path | str,
        package_managers: Sequence[PackageManagerDescriptor] | None = None,
    ) -> AnalyzerResult:
        """Synchronous entry point, see analyze_async()."""
        return asyncio.run(self.analyze_async(path, package_managers))

    async def analyze_async(
        self,
        path: Path | str,
        package_managers: Sequence[PackageManagerDescriptor] | None = None,
    ) -> AnalyzerResult:
        """Analyze *path* with the given (default: all registered) package managers.

        Raises DiscoveryError if the tree cannot be read and ResultIntegrityError
        if the merged result is inconsistent. Failures of single package managers
        end up as errors in the result.
        """
        progress = self.progress
        progress.reset()

        managers = list(package_managers) if package_managers is not None else self.registry.list_all()
        root_path = Path(path).absolute()
        root_dir = root_path.parent if root_path.is_file() else root_path

        with progress.track("discovery") as phase:
            managed = discover(root_path, managers)
            phase.detail = (
                f"{sum(len(f) for f in managed.values())} definition file(s), "
                f"{len(managed)} package manager(s)"
            )

        builder = AnalyzerResultBuilder(self.config, get_clone_info(root_dir))

        slots = asyncio.Semaphore(self.settings.max_workers)
        pending = [
            asyncio.create_task(
                self._resolve(slots, descriptor, root_dir, files),
                name=f"resolve-{descriptor.name}",
            )
            for descriptor, files in managed.items()
        ]
        # Single consumer: results reach the builder one at a time.
        for next_done in asyncio.as_completed(pending):
            descriptor, results = await next_done
            project_results = distinct_results(results)
            for project_result in project_results:
                builder.add_result(curate_result(project_result, self.curation_provider))
            log.info(
                "analyzer.manager_done", manager=descriptor.name, projects=len(project_results)
            )

        with progress.track("build") as phase:
            result = builder.build()
            phase.detail = f"{len(result.projects)} project(s), {len(result.packages)} package(s)"
        log.info(
            "analyzer.completed",
            projects=len(result.projects),
            packages=len(result.packages),
            has_errors=result.has_errors(),
        )
        return result

    async def _resolve(
        self,
        slots: asyncio.Semaphore,
        descriptor: PackageManagerDescriptor,
        root_dir: Path,
        files: list[Path],
    ) -> _Resolved:
        """Resolve one manager's files once a slot is free; failures become error results.

        The timeout only counts from the moment the resolution starts running. A
        timed out resolution gives its slot back and its thread is abandoned.
        """
        phase = f"resolve:{descriptor.name}"
        timeout = self.settings.resolution_timeout

        async with slots:
            self.progress.start(phase)
            try:
                manager = descriptor.create(self.config)
                call = _run_in_thread(
                    asyncio.get_running_loop(),
                    f"resolve-{descriptor.name}",
                    manager.resolve_dependencies,
                    root_dir,
                    files,
                )
                results = await asyncio.wait_for(call, timeout) if timeout else await call
            except asyncio.TimeoutError:
                error = f"Resolution with {descriptor.name} timed out after {timeout}s."
                log.error("analyzer.resolution_timeout", manager=descriptor.name, timeout=timeout)
            except Exception as e:
                error = f"Resolution with {descriptor.name} failed: {type(e).__name__}: {e}"
                log.error("analyzer.resolution_failed", manager=descriptor.name, exc_info=True)
            else:
                self.progress.complete(
                    phase, detail=f"{len(distinct_results(results))} project(s)"
                )
                return descriptor, results

        self.progress.fail(phase, error)
        return descriptor, {
            f: error_result(self.config, descriptor.name, root_dir, f, error) for f in files
        }
