"""Phase tracking for one analysis run: discovery, one resolve phase per manager, build."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

import structlog

log = structlog.get_logger("dependency_analyzer.engine")


class PhaseStatus(Enum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class Phase:
    name: str  # "discovery", "resolve:<manager>" or "build"
    status: PhaseStatus = PhaseStatus.RUNNING
    started: float = 0.0
    finished: float | None = None
    detail: str = ""
    error: str | None = None

    @property
    def duration(self) -> float | None:
        if self.finished is None:
            return None
        return round(self.finished - self.started, 2)

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.name,
            "status": self.status.value,
            "duration": self.duration,
            "detail": self.detail,
            "error": self.error,
        }


class ProgressTracker:
    """Records phases in start order and notifies listeners on every change."""

    def __init__(self) -> None:
        self.phases: list[Phase] = []
        self.listeners: list[Callable[[Phase], None]] = []

    def reset(self) -> None:
        """Forget recorded phases; listeners stay attached."""
        self.phases = []

    def get(self, name: str) -> Phase | None:
        for phase in reversed(self.phases):
            if phase.name == name:
                return phase
        return None

    def start(self, name: str) -> Phase:
        phase = Phase(name=name, started=time.monotonic())
        self.phases.append(phase)
        log.debug("phase.started", phase=name)
        self._changed(phase)
        return phase

    def complete(self, name: str, detail: str = "") -> None:
        self._finish(name, PhaseStatus.COMPLETED, detail=detail)

    def fail(self, name: str, error: str) -> None:
        self._finish(name, PhaseStatus.FAILED, error=error)

    @contextmanager
    def track(self, name: str) -> Iterator[Phase]:
        """Run a block as phase *name*; an exception fails the phase and propagates.

        The block may set ``phase.detail``; the phase completes with it unless the
        block already finished the phase itself.
        """
        phase = self.start(name)
        try:
            yield phase
        except Exception as e:
            self.fail(name, f"{type(e).__name__}: {e}")
            raise
        if phase.status is PhaseStatus.RUNNING:
            self.complete(name, phase.detail)

    def summary(self) -> dict[str, Any]:
        return {
            "phases": [p.to_dict() for p in self.phases],
            "total_duration": round(sum(p.duration or 0 for p in self.phases), 2),
        }

    def _finish(
        self, name: str, status: PhaseStatus, detail: str = "", error: str | None = None
    ) -> None:
        phase = self.get(name)
        if phase is None or phase.status is not PhaseStatus.RUNNING:
            return
        phase.status = status
        phase.finished = time.monotonic()
        phase.detail = detail or phase.detail
        phase.error = error
        log.debug("phase.finished", phase=name, status=status.value, duration=phase.duration)
        self._changed(phase)

    def _changed(self, phase: Phase) -> None:
        for listener in self.listeners:
            try:
                listener(phase)
            except Exception:
                log.warning("phase.listener_failed", phase=phase.name, exc_info=True)
