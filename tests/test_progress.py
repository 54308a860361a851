"""Tests for ProgressTracker."""

from __future__ import annotations

import time

import pytest

from dependency_analyzer.progress import PhaseStatus, ProgressTracker


class TestProgressTracker:
    def test_basic_flow(self):
        tracker = ProgressTracker()
        tracker.start("discovery")
        tracker.complete("discovery", detail="3 definition file(s)")

        summary = tracker.summary()
        assert len(summary["phases"]) == 1
        assert summary["phases"][0]["status"] == "completed"
        assert summary["phases"][0]["detail"] == "3 definition file(s)"

    def test_fail(self):
        tracker = ProgressTracker()
        tracker.start("resolve:Cargo")
        tracker.fail("resolve:Cargo", "timed out")

        phase = tracker.get("resolve:Cargo")
        assert phase.status is PhaseStatus.FAILED
        assert phase.error == "timed out"

    def test_finished_phase_is_not_changed_again(self):
        tracker = ProgressTracker()
        tracker.start("build")
        tracker.fail("build", "broken")
        tracker.complete("build")
        assert tracker.get("build").status is PhaseStatus.FAILED

    def test_unknown_phase_ignored(self):
        tracker = ProgressTracker()
        tracker.complete("never-started")
        assert tracker.phases == []
        assert tracker.get("never-started") is None

    def test_duration(self):
        tracker = ProgressTracker()
        tracker.start("build")
        assert tracker.get("build").duration is None
        time.sleep(0.01)
        tracker.complete("build")

        assert tracker.get("build").duration >= 0.01

    def test_track_completes_with_detail(self):
        tracker = ProgressTracker()
        with tracker.track("discovery") as phase:
            phase.detail = "2 package manager(s)"

        assert tracker.summary()["phases"][0] == {
            "phase": "discovery",
            "status": "completed",
            "duration": tracker.get("discovery").duration,
            "detail": "2 package manager(s)",
            "error": None,
        }

    def test_track_fails_and_reraises(self):
        tracker = ProgressTracker()
        with pytest.raises(OSError):
            with tracker.track("discovery"):
                raise OSError("unreadable")

        phase = tracker.get("discovery")
        assert phase.status is PhaseStatus.FAILED
        assert phase.error == "OSError: unreadable"

    def test_listeners(self):
        events = []
        tracker = ProgressTracker()
        tracker.listeners.append(lambda p: events.append((p.name, p.status)))

        tracker.start("a")
        tracker.complete("a")

        assert events == [("a", PhaseStatus.RUNNING), ("a", PhaseStatus.COMPLETED)]

    def test_failing_listener_does_not_break_tracking(self):
        tracker = ProgressTracker()

        def explode(phase):
            raise RuntimeError("boom")

        tracker.listeners.append(explode)
        tracker.start("a")
        tracker.complete("a")
        assert tracker.get("a").status is PhaseStatus.COMPLETED

    def test_phases_kept_in_start_order(self):
        tracker = ProgressTracker()
        for name in ("discovery", "resolve:PIP", "build"):
            tracker.start(name)
            tracker.complete(name)

        summary = tracker.summary()
        assert [p["phase"] for p in summary["phases"]] == ["discovery", "resolve:PIP", "build"]
        assert summary["total_duration"] >= 0

    def test_reset_keeps_listeners(self):
        events = []
        tracker = ProgressTracker()
        tracker.listeners.append(lambda p: events.append(p.name))
        tracker.start("discovery")
        tracker.complete("discovery")

        tracker.reset()
        assert tracker.phases == []
        assert tracker.get("discovery") is None

        tracker.start("build")
        assert events == ["discovery", "discovery", "build"]
