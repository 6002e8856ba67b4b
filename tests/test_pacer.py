"""
Unit tests for tick pacing and keep-up monitoring.

Tests verify:
- Overload is flagged only for ticks whose work exceeds dt
- Remaining budget is slept in real-time mode only
- Scripted durations drive SyntheticPacer deterministically
"""

import pytest

from doppler_sim import KeepUpMonitor, RealTimePacer, SyntheticPacer

DT = 0.05


class FakeClock:
    """Clock returning a scripted sequence of readings."""

    def __init__(self, readings):
        self._readings = iter(readings)

    def __call__(self):
        return next(self._readings)


class TestKeepUpMonitor:
    """Tests for KeepUpMonitor."""

    def test_flags_and_counts(self):
        """Test the flag follows the latest tick and the count accumulates."""
        monitor = KeepUpMonitor(DT)
        flags = [monitor.check(elapsed) for elapsed in (0.01, 0.08, 0.02, 0.06)]

        assert flags == [False, True, False, True]
        assert monitor.overloaded
        assert monitor.overload_count == 2
        assert monitor.ticks == 4

    def test_exact_budget_not_overloaded(self):
        """Test a tick that uses exactly dt still keeps up."""
        assert not KeepUpMonitor(DT).check(DT)

    def test_reset(self):
        monitor = KeepUpMonitor(DT)
        monitor.check(1.0)
        monitor.reset()
        assert not monitor.overloaded
        assert monitor.overload_count == 0
        assert monitor.ticks == 0


class TestSyntheticPacer:
    """Tests for SyntheticPacer."""

    def test_overload_sequence(self):
        """Test durations 0.01, 0.08, 0.02 flag only the middle tick."""
        pacer = SyntheticPacer(DT, durations=[0.01, 0.08, 0.02])
        timings = []
        for _ in range(3):
            pacer.start()
            timings.append(pacer.finish())

        assert [t.overloaded for t in timings] == [False, True, False]
        assert [t.elapsed for t in timings] == [0.01, 0.08, 0.02]
        assert timings[1].sleep == 0.0
        assert pacer.total_sleep == pytest.approx(0.04 + 0.03)
        assert pacer.monitor.overload_count == 1

    def test_default_after_exhaustion(self):
        """Test ticks past the script use the default duration."""
        pacer = SyntheticPacer(DT, durations=[0.01], default=0.1)
        pacer.start()
        assert not pacer.finish().overloaded
        pacer.start()
        assert pacer.finish().overloaded

    def test_invalid_dt(self):
        with pytest.raises(ValueError, match="dt must be positive"):
            SyntheticPacer(0.0)


class TestRealTimePacer:
    """Tests for RealTimePacer."""

    def test_sleeps_remaining_budget(self):
        """Test the pacer sleeps out whatever the work left of dt."""
        sleeps = []
        pacer = RealTimePacer(
            DT, clock=FakeClock([0.0, 0.02, 1.0, 1.07]), sleep=sleeps.append
        )

        pacer.start()
        first = pacer.finish()
        pacer.start()
        second = pacer.finish()

        assert not first.overloaded
        assert first.sleep == pytest.approx(0.03)
        assert second.overloaded
        assert second.sleep == 0.0
        assert sleeps == [pytest.approx(0.03)]

    def test_free_running_never_sleeps(self):
        """Test realtime=False measures without sleeping."""
        sleeps = []
        pacer = RealTimePacer(
            DT, realtime=False, clock=FakeClock([0.0, 0.01]), sleep=sleeps.append
        )
        pacer.start()
        timing = pacer.finish()

        assert not timing.overloaded
        assert sleeps == []

    def test_finish_without_start(self):
        """Test finish() requires a matching start()."""
        pacer = RealTimePacer(DT)
        with pytest.raises(RuntimeError, match="before start"):
            pacer.finish()
