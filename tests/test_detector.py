"""
Unit tests for observed-frequency detection.

Tests verify:
- Wavelength to frequency conversion from two crossed wavefronts
- Pairs are skipped until both wavefronts reach the observer
- The first qualifying pair in storage order wins
- Stale observed frequencies drop to zero
"""

import pytest

from doppler_sim import FrequencyDetector, WavefrontRing

C = 343.0
DT = 0.05
OBSERVER_X = 400.0


@pytest.fixture
def detector():
    """Detector with the default wave speed and timestep."""
    return FrequencyDetector(c=C, dt=DT, stale_ticks=10)


class TestScan:
    """Tests for FrequencyDetector.scan()."""

    def test_pair_past_observer(self, ring, detector):
        """Test edges 10 m apart at 343 m/s give 34.3 Hz."""
        ring.place(0, radius=615.0, center_x=1000.0)  # edge at 385
        ring.place(1, radius=605.0, center_x=1000.0)  # edge at 395

        assert detector.scan(ring, OBSERVER_X) == pytest.approx(34.3)
        assert detector.observed_frequency == pytest.approx(34.3)
        assert detector.state.period_estimate_clock == 0.0
        assert ring.observed[0]
        assert not ring.observed[1]

    def test_second_wavefront_not_arrived(self, ring, detector):
        """Test nothing is detected until both edges pass the observer."""
        ring.place(0, radius=615.0, center_x=1000.0)
        ring.place(1, radius=595.0, center_x=1000.0)  # edge at 405

        assert detector.scan(ring, OBSERVER_X) is None
        assert detector.observed_frequency == 0.0
        assert not ring.observed[0]

    def test_observed_slot_skipped(self, ring, detector):
        """Test an already consumed wavefront can't start a pair."""
        ring.place(0, radius=615.0, center_x=1000.0, observed=True)
        ring.place(1, radius=605.0, center_x=1000.0)

        assert detector.scan(ring, OBSERVER_X) is None

    def test_parked_ring_never_detects(self, ring, detector):
        """Test the initial parked slots never produce a sample."""
        for _ in range(100):
            assert detector.scan(ring, OBSERVER_X) is None
        assert detector.observed_frequency == 0.0

    def test_first_pair_wins(self, ring, detector):
        """Test only the lowest qualifying pair is consumed per scan."""
        ring.place(0, radius=615.0, center_x=1000.0)
        ring.place(1, radius=605.0, center_x=1000.0)
        ring.place(5, radius=700.0, center_x=1000.0)  # edge at 300
        ring.place(6, radius=680.0, center_x=1000.0)  # edge at 320

        assert detector.scan(ring, OBSERVER_X) == pytest.approx(34.3)
        assert not ring.observed[5]

        assert detector.scan(ring, OBSERVER_X) == pytest.approx(17.15)
        assert ring.observed[5]

    def test_zero_wavelength_skipped(self, ring, detector):
        """Test coincident edges don't divide by zero."""
        ring.place(0, radius=700.0, center_x=1000.0)
        ring.place(1, radius=700.0, center_x=1000.0)

        assert detector.scan(ring, OBSERVER_X) is None
        assert detector.observed_frequency == 0.0

    def test_increasing_crossing(self, detector):
        """Test detection for an observer on the high-x side."""
        ring = WavefrontRing(capacity=28, crossing="increasing")
        ring.place(0, radius=815.0, center_x=1000.0)  # edge at 1815
        ring.place(1, radius=805.0, center_x=1000.0)  # edge at 1805

        assert detector.scan(ring, observer_x=1800.0) == pytest.approx(34.3)


class TestStaleness:
    """Tests for dropping stale observed frequencies."""

    def test_expires_after_period_plus_margin(self, ring, detector):
        """Test 34.3 Hz is held for 10 ticks and dropped on the 11th."""
        ring.place(0, radius=615.0, center_x=1000.0)
        ring.place(1, radius=605.0, center_x=1000.0)
        detector.scan(ring, OBSERVER_X)

        # 1/34.3 + 10 * 0.05 is about 0.529 s
        for _ in range(10):
            detector.scan(ring, OBSERVER_X)
        assert detector.observed_frequency == pytest.approx(34.3)

        detector.scan(ring, OBSERVER_X)
        assert detector.observed_frequency == 0.0
        assert detector.state.period_estimate_clock == 0.0

    def test_clock_runs_without_sample(self, ring, detector):
        """Test the clock advances every scan even with nothing observed."""
        for _ in range(4):
            detector.scan(ring, OBSERVER_X)
        assert detector.state.period_estimate_clock == pytest.approx(0.2)

    def test_reset(self, ring, detector):
        """Test reset clears the sample and clock."""
        ring.place(0, radius=615.0, center_x=1000.0)
        ring.place(1, radius=605.0, center_x=1000.0)
        detector.scan(ring, OBSERVER_X)
        detector.reset()
        assert detector.observed_frequency == 0.0
        assert detector.state.period_estimate_clock == 0.0
