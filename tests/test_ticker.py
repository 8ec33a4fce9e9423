import queue

import pytest

from services.ticker import DriftCorrector, PrecisionTicker, Tick


def test_corrector_pulls_back_toward_grid():
    corrector = DriftCorrector(1000)
    corrector.start(0)
    assert corrector.step(1000) == 1000
    assert corrector.step(2050) == 950
    assert corrector.expected_ms == 3000


def test_large_drift_resyncs_instead_of_bursting():
    corrector = DriftCorrector(1000)
    corrector.start(0)
    corrector.step(1000)
    delay = corrector.step(3500)  # expected 2000, dt = 1500
    assert corrector.resyncs == 1
    assert corrector.expected_ms == 4500
    assert delay == 1000
    assert corrector.step(4500) == 1000


def test_drift_of_exactly_one_interval_does_not_resync():
    corrector = DriftCorrector(1000)
    corrector.start(0)
    assert corrector.step(2000) == 0
    assert corrector.resyncs == 0
    assert corrector.expected_ms == 2000


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        DriftCorrector(0)


def test_ticker_delivers_ordered_ticks_through_channel():
    channel = queue.Queue()
    ticker = PrecisionTicker(10, channel=channel)
    with ticker:
        first = channel.get(timeout=2)
        second = channel.get(timeout=2)
        assert ticker.running
    assert isinstance(first, Tick)
    assert (first.seq, second.seq) == (1, 2)
    assert second.at_ms >= first.at_ms
    assert not ticker.running
    ticker.stop()
