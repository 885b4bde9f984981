import time
from unittest.mock import MagicMock, patch
import pytest
from gltfmerge.profiler import Profiler


def test_record_pass():
    profiler = Profiler()
    with profiler.record("nodes"):
        time.sleep(0.005)

    timings = profiler.get_timings()
    assert list(timings) == ["nodes"]
    assert timings["nodes"] > 0.0


def test_slower_pass_has_larger_timing():
    profiler = Profiler()
    with profiler.record("geometry"):
        time.sleep(0.005)
    with profiler.record("animations"):
        time.sleep(0.02)

    timings = profiler.get_timings()
    assert timings["geometry"] < timings["animations"]


def test_repeated_pass_accumulates():
    profiler = Profiler()
    with patch("gltfmerge.profiler.time.perf_counter", side_effect=[0.0, 1.0, 0.0, 3.0]):
        with profiler.record("skins"):
            pass
        with profiler.record("skins"):
            pass
    assert profiler.get_timings() == {"skins": pytest.approx(4.0)}


def test_profilers_do_not_share_state():
    first, second = Profiler(), Profiler()
    with first.record("attach"):
        pass
    assert second.get_timings() == {}


def test_get_timings_returns_a_copy():
    profiler = Profiler()
    with profiler.record("resources"):
        pass
    profiler.get_timings().clear()
    assert "resources" in profiler.get_timings()


@patch("gltfmerge.profiler.get_logger")
def test_log_stats_at_debug(mock_get_logger):
    mock_logger = MagicMock()
    mock_get_logger.return_value = mock_logger
    profiler = Profiler()

    with profiler.record("resources"):
        pass
    profiler.log_stats()

    mock_logger.debug.assert_called_once()
    line = mock_logger.debug.call_args[0][0]
    assert "resources" in line
    assert "ms" in line


def test_records_when_pass_raises():
    profiler = Profiler()
    with pytest.raises(ValueError):
        with profiler.record("failing"):
            raise ValueError("boom")
    assert "failing" in profiler.get_timings()
