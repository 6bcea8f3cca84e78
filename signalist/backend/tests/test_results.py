from __future__ import annotations

from results import Err, Ok, capture, map_result, on_error, unwrap_or


def test_capture_wraps_value_and_exception():
    assert capture(lambda: 3) == Ok(3)
    failed = capture(lambda: 1 / 0)
    assert isinstance(failed, Err)
    assert isinstance(failed.error, ZeroDivisionError)
    assert not failed.ok


def test_map_and_unwrap():
    assert unwrap_or(map_result(Ok(2), lambda v: v * 10), 0) == 20
    assert unwrap_or(map_result(Ok(2), lambda v: v / 0), "fallback") == "fallback"
    assert unwrap_or(Err(ValueError()), []) == []


def test_on_error_only_fires_for_failures():
    seen = []
    on_error(Ok(1), seen.append)
    on_error(Err(KeyError("x")), seen.append)
    assert len(seen) == 1 and isinstance(seen[0], KeyError)
