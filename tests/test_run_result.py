# tests/test_run_result.py
import time

import pytest

from crossrun import NonZeroExitError, RunResult, RunState


def test_initial_state():
    r = RunResult(command="npm run build")
    assert r.state == RunState.PENDING
    assert r.success is None
    assert r.error is None
    assert r.exit_code is None
    assert r.start_time is None


def test_mark_running_sets_start_time_and_state():
    r = RunResult(command="test")
    r.mark_running()
    assert r.state == RunState.RUNNING
    assert r.start_time is not None


def test_mark_success_transitions_state():
    r = RunResult(command="lint")
    r.mark_running()
    r.mark_success()

    assert r.state == RunState.SUCCESS
    assert r.success is True
    assert r.exit_code == 0
    assert r.duration is not None
    r.raise_for_failure()


def test_mark_failed_sets_error():
    r = RunResult(command="compile")
    r.mark_running()
    error = NonZeroExitError("compile", 2)
    r.mark_failed(error, exit_code=2)

    assert r.state == RunState.FAILED
    assert r.success is False
    assert r.error is error
    assert r.exit_code == 2
    with pytest.raises(NonZeroExitError):
        r.raise_for_failure()


def test_failed_without_start_has_zero_duration():
    r = RunResult(command="npm:missing")
    r.mark_failed(NonZeroExitError("x", 1))
    assert r.duration_secs == 0
    assert r.duration_str == "0ms"


def test_duration_str():
    r = RunResult(command="build")
    assert r.duration_str == "-"
    r.mark_running()
    time.sleep(0.01)
    r.mark_success()
    assert r.duration_secs > 0
    assert r.duration_str.endswith("ms") or r.duration_str.endswith("s")


def test_repr():
    r = RunResult(command="echo hi", label="echo")
    r.mark_running()
    r.mark_failed(NonZeroExitError("echo hi", 3), exit_code=3)

    text = repr(r)
    assert "cmd='echo hi'" in text
    assert "state=failed" in text
    assert "exit=3" in text
