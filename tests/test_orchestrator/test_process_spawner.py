# tests/test_orchestrator/test_process_spawner.py
import asyncio
import io
from unittest.mock import patch

import pytest

from crossrun import (
    CommandInvocation,
    NonZeroExitError,
    OutputPrefix,
    ProcessSpawner,
    RunState,
    SpawnFailureError,
    escape_path,
)


@pytest.mark.parametrize(
    "path, platform, expected",
    [
        ("/usr/bin/npm", "posix", "/usr/bin/npm"),
        ("/opt/my tools/npm", "posix", "/opt/my\\ tools/npm"),
        ("/opt/a  b/npm", "posix", "/opt/a\\  b/npm"),
        ("C:\\Program Files\\nodejs\\npm.cmd", "nt", 'C:\\Program" "Files\\nodejs\\npm.cmd'),
        ("C:\\a  b\\x", "nt", 'C:\\a" "" "b\\x'),
    ],
)
def test_escape_path(path, platform, expected):
    assert escape_path(path, platform) == expected


def test_command_line_joins_args_verbatim():
    invocation = CommandInvocation("/opt/my tools/yarn", ("run", "build", "a|b"))
    assert invocation.command_line("posix") == "/opt/my\\ tools/yarn run build a|b"


@pytest.mark.asyncio
async def test_spawn_success_forwards_output(spawner, streams, create_proc):
    out, err = streams
    proc = create_proc(stdout=[b"hello\n"], stderr=[b"warn\n"], returncode=0)

    with patch("asyncio.create_subprocess_shell", return_value=proc) as shell:
        result = await spawner.spawn(CommandInvocation("echo", ("hello",)), {"A": "1"})

    assert result.state == RunState.SUCCESS
    assert result.exit_code == 0
    assert out.getvalue() == "hello\n"
    assert err.getvalue() == "warn\n"
    assert shell.call_args[0][0] == "echo hello"


@pytest.mark.asyncio
async def test_spawn_passes_private_env_copy(spawner, create_proc):
    env = {"A": "1"}
    with patch("asyncio.create_subprocess_shell", return_value=create_proc()) as shell:
        await spawner.spawn(CommandInvocation("true"), env)

    passed = shell.call_args.kwargs["env"]
    assert passed == env
    assert passed is not env


@pytest.mark.asyncio
async def test_labeled_chunks_get_prefix_and_newline(spawner, streams, create_proc):
    out, _ = streams
    proc = create_proc(stdout=[b"partial", b"line\n"])

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        await spawner.spawn(CommandInvocation("build"), {}, OutputPrefix("build", 0))

    assert out.getvalue() == " build  partial\n build  line\n"


@pytest.mark.asyncio
async def test_unlabeled_chunks_untouched(spawner, streams, create_proc):
    out, _ = streams
    proc = create_proc(stdout=[b"a", b"b"])

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        await spawner.spawn(CommandInvocation("cat"), {}, OutputPrefix(None, 3))

    assert out.getvalue() == "ab"


@pytest.mark.asyncio
async def test_raw_mode_skips_labels(streams, create_proc):
    out, _ = streams
    spawner = ProcessSpawner(raw=True, stdout=out, stderr=streams[1])
    proc = create_proc(stdout=[b"a", b"b\n"])

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        await spawner.spawn(CommandInvocation("x"), {}, OutputPrefix("x", 0))

    assert out.getvalue() == "ab\n"


@pytest.mark.asyncio
async def test_multibyte_character_split_across_chunks(spawner, streams, create_proc):
    out, _ = streams
    proc = create_proc(stdout=[b"caf\xc3", b"\xa9\n"])

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        await spawner.spawn(CommandInvocation("x"), {})

    assert out.getvalue() == "café\n"


@pytest.mark.asyncio
async def test_non_zero_exit_reports_failure(spawner, streams, create_proc):
    _, err = streams
    proc = create_proc(stderr=[b"boom\n"], returncode=2)

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        result = await spawner.spawn(CommandInvocation("make"), {}, OutputPrefix("make", 1))

    assert result.state == RunState.FAILED
    assert result.exit_code == 2
    assert isinstance(result.error, NonZeroExitError)
    assert result.error.exit_code == 2
    assert result.error.reported
    assert err.getvalue() == " make  boom\n make  Command exited with code 2.\n"


@pytest.mark.asyncio
async def test_raw_mode_does_not_report(streams, create_proc):
    out, err = streams
    spawner = ProcessSpawner(raw=True, stdout=out, stderr=err)

    with patch("asyncio.create_subprocess_shell", return_value=create_proc(returncode=1)):
        result = await spawner.spawn(CommandInvocation("false"), {})

    assert isinstance(result.error, NonZeroExitError)
    assert not result.error.reported
    assert err.getvalue() == ""


@pytest.mark.asyncio
async def test_spawn_failure(spawner, streams):
    _, err = streams
    with patch("asyncio.create_subprocess_shell", side_effect=OSError("No such shell")):
        result = await spawner.spawn(CommandInvocation("x"), {}, OutputPrefix("x", 0))

    assert result.state == RunState.FAILED
    assert isinstance(result.error, SpawnFailureError)
    assert result.exit_code is None
    assert err.getvalue() == " x  No such shell\n"


@pytest.mark.asyncio
async def test_verbose_echoes_command_line(streams, create_proc):
    out, err = streams
    spawner = ProcessSpawner(verbose=True, stdout=out, stderr=err)

    with patch("asyncio.create_subprocess_shell", return_value=create_proc()):
        await spawner.spawn(CommandInvocation("/opt/my tools/run", ("a", "b")), {}, OutputPrefix("run", 0))

    assert err.getvalue().startswith(" run  /opt/my\\ tools/run a b\n")


@pytest.mark.asyncio
async def test_stdout_and_stderr_are_read_concurrently(spawner, streams, create_proc):
    out, err = streams
    proc = create_proc(stdout=[b"1\n", b"2\n"], stderr=[b"e\n"], delay=0.01)

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        result = await asyncio.wait_for(spawner.spawn(CommandInvocation("x"), {}), timeout=2)

    assert result.success
    assert out.getvalue() == "1\n2\n"
    assert err.getvalue() == "e\n"


def binary_stream():
    return io.TextIOWrapper(io.BytesIO(), encoding="utf-8", newline="")


@pytest.mark.asyncio
async def test_raw_mode_forwards_bytes_unchanged(create_proc):
    out, err = binary_stream(), binary_stream()
    spawner = ProcessSpawner(raw=True, stdout=out, stderr=err)
    proc = create_proc(stdout=[b"\xff\xfe", b"\x00A\r\n"], stderr=[b"\xe9"])

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        result = await spawner.spawn(CommandInvocation("x"), {}, OutputPrefix("x", 0))

    assert result.success
    assert out.buffer.getvalue() == b"\xff\xfe\x00A\r\n"
    assert err.buffer.getvalue() == b"\xe9"


@pytest.mark.asyncio
async def test_labeled_bytes_follow_their_label(create_proc):
    out = binary_stream()
    spawner = ProcessSpawner(stdout=out, stderr=binary_stream())
    proc = create_proc(stdout=[b"caf\xc3", b"\xa9\n"])

    with patch("asyncio.create_subprocess_shell", return_value=proc):
        await spawner.spawn(CommandInvocation("build"), {}, OutputPrefix("build", 0))

    assert out.buffer.getvalue() == b" build  caf\xc3\n build  \xa9\n"


@pytest.mark.asyncio
async def test_spawn_passes_working_directory(spawner, create_proc, tmp_path):
    with patch("asyncio.create_subprocess_shell", return_value=create_proc()) as shell:
        await spawner.spawn(CommandInvocation("ls"), {}, cwd=tmp_path)
        await spawner.spawn(CommandInvocation("ls"), {})

    assert [c.kwargs["cwd"] for c in shell.call_args_list] == [tmp_path, None]
