# tests/test_orchestrator/conftest.py
import asyncio
from unittest.mock import AsyncMock, Mock

import pytest


def _reader(chunks):
    reader = Mock()
    pending = iter(chunks)
    # Once exhausted, keep reporting EOF like a real stream would.
    reader.read = AsyncMock(side_effect=lambda *_: next(pending, b""))
    return reader


@pytest.fixture
def create_proc():
    """
    Factory fixture that returns asyncio subprocess mocks.
    Use it like:
        proc = create_proc(stdout=[b"hello\\n"], returncode=0)
        with patch("asyncio.create_subprocess_shell", return_value=proc):
            ...
    stdout/stderr are lists of chunks, delivered one read() at a time.
    """
    def _make(stdout=(), stderr=(), returncode=0, delay=0.0):
        proc = Mock()
        proc.stdout = _reader(stdout)
        proc.stderr = _reader(stderr)
        proc.returncode = None

        async def wait():
            if delay:
                await asyncio.sleep(delay)
            proc.returncode = returncode
            return returncode

        proc.wait = wait
        return proc

    return _make
