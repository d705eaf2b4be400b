# tests/conftest.py
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import io

import pytest

from crossrun.process_spawner import ProcessSpawner


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    """Keep rich from emitting color codes into captured streams."""
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.setenv("NO_COLOR", "1")


@pytest.fixture
def streams():
    return io.StringIO(), io.StringIO()


@pytest.fixture
def spawner(streams):
    out, err = streams
    return ProcessSpawner(stdout=out, stderr=err)


@pytest.fixture
def package_json(tmp_path):
    """Write a package.json with the given scripts into tmp_path."""
    import json

    def _write(scripts=None, **extra):
        data = dict(extra)
        if scripts is not None:
            data["scripts"] = scripts
        (tmp_path / "package.json").write_text(json.dumps(data), encoding="utf-8")
        return tmp_path

    return _write
