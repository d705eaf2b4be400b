# tests/test_run_config.py
import pytest

from crossrun import ConfigConflictError, ConfigValidationError, PackageManager, RunConfig, RunMode


def test_defaults():
    config = RunConfig()
    assert config.mode is RunMode.SINGLE
    assert not config.strict
    assert not config.raw
    assert not config.verbose
    assert config.package_manager is None
    assert not config.prefixed


def test_config_is_immutable():
    config = RunConfig()
    with pytest.raises(AttributeError):
        config.strict = True


@pytest.mark.parametrize(
    "multiple, parallel, mode",
    [
        (False, False, RunMode.SINGLE),
        (True, False, RunMode.SEQUENTIAL),
        (False, True, RunMode.CONCURRENT),
    ],
)
def test_from_flags_mode(multiple, parallel, mode):
    config = RunConfig.from_flags(multiple=multiple, parallel=parallel)
    assert config.mode is mode
    assert config.prefixed is (mode is not RunMode.SINGLE)


def test_from_flags_conflict():
    with pytest.raises(ConfigConflictError, match="Cannot use both --multiple and --parallel"):
        RunConfig.from_flags(multiple=True, parallel=True)


def test_conflict_is_a_config_error():
    assert issubclass(ConfigConflictError, ConfigValidationError)


def test_default_mode_used_without_flags():
    config = RunConfig.from_flags(default_mode=RunMode.CONCURRENT)
    assert config.mode is RunMode.CONCURRENT
    assert RunConfig.from_flags(multiple=True, default_mode=RunMode.CONCURRENT).mode is RunMode.SEQUENTIAL


def test_package_manager_coerced():
    assert RunConfig(package_manager="yarn").package_manager is PackageManager.YARN


def test_invalid_package_manager():
    with pytest.raises(ConfigValidationError, match="Invalid package manager bun"):
        RunConfig.from_flags(package_manager="bun")


def test_mode_string_coerced():
    assert RunConfig(mode="concurrent").mode is RunMode.CONCURRENT
    with pytest.raises(ConfigValidationError, match="Invalid mode"):
        RunConfig(mode="turbo")
