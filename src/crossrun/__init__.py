__version__ = "0.1.0"

import logging

from .env_expander import expand_env, parse_inline_env
from .exceptions import (
    ConfigConflictError,
    ConfigValidationError,
    CrossRunError,
    NonZeroExitError,
    NoPackageManagerError,
    NoScriptMatchedError,
    SpawnFailureError,
    UnknownVariableError,
)
from .load_config import FileConfig, load_config
from .logging_config import disable_logging, setup_logging
from .output_prefix import ColorCursor, OutputPrefix
from .package_manager import PackageManager, check_override, detect_package_manager
from .process_spawner import CommandInvocation, ProcessSpawner, escape_path
from .run_config import RunConfig, RunMode
from .run_orchestrator import RunOrchestrator, run
from .run_result import RunResult, RunState
from .script_matcher import match_scripts, read_manifest_scripts

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Core Components
    "RunConfig",
    "RunMode",
    "RunOrchestrator",
    "RunResult",
    "RunState",
    "run",
    "ProcessSpawner",
    "CommandInvocation",
    "OutputPrefix",
    "ColorCursor",
    "PackageManager",
    # Functions
    "expand_env",
    "parse_inline_env",
    "escape_path",
    "check_override",
    "detect_package_manager",
    "match_scripts",
    "read_manifest_scripts",
    # Configuration & logging
    "FileConfig",
    "load_config",
    "setup_logging",
    "disable_logging",
    # Exceptions
    "CrossRunError",
    "ConfigValidationError",
    "ConfigConflictError",
    "UnknownVariableError",
    "NoScriptMatchedError",
    "NoPackageManagerError",
    "SpawnFailureError",
    "NonZeroExitError",
]
