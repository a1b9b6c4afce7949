# ==========================================
# CONFIGURATION
# ==========================================
"""
Runner configuration, read from a JSON file.

Lookup order when no explicit path is given: ``csrun.json`` in the working
directory, then ``~/.csrun/config.json``. Missing files mean defaults.
"""
import json
import os
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigError
from .logger import debug_log

CONFIG_PATHS = ["csrun.json", os.path.join("~", ".csrun", "config.json")]


class RunnerConfig(BaseModel):
    """Settings shared by every run."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    # Libraries every compilation references, ahead of any //#import.
    default_references: List[str] = Field(default_factory=lambda: ["math", "os"])
    # Where rewritten sources go; None means the system temp directory.
    temp_dir: Optional[str] = None
    # utf-8-sig drops a leading byte-order mark, as editors often write one.
    encoding: str = "utf-8-sig"


def load_config(path=None):
    """Load the runner configuration from ``path`` or the default locations."""
    if path is not None:
        if not os.path.isfile(path):
            raise ConfigError(f"Configuration file not found: {path}")
        return _read_config(path)

    for candidate in CONFIG_PATHS:
        candidate = os.path.expanduser(candidate)
        if os.path.isfile(candidate):
            return _read_config(candidate)
    debug_log("No configuration file found, using defaults")
    return RunnerConfig()


def _read_config(path):
    debug_log(f"Loading configuration from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration file {path}: expected a JSON object")
    try:
        return RunnerConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration file {path}: {e}") from e
