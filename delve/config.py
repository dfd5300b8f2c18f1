"""
Crawler Settings
================

Configuration for crawl sessions.

Settings come from defaults, a JSON file, or the environment (a `.env` file
is honoured through python-dotenv):

- DELVE_MAX_DEPTH   : bound on nested sub-traversals
- DELVE_MAX_LENGTH  : bound on traversal length in steps
- DELVE_CONDENSED   : condense rendered traversals ("1"/"0")
- DELVE_VERBOSE     : print crawler progress ("1"/"0")
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

MAX_DEPTH = 30
"""Default bound on nested sub-traversals."""

MAX_LENGTH = 200
"""Default bound on the number of steps in a traversal path."""

ENV_PREFIX = "DELVE_"

_TRUTHY = {"1", "true", "yes", "on"}


class CrawlerSettings(BaseModel):
    """Tunable bounds and output options for a crawler."""

    max_depth: int = Field(default=MAX_DEPTH, ge=1)
    """Maximum nesting of sub-traversals before aborting."""

    max_length: int = Field(default=MAX_LENGTH, ge=1)
    """Maximum number of steps in any traversal path."""

    condensed: bool = True
    """Omit intermediate rooms where nothing is set when rendering."""

    verbose: bool = True
    """Print crawler progress lines."""

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_json_file(cls, path: Path | str) -> "CrawlerSettings":
        """Load settings from a JSON file."""
        with open(path) as f:
            config = json.load(f)
        return cls.model_validate(config)

    @classmethod
    def from_env(cls, dotenv_path: Optional[Path | str] = None) -> "CrawlerSettings":
        """
        Load settings from DELVE_* environment variables.

        Unset variables fall back to defaults.
        """
        load_dotenv(dotenv_path)

        values: dict[str, Any] = {}
        for name in ("max_depth", "max_length"):
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = int(raw)

        for name in ("condensed", "verbose"):
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw.strip():
                values[name] = raw.strip().lower() in _TRUTHY

        return cls.model_validate(values)
