"""Global configuration: constants, environment profiles and settings loading."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Wildcard building type: a clause tagged with it applies to every type
ALL_TYPES = "*"

# Reports stay valid for this many days after generation
REPORT_VALIDITY_DAYS = 90

# Reviewer recorded on checks created by the evaluator
SYSTEM_REVIEWER = "System Auto-Check"

# Per-project state directory (check store, exports)
DEFAULT_STATE_DIR = ".daritana"
DEFAULT_STORE_FILE = "compliance.json"

# Recognised settings: key -> (default, description)
SETTINGS: dict[str, tuple[str, str]] = {
    "DARITANA_ENV": ("development", "Environment profile"),
    "DARITANA_LOG_LEVEL": ("INFO", "Logging level"),
    "DARITANA_CLAUSE_DB": (":memory:", "Clause database path"),
    "DARITANA_CLAUSE_FILE": ("", "Optional JSON clause data file"),
    "DARITANA_STORE_PATH": (
        f"{DEFAULT_STATE_DIR}/{DEFAULT_STORE_FILE}",
        "Compliance check/report store (empty for in-memory)",
    ),
}

PROFILES: dict[str, dict[str, str]] = {
    "development": {"DARITANA_LOG_LEVEL": "DEBUG"},
    "production": {"DARITANA_LOG_LEVEL": "WARNING"},
    "testing": {
        "DARITANA_LOG_LEVEL": "DEBUG",
        "DARITANA_CLAUSE_DB": ":memory:",
        "DARITANA_STORE_PATH": "",
    },
}


def _json_layer(path: Path) -> dict[str, str]:
    """Settings from a JSON object file; empty if missing or unreadable."""
    if not path.is_file():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        logger.debug("Ignoring unreadable settings file %s", path, exc_info=True)
        return {}
    if not isinstance(raw, dict):
        logger.debug("Ignoring settings file %s: not a JSON object", path)
        return {}
    return {str(k): str(v) for k, v in raw.items()}


def _dotenv_layer(path: Path) -> dict[str, str]:
    """``KEY=value`` pairs from a dotenv file; comments and blanks skipped."""
    if not path.is_file():
        return {}
    try:
        text = path.read_text(encoding="utf-8")
    except OSError:
        logger.debug("Ignoring unreadable dotenv file %s", path, exc_info=True)
        return {}
    values: dict[str, str] = {}
    for raw_line in text.splitlines():
        entry = raw_line.strip()
        if entry.startswith("#") or "=" not in entry:
            continue
        key, _, value = entry.partition("=")
        values[key.strip()] = value.strip()
    return values


class ConfigManager:
    """Resolve Daritana settings for a project directory."""

    def generate_env_template(self, project_path: str | Path) -> Path:
        """Write ``.env.example`` listing every setting with its default."""
        target = Path(project_path) / ".env.example"
        out = ["# Daritana compliance settings", "# Copy to .env and adjust", ""]
        for key, (default, description) in SETTINGS.items():
            out.extend([f"# {description}", f"{key}={default}", ""])
        target.write_text("\n".join(out), encoding="utf-8")
        return target

    def load_config(self, project_path: str | Path) -> dict[str, str]:
        """Merge settings for *project_path*.

        Later layers win: defaults, the ``DARITANA_ENV`` profile,
        ``.daritana/config.json``, ``.env``, then process environment
        variables for known keys.
        """
        root = Path(project_path)
        merged = {key: default for key, (default, _) in SETTINGS.items()}

        profile_name = os.environ.get("DARITANA_ENV") or merged["DARITANA_ENV"]
        if profile_name not in PROFILES:
            logger.warning("Unknown profile %r; using defaults only", profile_name)
        merged["DARITANA_ENV"] = profile_name
        merged.update(PROFILES.get(profile_name, {}))

        merged.update(_json_layer(root / DEFAULT_STATE_DIR / "config.json"))
        merged.update(_dotenv_layer(root / ".env"))
        merged.update({key: os.environ[key] for key in SETTINGS if key in os.environ})
        return merged

    def configure_logging(self, config: dict[str, str]) -> int:
        """Apply ``DARITANA_LOG_LEVEL`` to the package logger.

        Handlers are left to the host application. Returns the numeric level.
        """
        name = config.get("DARITANA_LOG_LEVEL", "INFO").upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            logger.warning("Unknown log level %r; falling back to INFO", name)
            level = logging.INFO
        logging.getLogger("daritana").setLevel(level)
        return level
