from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..models.config_models import SUPPORTED_DATABASE_TYPES, DatabaseConfig, ImportOptions

"""Config loader.

Builds the immutable ``ImportOptions`` snapshot from three sources, highest
precedence first:

1. CLI flags (``None`` means "not given")
2. Environment variables (``MYSQL_HOST`` ... , usually loaded from ``.env``)
3. YAML file (``config/import.yml`` by default), validated against CONFIG_SCHEMA

Anything still missing falls back to defaults; required values that remain
unresolved raise ConfigError.
"""

DEFAULT_CONFIG_PATH = Path("config/import.yml")

# option key -> environment variable
ENV_VARS = {
    "database": "MYSQL_DATABASE",
    "database_type": "EXCEL2SQL_DATABASE_TYPE",
    "host": "MYSQL_HOST",
    "port": "MYSQL_PORT",
    "user": "MYSQL_USER",
    "password": "MYSQL_PASSWORD",
}

CONFIG_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "excel": {"type": "string"},
        "clear": {"type": "boolean"},
        "skip": {"type": "integer", "minimum": 0},
        "django_style": {"type": "boolean"},
        "database": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "type": {"type": "string"},
                "host": {"type": "string"},
                "port": {"type": "integer", "minimum": 1, "maximum": 65535},
                "user": {"type": "string"},
                "password": {"type": ["string", "null"]},
                "database": {"type": "string"},
            },
        },
    },
}


class ConfigError(Exception):
    pass


def load_config_file(path: Path) -> dict[str, Any]:
    """Read and validate the YAML config file."""
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    try:
        jsonschema.validate(data, CONFIG_SCHEMA)
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e
    return data


def _first(*candidates: Any) -> Any:
    for c in candidates:
        if c is not None:
            return c
    return None


def _as_int(name: str, value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e


def load_options(
    cli: Mapping[str, Any],
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ImportOptions:
    """Resolve the run options.

    Args:
        cli: Parsed CLI values keyed by option name (``excel``, ``host`` ...)
        config_path: Explicit YAML path; when None the default path is used
            only if it exists
        environ: Environment mapping (defaults to ``os.environ``)

    Raises:
        ConfigError: invalid file, invalid values or missing required options
    """
    env = os.environ if environ is None else environ
    if config_path is not None:
        file_cfg = load_config_file(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        file_cfg = load_config_file(DEFAULT_CONFIG_PATH)
    else:
        file_cfg = {}
    db_file = file_cfg.get("database", {})
    file_db_keys = {"database_type": "type"}

    def db_value(key: str) -> Any:
        return _first(cli.get(key), env.get(ENV_VARS[key]), db_file.get(file_db_keys.get(key, key)))

    database_type = (db_value("database_type") or "mysql").lower()
    if database_type not in SUPPORTED_DATABASE_TYPES:
        raise ConfigError(
            f"unsupported database type: {database_type} "
            f"(supported: {', '.join(SUPPORTED_DATABASE_TYPES)})"
        )

    skip = _as_int("skip", _first(cli.get("skip"), file_cfg.get("skip"), 0))
    if skip is None or skip < 0:
        raise ConfigError(f"skip must be >= 0, got {skip}")

    options = ImportOptions(
        excel=_first(cli.get("excel"), file_cfg.get("excel")),
        database=DatabaseConfig(
            database=db_value("database"),
            database_type=database_type,
            host=db_value("host"),
            port=_as_int("port", db_value("port")),
            user=db_value("user"),
            password=db_value("password"),
        ),
        clear=bool(_first(cli.get("clear"), file_cfg.get("clear"), False)),
        skip=skip,
        django_style=bool(_first(cli.get("django_style"), file_cfg.get("django_style"), False)),
        dry_run=bool(cli.get("dry_run") or False),
    )
    _check_required(options)
    return options


def _check_required(options: ImportOptions) -> None:
    missing = []
    if not options.excel:
        missing.append("excel")
    if not options.database.database:
        missing.append("database")
    if not options.dry_run:
        db = options.database
        for key in ("host", "port", "user", "password"):
            if getattr(db, key) is None:
                missing.append(key)
    if missing:
        raise ConfigError(f"missing required options: {', '.join(missing)}")
