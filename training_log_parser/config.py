"""Configuration loading from defaults, an optional YAML file, env vars, and CLI args."""

import os
import logging
from dataclasses import dataclass, field

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yml"

# Details values that close an action sequence. Keep in sync with trainingLogger.js.
DEFAULT_END_OF_FLOW = (
    "Edit", "Delete",
    "Edit Log", "Delete Log",
    "Add Refrigerator", "Edit Refrigerator", "Delete Refrigerator",
    "Move Refrigerator", "Delete Move",
    "Edit Temperature Data", "Delete Temperature Data",
    "Edit Refrigerator Status",
    "Edit Cold Room Status",
    "Add Maintenance Record",
    "Add Cold Room", "Edit Cold Room", "Delete Cold Room",
    "Edit Facility", "Delete Facility",
)


@dataclass(frozen=True)
class LineFormat:
    marker: str = "TRAINING_LOG"      # token[2] of a qualifying line
    token_delimiter: str = "/"
    time_prefix: str = "Time="
    details_separator: str = "--"


@dataclass(frozen=True)
class ParserConfig:
    log_folder: str = "logs"
    output_folder: str = "parsedLogs"
    output_prefix: str = "PARSED_"
    combine_day_output: bool = False
    reset_between_files: bool = False
    echo_lines: bool = True
    line_format: LineFormat = field(default_factory=LineFormat)
    end_of_flow: frozenset[str] = frozenset(DEFAULT_END_OF_FLOW)


def load_yaml_config(path: str | None = None) -> dict:
    """Load overrides from a YAML file. Returns empty dict if the file is missing.

    The path defaults to ``config.yml`` and can be overridden via the
    ``CONFIG_PATH`` environment variable. yaml.YAMLError propagates.
    """
    path = path or os.environ.get("CONFIG_PATH", DEFAULT_CONFIG_PATH)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    logger.info("Loaded YAML config from %s", path)
    return data


def _get_bool(data: dict, key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"Config key {key!r} must be true or false, got {value!r}")
    return value


def _get_str(data: dict, key: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise ValueError(f"Config key {key!r} must be a string, got {value!r}")
    return value


def _get_keywords(data: dict, default: frozenset[str]) -> frozenset[str]:
    value = data.get("end_of_flow")
    if value is None:
        return default
    if not isinstance(value, list):
        raise ValueError(f"Config key 'end_of_flow' must be a list, got {value!r}")
    # YAML reads bare numbers and yes/no as non-strings; keywords are compared as text
    return frozenset(str(k) for k in value)


def load_config(cli_args=None, yaml_data: dict | None = None) -> ParserConfig:
    """Build a ParserConfig from YAML data, env vars, and parsed CLI args.

    Precedence, lowest first: built-in defaults, YAML, environment, CLI.
    Raises ValueError for settings of the wrong type.
    """
    yaml_data = yaml_data or {}
    defaults = ParserConfig()

    fmt = yaml_data.get("format") or {}
    if not isinstance(fmt, dict):
        raise ValueError(f"Config key 'format' must be a mapping, got {fmt!r}")
    line_format = LineFormat(
        marker=_get_str(fmt, "marker", defaults.line_format.marker),
        token_delimiter=_get_str(fmt, "token_delimiter", defaults.line_format.token_delimiter),
        time_prefix=_get_str(fmt, "time_prefix", defaults.line_format.time_prefix),
        details_separator=_get_str(fmt, "details_separator", defaults.line_format.details_separator),
    )

    log_folder = os.environ.get("LOG_FOLDER", _get_str(yaml_data, "log_folder", defaults.log_folder))
    output_folder = os.environ.get(
        "PARSED_LOGS_FOLDER", _get_str(yaml_data, "output_folder", defaults.output_folder)
    )
    combine_day_output = _get_bool(yaml_data, "combine_day_output", defaults.combine_day_output)
    reset_between_files = _get_bool(yaml_data, "reset_between_files", defaults.reset_between_files)
    echo_lines = _get_bool(yaml_data, "echo_lines", defaults.echo_lines)

    if cli_args is not None:
        if getattr(cli_args, "log_folder", None):
            log_folder = cli_args.log_folder
        if getattr(cli_args, "output_folder", None):
            output_folder = cli_args.output_folder
        if getattr(cli_args, "combine_day", False):
            combine_day_output = True
        if getattr(cli_args, "reset_between_files", False):
            reset_between_files = True
        if getattr(cli_args, "no_echo", False):
            echo_lines = False

    return ParserConfig(
        log_folder=log_folder,
        output_folder=output_folder,
        output_prefix=_get_str(yaml_data, "output_prefix", defaults.output_prefix),
        combine_day_output=combine_day_output,
        reset_between_files=reset_between_files,
        echo_lines=echo_lines,
        line_format=line_format,
        end_of_flow=_get_keywords(yaml_data, defaults.end_of_flow),
    )
