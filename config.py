import os
import json
import logging
import sys
from dataclasses import dataclass
from typing import Optional, List, Dict, Any, Mapping
from urllib.parse import urlparse

from dotenv import load_dotenv

load_dotenv()


def _parse_bool(raw: Optional[str], default: bool) -> bool:
    if raw is None:
        return default
    return raw.lower() in ("1", "true", "yes", "on")


def _env_bool(name: str, default: bool) -> bool:
    return _parse_bool(os.getenv(name), default)


def _env_flag(name: str) -> bool:
    """True for any non-empty value other than an explicit off value"""
    v = os.getenv(name)
    if not v:
        return False
    return v.lower() not in ("0", "false", "no", "off")


# =============================================================================
# Logging Configuration
# =============================================================================
DEBUG: bool = _env_flag("DEBUG")
LOG_LEVEL: str = "DEBUG" if DEBUG else os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = os.getenv(
    "LOG_FORMAT",
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def setup_logging():
    """Configure application-wide logging"""
    level = getattr(logging, LOG_LEVEL, logging.INFO)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# =============================================================================
# Turbonomic API Configuration
# =============================================================================
# Variables that must be present before any request is made
REQUIRED_VARIABLES: List[str] = [
    "TURBO_USERNAME",
    "TURBO_PASSWORD",
    "TURBO_URL",
    "POD_SEARCH_QUERY",
    "POD_GROUPS_TO_EXCLUDE",
]

DEFAULT_OUTPUT_FILENAME: str = "container-actions.json"

# Defaults; environment overrides are parsed and validated by load_settings()
TURBO_TIMEOUT_SECONDS: int = 60
TURBO_VERIFY_SSL: bool = True
# Number of pod groups whose containers are looked up at the same time
GROUP_REQUEST_LIMIT: int = 25


__all__ = [
    "DEBUG",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "setup_logging",
    "REQUIRED_VARIABLES",
    "DEFAULT_OUTPUT_FILENAME",
    "TURBO_TIMEOUT_SECONDS",
    "TURBO_VERIFY_SSL",
    "GROUP_REQUEST_LIMIT",
    "Settings",
    "ConfigValidationError",
    "load_settings",
]


# =============================================================================
# Configuration Validation
# =============================================================================
class ConfigValidationError(Exception):
    """Raised when configuration validation fails"""
    pass


@dataclass(frozen=True)
class Settings:
    """Validated run settings.

    Built once by load_settings() before any network activity and passed
    explicitly to the pipeline.
    """
    turbo_url: str
    username: str
    password: str
    pod_search_query: Dict[str, Any]
    excluded_groups: List[str]
    output_filename: str = DEFAULT_OUTPUT_FILENAME
    timeout_seconds: int = TURBO_TIMEOUT_SECONDS
    verify_ssl: bool = TURBO_VERIFY_SSL
    group_request_limit: int = GROUP_REQUEST_LIMIT


def _validate_positive_int(name: str, value: int) -> None:
    if value <= 0:
        raise ConfigValidationError(f"{name} must be positive, got {value}")


def _validate_url(name: str, value: str) -> None:
    try:
        result = urlparse(value)
        if not all([result.scheme, result.netloc]):
            raise ValueError("Missing scheme or netloc")
        if result.scheme not in ('http', 'https'):
            raise ValueError(f"Invalid scheme: {result.scheme}")
    except Exception as e:
        raise ConfigValidationError(f"{name} is not a valid URL: {value} ({e})")


def _load_json(name: str, value: str, expected: type) -> Any:
    try:
        parsed = json.loads(value)
    except json.JSONDecodeError:
        raise ConfigValidationError(f"{name} should be a valid JSON string.")
    if not isinstance(parsed, expected):
        raise ConfigValidationError(
            f"{name} should be a JSON {'object' if expected is dict else 'array'}, "
            f"got {type(parsed).__name__}"
        )
    return parsed


def _int_setting(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigValidationError(f"{name} must be an integer, got '{raw}'")
    _validate_positive_int(name, value)
    return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read and validate the run settings from the environment

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        Settings for one run

    Raises:
        ConfigValidationError: If a required variable is missing or malformed
    """
    env = os.environ if environ is None else environ

    missing = [v for v in REQUIRED_VARIABLES if not env.get(v)]
    if missing:
        raise ConfigValidationError(
            "The following required environment variables were missing: "
            + ", ".join(missing)
        )

    turbo_url = env["TURBO_URL"].rstrip('/')
    _validate_url("TURBO_URL", turbo_url)

    pod_search_query = _load_json("POD_SEARCH_QUERY", env["POD_SEARCH_QUERY"], dict)
    excluded_groups = _load_json("POD_GROUPS_TO_EXCLUDE", env["POD_GROUPS_TO_EXCLUDE"], list)
    if not all(isinstance(g, str) for g in excluded_groups):
        raise ConfigValidationError("POD_GROUPS_TO_EXCLUDE should only contain strings")

    verify_ssl = _parse_bool(env.get("TURBO_VERIFY_SSL"), TURBO_VERIFY_SSL)

    return Settings(
        turbo_url=turbo_url,
        username=env["TURBO_USERNAME"],
        password=env["TURBO_PASSWORD"],
        pod_search_query=pod_search_query,
        excluded_groups=excluded_groups,
        output_filename=env.get("OUTPUT_FILENAME") or DEFAULT_OUTPUT_FILENAME,
        timeout_seconds=_int_setting(env, "TURBO_TIMEOUT_SECONDS", TURBO_TIMEOUT_SECONDS),
        verify_ssl=verify_ssl,
        group_request_limit=_int_setting(env, "GROUP_REQUEST_LIMIT", GROUP_REQUEST_LIMIT),
    )
