import math
import os
from typing import Union

from databootstrap.constants import (
    DEFAULT_POSTGRES_PORT,
    LOG_LEVELS,
    PAGILA_DATA_URL,
    PAGILA_SCHEMA_URL,
    TRACE_LOG_LEVELS,
    TRUE_STRINGS,
)


def eval_log_type(env_var_name: str) -> Union[str, bool]:
    """Get the log type from environment variable"""
    bootstrap_log = os.environ.get(env_var_name, "").lower().strip()
    return bootstrap_log if bootstrap_log in LOG_LEVELS else False


def is_env_true(env_var_name: str) -> bool:
    """Whether the given environment variable has a truthy value."""
    return os.environ.get(env_var_name, "").lower().strip() in TRUE_STRINGS


def parse_number_env(env_var_name: str, default: float) -> float:
    """Parse the value of the given env variable as a finite number, falling back to ``default`` if unset or invalid."""
    value = os.environ.get(env_var_name, "").strip()
    if not value:
        return default
    try:
        number = float(value)
    except ValueError:
        return default
    return number if math.isfinite(number) else default


# log level of the bootstrap controller
BOOTSTRAP_LOG = eval_log_type("BOOTSTRAP_LOG")
DEBUG = is_env_true("DEBUG") or BOOTSTRAP_LOG in TRACE_LOG_LEVELS

# total time (in seconds) to wait for a single Athena statement to reach a terminal state
ATHENA_MAX_WAIT_SECONDS = parse_number_env("ATHENA_MAX_WAIT_SECONDS", 60 * 8)

# time (in seconds) to sleep between two status checks of an Athena statement
ATHENA_POLL_INTERVAL_SECONDS = parse_number_env("ATHENA_POLL_INTERVAL_SECONDS", 10)

# port used for RDS connections if neither the resource properties nor the credential define one
RDS_DEFAULT_PORT = int(parse_number_env("RDS_DEFAULT_PORT", DEFAULT_POSTGRES_PORT))

# default SQL scripts to bootstrap RDS databases with, if the resource properties define none
RDS_SCHEMA_SCRIPT_URL = os.environ.get("RDS_SCHEMA_SCRIPT_URL", "").strip() or PAGILA_SCHEMA_URL
RDS_DATA_SCRIPT_URL = os.environ.get("RDS_DATA_SCRIPT_URL", "").strip() or PAGILA_DATA_URL

# timeout (in seconds) for downloading SQL scripts
SCRIPT_DOWNLOAD_TIMEOUT = parse_number_env("SCRIPT_DOWNLOAD_TIMEOUT", 60)

# custom endpoint for all AWS clients (e.g., http://localhost.localstack.cloud:4566)
AWS_ENDPOINT_URL = os.environ.get("AWS_ENDPOINT_URL", "").strip() or None

# list of environment variable names used for configuration.
# Make sure to keep this in sync with the above!
CONFIG_ENV_VARS = [
    "ATHENA_MAX_WAIT_SECONDS",
    "ATHENA_POLL_INTERVAL_SECONDS",
    "AWS_ENDPOINT_URL",
    "BOOTSTRAP_LOG",
    "DEBUG",
    "RDS_DATA_SCRIPT_URL",
    "RDS_DEFAULT_PORT",
    "RDS_SCHEMA_SCRIPT_URL",
    "SCRIPT_DOWNLOAD_TIMEOUT",
]


def is_trace_logging_enabled():
    if BOOTSTRAP_LOG:
        log_level = str(BOOTSTRAP_LOG).upper()
        return log_level.lower() in TRACE_LOG_LEVELS
    return False
