"""Core domain types and logic."""

from .config import ConfigError, RunConfiguration, build_run_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "RunConfiguration",
    "build_run_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
