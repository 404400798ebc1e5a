from dataclasses import dataclass
from enum import Enum
from typing import Optional

from codesessions.clients import constants
from codesessions.utils.utils import get_env


class CodeInputType(str, Enum):
    """How code is handed to the session pool."""
    INLINE = "inline"


class CodeExecutionType(str, Enum):
    """How the session pool runs submitted code."""
    SYNCHRONOUS = "synchronous"


_TRUTHY = ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Configuration for a SessionClient.

    Args:
        endpoint: Base URL of the session pool management endpoint.
        sanitize_input: Strip code fences and language hints from submitted code.
        timeout_seconds: Execution timeout passed to the session pool.
        code_input_type: Code input type sent with each execution.
        code_execution_type: Execution type sent with each execution.
    """
    endpoint: str
    sanitize_input: bool = False
    timeout_seconds: int = constants.DEFAULT_TIMEOUT_SECONDS
    code_input_type: CodeInputType = CodeInputType.INLINE
    code_execution_type: CodeExecutionType = CodeExecutionType.SYNCHRONOUS

    def __post_init__(self):
        if not self.endpoint or not self.endpoint.strip():
            raise ValueError("Settings 'endpoint' must be a non-empty URL.")
        if self.timeout_seconds <= 0:
            raise ValueError("Settings 'timeout_seconds' must be positive.")

    @classmethod
    def from_env(cls, endpoint: Optional[str] = None) -> "Settings":
        """Build settings from arguments, falling back to environment variables."""
        endpoint = endpoint or get_env(constants.ENDPOINT_ENV)
        if not endpoint:
            raise ValueError(
                "Session pool endpoint must be provided via 'endpoint' argument or "
                f"'{constants.ENDPOINT_ENV}' environment variable."
            )

        sanitize = get_env(constants.SANITIZE_INPUT_ENV, "false").lower() in _TRUTHY

        timeout_raw = get_env(constants.TIMEOUT_SECONDS_ENV, str(constants.DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = int(timeout_raw)
        except ValueError:
            raise ValueError(
                f"'{constants.TIMEOUT_SECONDS_ENV}' must be an integer, got {timeout_raw!r}"
            )

        return cls(endpoint=endpoint, sanitize_input=sanitize, timeout_seconds=timeout)
