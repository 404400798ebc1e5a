"""
Wire models for the dynamic sessions REST API.

Each response shape is decoded explicitly: required fields that are missing
raise ResponseParseError instead of falling back to a default.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from codesessions.exceptions import ResponseParseError

VALUES_KEY = "$values"

# .NET serializers emit up to 7 fractional digits; datetime takes 6
_EXTRA_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def _optional_str(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ResponseParseError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ResponseParseError(f"Invalid timestamp: {value!r}")
    try:
        normalized = _EXTRA_FRACTION_RE.sub(r"\1", value.replace("Z", "+00:00"))
        return datetime.fromisoformat(normalized)
    except ValueError as e:
        raise ResponseParseError(f"Invalid timestamp: {value!r}") from e


def _require_object(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object for {what}, got {type(data).__name__}")
    return data


@dataclass(frozen=True)
class FileMetadata:
    """Metadata of a file stored in a session."""
    filename: str
    size_bytes: int
    last_modified_time: Optional[datetime] = None

    @classmethod
    def from_dict(cls, data: Any) -> "FileMetadata":
        """Decode a file descriptor as returned by the session pool."""
        data = _require_object(data, "file metadata")
        filename = data.get("filename")
        if not isinstance(filename, str):
            raise ResponseParseError("File metadata is missing 'filename'")
        size = data.get("size")
        # bool is an int subclass but never a valid size
        if not isinstance(size, int) or isinstance(size, bool):
            raise ResponseParseError(f"File metadata for '{filename}' is missing 'size'")
        return cls(
            filename=filename,
            size_bytes=size,
            last_modified_time=_parse_timestamp(data.get("last_modified_time")),
        )

    def __str__(self) -> str:
        return self.filename


@dataclass(frozen=True)
class ExecutionResult:
    """Body of a python/execute response."""
    stdout: Optional[str] = None
    stderr: Optional[str] = None
    result: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ExecutionResult":
        data = _require_object(data, "execution result")
        return cls(
            stdout=_optional_str(data, "stdout"),
            stderr=_optional_str(data, "stderr"),
            result=_optional_str(data, "result"),
        )

    @property
    def failed(self) -> bool:
        return bool(self.stderr)

    @property
    def output(self) -> Optional[str]:
        """The expression result if any, else captured stdout, else None."""
        if self.result and self.result.strip():
            return self.result
        if self.stdout and self.stdout.strip():
            return self.stdout
        return None


def parse_file_metadata_list(data: Any) -> List[FileMetadata]:
    """Decode a {"$values": [...]} envelope, preserving server order."""
    data = _require_object(data, "file list")
    if VALUES_KEY not in data:
        raise ResponseParseError(f"Response is missing '{VALUES_KEY}'")
    values = data[VALUES_KEY]
    if not isinstance(values, list):
        raise ResponseParseError(f"'{VALUES_KEY}' must be an array")
    return [FileMetadata.from_dict(item) for item in values]
