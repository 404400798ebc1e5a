from codesessions.clients.constants import SDK_VERSION as __version__
from codesessions.clients import (
    FileTokenSource,
    SessionClient,
    StaticTokenSource,
    Token,
    TokenCache,
    TokenSource,
)
from codesessions.exceptions import (
    FileDownloadError,
    FileListError,
    FileUploadError,
    InvalidOperationError,
    RemoteExecutionError,
    RemoteRequestError,
    ResponseParseError,
    SessionsError,
    TokenAcquisitionError,
)
from codesessions.models import ExecutionResult, FileMetadata
from codesessions.session import CodeSession
from codesessions.settings import CodeExecutionType, CodeInputType, Settings

__all__ = [
    "CodeExecutionType",
    "CodeInputType",
    "CodeSession",
    "ExecutionResult",
    "FileDownloadError",
    "FileListError",
    "FileMetadata",
    "FileTokenSource",
    "FileUploadError",
    "InvalidOperationError",
    "RemoteExecutionError",
    "RemoteRequestError",
    "ResponseParseError",
    "SessionClient",
    "SessionsError",
    "Settings",
    "StaticTokenSource",
    "Token",
    "TokenAcquisitionError",
    "TokenCache",
    "TokenSource",
    "__version__",
]
