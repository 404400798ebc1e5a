# Copyright The Volcano Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from typing import Optional


class SessionsError(Exception):
    """Base exception for the codesessions SDK"""
    pass

class TokenAcquisitionError(SessionsError):
    """Raised when a token source cannot produce a bearer token"""
    pass

class RemoteRequestError(SessionsError):
    """Raised when the session pool rejects a request"""
    action = "complete request"

    def __init__(self, status_code: int, details: Optional[str] = None):
        self.status_code = status_code
        self.details = details
        message = f"Failed to {self.action}. Status: {status_code}"
        if details is not None:
            message += f". Details: {details}."
        super().__init__(message)

class RemoteExecutionError(RemoteRequestError):
    """Raised when code execution fails, remotely or in the submitted code"""
    action = "execute python code"

class FileUploadError(RemoteRequestError):
    action = "upload file"

class FileDownloadError(RemoteRequestError):
    action = "download file"

class FileListError(RemoteRequestError):
    """Raised when listing files fails. Carries the status code only."""
    action = "list files"

class ResponseParseError(SessionsError):
    """Raised when a response body does not have the expected shape"""
    pass

class InvalidOperationError(SessionsError):
    """Raised when an operation cannot produce a meaningful result"""
    pass
