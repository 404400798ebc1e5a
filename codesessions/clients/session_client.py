import logging
from typing import Callable, Dict, List, Optional, Union

import httpx

from codesessions.clients import constants
from codesessions.clients.auth import TokenCache, TokenSource
from codesessions.exceptions import (
    FileDownloadError,
    FileListError,
    FileUploadError,
    InvalidOperationError,
    RemoteExecutionError,
    ResponseParseError,
)
from codesessions.models import (
    ExecutionResult,
    FileMetadata,
    parse_file_metadata_list,
)
from codesessions.settings import Settings
from codesessions.utils.http import create_async_client
from codesessions.utils.log import get_logger
from codesessions.utils.packages import parse_packages
from codesessions.utils.sanitize import sanitize_code
from codesessions.utils.utils import is_blank

PACKAGES_SNIPPET = (
    "import importlib.metadata\n"
    "[(d.metadata['Name'], d.version) for d in importlib.metadata.distributions()]"
)


def _require(value: Optional[str], name: str) -> None:
    if is_blank(value):
        raise ValueError(f"The argument '{name}' cannot be None, empty, or whitespace.")


class SessionClient:
    """Client for a dynamic sessions code interpreter pool.

    The client is session-agnostic: every operation takes the session
    identifier, and nothing but the token cache is shared between calls.
    """

    def __init__(
        self,
        settings: Settings,
        token_source: Union[TokenSource, TokenCache],
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
        verbose: bool = False,
    ):
        """Initialize the session client.

        Args:
            settings: Endpoint and execution settings.
            token_source: A TokenSource, or an existing TokenCache to share
                between clients.
            client_factory: Returns a new httpx.AsyncClient per call. Defaults
                to create_async_client() sized from settings.timeout_seconds.
            verbose: Enable debug logging.
        """
        if settings is None:
            raise ValueError("settings cannot be None")
        if token_source is None:
            raise ValueError("token_source cannot be None")

        self.settings = settings
        # One trailing slash, so relative operation paths append to the pool path
        self.endpoint = settings.endpoint.strip().rstrip("/") + "/"

        if isinstance(token_source, TokenCache):
            self.token_cache = token_source
        else:
            self.token_cache = TokenCache(token_source)

        self.client_factory = client_factory or (
            lambda: create_async_client(timeout_seconds=settings.timeout_seconds)
        )

        self.logger = get_logger(f"{__name__}.SessionClient")
        if verbose:
            self.logger.setLevel(logging.DEBUG)

    def _url(self, operation: str) -> str:
        return f"{self.endpoint}python/{operation}"

    async def _headers(self) -> Dict[str, str]:
        token = await self.token_cache.get_token()
        return {
            "User-Agent": constants.USER_AGENT,
            "Authorization": f"Bearer {token}",
        }

    def _params(self, **params: str) -> Dict[str, str]:
        params["api-version"] = constants.API_VERSION
        return params

    @staticmethod
    def _json(response: httpx.Response):
        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(f"Response body is not valid JSON: {e}") from e

    async def execute_code(self, session: str, code: str) -> Optional[str]:
        """Execute Python code in a session.

        Args:
            session: Session identifier.
            code: The Python code to execute.

        Returns:
            The value of the last expression if any, else the captured
            stdout, else None.

        Raises:
            ValueError: If session or code is empty.
            RemoteExecutionError: If the request fails or the code writes to stderr.
            ResponseParseError: If the response body is malformed.
        """
        _require(session, "session")
        _require(code, "code")

        if self.settings.sanitize_input:
            code = sanitize_code(code)
            _require(code, "code")

        self.logger.debug(f"Executing Python code: {code}")

        payload = {
            "properties": {
                "identifier": session,
                "codeInputType": self.settings.code_input_type.value,
                "executionType": self.settings.code_execution_type.value,
                "timeoutInSeconds": self.settings.timeout_seconds,
                "pythonCode": code,
            }
        }

        headers = await self._headers()
        async with self.client_factory() as http:
            response = await http.post(
                self._url("execute"),
                params=self._params(),
                json=payload,
                headers=headers,
            )

        if not response.is_success:
            self.logger.error(f"Failed to execute python code: {response.text}")
            raise RemoteExecutionError(response.status_code, response.text)

        result = ExecutionResult.from_dict(self._json(response))
        if result.failed:
            self.logger.debug(f"Python code wrote to stderr: {result.stderr}")
            raise RemoteExecutionError(400, result.stderr)

        self.logger.debug(f"Standard Output: {result.stdout}")
        return result.output

    async def get_packages(self, session: str) -> Dict[str, str]:
        """Get the packages installed in the session environment.

        Returns:
            A dict of package name to version.

        Raises:
            InvalidOperationError: If the session returned no package listing.
        """
        _require(session, "session")

        output = await self.execute_code(session, PACKAGES_SNIPPET)
        if is_blank(output):
            raise InvalidOperationError("Failed to get package list from the remote session.")

        return parse_packages(output)

    async def upload_file(
        self,
        session: str,
        path: str,
        data: Union[bytes, bytearray, memoryview],
    ) -> FileMetadata:
        """Upload bytes to a file in the session.

        Args:
            session: Session identifier.
            path: Destination filename in the session.
            data: File content; may be empty.

        Returns:
            The metadata of the uploaded file.
        """
        _require(session, "session")
        _require(path, "path")
        if data is None:
            raise ValueError("The argument 'data' cannot be None.")

        self.logger.info(f"Uploading file to {path}")

        headers = await self._headers()
        async with self.client_factory() as http:
            response = await http.post(
                self._url("uploadFile"),
                params=self._params(identifier=session),
                files={"file": (path, bytes(data), "application/octet-stream")},
                headers=headers,
            )

        if not response.is_success:
            self.logger.error(f"Failed to upload file {path}: {response.text}")
            raise FileUploadError(response.status_code, response.text)

        files = parse_file_metadata_list(self._json(response))
        if not files:
            raise ResponseParseError(f"Upload of {path} returned no file metadata")
        return files[0]

    async def download_file(self, session: str, path: str) -> bytes:
        """Download a file from the session.

        Args:
            session: Session identifier.
            path: Filename in the session, relative to /mnt/data.

        Returns:
            The raw file content.
        """
        _require(session, "session")
        _require(path, "path")

        self.logger.debug(f"Downloading file {path}")

        headers = await self._headers()
        async with self.client_factory() as http:
            response = await http.get(
                self._url("downloadFile"),
                params=self._params(identifier=session, filename=path),
                headers=headers,
            )

        if not response.is_success:
            self.logger.error(f"Failed to download file {path}: {response.text}")
            raise FileDownloadError(response.status_code, response.text)

        return response.content

    async def list_files(self, session: str) -> List[FileMetadata]:
        """List the files in a session, in server order."""
        _require(session, "session")

        self.logger.debug(f"Listing files for session {session}")

        headers = await self._headers()
        async with self.client_factory() as http:
            response = await http.get(
                self._url("files"),
                params=self._params(identifier=session),
                headers=headers,
            )

        if not response.is_success:
            # The response body is not included for listing failures
            self.logger.error(f"Failed to list files for session {session}: status {response.status_code}")
            raise FileListError(response.status_code)

        return parse_file_metadata_list(self._json(response))
