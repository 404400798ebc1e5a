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

import uuid
from typing import Dict, List, Optional, Union

from codesessions.clients.session_client import SessionClient
from codesessions.models import FileMetadata


class CodeSession:
    """
    A SessionClient bound to one session identifier.

    The session pool creates a session on first use of an identifier and
    reclaims it on its own, so there is nothing to create or delete here.
    When no identifier is given a new random one is generated.
    """

    def __init__(self, client: SessionClient, session_id: Optional[str] = None):
        if client is None:
            raise ValueError("client cannot be None")
        if session_id is not None and not session_id.strip():
            raise ValueError("session_id cannot be empty or whitespace")
        self.client = client
        self.session_id = session_id or str(uuid.uuid4())

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass

    async def execute_code(self, code: str) -> Optional[str]:
        """
        Execute Python code in this session.

        Args:
            code: The Python code to execute.

        Returns:
            The value of the last expression, else stdout, else None.
        """
        return await self.client.execute_code(self.session_id, code)

    async def get_packages(self) -> Dict[str, str]:
        return await self.client.get_packages(self.session_id)

    async def upload_file(self, path: str, data: Union[bytes, bytearray, memoryview]) -> FileMetadata:
        """
        Upload bytes to a file in this session.

        Args:
            path: Destination filename, relative to /mnt/data.
            data: File content.
        """
        return await self.client.upload_file(self.session_id, path, data)

    async def download_file(self, path: str) -> bytes:
        return await self.client.download_file(self.session_id, path)

    async def list_files(self) -> List[FileMetadata]:
        return await self.client.list_files(self.session_id)
