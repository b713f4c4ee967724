"""
OpenList (AList-compatible) storage client.

Logs in with username/password and lists directories through the
``/api/fs/list`` endpoint.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from openshelf.media.libraries.base import (
    SUCCESS_CODE,
    ListData,
    ListResponse,
    RemoteEntry,
    RemoteLister,
)

logger = logging.getLogger(__name__)

# Codes for failures that never reached the OpenList API
TRANSPORT_ERROR_CODE = -1
LOGIN_FAILED_CODE = 401


class OpenListClient(RemoteLister):
    """
    OpenList server client.

    Features:
    - Token login via /api/auth/login
    - Paginated directory listing
    """

    def __init__(
        self,
        server_url: str,
        username: str,
        password: str,
        timeout: float = 30.0,
    ):
        """
        Initialize OpenListClient.

        Args:
            server_url: OpenList server URL.
            username: Account name.
            password: Account password.
            timeout: Total request timeout in seconds.
        """
        self.server_url = server_url.rstrip("/")
        self.username = username
        self.password = password
        self.timeout = timeout
        self._session: Optional[aiohttp.ClientSession] = None
        self._token: Optional[str] = None

    @property
    def headers(self) -> Dict[str, str]:
        """Get HTTP headers for OpenList API requests."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self._token:
            headers["Authorization"] = self._token
        return headers

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
        return self._session

    async def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST to the OpenList API and return the decoded envelope."""
        session = await self._ensure_session()
        url = f"{self.server_url}{endpoint}"

        async with session.post(url, json=payload, headers=self.headers) as response:
            if response.status != 200:
                return {"code": response.status, "message": f"HTTP {response.status}"}
            data = await response.json(content_type=None)
            if not isinstance(data, dict):
                return {"code": TRANSPORT_ERROR_CODE, "message": "unexpected response body"}
            return data

    async def login(self) -> bool:
        """Obtain an API token for the configured account."""
        try:
            data = await self._post(
                "/api/auth/login",
                {"username": self.username, "password": self.password},
            )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"OpenList login error: {e}")
            return False

        token = (data.get("data") or {}).get("token")
        if data.get("code") != SUCCESS_CODE or not token:
            logger.error(f"OpenList login failed: {data.get('message', 'no token')}")
            return False

        self._token = token
        logger.info(f"Logged in to OpenList: {self.server_url}")
        return True

    async def list_directory(
        self,
        path: str,
        page: int = 1,
        per_page: int = 100,
        refresh: bool = False,
    ) -> ListResponse:
        """List one page of a directory."""
        if not self._token and not await self.login():
            return ListResponse.error(LOGIN_FAILED_CODE, "OpenList login failed")

        payload = {
            "path": path,
            "password": "",
            "page": page,
            "per_page": per_page,
            "refresh": refresh,
        }

        try:
            data = await self._post("/api/fs/list", payload)
        # ValueError covers undecodable JSON bodies
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            logger.error(f"OpenList list request failed: {e}")
            return ListResponse.error(TRANSPORT_ERROR_CODE, str(e) or e.__class__.__name__)

        return self._parse_list_response(data)

    def _parse_list_response(self, data: Dict[str, Any]) -> ListResponse:
        """Parse an /api/fs/list envelope."""
        code = data.get("code", TRANSPORT_ERROR_CODE)
        message = data.get("message") or ""
        if code != SUCCESS_CODE:
            return ListResponse.error(code, message)

        payload = data.get("data") or {}
        entries = []
        # OpenList sends "content": null for empty directories
        for item in payload.get("content") or []:
            if isinstance(item, dict):
                entries.append(RemoteEntry.from_dict(item))

        return ListResponse(
            code=code,
            message=message,
            data=ListData(total=int(payload.get("total") or 0), content=entries),
        )

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        logger.debug(f"Disconnected from OpenList: {self.server_url}")
