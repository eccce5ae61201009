"""
Turbonomic REST client - session login and authenticated requests
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

LOGIN_PATH = "/vmturbo/rest/login"


class TurboError(Exception):
    """Base exception for Turbonomic API errors"""
    pass


class TurboAuthError(TurboError):
    """Raised when a session cannot be established"""
    pass


@dataclass(frozen=True)
class TurboSession:
    """Credential for one run, acquired once by login() and never mutated"""
    base_url: str
    cookie: str

    @property
    def auth_headers(self) -> Dict[str, str]:
        return {"Cookie": self.cookie}


def open_http_client(timeout: float = 60, verify: bool = True) -> httpx.AsyncClient:
    """Create the single HTTP client shared by every request of a run"""
    return httpx.AsyncClient(timeout=timeout, verify=verify)


async def login(http: httpx.AsyncClient, base_url: str, username: str, password: str) -> TurboSession:
    """Authenticate against Turbonomic and return the session cookie

    Raises:
        TurboAuthError: If the login request fails or returns no cookie
    """
    base_url = base_url.rstrip('/')
    try:
        response = await http.post(
            f"{base_url}{LOGIN_PATH}",
            data={"username": username, "password": password},
        )
        response.raise_for_status()
    except httpx.HTTPError as e:
        raise TurboAuthError(f"Error authenticating to Turbonomic: {e}") from e

    cookies = response.headers.get_list("set-cookie")
    if not cookies:
        raise TurboAuthError("Error authenticating to Turbonomic: login response did not set a session cookie")

    # Only the name=value pair is sent back; attributes like Path are dropped
    cookie = cookies[0].split(';', 1)[0].strip()
    logger.debug(f"Authenticated to {base_url} as {username}")
    return TurboSession(base_url=base_url, cookie=cookie)


class TurboClient:
    """Authenticated requests against one Turbonomic instance

    Args:
        http: Shared async HTTP client
        session: Session returned by login()
    """

    def __init__(self, http: httpx.AsyncClient, session: TurboSession):
        self.http = http
        self.session = session

    def url(self, path: str) -> str:
        return f"{self.session.base_url}{path}"

    async def get(self, path: str, params: Any = None) -> httpx.Response:
        response = await self.http.get(
            self.url(path),
            params=params,
            headers=self.session.auth_headers,
        )
        response.raise_for_status()
        return response

    async def post(self, path: str, json: Any = None, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        response = await self.http.post(
            self.url(path),
            json=json,
            params=params,
            headers=self.session.auth_headers,
        )
        response.raise_for_status()
        return response
