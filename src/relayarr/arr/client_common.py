"""
Common arr client functionality.

Provides the push capability shared by every arr family (Radarr, Sonarr,
Lidarr, Readarr, Whisparr). Families differ only in their ``ArrSpec``.
"""

from collections.abc import Collection, Iterable
from datetime import UTC, datetime
from typing import Any, Protocol

import anyio
import msgspec
from aiohttp import BasicAuth, ClientError, ClientSession, ClientTimeout
from humanfriendly import InvalidSize, parse_size

from .. import __version__, logger
from ..definitions import Release
from .models import (
    ArrRelease,
    PushError,
    PushOutcome,
    Rejected,
    SystemStatus,
    Unauthorized,
)
from .outcome import interpret

# Arr apps may run slow disk or import work before answering a push
DEFAULT_TIMEOUT = 120.0


class InvalidCredentialsException(Exception):
    pass


class RequestException(Exception):
    pass


class ArrSpec(msgspec.Struct, frozen=True):
    """Predefined arr family specification.

    Attributes:
        app_name: Display name, e.g. "Radarr".
        api_path: API base path, e.g. "/api/v3".
    """

    app_name: str
    api_path: str


class ArrPusher(Protocol):
    """Capability shared by every push target."""

    name: str

    async def push(
        self, release: Release, secrets: Iterable[str] = ()
    ) -> PushOutcome: ...


class ArrClient:
    """Client for one arr instance's push API."""

    def __init__(
        self,
        name: str,
        host: str,
        api_key: str,
        spec: ArrSpec,
        username: str | None = None,
        password: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        download_client: str = "",
        download_client_id: int = 0,
        indexers: Collection[str] = (),
        max_in_flight: int | None = None,
        session: ClientSession | None = None,
    ) -> None:
        self.timeout = ClientTimeout(total=timeout)
        if session is not None:
            self.client = session
        else:
            self.client = ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": f"relayarr/{__version__}"},
            )

        self.name = name
        self.host = host.rstrip("/")
        self.spec = spec
        self.download_client = download_client
        self.download_client_id = download_client_id
        # Empty means every indexer is routed here
        self.indexers = frozenset(indexers)

        self._headers = {
            "X-Api-Key": api_key,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        self._auth = BasicAuth(username, password or "") if username else None
        self._api_key = api_key
        self._password = password or ""

        self.max_in_flight = max_in_flight
        self._limiter: anyio.CapacityLimiter | None = None

    @property
    def limiter(self) -> anyio.CapacityLimiter | None:
        """Get in-flight push limiter for current event loop, if configured."""
        if self.max_in_flight is None:
            return None
        if self._limiter is None:
            self._limiter = anyio.CapacityLimiter(self.max_in_flight)
        return self._limiter

    @property
    def app_name(self) -> str:
        return self.spec.app_name

    def api_url(self, endpoint: str) -> str:
        return f"{self.host}{self.spec.api_path}/{endpoint.lstrip('/')}"

    def accepts_indexer(self, indexer: str) -> bool:
        return not self.indexers or indexer in self.indexers

    async def close(self) -> None:
        """Close the aiohttp ClientSession."""
        await self.client.close()

    def build_payload(
        self, release: Release, publish_date: datetime | None = None
    ) -> ArrRelease:
        """Convert a release into the arr push payload.

        Args:
            release: Normalized release.
            publish_date: Publish timestamp. Defaults to now.

        Returns:
            ArrRelease: Push payload.
        """
        size = 0
        if release.size:
            try:
                size = parse_size(release.size, binary=True)
            except InvalidSize:
                logger.warning(
                    "Could not parse size %r of %s", release.size, release.title
                )

        download_url = release.download_url
        magnet_url = ""
        if download_url.startswith("magnet:"):
            download_url, magnet_url = "", release.download_url

        publish_date = publish_date or datetime.now(UTC)
        return ArrRelease(
            title=release.title,
            download_url=download_url,
            magnet_url=magnet_url,
            info_url=release.rendered.get("infourl", ""),
            size=size,
            indexer=release.indexer,
            download_protocol=release.protocol,
            protocol=release.protocol,
            publish_date=publish_date.strftime("%Y-%m-%dT%H:%M:%SZ"),
            download_client_id=self.download_client_id,
            download_client=self.download_client,
        )

    def _redact(self, text: str, secrets: Iterable[str] = ()) -> str:
        return logger.redact(text, [self._api_key, self._password, *secrets])

    async def request(
        self, method: str, endpoint: str, payload: Any = None
    ) -> tuple[int, bytes]:
        """Send an API request and return status code and body.

        Args:
            method: HTTP method.
            endpoint: Endpoint below the API base path, e.g. "release/push".
            payload: Value to send as JSON body.

        Returns:
            tuple[int, bytes]: Status code and response content.

        Raises:
            RequestException: On transport failure or timeout.
        """
        data = msgspec.json.encode(payload) if payload is not None else None
        try:
            async with self.client.request(
                method,
                self.api_url(endpoint),
                data=data,
                headers=self._headers,
                auth=self._auth,
                timeout=self.timeout,
            ) as response:
                content = await response.read()
                return response.status, content
        except TimeoutError as e:
            raise RequestException(f"Request to {self.name} timed out") from e
        except ClientError as e:
            raise RequestException(f"Request error: {e}") from e

    async def test(self) -> SystemStatus:
        """Check connectivity and credentials.

        Returns:
            SystemStatus: Status reported by the arr.

        Raises:
            InvalidCredentialsException: If the API key is refused.
            RequestException: If the request fails or the response is invalid.
        """
        status, content = await self.request("GET", "system/status")
        if status == 401:
            raise InvalidCredentialsException(f"{self.name}: bad credentials")
        if status != 200:
            raise RequestException(f"HTTP {status}: {content[:500]!r}")
        try:
            return msgspec.json.decode(content, type=SystemStatus)
        except msgspec.DecodeError as e:
            raise RequestException(f"Invalid system status response: {e}") from e

    async def push(self, release: Release, secrets: Iterable[str] = ()) -> PushOutcome:
        """Push a release and classify the arr's answer.

        Never raises for transport problems; they become PushError.

        Args:
            release: Normalized release.
            secrets: Values to mask when logging, e.g. the indexer's RSS key.

        Returns:
            PushOutcome: Outcome of the push.
        """
        secrets = list(secrets)
        payload = self.build_payload(release)

        limiter = self.limiter
        try:
            if limiter is None:
                status, content = await self.request("POST", "release/push", payload)
            else:
                async with limiter:
                    status, content = await self.request(
                        "POST", "release/push", payload
                    )
        except RequestException as e:
            logger.error("%s release/push failed: %s", self.name, e)
            return PushError(detail=self._redact(str(e), secrets))

        logger.debug(
            "%s release/push status: (%s) response: %s",
            self.name,
            status,
            self._redact(content.decode("utf-8", errors="replace"), secrets),
        )

        outcome = interpret(status, content)
        if isinstance(outcome, Rejected):
            logger.info(
                "%s release/push rejected %s reasons: %s",
                self.name,
                release.title,
                self._redact(", ".join(outcome.reasons), secrets),
            )
        elif isinstance(outcome, Unauthorized):
            logger.error("%s release/push unauthorized: check API key", self.name)
        elif isinstance(outcome, PushError):
            outcome = PushError(detail=self._redact(outcome.detail, secrets))
            logger.error("%s release/push error: %s", self.name, outcome.detail)
        else:
            logger.success("%s accepted %s", self.name, release.title)
        return outcome
