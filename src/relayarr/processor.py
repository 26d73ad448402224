"""Announce processing orchestrator for relayarr."""

import logging
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

import anyio
import msgspec
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from . import logger
from .arr import (
    Accepted,
    ArrPusher,
    PushError,
    PushOutcome,
    Rejected,
    Unauthorized,
)
from .definitions import (
    DefinitionRegistry,
    Release,
    matcher,
    normalize,
    resolve_settings,
)

if TYPE_CHECKING:
    from .arr import ArrClient
    from .config import RelayarrConfig
    from .notifier import Notifier


class ProcessorStats(msgspec.Struct):
    """Counters for announce processing."""

    lines: int = 0
    matched: int = 0
    pushed: int = 0
    accepted: int = 0
    rejected: int = 0
    unauthorized: int = 0
    errors: int = 0


async def push_with_retry(
    client: ArrPusher,
    release: Release,
    attempts: int = 3,
    secrets: Iterable[str] = (),
    wait: wait_base | None = None,
) -> PushOutcome:
    """Push a release, retrying only outcomes that may be transient.

    PushError is retried with exponential backoff; Accepted, Rejected and
    Unauthorized are returned immediately.

    Args:
        client: Push target.
        release: Release to push.
        attempts: Maximum number of attempts.
        secrets: Values to mask when logging.
        wait: Backoff strategy. Defaults to exponential backoff.

    Returns:
        PushOutcome: The last outcome.
    """
    secrets = list(secrets)
    retrying = AsyncRetrying(
        stop=stop_after_attempt(attempts),
        wait=wait or wait_exponential(multiplier=0.4, max=60),
        retry=retry_if_result(lambda outcome: outcome.retryable),
        before_sleep=before_sleep_log(logging.getLogger("relayarr"), logging.WARNING),
        retry_error_callback=lambda state: state.outcome.result(),
    )
    return await retrying(client.push, release, secrets=secrets)


class AnnounceProcessor:
    """Turns announce lines into releases and pushes them to arr clients."""

    def __init__(
        self,
        registry: DefinitionRegistry,
        arr_clients: "list[ArrClient]",
        settings: Mapping[str, Mapping[str, str]] | None = None,
        notifier: "Notifier | None" = None,
        push_attempts: int = 1,
        retry_wait: wait_base | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            registry: Validated definitions.
            arr_clients: Push targets.
            settings: Operator-supplied settings per indexer identifier.
            notifier: Optional Notifier for push outcomes.
            push_attempts: Attempts per push, 1 disables retrying.
            retry_wait: Backoff strategy between attempts.

        Raises:
            SettingsError: If an indexer lacks a required setting.
        """
        self.registry = registry
        self.arr_clients = arr_clients
        self.notifier = notifier
        self.push_attempts = push_attempts
        self.retry_wait = retry_wait
        self.stats = ProcessorStats()

        settings = settings or {}
        self._settings: dict[str, dict[str, str]] = {}
        self._secrets: dict[str, list[str]] = {}
        for valid in registry:
            resolved = resolve_settings(valid, settings.get(valid.identifier))
            self._settings[valid.identifier] = resolved
            self._secrets[valid.identifier] = [
                resolved[name] for name in valid.secret_settings if name in resolved
            ]

    def secrets_for(self, indexer: str) -> list[str]:
        """Secret setting values of an indexer, for log redaction."""
        return self._secrets.get(indexer, [])

    def parse_line(self, indexer: str, line: str) -> Release | None:
        """Parse an announce line with one indexer's definition.

        Args:
            indexer: Definition identifier.
            line: Raw announce line.

        Returns:
            Release | None: The release, or None if the line does not match.

        Raises:
            KeyError: If the indexer is not registered.
        """
        valid = self.registry[indexer]
        result = matcher.match(valid, line)
        if result is None:
            logger.debug("No match for %s line: %s", indexer, line)
            return None
        return normalize(result, valid, self._settings[indexer])

    async def push_to_all(self, release: Release) -> dict[str, PushOutcome]:
        """Push a release to every arr client routed for its indexer.

        Pushes run concurrently; results are keyed by client name.

        Args:
            release: Release to push.

        Returns:
            dict[str, PushOutcome]: Outcome per client.
        """
        targets = [c for c in self.arr_clients if c.accepts_indexer(release.indexer)]
        secrets = self.secrets_for(release.indexer)
        outcomes: dict[str, PushOutcome] = {}

        async def _push(client: "ArrClient") -> None:
            outcomes[client.name] = await push_with_retry(
                client,
                release,
                attempts=self.push_attempts,
                secrets=secrets,
                wait=self.retry_wait,
            )

        async with anyio.create_task_group() as tg:
            for client in targets:
                tg.start_soon(_push, client)

        for client in targets:
            await self._record(release, client.name, outcomes[client.name])
        return outcomes

    async def _record(self, release: Release, app: str, outcome: PushOutcome) -> None:
        self.stats.pushed += 1
        match outcome:
            case Accepted():
                self.stats.accepted += 1
                if self.notifier:
                    await self.notifier.send_push_accepted(release.title, app)
            case Rejected(reasons=reasons):
                self.stats.rejected += 1
                if self.notifier:
                    await self.notifier.send_push_rejected(release.title, app, reasons)
            case Unauthorized():
                self.stats.unauthorized += 1
                if self.notifier:
                    await self.notifier.send_unauthorized(app)
            case PushError():
                self.stats.errors += 1

    async def process_line(self, indexer: str, line: str) -> dict[str, PushOutcome]:
        """Parse an announce line and push the release.

        Args:
            indexer: Definition identifier the line was received for.
            line: Raw announce line.

        Returns:
            dict[str, PushOutcome]: Outcome per client, empty on no match.
        """
        self.stats.lines += 1
        release = self.parse_line(indexer, line)
        if release is None:
            return {}

        self.stats.matched += 1
        logger.header("New release: %s (%s)", release.title, indexer)
        return await self.push_to_all(release)


def create_processor(
    config: "RelayarrConfig",
    registry: DefinitionRegistry,
    arr_clients: "list[ArrClient]",
    notifier: "Notifier | None" = None,
) -> AnnounceProcessor:
    """Build a processor from the configuration.

    Only enabled indexers with a registered definition are kept.

    Args:
        config: Loaded configuration.
        registry: All loaded definitions.
        arr_clients: Push targets.
        notifier: Optional notifier.

    Returns:
        AnnounceProcessor: Configured processor.
    """
    enabled = DefinitionRegistry()
    settings = {}
    for indexer in config.enabled_indexers:
        valid = registry.get(indexer.identifier)
        if valid is None:
            logger.warning("No definition found for indexer %s", indexer.identifier)
            continue
        enabled.add(valid)
        settings[indexer.identifier] = indexer.settings

    return AnnounceProcessor(
        registry=enabled,
        arr_clients=arr_clients,
        settings=settings,
        notifier=notifier,
        push_attempts=config.global_config.push_attempts,
    )
