"""Arr client registry and global instance management for relayarr."""

from contextlib import suppress

import anyio
from aiohttp import ClientSession

from .. import logger
from ..config import ArrConfig, ArrType
from .client_common import (
    ArrClient,
    ArrSpec,
    InvalidCredentialsException,
    RequestException,
)

ARR_REGISTRY: dict[ArrType, ArrSpec] = {
    ArrType.RADARR: ArrSpec(app_name="Radarr", api_path="/api/v3"),
    ArrType.SONARR: ArrSpec(app_name="Sonarr", api_path="/api/v3"),
    ArrType.WHISPARR: ArrSpec(app_name="Whisparr", api_path="/api/v3"),
    ArrType.LIDARR: ArrSpec(app_name="Lidarr", api_path="/api/v1"),
    ArrType.READARR: ArrSpec(app_name="Readarr", api_path="/api/v1"),
}


def create_arr_client(
    arr_config: ArrConfig, session: ClientSession | None = None
) -> ArrClient:
    """Create an arr client for a configured instance.

    Args:
        arr_config: Configuration of the arr instance.
        session: Optional aiohttp session to use instead of a new one.

    Returns:
        ArrClient: Client for the instance.

    Raises:
        ValueError: If the arr type is not supported.
    """
    if arr_config.type not in ARR_REGISTRY:
        raise ValueError(f"Unsupported arr type: {arr_config.type}")

    return ArrClient(
        name=arr_config.name,
        host=arr_config.host,
        api_key=arr_config.api_key,
        spec=ARR_REGISTRY[arr_config.type],
        username=arr_config.username if arr_config.basic_auth else None,
        password=arr_config.password if arr_config.basic_auth else None,
        timeout=arr_config.timeout,
        download_client=arr_config.download_client,
        download_client_id=arr_config.download_client_id,
        indexers=arr_config.indexers,
        max_in_flight=arr_config.max_in_flight,
        session=session,
    )


# Global arr clients instance
_arr_clients_instance: list[ArrClient] = []
_arr_clients_lock = anyio.Lock()


async def init_arr_clients(arr_configs: list[ArrConfig]) -> None:
    """Initialize global arr clients.

    Each client is tested once. Clients refusing the API key are dropped;
    unreachable clients are kept since the arr may come up later.

    Args:
        arr_configs: Configured arr instances.

    Raises:
        RuntimeError: If already initialized or no client is usable.
    """
    global _arr_clients_instance
    async with _arr_clients_lock:
        if _arr_clients_instance:
            raise RuntimeError("Arr clients already initialized.")

        logger.section("===== Connecting to Arr Applications =====")
        clients = []

        for arr_config in arr_configs:
            client = create_arr_client(arr_config)
            try:
                status = await client.test()
                logger.success(
                    "Connected to %s (%s %s)",
                    client.name,
                    client.app_name,
                    status.version,
                )
                clients.append(client)
            except InvalidCredentialsException as e:
                logger.error("Disabling %s: %s", client.name, e)
                with suppress(Exception):
                    await client.close()
            except RequestException as e:
                logger.warning("Could not reach %s, keeping it: %s", client.name, e)
                clients.append(client)

        if not clients:
            logger.critical("No usable arr applications configured")
            raise RuntimeError("Failed to set up any arr application")

        _arr_clients_instance = clients


def get_arr_clients() -> list[ArrClient]:
    """Get global arr clients.

    Must be called after init_arr_clients() has been invoked.

    Raises:
        RuntimeError: If arr clients have not been initialized.
    """
    if not _arr_clients_instance:
        raise RuntimeError("Arr clients not initialized. Call init_arr_clients() first.")
    return _arr_clients_instance


def find_client_by_name(clients: list[ArrClient], name: str) -> ArrClient | None:
    """Find a client by its configured name.

    Pure function: no global state access.
    """
    for client in clients:
        if client.name == name:
            return client
    return None


async def cleanup_arr_clients() -> None:
    """Close all arr client sessions.

    Errors are logged and do not prevent other clients from closing.
    """
    global _arr_clients_instance
    async with _arr_clients_lock:
        if not _arr_clients_instance:
            logger.debug("No arr clients to cleanup")
            return

        for client in _arr_clients_instance:
            try:
                await client.close()
                logger.debug("Closed arr client %s", client.name)
            except Exception as e:
                logger.warning("Error closing arr client %s: %s", client.name, e)

        _arr_clients_instance = []
