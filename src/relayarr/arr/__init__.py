"""Arr push clients for relayarr."""

from .client_common import (
    DEFAULT_TIMEOUT,
    ArrClient,
    ArrPusher,
    ArrSpec,
    InvalidCredentialsException,
    RequestException,
)
from .models import (
    Accepted,
    ArrRelease,
    BadRequestResponse,
    PushError,
    PushOutcome,
    PushResponse,
    PushStatus,
    Rejected,
    SystemStatus,
    Unauthorized,
)
from .outcome import interpret
from .registry import (
    ARR_REGISTRY,
    cleanup_arr_clients,
    create_arr_client,
    find_client_by_name,
    get_arr_clients,
    init_arr_clients,
)

__all__ = [
    "ARR_REGISTRY",
    "Accepted",
    "ArrClient",
    "ArrPusher",
    "ArrRelease",
    "ArrSpec",
    "BadRequestResponse",
    "DEFAULT_TIMEOUT",
    "InvalidCredentialsException",
    "PushError",
    "PushOutcome",
    "PushResponse",
    "PushStatus",
    "Rejected",
    "RequestException",
    "SystemStatus",
    "Unauthorized",
    "cleanup_arr_clients",
    "create_arr_client",
    "find_client_by_name",
    "get_arr_clients",
    "init_arr_clients",
    "interpret",
]
