"""Data models for arr push requests, responses and outcomes."""

from enum import StrEnum
from typing import Any, ClassVar

import msgspec


class ArrRelease(msgspec.Struct, rename="camel"):
    """Release payload accepted by the arr ``release/push`` endpoint."""

    title: str
    download_url: str = ""
    magnet_url: str = ""
    info_url: str = ""
    size: int = 0
    indexer: str = ""
    download_protocol: str = "torrent"
    protocol: str = "torrent"
    publish_date: str = ""
    download_client_id: int = 0
    download_client: str = ""


class BadRequestResponse(msgspec.Struct, rename="camel"):
    """One validation failure from a 400 ``release/push`` response.

    Every field is optional and may be null; a failure is still a rejection.
    """

    error_message: str | None = None
    property_name: str | None = None
    error_code: Any = None
    attempted_value: Any = None
    severity: str | None = None

    def __str__(self) -> str:
        def text(value: Any) -> Any:
            return "" if value is None else value

        return (
            f"[{text(self.severity)}: {text(self.error_code)}] "
            f"{text(self.property_name)}: {text(self.error_message)} "
            f"- got value: {text(self.attempted_value)}"
        )


class PushResponse(msgspec.Struct, rename="camel"):
    """Decision returned by an arr for a pushed release."""

    approved: bool = False
    rejected: bool = False
    temp_rejected: bool = False
    rejections: list[str] | None = None


class SystemStatus(msgspec.Struct, rename="camel"):
    """Subset of the arr ``system/status`` response."""

    version: str
    app_name: str = ""
    instance_name: str = ""


class PushStatus(StrEnum):
    """Kind of push outcome."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    UNAUTHORIZED = "unauthorized"
    ERROR = "error"


class _Outcome(msgspec.Struct, frozen=True, tag_field="outcome"):
    status: ClassVar[PushStatus]

    @property
    def retryable(self) -> bool:
        """Whether a supervisor may retry the push."""
        return False


class Accepted(_Outcome, frozen=True, tag="accepted"):
    """The arr accepted the release."""

    status: ClassVar[PushStatus] = PushStatus.ACCEPTED


class Rejected(_Outcome, frozen=True, tag="rejected"):
    """The arr refused the release. Terminal for this release.

    Attributes:
        reasons: Rejection reasons, in the order the arr reported them.
    """

    status: ClassVar[PushStatus] = PushStatus.REJECTED

    reasons: tuple[str, ...] = ()


class Unauthorized(_Outcome, frozen=True, tag="unauthorized"):
    """The arr refused the credentials. Needs operator attention."""

    status: ClassVar[PushStatus] = PushStatus.UNAUTHORIZED


class PushError(_Outcome, frozen=True, tag="error"):
    """Transport failure or unexpected response. May be transient.

    Attributes:
        detail: Description of the failure.
    """

    status: ClassVar[PushStatus] = PushStatus.ERROR

    detail: str = ""

    @property
    def retryable(self) -> bool:
        return True


PushOutcome = Accepted | Rejected | Unauthorized | PushError
