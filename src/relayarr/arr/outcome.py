"""Interpretation of arr ``release/push`` responses.

Pure functions: the outcome depends only on the status code and body.
"""

from http import HTTPStatus
from typing import Any

import msgspec

from .models import (
    Accepted,
    BadRequestResponse,
    PushError,
    PushOutcome,
    PushResponse,
    Rejected,
    Unauthorized,
)

_EXCERPT_LENGTH = 200


def _decode(body: Any, type_: Any) -> Any:
    if isinstance(body, (bytes, bytearray, memoryview, str)):
        return msgspec.json.decode(body, type=type_)
    return msgspec.convert(body, type=type_)


def _excerpt(body: Any) -> str:
    if isinstance(body, (bytes, bytearray, memoryview)):
        body = bytes(body).decode("utf-8", errors="replace")
    text = body if isinstance(body, str) else repr(body)
    return text[:_EXCERPT_LENGTH]


def interpret(status_code: int, body: Any) -> PushOutcome:
    """Classify the response of a release push.

    The status code is checked first: 401 is Unauthorized whatever the body,
    400 must carry a list of validation failures, and any other non-2xx status
    is an error. A 2xx body is the arr's decision; a rejected decision is a
    normal outcome, not an error.

    Args:
        status_code: HTTP status code of the response.
        body: Raw JSON body (bytes or str) or an already decoded value.

    Returns:
        PushOutcome: Accepted, Rejected, Unauthorized or PushError.
    """
    if status_code == HTTPStatus.UNAUTHORIZED:
        return Unauthorized()

    if status_code == HTTPStatus.BAD_REQUEST:
        try:
            failures = _decode(body, list[BadRequestResponse])
        except msgspec.DecodeError as e:
            return PushError(detail=f"could not decode bad request response: {e}")
        return Rejected(reasons=tuple(str(failure) for failure in failures))

    if not 200 <= status_code < 300:
        return PushError(
            detail=f"unexpected HTTP status {status_code}: {_excerpt(body)}"
        )

    try:
        decision = _decode(body, PushResponse | list[PushResponse])
    except msgspec.DecodeError as e:
        return PushError(detail=f"could not decode push response: {e}")

    # Older arr versions answer with a one-element list
    decisions = decision if isinstance(decision, list) else [decision]
    rejected = [d for d in decisions if d.rejected]
    if rejected:
        return Rejected(
            reasons=tuple(reason for d in rejected for reason in d.rejections or ())
        )
    return Accepted()
