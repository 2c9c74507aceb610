"""Server side of the dismissal acknowledgement round-trip."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from fastapi import status

from core import verify_nonce

from .dismissals import DismissalStore, dismiss_notice_for_user
from .keys import is_valid_notice_key, sanitize_notice_key
from .rendering import NONCE_DISMISS_NOTICE
from .schemas import DismissalAck

ACTION_DISMISSAL = "stellarwp-dismiss-notice"
NOTICE_FIELD = "notice"
NONCE_FIELD = "_wpnonce"
ACTION_FIELD = "action"

MISSING_FIELDS_MESSAGE = "Required fields missing."
UNKNOWN_ACTION_MESSAGE = "Unknown action."
UNAUTHENTICATED_MESSAGE = "Authentication required."
BAD_NONCE_MESSAGE = "Nonce validation failed."
INVALID_KEY_MESSAGE = "Invalid notice key."
PERSISTENCE_FAILED_MESSAGE = "Unable to record dismissal."
ACTOR_LOOKUP_FAILED_MESSAGE = "Unable to resolve the current user."
RATE_LIMITED_MESSAGE = "Too many dismissal requests."

VerifyNonceFn = Callable[[str, str, str | None], int]
logger = logging.getLogger(__name__)


class DismissalState(str, Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    PERSISTED = "persisted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class DismissalResult:
    state: DismissalState
    ack: DismissalAck
    status_code: int = status.HTTP_200_OK


def _field(form: Mapping[str, Any], name: str) -> str:
    value = form.get(name)
    if not isinstance(value, str):
        return ""
    return value.strip()


def reject_dismissal(message: str, status_code: int, **context: Any) -> DismissalResult:
    logger.info(
        "Rejected notice dismissal",
        extra={"reason": message, "status_code": status_code, **context},
    )
    return DismissalResult(
        state=DismissalState.REJECTED,
        ack=DismissalAck(success=False, data=message),
        status_code=status_code,
    )


async def handle_dismissal(
    form: Mapping[str, Any],
    *,
    user_id: str | None,
    store: DismissalStore,
    verify_nonce_fn: VerifyNonceFn = verify_nonce,
) -> DismissalResult:
    """Validate a dismissal request and persist it for ``user_id``.

    Every outcome, including storage faults, is returned as a result; this
    function does not raise.
    """
    raw_notice = _field(form, NOTICE_FIELD)
    nonce = _field(form, NONCE_FIELD)
    if not raw_notice or not nonce:
        return reject_dismissal(
            MISSING_FIELDS_MESSAGE, status.HTTP_422_UNPROCESSABLE_ENTITY
        )

    action = _field(form, ACTION_FIELD)
    if action and action != ACTION_DISMISSAL:
        return reject_dismissal(
            UNKNOWN_ACTION_MESSAGE, status.HTTP_400_BAD_REQUEST, action=action
        )

    if not user_id:
        return reject_dismissal(UNAUTHENTICATED_MESSAGE, status.HTTP_401_UNAUTHORIZED)

    if not verify_nonce_fn(nonce, NONCE_DISMISS_NOTICE, user_id):
        return reject_dismissal(
            BAD_NONCE_MESSAGE, status.HTTP_403_FORBIDDEN, user_id=user_id
        )

    notice_key = sanitize_notice_key(raw_notice)
    if not is_valid_notice_key(notice_key):
        return reject_dismissal(
            INVALID_KEY_MESSAGE,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            user_id=user_id,
        )

    try:
        persisted = await dismiss_notice_for_user(store, notice_key, user_id)
    except Exception as persist_error:
        logger.warning(
            "Dismissal store raised while recording dismissal",
            extra={"user_id": user_id, "notice_key": notice_key},
            exc_info=persist_error,
        )
        persisted = False

    if not persisted:
        return reject_dismissal(
            PERSISTENCE_FAILED_MESSAGE,
            status.HTTP_200_OK,
            user_id=user_id,
            notice_key=notice_key,
        )

    logger.info(
        "Recorded notice dismissal",
        extra={"user_id": user_id, "notice_key": notice_key},
    )
    return DismissalResult(
        state=DismissalState.PERSISTED,
        ack=DismissalAck(success=True),
    )
