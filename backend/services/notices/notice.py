"""Admin notice value object."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, field_validator

from .keys import (
    MAX_NOTICE_KEY_LENGTH,
    derive_notice_key,
    is_valid_notice_key,
    sanitize_notice_key,
)


class Severity(str, Enum):
    """Color scheme of a notice."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"
    INFO = "info"


class ImmutableNoticeError(AttributeError):
    """Raised when a notice attribute is assigned directly."""


@dataclass(frozen=True)
class AutoGenerated:
    """Track dismissals under a key derived from severity and message."""


@dataclass(frozen=True)
class Explicit:
    """Track dismissals under a caller-chosen key."""

    key: str


DismissalTracking = Union[None, AutoGenerated, Explicit]


class Notice(BaseModel):
    """A dismissible, styled banner awaiting a render decision.

    Notices are immutable: every ``with_*()`` method returns an updated copy
    and leaves the receiver untouched.
    """

    model_config = ConfigDict(frozen=True)

    message: str
    severity: Severity = Severity.INFO
    dismissible: bool = False
    dismissible_key: str | None = None
    capability: str | None = None
    alt: bool = False
    inline: bool = False

    def __init__(
        self,
        message: str,
        severity: Any = Severity.INFO,
        **data: Any,
    ) -> None:
        super().__init__(message=message, severity=severity, **data)

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> Severity:
        if isinstance(value, Severity):
            return value
        try:
            return Severity(value)
        except ValueError:
            return Severity.INFO

    def __setattr__(self, name: str, value: Any) -> None:
        raise ImmutableNoticeError(
            f"Properties on {type(self).__name__} cannot be modified directly. "
            "Please use the with_*() methods instead."
        )

    def __delattr__(self, name: str) -> None:
        raise ImmutableNoticeError(
            f"Properties on {type(self).__name__} cannot be deleted."
        )

    @property
    def tracks_dismissals(self) -> bool:
        """True when dismissals of this notice are persisted per user."""
        return self.dismissible and bool(self.dismissible_key)

    def with_alt(self, alt: bool) -> Notice:
        return self.model_copy(update={"alt": bool(alt)})

    def with_inline(self, inline: bool) -> Notice:
        """Keep the notice where it is rendered instead of hoisting it to the top."""
        return self.model_copy(update={"inline": bool(inline)})

    def with_capability(self, capability: str | None) -> Notice:
        """Require a capability before rendering; None removes the requirement."""
        return self.model_copy(update={"capability": capability or None})

    def with_dismissible(
        self,
        dismissible: bool,
        tracking: DismissalTracking | str = None,
    ) -> Notice:
        """Toggle dismissibility and, optionally, how dismissals are remembered.

        ``tracking`` may be ``AutoGenerated()``, ``Explicit(key)`` or a bare
        key string. ``None`` keeps whatever key was configured before.

        Explicit keys are cleaned the same way the dismissal endpoint cleans
        posted keys, so the rendered key is the one that gets stored. A key
        that is empty after cleaning or longer than ``MAX_NOTICE_KEY_LENGTH``
        raises ``ValueError``.
        """
        update: dict[str, Any] = {"dismissible": bool(dismissible)}

        if isinstance(tracking, str):
            tracking = Explicit(tracking) if tracking else None

        if isinstance(tracking, AutoGenerated):
            update["dismissible_key"] = derive_notice_key(
                self.severity.value, self.message
            )
        elif isinstance(tracking, Explicit) and tracking.key:
            notice_key = sanitize_notice_key(tracking.key)
            if not is_valid_notice_key(notice_key):
                raise ValueError(
                    f"Dismissible key {tracking.key!r} cannot be stored: it must "
                    f"be 1 to {MAX_NOTICE_KEY_LENGTH} characters after cleaning."
                )
            update["dismissible_key"] = notice_key

        return self.model_copy(update=update)
