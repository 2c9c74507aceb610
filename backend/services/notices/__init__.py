"""Admin notice domain services."""

from .assets import SCRIPT_HANDLE, SCRIPT_PATH, SCRIPT_VERSION, script_tag
from .dismissals import (
    USER_META_KEY,
    DismissalStore,
    UserMetaDismissalStore,
    dismiss_notice_for_user,
)
from .handler import (
    ACTION_DISMISSAL,
    DismissalResult,
    DismissalState,
    handle_dismissal,
    reject_dismissal,
)
from .keys import MAX_NOTICE_KEY_LENGTH, derive_notice_key, sanitize_notice_key
from .notice import (
    AutoGenerated,
    DismissalTracking,
    Explicit,
    ImmutableNoticeError,
    Notice,
    Severity,
)
from .queue import NoticeBatch, NoticeQueue
from .rendering import (
    EMPTY_RENDER,
    NONCE_DISMISS_NOTICE,
    NoticeService,
    RenderedNotice,
    format_message,
)
from .schemas import DismissalAck, DismissedNoticeListResponse, NoticeListResponse

__all__ = [
    "Notice",
    "Severity",
    "AutoGenerated",
    "Explicit",
    "DismissalTracking",
    "ImmutableNoticeError",
    "derive_notice_key",
    "sanitize_notice_key",
    "MAX_NOTICE_KEY_LENGTH",
    "DismissalStore",
    "UserMetaDismissalStore",
    "dismiss_notice_for_user",
    "USER_META_KEY",
    "NoticeService",
    "RenderedNotice",
    "EMPTY_RENDER",
    "NONCE_DISMISS_NOTICE",
    "format_message",
    "NoticeQueue",
    "NoticeBatch",
    "ACTION_DISMISSAL",
    "DismissalState",
    "DismissalResult",
    "handle_dismissal",
    "reject_dismissal",
    "DismissalAck",
    "NoticeListResponse",
    "DismissedNoticeListResponse",
    "SCRIPT_HANDLE",
    "SCRIPT_VERSION",
    "SCRIPT_PATH",
    "script_tag",
]
