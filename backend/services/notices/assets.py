"""Browser-side dismissal listener packaging."""

from __future__ import annotations

from html import escape
from pathlib import Path

SCRIPT_HANDLE = "stellarwp-admin-notice"
SCRIPT_VERSION = "0.1.0"
SCRIPT_FILENAME = "admin-notice.js"
ASSETS_DIR = Path(__file__).resolve().parent / "static"
SCRIPT_PATH = ASSETS_DIR / SCRIPT_FILENAME


def script_url(asset_base: str) -> str:
    return f"{asset_base.rstrip('/')}/{SCRIPT_FILENAME}?ver={SCRIPT_VERSION}"


def script_tag(asset_base: str, endpoint: str) -> str:
    """Build the deferred ``<script>`` element that loads the listener.

    The listener reads its dismissal endpoint from ``data-endpoint``.
    """
    return (
        f'<script id="{SCRIPT_HANDLE}-js" src="{escape(script_url(asset_base))}"'
        f' data-endpoint="{escape(endpoint)}" defer></script>'
    )
