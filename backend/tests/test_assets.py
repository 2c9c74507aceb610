"""Tests for the browser dismissal listener packaging."""

from services.notices import SCRIPT_HANDLE, SCRIPT_PATH, SCRIPT_VERSION, script_tag
from services.notices.assets import script_url


def test_script_url_is_versioned() -> None:
    assert script_url("/assets/") == f"/assets/admin-notice.js?ver={SCRIPT_VERSION}"


def test_script_tag_carries_endpoint_and_defers() -> None:
    tag = script_tag("/assets", "/api/v1/notices/dismiss")

    assert tag == (
        f'<script id="{SCRIPT_HANDLE}-js" src="/assets/admin-notice.js?ver={SCRIPT_VERSION}"'
        ' data-endpoint="/api/v1/notices/dismiss" defer></script>'
    )


def test_script_tag_escapes_endpoint() -> None:
    assert 'data-endpoint="/dismiss?a=1&amp;b=&quot;2&quot;"' in script_tag(
        "/assets", '/dismiss?a=1&b="2"'
    )


def test_listener_posts_expected_fields() -> None:
    source = SCRIPT_PATH.read_text(encoding="utf-8")

    assert "notice-dismiss" in source
    assert "'stellarwp-dismiss-notice'" in source
    assert "body.append('notice', notice.dataset.id)" in source
    assert "body.append('_wpnonce', notice.dataset.nonce)" in source
    assert "credentials: 'include'" in source
    assert "!notice.dataset.id || !notice.dataset.nonce" in source
