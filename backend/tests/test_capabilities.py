"""Tests for role and grant based capability checks."""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from services import ROLE_CAPABILITIES, AuthorizationGate, UserCapabilityGate
from tests.factories import StaticCapabilityGate, create_user


def test_gates_satisfy_protocol(db_session: AsyncSession) -> None:
    assert isinstance(UserCapabilityGate(db_session), AuthorizationGate)
    assert isinstance(StaticCapabilityGate(), AuthorizationGate)


def test_administrator_holds_every_editor_capability() -> None:
    assert ROLE_CAPABILITIES["editor"] <= ROLE_CAPABILITIES["administrator"]
    assert ROLE_CAPABILITIES["subscriber"] == frozenset({"read"})


@pytest.mark.asyncio
async def test_role_capabilities_are_granted(db_session: AsyncSession) -> None:
    admin = await create_user(db_session, "site_admin", role="administrator")
    subscriber = await create_user(db_session, "reader")
    gate = UserCapabilityGate(db_session)

    assert await gate.has_capability(admin.id, "manage_options") is True
    assert await gate.has_capability(subscriber.id, "manage_options") is False
    assert await gate.has_capability(subscriber.id, "read") is True


@pytest.mark.asyncio
async def test_explicit_grants_extend_role(db_session: AsyncSession) -> None:
    user = await create_user(
        db_session,
        "granted",
        capabilities=["view_site_health_checks"],
    )
    gate = UserCapabilityGate(db_session)

    assert await gate.has_capability(user.id, "view_site_health_checks") is True
    assert await gate.has_capability(user.id, "update_core") is False


@pytest.mark.asyncio
async def test_role_name_is_accepted_as_capability(db_session: AsyncSession) -> None:
    editor = await create_user(db_session, "the_editor", role="editor")
    gate = UserCapabilityGate(db_session)

    assert await gate.has_capability(editor.id, "editor") is True
    assert await gate.has_capability(editor.id, "administrator") is False


@pytest.mark.asyncio
async def test_unknown_or_anonymous_users_hold_nothing(db_session: AsyncSession) -> None:
    gate = UserCapabilityGate(db_session)

    assert await gate.has_capability(None, "read") is False
    assert await gate.has_capability("missing-user", "read") is False


@pytest.mark.asyncio
async def test_unknown_role_only_uses_explicit_grants(db_session: AsyncSession) -> None:
    user = await create_user(db_session, "custom_role", role="shop_manager", capabilities=["manage_shop"])
    gate = UserCapabilityGate(db_session)

    assert await gate.has_capability(user.id, "manage_shop") is True
    assert await gate.has_capability(user.id, "read") is False
