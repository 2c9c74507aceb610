"""Capability checks for the current actor."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from sqlalchemy.ext.asyncio import AsyncSession

from models import User

ROLE_CAPABILITIES: dict[str, frozenset[str]] = {
    "administrator": frozenset(
        {
            "read",
            "edit_posts",
            "edit_others_posts",
            "publish_posts",
            "manage_options",
            "activate_plugins",
            "install_plugins",
            "update_core",
            "list_users",
        }
    ),
    "editor": frozenset(
        {"read", "edit_posts", "edit_others_posts", "publish_posts"}
    ),
    "author": frozenset({"read", "edit_posts", "publish_posts"}),
    "subscriber": frozenset({"read"}),
}


@runtime_checkable
class AuthorizationGate(Protocol):
    async def has_capability(self, user_id: str | None, capability: str) -> bool: ...


def user_capabilities(user: User) -> frozenset[str]:
    granted = set(ROLE_CAPABILITIES.get(user.role, frozenset()))
    granted.update(user.capabilities or [])
    return frozenset(granted)


class UserCapabilityGate:
    """Resolve capabilities from the user's role and explicit grants."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def has_capability(self, user_id: str | None, capability: str) -> bool:
        if not user_id:
            return False
        user = await self.session.get(User, user_id)
        if user is None:
            return False
        if capability == user.role:
            return True
        return capability in user_capabilities(user)
