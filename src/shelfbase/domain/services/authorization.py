"""Owner-or-admin authorization.

A requester may mutate a collection, or anything inside it, when they own
the collection or are an admin.
"""

from shelfbase.domain.entities import NotAuthorizedFailure, NotFoundFailure, User


def authorize_owner_or_admin(owner_id: str, requester_id: str, requester_is_admin: bool) -> bool:
    return requester_id == owner_id or requester_is_admin


class AuthorizationGate:
    """Resolves the requester and applies the owner-or-admin rule.

    Args:
        users: Anything with an async ``get(user_id) -> User | None``.
    """

    def __init__(self, users) -> None:
        self.users = users

    async def check(
        self, owner_id: str, requester_id: str
    ) -> User | NotAuthorizedFailure | NotFoundFailure:
        """Return the requester if allowed, otherwise a failure.

        Blocked requesters are never allowed.
        """
        requester = await self.users.get(requester_id)
        if requester is None:
            return NotFoundFailure(resource="User", resource_id=requester_id)
        if requester.blocked:
            return NotAuthorizedFailure(message="User is blocked")
        if not authorize_owner_or_admin(owner_id, requester.id, requester.is_admin):
            return NotAuthorizedFailure()
        return requester
