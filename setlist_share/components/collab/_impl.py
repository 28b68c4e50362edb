"""
GrantStore - explicit collaboration grants on setlists.

Mutations require admin on the setlist. The owner never needs a row; a row
written for the owner is accepted and has no effect on authorization.
"""

from __future__ import annotations

import logging
from uuid import UUID, uuid4

from setlist_share.components.access import AccessResolver
from setlist_share.domain.entities import CollaborationGrant
from setlist_share.domain.errors import ValidationError
from setlist_share.domain.policy import PERMISSION_LEVELS, is_permission_level

from .models import Collaborator
from .ports import GrantRepoPort, TimePort, UserRepoPort

logger = logging.getLogger(__name__)


class GrantStore:
    def __init__(
        self,
        grants: GrantRepoPort,
        users: UserRepoPort,
        resolver: AccessResolver,
        time: TimePort,
    ) -> None:
        self.repo = grants
        self.users = users
        self.resolver = resolver
        self.time = time

    def upsert_grant(
        self, actor_id: UUID, setlist_id: UUID, target_user_id: UUID, level: str
    ) -> CollaborationGrant:
        # 1. Check Permission (actor must hold admin)
        self.resolver.require(actor_id, setlist_id, "admin")

        # 2. Validate level and target
        if not is_permission_level(level):
            raise ValidationError.single(
                "invalid_level",
                f"Permission level must be one of: {', '.join(PERMISSION_LEVELS)}",
                field="level",
            )
        if not self.users.exists(target_user_id):
            raise ValidationError.single(
                "user_not_found", f"User {target_user_id} does not exist", field="user_id"
            )

        # 3. Upsert; an existing row keeps its id and only its level changes
        grant = self.repo.upsert(
            CollaborationGrant(
                id=uuid4(),
                setlist_id=setlist_id,
                user_id=target_user_id,
                level=level,  # type: ignore[arg-type]
                created_at=self.time.now_utc(),
            )
        )
        logger.info(
            "Grant %s on setlist %s to user %s by %s", level, setlist_id, target_user_id, actor_id
        )
        return grant

    def remove_grant(self, actor_id: UUID, setlist_id: UUID, target_user_id: UUID) -> bool:
        """Returns whether a row existed. Removing a missing grant is not an error."""
        self.resolver.require(actor_id, setlist_id, "admin")

        removed = self.repo.delete(setlist_id, target_user_id)
        if removed:
            logger.info(
                "Revoked grant on setlist %s for user %s by %s",
                setlist_id,
                target_user_id,
                actor_id,
            )
        return removed

    def list_collaborators(self, setlist_id: UUID) -> list[Collaborator]:
        """Grants hydrated with their users. Callers check view access first."""
        grants = self.repo.list_by_setlist(setlist_id)
        users = self.users.get_many([g.user_id for g in grants])

        results: list[Collaborator] = []
        for g in grants:
            user = users.get(g.user_id)
            if user:
                results.append(Collaborator(user=user, level=g.level))
        return results
