"""Authorization gate — two coarse tiers over community membership.

- admin: may manage forms, responses and tickets of the community's events.
- member (volunteers included): may scan tickets at check-in.
Admin implies member-level rights.
"""
from typing import Optional

from sqlalchemy.orm import Session

from ticketing.models.community import CommunityMember, CommunityRole
from ticketing.models.event import Event


def get_community_role(db: Session, user_id: str, community_id: str) -> Optional[CommunityRole]:
    """Return the user's role in the community, or None if not a member."""
    membership = db.get(CommunityMember, (community_id, user_id))
    return membership.role if membership else None


def can_manage(db: Session, principal_id: str, event: Event) -> bool:
    return get_community_role(db, principal_id, event.community_id) == CommunityRole.admin


def can_check_in(db: Session, principal_id: str, event: Event) -> bool:
    return get_community_role(db, principal_id, event.community_id) in (
        CommunityRole.admin,
        CommunityRole.member,
    )
