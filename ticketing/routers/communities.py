"""Community management API routes.

Membership rows are what the authorization gate reads; only community
admins may change them (a member may remove themself).
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ticketing.database import get_db
from ticketing.deps import get_current_principal
from ticketing.exceptions import Forbidden
from ticketing.models.community import Community, CommunityMember, CommunityRole
from ticketing.models.user import User
from ticketing.schemas.community import CommunityCreate, CommunityMemberAdd, CommunityOut, CommunityMemberOut
from ticketing.services.authorization import get_community_role

logger = logging.getLogger(__name__)
router = APIRouter()


def _get_community(db: Session, community_id: str) -> Community:
    community = db.get(Community, community_id)
    if not community:
        raise HTTPException(status_code=404, detail="Community not found")
    return community


@router.post("/", response_model=CommunityOut, status_code=status.HTTP_201_CREATED)
def create_community(
    payload: CommunityCreate,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Create a new community. Creator is automatically added as admin."""
    if db.query(Community).filter(Community.handle == payload.handle).first():
        raise HTTPException(status_code=409, detail="Community handle is already taken")

    community = Community(handle=payload.handle, name=payload.name, created_by=principal.user_id)
    db.add(community)
    db.flush()

    # Creator is auto-added as admin
    db.add(CommunityMember(
        community_id=community.community_id,
        user_id=principal.user_id,
        role=CommunityRole.admin,
    ))
    db.commit()
    db.refresh(community)
    logger.info("Created community '%s' (%s) by user %s", community.handle, community.community_id, principal.user_id)
    return community


@router.get("/{community_id}", response_model=CommunityOut)
def get_community(community_id: str, db: Session = Depends(get_db)):
    """Fetch a single community by ID with members."""
    return _get_community(db, community_id)


@router.post("/{community_id}/members", response_model=CommunityMemberOut, status_code=status.HTTP_201_CREATED)
def add_member(
    community_id: str,
    payload: CommunityMemberAdd,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Add a member (or admin) to a community. Admins only."""
    community = _get_community(db, community_id)
    if get_community_role(db, principal.user_id, community.community_id) != CommunityRole.admin:
        raise Forbidden("Only admins can add members")

    if not db.get(User, payload.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    try:
        role = CommunityRole(payload.role)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid role: {payload.role}")

    if db.get(CommunityMember, (community_id, payload.user_id)):
        raise HTTPException(status_code=409, detail="User is already a member of this community")

    member = CommunityMember(community_id=community_id, user_id=payload.user_id, role=role)
    db.add(member)
    db.commit()
    db.refresh(member)
    logger.info("Added user %s to community %s as %s", payload.user_id, community_id, role.value)
    return member


@router.delete("/{community_id}/members/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_member(
    community_id: str,
    user_id: str,
    principal: User = Depends(get_current_principal),
    db: Session = Depends(get_db),
):
    """Remove a member. Admins may remove anyone; members only themselves."""
    is_admin = get_community_role(db, principal.user_id, community_id) == CommunityRole.admin
    if not is_admin and principal.user_id != user_id:
        raise Forbidden("Not authorized to remove members")

    member = db.get(CommunityMember, (community_id, user_id))
    if not member:
        raise HTTPException(status_code=404, detail="Membership not found")
    db.delete(member)
    db.commit()
    logger.info("Removed user %s from community %s", user_id, community_id)
