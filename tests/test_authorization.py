"""Tests for the authorization gate (admin manages, admin or member scans)."""
from datetime import datetime, timezone

import pytest

from ticketing.models.community import Community, CommunityMember, CommunityRole
from ticketing.models.event import Event
from ticketing.models.user import User
from ticketing.services.authorization import can_check_in, can_manage, get_community_role


@pytest.fixture
def community_event(db):
    """A community with one admin and one member, an outsider, and an event."""
    users = {name: User(display_name=name, email=f"{name}@example.com") for name in ("admin", "member", "outsider")}
    db.add_all(users.values())
    db.flush()

    community = Community(handle="gate-crew", name="Gate Crew", created_by=users["admin"].user_id)
    db.add(community)
    db.flush()
    db.add_all([
        CommunityMember(community_id=community.community_id, user_id=users["admin"].user_id, role=CommunityRole.admin),
        CommunityMember(community_id=community.community_id, user_id=users["member"].user_id, role=CommunityRole.member),
    ])
    event = Event(
        community_id=community.community_id,
        title="Launch Night",
        start_time_utc=datetime(2026, 11, 20, 18, 30, tzinfo=timezone.utc),
        created_by=users["admin"].user_id,
    )
    db.add(event)
    db.commit()
    return users, community, event


def test_get_community_role(db, community_event):
    users, community, _ = community_event
    assert get_community_role(db, users["admin"].user_id, community.community_id) == CommunityRole.admin
    assert get_community_role(db, users["member"].user_id, community.community_id) == CommunityRole.member
    assert get_community_role(db, users["outsider"].user_id, community.community_id) is None


def test_only_admin_manages(db, community_event):
    users, _, event = community_event
    assert can_manage(db, users["admin"].user_id, event) is True
    assert can_manage(db, users["member"].user_id, event) is False
    assert can_manage(db, users["outsider"].user_id, event) is False


def test_admin_and_member_check_in(db, community_event):
    users, _, event = community_event
    assert can_check_in(db, users["admin"].user_id, event) is True
    assert can_check_in(db, users["member"].user_id, event) is True
    assert can_check_in(db, users["outsider"].user_id, event) is False


def test_membership_in_other_community_grants_nothing(db, community_event):
    users, _, event = community_event
    other = Community(handle="elsewhere", name="Elsewhere", created_by=users["outsider"].user_id)
    db.add(other)
    db.flush()
    db.add(CommunityMember(community_id=other.community_id, user_id=users["outsider"].user_id, role=CommunityRole.admin))
    db.commit()

    assert can_manage(db, users["outsider"].user_id, event) is False
    assert can_check_in(db, users["outsider"].user_id, event) is False
