"""
Unit tests for AccessResolver.

Tests the resolver shell against mock readers.
"""

from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from setlist_share.components.access import AccessResolver, ResolveInput, run_resolve
from setlist_share.domain.entities import CollaborationGrant, Setlist
from setlist_share.domain.errors import AccessDenied
from setlist_share.domain.policy import GrantedAccess, NoAccess, OwnerAccess


class MockSetlistReader:
    def __init__(self):
        self.setlists: dict[UUID, Setlist] = {}

    def get_by_id(self, setlist_id: UUID) -> Setlist | None:
        return self.setlists.get(setlist_id)


class MockGrantReader:
    def __init__(self):
        self.grants: dict[tuple[UUID, UUID], CollaborationGrant] = {}
        self.lookups = 0

    def get(self, setlist_id: UUID, user_id: UUID) -> CollaborationGrant | None:
        self.lookups += 1
        return self.grants.get((setlist_id, user_id))


@pytest.fixture
def setlists():
    return MockSetlistReader()


@pytest.fixture
def grants():
    return MockGrantReader()


@pytest.fixture
def resolver(setlists, grants):
    return AccessResolver(setlists=setlists, grants=grants)


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def setlist(setlists, owner_id):
    s = Setlist(owner_user_id=owner_id, title="Show 1")
    setlists.setlists[s.id] = s
    return s


def test_owner_skips_grant_lookup(resolver, grants, setlist, owner_id):
    decision = resolver.resolve(owner_id, setlist.id, "admin")
    assert decision.allowed
    assert decision.access == OwnerAccess()
    assert decision.setlist == setlist
    assert grants.lookups == 0


def test_grant_decides(resolver, grants, setlist):
    member = uuid4()
    grants.grants[(setlist.id, member)] = CollaborationGrant(
        setlist_id=setlist.id, user_id=member, level="edit"
    )

    assert resolver.resolve(member, setlist.id, "edit").access == GrantedAccess(level="edit")
    assert resolver.resolve(member, setlist.id, "admin").access == NoAccess()


def test_anonymous_skips_grant_lookup(resolver, grants, setlist):
    decision = resolver.resolve(None, setlist.id, "view")
    assert not decision.allowed
    assert grants.lookups == 0


def test_require_returns_setlist(resolver, setlist, owner_id):
    assert resolver.require(owner_id, setlist.id, "edit") == setlist


def test_require_missing_setlist_raises(resolver, owner_id):
    with pytest.raises(AccessDenied):
        resolver.require(owner_id, uuid4(), "view")


def test_require_denied_raises(resolver, setlist):
    with pytest.raises(AccessDenied):
        resolver.require(uuid4(), setlist.id, "view")


def test_run_resolve_binds_unit_of_work(setlists, grants, setlist, owner_id):
    uow = SimpleNamespace(setlists=setlists, grants=grants)
    inp = ResolveInput(user_id=owner_id, setlist_id=setlist.id, required="admin")
    assert run_resolve(inp, uow).allowed
