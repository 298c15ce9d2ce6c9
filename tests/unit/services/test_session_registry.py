"""Tests for the session registry."""

import datetime

import pytest

from bizzleap.services.session_registry import SessionRegistry
from bizzleap.services.user_service import UserService


@pytest.fixture
def registry(db, clock):
    return SessionRegistry(db, clock)


@pytest.fixture
def user(db, settings, clock, registration):
    return UserService(db, settings, clock).register(registration)


@pytest.fixture
def expires_at(clock):
    return clock.now + datetime.timedelta(days=7)


def test_created_session_is_live(registry, user, expires_at, clock):
    entry = registry.create(user.id, "tok-1", expires_at, device_info="Laptop", ip_address="10.0.0.1",
                            user_agent="pytest")
    assert entry.is_active
    assert entry.created_at == clock.now
    assert entry.last_used_at == clock.now
    assert registry.is_live("tok-1")


def test_unknown_token_is_not_live(registry):
    assert not registry.is_live("never-issued")


def test_session_dies_at_expiry(registry, user, expires_at, clock):
    registry.create(user.id, "tok-1", expires_at)
    clock.advance(days=7, seconds=-1)
    assert registry.is_live("tok-1")
    clock.advance(seconds=1)
    assert not registry.is_live("tok-1")


def test_revoke_is_idempotent(registry, user, expires_at):
    registry.create(user.id, "tok-1", expires_at)
    assert registry.revoke("tok-1") is True
    assert registry.revoke("tok-1") is False
    assert registry.revoke("unknown") is False
    assert not registry.is_live("tok-1")


def test_revoke_all_only_touches_that_user(db, registry, user, expires_at, settings, clock):
    from bizzleap.schemas.user import UserCreate

    other = UserService(db, settings, clock).register(
        UserCreate(first_name="Grace", last_name="Hopper", email="grace@example.com", password="cobol-forever"))
    registry.create(user.id, "tok-1", expires_at)
    registry.create(user.id, "tok-2", expires_at)
    registry.create(other.id, "tok-3", expires_at)

    assert registry.revoke_all_for_user(user.id) == 2
    assert not registry.is_live("tok-1")
    assert not registry.is_live("tok-2")
    assert registry.is_live("tok-3")


def test_touch_updates_last_used(registry, user, expires_at, clock):
    registry.create(user.id, "tok-1", expires_at)
    clock.advance(minutes=30)
    registry.touch("tok-1")
    assert registry.get_live("tok-1").last_used_at == clock.now


def test_list_active_newest_first(registry, user, expires_at, clock):
    registry.create(user.id, "tok-1", expires_at)
    clock.advance(minutes=1)
    registry.create(user.id, "tok-2", expires_at)
    registry.create(user.id, "tok-3", expires_at)
    registry.revoke("tok-3")

    assert [entry.token for entry in registry.list_active(user.id)] == ["tok-2", "tok-1"]


def test_sessions_removed_with_user(db, registry, user, expires_at):
    registry.create(user.id, "tok-1", expires_at)
    db.delete(user)
    db.commit()
    assert registry.repository.get_by_token("tok-1") is None
