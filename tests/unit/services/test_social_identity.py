"""Tests for mapping provider profiles to local users."""

import pytest

from bizzleap.core.exceptions import OAuthError
from bizzleap.models.user import SocialProvider
from bizzleap.schemas.auth import SocialProfile
from bizzleap.services.social_identity import SocialIdentityLinker
from bizzleap.services.user_service import UserService


@pytest.fixture
def linker(db, clock):
    return SocialIdentityLinker(db, clock)


def _profile(**overrides) -> SocialProfile:
    data = {
        "id": "g-123",
        "emails": ["Ada@Example.com"],
        "display_name": "Ada Lovelace",
        "photos": ["https://img.example.com/ada.png"],
    }
    data.update(overrides)
    return SocialProfile(**data)


def test_creates_social_only_user(linker):
    user = linker.resolve(SocialProvider.GOOGLE, _profile())
    assert user.id is not None
    assert user.email == "ada@example.com"
    assert user.hashed_password is None
    assert (user.first_name, user.last_name) == ("Ada", "Lovelace")
    assert user.social_provider == SocialProvider.GOOGLE
    assert user.social_id == "g-123"
    assert user.avatar == "https://img.example.com/ada.png"
    assert user.email_verified
    assert user.role is None


def test_resolve_is_idempotent(linker):
    first = linker.resolve(SocialProvider.GOOGLE, _profile())
    second = linker.resolve(SocialProvider.GOOGLE, _profile())
    assert first.id == second.id


def test_existing_link_wins_over_changed_email(linker):
    first = linker.resolve(SocialProvider.GOOGLE, _profile())
    second = linker.resolve(SocialProvider.GOOGLE, _profile(emails=["renamed@example.com"]))
    assert second.id == first.id
    assert second.email == "ada@example.com"


def test_links_existing_password_account_by_email(db, linker, settings, clock, registration):
    local = UserService(db, settings, clock).register(registration)

    user = linker.resolve(SocialProvider.GITHUB, _profile(id="gh-9"))

    assert user.id == local.id
    assert user.social_provider == SocialProvider.GITHUB
    assert user.social_id == "gh-9"
    assert user.avatar == "https://img.example.com/ada.png"
    assert user.hashed_password == local.hashed_password


def test_linking_keeps_avatar_when_profile_has_none(db, linker, settings, clock, registration):
    local = UserService(db, settings, clock).register(registration)
    local.avatar = "https://img.example.com/mine.png"
    db.add(local)
    db.commit()

    user = linker.resolve(SocialProvider.GOOGLE, _profile(photos=[]))

    assert user.avatar == "https://img.example.com/mine.png"


def test_same_id_on_different_providers_are_different_identities(linker):
    google = linker.resolve(SocialProvider.GOOGLE, _profile(id="42", emails=["one@example.com"]))
    github = linker.resolve(SocialProvider.GITHUB, _profile(id="42", emails=["two@example.com"]))
    assert google.id != github.id


def test_profile_without_email_rejected(linker):
    with pytest.raises(OAuthError):
        linker.resolve(SocialProvider.FACEBOOK, _profile(emails=[]))


def test_name_from_given_and_family_name(linker):
    user = linker.resolve(SocialProvider.GOOGLE,
                          _profile(display_name=None, given_name="Augusta", family_name="King"))
    assert (user.first_name, user.last_name) == ("Augusta", "King")


def test_deactivated_account_is_not_linked(db, linker, settings, clock, registration):
    users = UserService(db, settings, clock)
    local = users.register(registration)
    users.deactivate(local.id)

    with pytest.raises(OAuthError):
        linker.resolve(SocialProvider.GOOGLE, _profile())

    db.refresh(local)
    assert local.social_id is None
    assert local.social_provider is None
