"""Tests for registration, credential checks and profile updates."""

import pytest

from bizzleap.core.exceptions import DuplicateEmail, InvalidCredentials, NotFound, ValidationError
from bizzleap.models.user import SocialProvider, UserRole
from bizzleap.schemas.auth import SocialProfile
from bizzleap.schemas.user import UserProfileUpdate
from bizzleap.services.session_registry import SessionRegistry
from bizzleap.services.social_identity import SocialIdentityLinker
from bizzleap.services.user_service import UserService, normalize_email


@pytest.fixture
def service(db, settings, clock):
    return UserService(db, settings, clock)


class TestNormalizeEmail:

    def test_trims_and_lowercases(self):
        assert normalize_email("  Ada@Example.COM ") == "ada@example.com"


class TestRegister:

    def test_creates_user_without_role(self, service, registration, clock):
        user = service.register(registration)
        assert user.id is not None
        assert user.email == "ada@example.com"
        assert user.role is None
        assert user.is_active
        assert user.created_at == clock.now

    def test_stores_hash_not_password(self, service, registration):
        user = service.register(registration)
        assert user.hashed_password != registration.password
        assert user.hashed_password.startswith("$2b$04$")

    def test_duplicate_email_is_case_insensitive(self, service, registration):
        service.register(registration)
        again = registration.model_copy(update={"email": "ADA@example.com"})
        with pytest.raises(DuplicateEmail):
            service.register(again)

    def test_short_password_rejected(self, service, registration):
        weak = registration.model_copy(update={"password": "short"})
        with pytest.raises(ValidationError):
            service.register(weak)

    def test_password_policy_follows_settings(self, db, clock, settings, registration):
        strict = settings.model_copy(update={"PASSWORD_MIN_LENGTH": 32})
        with pytest.raises(ValidationError) as exc_info:
            UserService(db, strict, clock).register(registration)
        assert "32" in exc_info.value.message


class TestVerifyCredentials:

    def test_success_records_last_login(self, service, registration, clock):
        service.register(registration)
        clock.advance(minutes=5)
        user = service.verify_credentials("ADA@example.com", "analytical-engine")
        assert user.last_login == clock.now

    def test_unknown_email_and_wrong_password_are_indistinguishable(self, service, registration):
        service.register(registration)
        with pytest.raises(InvalidCredentials) as unknown:
            service.verify_credentials("nobody@example.com", "analytical-engine")
        with pytest.raises(InvalidCredentials) as wrong:
            service.verify_credentials("ada@example.com", "difference-engine")
        assert (unknown.value.error, unknown.value.message) == (wrong.value.error, wrong.value.message)

    def test_deactivated_user_cannot_login(self, service, registration):
        user = service.register(registration)
        service.deactivate(user.id)
        with pytest.raises(InvalidCredentials):
            service.verify_credentials("ada@example.com", "analytical-engine")


class TestProfile:

    def test_get_profile_missing(self, service):
        with pytest.raises(NotFound):
            service.get_profile(999)

    def test_update_applies_only_present_fields(self, service, registration, clock):
        user = service.register(registration)
        clock.advance(hours=1)
        updated = service.update_profile(user.id, UserProfileUpdate(role=UserRole.FARMER, farm_name="Green Acres"))
        assert updated.role == UserRole.FARMER
        assert updated.farm_name == "Green Acres"
        assert updated.first_name == "Ada"
        assert updated.updated_at == clock.now

    def test_empty_update_rejected(self, service, registration):
        user = service.register(registration)
        with pytest.raises(ValidationError):
            service.update_profile(user.id, UserProfileUpdate())

    def test_unknown_fields_are_ignored(self, service, registration):
        user = service.register(registration)
        data = UserProfileUpdate.model_validate({"email": "evil@example.com", "city": "Lagos"})
        updated = service.update_profile(user.id, data)
        assert updated.email == "ada@example.com"
        assert updated.city == "Lagos"


class TestChangePassword:

    def test_revokes_every_session(self, db, service, registration, clock):
        user = service.register(registration)
        registry = SessionRegistry(db, clock)
        expires = clock.now.replace(year=2027)
        registry.create(user.id, "token-a", expires)
        registry.create(user.id, "token-b", expires)

        revoked = service.change_password(user.id, "analytical-engine", "new-secret-password")

        assert revoked == 2
        assert registry.list_active(user.id) == []
        service.verify_credentials("ada@example.com", "new-secret-password")

    def test_wrong_current_password(self, service, registration):
        user = service.register(registration)
        with pytest.raises(InvalidCredentials):
            service.change_password(user.id, "not-my-password", "new-secret-password")

    def test_new_password_checked_against_policy(self, service, registration):
        user = service.register(registration)
        with pytest.raises(ValidationError):
            service.change_password(user.id, "analytical-engine", "short")

    def test_social_only_account_has_no_password(self, db, service, clock):
        user = SocialIdentityLinker(db, clock).resolve(
            SocialProvider.GOOGLE, SocialProfile(id="g-5", emails=["ada@example.com"], display_name="Ada Lovelace"))
        with pytest.raises(ValidationError) as exc_info:
            service.change_password(user.id, "anything-at-all", "new-secret-password")
        assert "no password" in exc_info.value.message
        assert service.get_profile(user.id).hashed_password is None


def test_duplicate_caught_by_unique_constraint(service, registration, monkeypatch):
    service.register(registration)
    # Simulate losing the race: the pre-check sees no user, the insert hits the constraint
    monkeypatch.setattr(service.repository, "exists_by_email", lambda email: False)
    with pytest.raises(DuplicateEmail):
        service.register(registration.model_copy(update={"email": "Ada@Example.com"}))
    assert service.verify_credentials("ada@example.com", "analytical-engine").id is not None
