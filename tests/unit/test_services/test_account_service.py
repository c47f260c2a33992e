"""Tests for registration, login and profile updates."""

import pytest

from agencyhub.cache import IdentityCache
from agencyhub.domain.accounts.schemas import ProfileName, ProfileUpdate, RegisterRequest
from agencyhub.domain.accounts.service import AccountService
from agencyhub.domain.representations.service import RepresentationService
from agencyhub.errors import (
    ConflictError,
    ForbiddenError,
    InvalidInputError,
    UnauthorizedError,
)
from agencyhub.security_utils import verify_password
from tests.utils.factories import DEFAULT_TERMS, create_client


@pytest.fixture
def service(db):
    return AccountService(db)


def _register(service, email="new@x.com", code="code-123", name="New Person", password="s3cret-pass"):
    return service.register(
        RegisterRequest(email=email, password=password, registrationCode=code, name=name)
    )


@pytest.mark.unit
def test_register_whitelisted_agent(service):
    service.add_whitelisted_email("new@x.com", "agent", "code-123")

    user = _register(service)

    assert user.role == "agent"
    assert (user.first_name, user.last_name) == ("New", "Person")
    assert verify_password("s3cret-pass", user.password_hash)


@pytest.mark.unit
def test_register_requires_whitelist(service):
    with pytest.raises(ForbiddenError):
        _register(service)


@pytest.mark.unit
def test_register_requires_matching_code(service):
    service.add_whitelisted_email("new@x.com", "client", "code-123")
    with pytest.raises(InvalidInputError):
        _register(service, code="wrong")


@pytest.mark.unit
def test_register_twice_conflicts(service):
    service.add_whitelisted_email("new@x.com", "client", "code-123")
    _register(service)
    with pytest.raises(ConflictError):
        _register(service)


@pytest.mark.unit
def test_whitelist_upsert_replaces_code(service):
    service.add_whitelisted_email("new@x.com", "client", "old-code")
    service.add_whitelisted_email("new@x.com", "client", "code-123")

    user = _register(service)
    assert user.username == "new@x.com"

    with pytest.raises(InvalidInputError):
        service.add_whitelisted_email("x@x.com", "admin", "code")


@pytest.mark.unit
def test_registering_invited_client_activates_pending_representations(db, service, agent):
    reps = RepresentationService(db)
    invited = service.provision_client("invited@x.com", "Old Name")
    pending = reps.create(agent.id, invited.id, terms=DEFAULT_TERMS)
    service.add_whitelisted_email("invited@x.com", "client", "code-123")

    user = _register(service, email="invited@x.com", name="Taylor Quinn")

    assert user.id == invited.id
    assert (user.first_name, user.last_name) == ("Taylor", "Quinn")
    rep = reps.get_representation(pending.id)
    assert rep.status == "active"
    latest = reps.get_events(rep.id)[0]
    assert latest.type == "status_changed"
    assert latest.created_by == user.id


@pytest.mark.unit
def test_authenticate(service):
    service.add_whitelisted_email("new@x.com", "client", "code-123")
    registered = _register(service)

    assert service.authenticate("new@x.com", "s3cret-pass").id == registered.id
    with pytest.raises(UnauthorizedError):
        service.authenticate("new@x.com", "wrong-pass")
    with pytest.raises(UnauthorizedError):
        service.authenticate("NEW@x.com", "s3cret-pass")
    with pytest.raises(UnauthorizedError):
        service.authenticate("nobody@x.com", "s3cret-pass")


@pytest.mark.unit
def test_password_less_identity_cannot_log_in(db, service):
    create_client(db, username="pending@x.com")
    with pytest.raises(UnauthorizedError):
        service.authenticate("pending@x.com", "")


@pytest.mark.unit
def test_update_profile_merges_and_invalidates_cache(db):
    cache = IdentityCache()
    service = AccountService(db, identity_cache=cache)
    talent = create_client(db, profile={"height": "180cm", "eyes": "green"})
    cache.set(talent.id, "stale")

    user = service.update_profile(
        talent.id,
        ProfileUpdate(name=ProfileName(first="Eric", last="Murphy"), profile={"eyes": "blue"}),
    )

    assert (user.first_name, user.last_name) == ("Eric", "Murphy")
    assert user.profile == {"height": "180cm", "eyes": "blue"}
    assert cache.get(talent.id) is None


@pytest.mark.unit
def test_update_profile_requires_a_field(db, service, talent):
    with pytest.raises(InvalidInputError):
        service.update_profile(talent.id, ProfileUpdate())


@pytest.mark.unit
def test_update_profile_trims_both_name_parts(db, service, talent):
    user = service.update_profile(
        talent.id, ProfileUpdate(name=ProfileName(first="  Eric ", last=" Murphy  "))
    )

    assert (user.first_name, user.last_name) == ("Eric", "Murphy")
