"""Tests for the representation lifecycle service."""

from datetime import datetime

import pytest
from freezegun import freeze_time

from agencyhub.domain.representations.schemas import (
    ActivityCreate,
    RepresentationUpdate,
    TermsSchema,
)
from agencyhub.domain.representations.service import RepresentationService
from agencyhub.errors import ForbiddenError, InvalidStatusTransitionError, NotFoundError
from tests.utils.factories import DEFAULT_TERMS, create_agent, create_client, create_representation


@pytest.fixture
def service(db):
    return RepresentationService(db)


@pytest.mark.unit
@freeze_time("2024-05-01 10:00:00")
def test_create_starts_pending_with_created_event(service, agent, talent):
    terms = dict(DEFAULT_TERMS)
    rep = service.create(agent.id, talent.id, terms=terms, notes="Signed at festival")

    assert rep.status == "pending"
    assert rep.start_date == datetime(2024, 5, 1, 10, 0, 0)
    assert rep.end_date is None

    events = service.get_events(rep.id)
    assert len(events) == 1
    assert events[0].type == "created"
    assert events[0].created_by == agent.id
    assert events[0].description == "Signed at festival"

    terms["commission"] = 50
    assert rep.terms["commission"] == 10.0


@pytest.mark.unit
def test_duplicate_representations_are_allowed(service, agent, talent):
    first = service.create(agent.id, talent.id, terms=DEFAULT_TERMS)
    second = service.create(agent.id, talent.id, terms=DEFAULT_TERMS)
    assert first.id != second.id


@pytest.mark.unit
def test_status_change_emits_single_status_changed_event(service, agent, active_representation):
    rep = service.update(
        active_representation.id, RepresentationUpdate(status="on_hold"), agent.id
    )

    assert rep.status == "on_hold"
    events = service.get_events(rep.id)
    assert len(events) == 1
    assert events[0].type == "status_changed"
    assert events[0].changes == [{"field": "status", "oldValue": "active", "newValue": "on_hold"}]
    assert events[0].created_by == agent.id


@pytest.mark.unit
def test_repeated_update_is_a_no_op(service, agent, active_representation):
    payload = RepresentationUpdate(status="away", notes="Shooting abroad")
    service.update(active_representation.id, payload, agent.id)
    rep = service.update(active_representation.id, payload, agent.id)

    assert rep.status == "away"
    assert rep.notes == "Shooting abroad"
    assert len(service.get_events(rep.id)) == 1


@pytest.mark.unit
def test_non_status_change_emits_updated_event(service, agent, active_representation):
    service.update(active_representation.id, RepresentationUpdate(notes="Great callback"), agent.id)

    events = service.get_events(active_representation.id)
    assert [e.type for e in events] == ["updated"]
    assert events[0].changes == [{"field": "notes", "oldValue": None, "newValue": "Great callback"}]


@pytest.mark.unit
def test_multiple_fields_batched_into_one_event(service, agent, active_representation):
    service.update(
        active_representation.id,
        RepresentationUpdate(status="on_set", notes="Booked series regular"),
        agent.id,
    )

    events = service.get_events(active_representation.id)
    assert len(events) == 1
    assert events[0].type == "status_changed"
    assert {c["field"] for c in events[0].changes} == {"status", "notes"}


@pytest.mark.unit
def test_null_and_missing_are_equivalent(service, agent, active_representation):
    assert active_representation.notes is None
    service.update(active_representation.id, RepresentationUpdate(notes=None), agent.id)
    service.update(active_representation.id, RepresentationUpdate(), agent.id)

    assert service.get_events(active_representation.id) == []


@pytest.mark.unit
def test_next_key_date_change_is_recorded_as_iso_string(service, agent, active_representation):
    rep = service.update(
        active_representation.id,
        RepresentationUpdate(nextKeyDate=datetime(2024, 6, 1, 9, 0)),
        agent.id,
    )

    assert rep.next_key_date == datetime(2024, 6, 1, 9, 0)
    change = service.get_events(rep.id)[0].changes[0]
    assert change == {"field": "nextKeyDate", "oldValue": None, "newValue": "2024-06-01T09:00:00Z"}


@pytest.mark.unit
def test_terms_compared_structurally(service, agent, active_representation):
    same_terms = TermsSchema(**DEFAULT_TERMS)
    service.update(active_representation.id, RepresentationUpdate(terms=same_terms), agent.id)
    assert service.get_events(active_representation.id) == []

    new_terms = TermsSchema(**{**DEFAULT_TERMS, "commission": 15, "territories": ["US", "CA"]})
    rep = service.update_terms(active_representation.id, new_terms, agent.id)

    assert rep.terms["commission"] == 15
    events = service.get_events(rep.id)
    assert len(events) == 1
    assert events[0].type == "updated"
    change = events[0].changes[0]
    assert change["field"] == "terms"
    assert change["oldValue"]["commission"] == 10.0
    assert change["newValue"]["territories"] == ["US", "CA"]


@pytest.mark.unit
def test_audit_values_are_detached_copies(service, agent, active_representation):
    new_terms = TermsSchema(**{**DEFAULT_TERMS, "commission": 15})
    rep = service.update_terms(active_representation.id, new_terms, agent.id)

    rep.terms["commission"] = 99
    rep.terms["territories"].append("MX")

    change = service.get_events(rep.id)[0].changes[0]
    assert change["newValue"]["commission"] == 15
    assert change["newValue"]["territories"] == ["US"]


@pytest.mark.unit
def test_inactive_is_terminal(service, agent, active_representation):
    service.archive(active_representation.id, agent.id)

    with pytest.raises(InvalidStatusTransitionError):
        service.change_status(active_representation.id, "active", agent.id)


@pytest.mark.unit
def test_update_unknown_representation(service, agent):
    with pytest.raises(NotFoundError):
        service.update(9999, RepresentationUpdate(status="active"), agent.id)


@pytest.mark.unit
@freeze_time("2024-05-01 10:00:00")
def test_archive_sets_inactive_and_end_date(service, agent, active_representation):
    rep = service.archive(active_representation.id, agent.id)

    assert rep.status == "inactive"
    assert rep.end_date == datetime(2024, 5, 1, 10, 0, 0)

    events = service.get_events(rep.id)
    assert len(events) == 1
    assert events[0].type == "archived"
    assert events[0].changes == [
        {"field": "status", "oldValue": "active", "newValue": "inactive"},
        {"field": "endDate", "oldValue": None, "newValue": "2024-05-01T10:00:00Z"},
    ]


@pytest.mark.unit
def test_archive_twice_is_idempotent(service, agent, active_representation):
    first = service.archive(active_representation.id, agent.id)
    end_date = first.end_date
    second = service.end_representation(active_representation.id, agent.id)

    assert second.status == "inactive"
    assert second.end_date == end_date
    assert [e.type for e in service.get_events(second.id)] == ["archived"]


@pytest.mark.unit
def test_archive_unknown_representation(service, agent):
    with pytest.raises(NotFoundError):
        service.archive(9999, agent.id)


@pytest.mark.unit
def test_events_most_recent_first(service, agent, talent):
    with freeze_time("2024-05-01 10:00:00"):
        rep = service.create(agent.id, talent.id, terms=DEFAULT_TERMS)
    with freeze_time("2024-05-02 10:00:00"):
        service.change_status(rep.id, "active", agent.id)
    with freeze_time("2024-05-03 10:00:00"):
        service.update(rep.id, RepresentationUpdate(notes="Lunch booked"), agent.id)

    assert [e.type for e in service.get_events(rep.id)] == ["updated", "status_changed", "created"]


@pytest.mark.unit
def test_log_activity_appends_manual_event(service, agent, active_representation):
    event = service.log_activity(
        active_representation.id,
        ActivityCreate(type="meeting", title="Quarterly check-in", location="Agency office"),
        agent.id,
    )

    assert event.type == "meeting"
    assert event.location == "Agency office"
    assert service.get_events(active_representation.id)[0].id == event.id


@pytest.mark.unit
def test_roster_hides_pending_and_inactive_by_default(db, service, agent):
    active = create_representation(db, agent, create_client(db), status="active")
    on_hold = create_representation(db, agent, create_client(db), status="on_hold")
    create_representation(db, agent, create_client(db), status="pending")
    create_representation(db, agent, create_client(db), status="inactive")

    roster_ids = {r.id for r in service.get_roster(agent.id)}
    assert roster_ids == {active.id, on_hold.id}
    assert len(service.get_roster(agent.id, include_inactive=True)) == 4


@pytest.mark.unit
def test_roster_is_scoped_to_agent(db, service, agent, other_agent, talent):
    create_representation(db, other_agent, talent, status="active")
    assert service.get_roster(agent.id) == []


@pytest.mark.unit
def test_connections_only_include_active_and_are_distinct(db, service, agent, other_agent, talent):
    create_representation(db, agent, talent, status="active")
    create_representation(db, agent, talent, status="active")
    create_representation(db, other_agent, talent, status="on_hold")

    agents = service.get_connected_agents(talent.id)
    assert [a.id for a in agents] == [agent.id]

    clients = service.get_connected_clients(agent.id)
    assert [c.id for c in clients] == [talent.id]
    assert service.get_connected_clients(other_agent.id) == []


@pytest.mark.unit
def test_owned_representation_rejects_other_agents(service, other_agent, active_representation):
    with pytest.raises(ForbiddenError):
        service.get_owned_representation(active_representation.id, other_agent.id)


@pytest.mark.unit
def test_activate_pending_for_client(db, service, agent, other_agent):
    newcomer = create_client(db)
    pending_a = create_representation(db, agent, newcomer, status="pending")
    pending_b = create_representation(db, other_agent, newcomer, status="pending")
    on_hold = create_representation(db, create_agent(db), newcomer, status="on_hold")

    activated = service.activate_pending_for_client(newcomer.id, newcomer.id)

    assert {r.id for r in activated} == {pending_a.id, pending_b.id}
    assert all(r.status == "active" for r in activated)
    assert service.get_representation(on_hold.id).status == "on_hold"

    event = service.get_events(pending_a.id)[0]
    assert event.type == "status_changed"
    assert event.created_by == newcomer.id
