from datetime import datetime, timedelta, timezone
from uuid import uuid4

import pytest

from src.inside_notes.domain.errors import NotFoundError, ValidationError
from src.inside_notes.domain.models.visit import VisitStatus
from src.inside_notes.infra.db.inmemory import InMemoryClientRepository, InMemoryVisitStore
from src.inside_notes.services.visits.service import VisitService


def make_service():
    clients = InMemoryClientRepository()
    client = clients.create(nome_fantasia="Padaria Central", razao_social=None, cnpj=None)
    return VisitService(store=InMemoryVisitStore(), client_repository=clients), client


def test_create_visit_requires_an_existing_client():
    service, _ = make_service()

    with pytest.raises(ValidationError) as missing:
        service.create_visit(user_id=2, client_id=None)
    assert missing.value.message == "Por favor, selecione um cliente."

    with pytest.raises(ValidationError):
        service.create_visit(user_id=2, client_id=999)


def test_create_visit_denormalizes_client_name():
    service, client = make_service()

    visit = service.create_visit(user_id=2, client_id=client.id, extra_description="Matriz")

    assert visit.client_name == "Padaria Central"
    assert visit.status == VisitStatus.OPEN
    assert visit.final_report_ref is None
    assert service.get_visit(visit.id) == visit


def test_visits_start_open_or_scheduled_only():
    service, client = make_service()

    with pytest.raises(ValidationError):
        service.create_visit(user_id=2, client_id=client.id, status=VisitStatus.COMPLETED)
    scheduled = service.create_visit(user_id=2, client_id=client.id, status=VisitStatus.SCHEDULED)
    assert scheduled.status == VisitStatus.SCHEDULED


def test_list_visits_newest_first_and_filtered():
    service, client = make_service()
    now = datetime.now(timezone.utc)
    older = service.create_visit(user_id=2, client_id=client.id, start_time=now - timedelta(days=1))
    newer = service.create_visit(user_id=2, client_id=client.id, start_time=now)
    other = service.create_visit(user_id=3, client_id=client.id, start_time=now)

    assert [v.id for v in service.list_visits(user_id=2)] == [newer.id, older.id]
    assert other.id in [v.id for v in service.list_visits()]
    assert service.list_visits(status=VisitStatus.SCHEDULED) == []


def test_completing_a_visit_sets_end_time():
    service, client = make_service()
    visit = service.create_visit(user_id=2, client_id=client.id)

    in_progress = service.update_status(visit.id, VisitStatus.IN_PROGRESS)
    assert in_progress.end_time is None

    completed = service.update_status(visit.id, VisitStatus.COMPLETED)
    assert completed.end_time is not None


def test_unknown_visit_is_not_found():
    service, _ = make_service()

    with pytest.raises(NotFoundError):
        service.get_visit(uuid4())


def test_naive_start_time_is_treated_as_utc_and_sorts_with_aware_ones():
    service, client = make_service()
    today = service.create_visit(user_id=2, client_id=client.id)
    past = service.create_visit(user_id=2, client_id=client.id, start_time=datetime(2025, 1, 1, 10, 0))

    assert past.start_time == datetime(2025, 1, 1, 10, 0, tzinfo=timezone.utc)
    assert [v.id for v in service.list_visits(user_id=2)] == [today.id, past.id]
