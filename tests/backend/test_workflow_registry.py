import pytest

from src.inside_notes.domain.errors import NotFoundError
from src.inside_notes.domain.models.annotation import AnnotationKind
from src.inside_notes.infra.db.inmemory import InMemoryAnnotationStore, InMemoryClientRepository, InMemoryVisitStore
from src.inside_notes.infra.storage.audio import LocalAudioStorageBackend
from src.inside_notes.services.annotations.audio import StoredAudioInput
from src.inside_notes.services.annotations.registry import WorkflowRegistry
from src.inside_notes.services.annotations.service import AnnotationService
from src.inside_notes.services.visits.service import VisitService


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def make_registry(tmp_path, clock):
    clients = InMemoryClientRepository()
    client = clients.create(nome_fantasia="Clínica Sorriso", razao_social=None, cnpj=None)
    visits = VisitService(store=InMemoryVisitStore(), client_repository=clients)
    visit = visits.create_visit(user_id=2, client_id=client.id)
    registry = WorkflowRegistry(
        visits=visits,
        annotations=AnnotationService(store=InMemoryAnnotationStore()),
        templates=lambda: [],
        audio_input=StoredAudioInput(LocalAudioStorageBackend(tmp_path)),
        notify=lambda notification: None,
        idle_ttl_seconds=60,
        clock=clock,
    )
    return registry, visit


async def test_idle_workflow_is_closed_and_its_recording_buffer_removed(tmp_path):
    clock = FakeClock()
    registry, visit = make_registry(tmp_path, clock)
    abandoned = registry.open(visit_id=visit.id, kind=AnnotationKind.ACTION)
    await abandoned.start_recording()
    abandoned.append_audio(b"chunk")
    assert len(list(tmp_path.glob("*.rec"))) == 1

    clock.now = 30
    active = registry.open(visit_id=visit.id, kind=AnnotationKind.DIAGNOSIS)
    clock.now = 70

    assert registry.get(active.id) is active
    with pytest.raises(NotFoundError):
        registry.get(abandoned.id)
    assert list(tmp_path.glob("*.rec")) == []
    assert abandoned.fragments == []


async def test_touching_a_workflow_keeps_it_open(tmp_path):
    clock = FakeClock()
    registry, visit = make_registry(tmp_path, clock)
    workflow = registry.open(visit_id=visit.id, kind=AnnotationKind.ACTION)

    for step in (50, 100, 150):
        clock.now = step
        registry.get(workflow.id).add_fragment(f"nota {step}")

    assert registry.get(workflow.id).fragments == ["nota 50", "nota 100", "nota 150"]

    registry.close(workflow.id)
    with pytest.raises(NotFoundError):
        registry.get(workflow.id)
