import json
import logging
from uuid import uuid4

from src.inside_notes.domain.models.user import User, UserRole
from src.inside_notes.services.audit.service import AuditService
from src.inside_notes.services.session.service import InMemorySessionStore, SessionManager

TECH = User(id=7, name="Joana Prado", email="joana.prado@inside.com.br", role=UserRole.STANDARD)


def test_event_names_the_logged_in_operator(caplog):
    session = SessionManager(InMemorySessionStore())
    session.login(TECH)
    visit_id = uuid4()

    with caplog.at_level(logging.INFO, logger="audit"):
        event = AuditService(session).log_event(
            action="finalize_annotation",
            resource_type="annotation_workflow",
            extra={"visit_id": visit_id, "fragments": 2},
        )

    assert event.operator_id == 7
    logged = json.loads(caplog.records[-1].getMessage())
    assert logged["action"] == "finalize_annotation"
    assert logged["operator_id"] == 7
    assert logged["extra"] == {"visit_id": str(visit_id), "fragments": 2}


def test_event_without_session_user(caplog):
    with caplog.at_level(logging.INFO, logger="audit"):
        event = AuditService(SessionManager(InMemorySessionStore())).log_event(action="logout", resource_type="session")

    assert event.operator_id is None
    assert event.extra == {}
    assert json.loads(caplog.records[-1].getMessage())["resource_type"] == "session"
