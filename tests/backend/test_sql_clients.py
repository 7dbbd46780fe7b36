import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from src.inside_notes.domain.errors import ConnectivityError
from src.inside_notes.infra.db.models import Base
from src.inside_notes.infra.db.session import create_sqlalchemy_session_factory
from src.inside_notes.infra.db.sql_clients import SqlClientRepository


@pytest.fixture
def repository():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(engine)
    return SqlClientRepository(create_sqlalchemy_session_factory(engine))


def test_sql_repository_crud(repository):
    created = repository.create(nome_fantasia="Farmácia Boa", razao_social="Boa LTDA", cnpj=None)
    assert created.id is not None
    assert repository.get(created.id) == created

    updated = repository.update(created.id, nome_fantasia="Farmácia Melhor", razao_social=None, cnpj="1")
    assert updated.nome_fantasia == "Farmácia Melhor"
    assert repository.update(999, nome_fantasia="x", razao_social=None, cnpj=None) is None

    assert repository.delete(created.id) is True
    assert repository.delete(created.id) is False
    assert repository.get(created.id) is None


def test_sql_repository_orders_and_filters(repository):
    for name in ("Zebra Net", "acme Redes", "Beta Telecom"):
        repository.create(nome_fantasia=name, razao_social=None, cnpj=None)

    assert [c.nome_fantasia for c in repository.list("NET")] == ["Zebra Net"]
    assert len(repository.list()) == 3
    repository.ping()


def test_ping_failure_is_connectivity_error(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'db.sqlite'}")
    repository = SqlClientRepository(create_sqlalchemy_session_factory(engine))

    with pytest.raises(ConnectivityError):
        repository.ping()
