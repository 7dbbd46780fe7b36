from __future__ import annotations

from typing import List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError

from src.inside_notes.domain.errors import ConnectivityError
from src.inside_notes.domain.models.client import Client
from src.inside_notes.infra.db.models import ClientORM
from src.inside_notes.infra.db.repositories import ClientRepository
from src.inside_notes.infra.db.session import SessionFactory


class SqlClientRepository(ClientRepository):
    """SQL-backed clientes repository.

    Every statement is parameterized by SQLAlchemy. Database errors other than
    the health ping propagate to the caller, which maps them to HTTP 500.
    """

    backend_name = "sql"

    def __init__(self, session_factory: SessionFactory) -> None:
        self._session_factory = session_factory

    def list(self, search: Optional[str] = None) -> List[Client]:
        session = self._session_factory()
        try:
            query = select(ClientORM)
            if search:
                query = query.where(ClientORM.nome_fantasia.ilike(f"%{search}%"))
            query = query.order_by(ClientORM.nome_fantasia.asc())
            return [orm.to_domain() for orm in session.scalars(query)]
        finally:
            session.close()

    def get(self, client_id: int) -> Optional[Client]:
        session = self._session_factory()
        try:
            orm = session.get(ClientORM, client_id)
            return orm.to_domain() if orm is not None else None
        finally:
            session.close()

    def create(self, *, nome_fantasia: str, razao_social: Optional[str], cnpj: Optional[str]) -> Client:
        session = self._session_factory()
        try:
            orm = ClientORM(nome_fantasia=nome_fantasia, razao_social=razao_social, cnpj=cnpj)
            session.add(orm)
            session.commit()
            return orm.to_domain()
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()

    def update(
        self,
        client_id: int,
        *,
        nome_fantasia: str,
        razao_social: Optional[str],
        cnpj: Optional[str],
    ) -> Optional[Client]:
        session = self._session_factory()
        try:
            existing = session.get(ClientORM, client_id)
            if existing is None:
                return None
            existing.nome_fantasia = nome_fantasia
            existing.razao_social = razao_social
            existing.cnpj = cnpj
            session.commit()
            return existing.to_domain()
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, client_id: int) -> bool:
        session = self._session_factory()
        try:
            existing = session.get(ClientORM, client_id)
            if existing is None:
                return False
            session.delete(existing)
            session.commit()
            return True
        except SQLAlchemyError:
            session.rollback()
            raise
        finally:
            session.close()

    def ping(self) -> None:
        session = self._session_factory()
        try:
            session.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            raise ConnectivityError(
                "Backend is running, but database connection failed.",
                details={"error": str(exc.__class__.__name__)},
            ) from exc
        finally:
            session.close()
