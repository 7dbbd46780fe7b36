from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from src.inside_notes.api.deps import get_client_repository
from src.inside_notes.domain.errors import ClientNotFoundError, ValidationError
from src.inside_notes.domain.models.client import Client
from src.inside_notes.infra.db.repositories import ClientRepository
from src.inside_notes.security import get_api_key
from src.inside_notes.services.audit.service import audit_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/clientes",
    tags=["clientes"],
    dependencies=[Depends(get_api_key)],
)


class ClientPayload(BaseModel):
    # Optional here so a missing name is reported as 400, not 422.
    nome_fantasia: Optional[str] = None
    razao_social: Optional[str] = None
    cnpj: Optional[str] = None

    def require_name(self) -> str:
        if not self.nome_fantasia or not self.nome_fantasia.strip():
            raise ValidationError("O campo nome_fantasia é obrigatório.", details={"field": "nome_fantasia"})
        return self.nome_fantasia.strip()


def _internal_error(action: str) -> HTTPException:
    logger.exception("Database error during %s", action)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Internal server error")


@router.get("", response_model=List[Client])
async def list_clients(
    search: Optional[str] = None,
    clients: ClientRepository = Depends(get_client_repository),
) -> List[Client]:
    try:
        return clients.list(search)
    except SQLAlchemyError:
        raise _internal_error("list_clients")


@router.get("/{client_id}", response_model=Client)
async def get_client(client_id: int, clients: ClientRepository = Depends(get_client_repository)) -> Client:
    try:
        client = clients.get(client_id)
    except SQLAlchemyError:
        raise _internal_error("get_client")
    if client is None:
        raise ClientNotFoundError(client_id)
    return client


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(payload: ClientPayload, clients: ClientRepository = Depends(get_client_repository)) -> Client:
    name = payload.require_name()
    try:
        client = clients.create(
            nome_fantasia=name,
            razao_social=payload.razao_social or None,
            cnpj=payload.cnpj or None,
        )
    except SQLAlchemyError:
        raise _internal_error("create_client")

    audit_service.log_event(action="create_client", resource_type="cliente", resource_id=str(client.id))
    return client


@router.put("/{client_id}", response_model=Client)
async def update_client(
    client_id: int,
    payload: ClientPayload,
    clients: ClientRepository = Depends(get_client_repository),
) -> Client:
    name = payload.require_name()
    try:
        client = clients.update(
            client_id,
            nome_fantasia=name,
            razao_social=payload.razao_social or None,
            cnpj=payload.cnpj or None,
        )
    except SQLAlchemyError:
        raise _internal_error("update_client")
    if client is None:
        raise ClientNotFoundError(client_id)

    audit_service.log_event(action="update_client", resource_type="cliente", resource_id=str(client_id))
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(client_id: int, clients: ClientRepository = Depends(get_client_repository)) -> Response:
    try:
        deleted = clients.delete(client_id)
    except SQLAlchemyError:
        raise _internal_error("delete_client")
    if not deleted:
        raise ClientNotFoundError(client_id)

    audit_service.log_event(action="delete_client", resource_type="cliente", resource_id=str(client_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
