from __future__ import annotations

from typing import Optional

from pydantic import BaseModel


class Client(BaseModel):
    """A customer company as stored in the ``clientes`` table.

    Field names follow the table columns because they are also the wire format
    of the /api/clientes resource.
    """

    id: int
    nome_fantasia: str
    razao_social: Optional[str] = None
    cnpj: Optional[str] = None
