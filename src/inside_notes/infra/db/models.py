from __future__ import annotations

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class ClientORM(Base):
    __tablename__ = "clientes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nome_fantasia: Mapped[str] = mapped_column(String, nullable=False, index=True)
    razao_social: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    cnpj: Mapped[Optional[str]] = mapped_column(String, nullable=True)

    def to_domain(self) -> "Client":  # type: ignore[name-defined]
        from src.inside_notes.domain.models.client import Client

        return Client(
            id=self.id,
            nome_fantasia=self.nome_fantasia,
            razao_social=self.razao_social,
            cnpj=self.cnpj,
        )
