from __future__ import annotations

from src.inside_notes.infra.db import inmemory as inmemory_repos
from src.inside_notes.infra.db.repositories import ClientRepository


def get_client_repository() -> ClientRepository:
    # Read through the module so the SQL repository installed at startup wins.
    return inmemory_repos.client_repository
