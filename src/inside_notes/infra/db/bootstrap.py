from __future__ import annotations

import logging
from typing import Optional

from src.inside_notes.config import settings
from src.inside_notes.infra.db import inmemory as inmemory_repos
from src.inside_notes.infra.db.models import Base
from src.inside_notes.infra.db.session import create_sqlalchemy_engine, create_sqlalchemy_session_factory
from src.inside_notes.infra.db.sql_clients import SqlClientRepository

logger = logging.getLogger(__name__)


def init_sql_repositories(database_url: Optional[str] = None) -> bool:  # pragma: no cover - side-effectful wiring
    """Optionally switch the clientes repository to its SQL implementation.

    If USE_SQL_REPOS is not enabled or DATABASE_URL is not configured, this is
    a no-op and the in-memory repository remains active. Returns True when the
    SQL repository was installed.
    """

    if not settings.use_sql_repos:
        return False

    db_url = database_url or settings.database_url
    if not db_url:
        logger.warning("USE_SQL_REPOS is enabled but DATABASE_URL is not set; keeping in-memory clientes")
        return False

    engine = create_sqlalchemy_engine(db_url)

    # Create tables if they do not exist. Real deployments should manage the
    # schema with migrations.
    Base.metadata.create_all(engine)

    # Swap the singleton so routes that read it through the module attribute
    # now hit the database.
    inmemory_repos.client_repository = SqlClientRepository(create_sqlalchemy_session_factory(engine))
    return True
