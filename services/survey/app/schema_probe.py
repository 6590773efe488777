"""Detection of optional columns in the live database.

The ``questions.mode`` column only exists from migration 002 on. Rather than
refusing to start against an older database, the service asks once at
startup (and again on every health probe) and passes the answer into the
catalog service as a plain value.
"""

import logging
from dataclasses import dataclass

from fastapi import Request
from sqlalchemy import select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncEngine

from app.models.question import Question

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SchemaCapabilities:
    has_question_mode: bool = True


LEGACY_SCHEMA = SchemaCapabilities(has_question_mode=False)
CURRENT_SCHEMA = SchemaCapabilities(has_question_mode=True)


async def probe_schema(engine: AsyncEngine) -> SchemaCapabilities:
    """Attempt a minimal read of ``questions.mode`` on a dedicated connection.

    A failed statement poisons the surrounding transaction on PostgreSQL,
    so the probe never shares a connection with request sessions.
    """
    async with engine.connect() as conn:
        try:
            await conn.execute(select(Question.mode).limit(1))
        except DBAPIError as exc:
            if exc.connection_invalidated:
                raise
            logger.warning("questions.mode not available, using legacy query shape: %s", exc.orig)
            return LEGACY_SCHEMA
    return CURRENT_SCHEMA


async def check_connection(engine: AsyncEngine) -> bool:
    """Cheap read against the questions table used by the health endpoint."""
    try:
        async with engine.connect() as conn:
            await conn.execute(select(Question.question_id).limit(1))
    except (DBAPIError, OSError) as exc:
        logger.warning("Database connection check failed: %s", exc)
        return False
    return True


def get_schema(request: Request) -> SchemaCapabilities:
    """FastAPI dependency returning the capabilities resolved at startup."""
    return getattr(request.app.state, "schema", CURRENT_SCHEMA)
