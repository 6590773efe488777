import logging
import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy.exc import DBAPIError

from app.config import get_settings
from app.database import dispose_db, get_engine, init_db
from app.questions.router import router as questions_router
from app.rate_limit import limiter, rate_limit_exceeded_handler
from app.responses.router import router as responses_router
from app.responses.router import submissions_router
from app.schema_probe import CURRENT_SCHEMA, check_connection, probe_schema
from shared.middleware.error_handler import install_error_handlers
from shared.middleware.request_id import request_id_middleware
from shared.middleware.security_headers import security_headers_middleware

logger = logging.getLogger(__name__)


async def _refresh_schema(app: FastAPI) -> bool:
    """Re-probe schema capabilities. False when the database cannot be reached."""
    engine = get_engine()
    if not await check_connection(engine):
        return False
    try:
        app.state.schema = await probe_schema(engine)
    except (DBAPIError, OSError) as exc:
        logger.warning("Database connection lost during schema probe: %s", exc)
        return False
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.database_url)
    app.state.started_at = time.monotonic()

    if await _refresh_schema(app):
        logger.info("Schema capabilities: %s", app.state.schema)
    else:
        logger.warning("Database unreachable at startup, assuming current schema until /health succeeds")

    yield

    # Shutdown
    await dispose_db()


SWAGGER_DESCRIPTION = """\
## Survey Monitor

Collects smiley-rated survey answers from visitors at each location and
serves per-question statistics and location comparisons to the admin
dashboard.

### Domain Tags

| Tag | Description |
|-----|-------------|
| **Questions** | Question catalog CRUD, filtered and paginated listing |
| **Responses** | Survey submission, flat response list, stats and comparisons |
| **Submissions** | Submissions with their nested responses |

### Authentication

Reading questions and submitting a survey are public. Everything else
requires a JWT Bearer token from the identity provider whose `email`
claim is on the server's `ADMIN_EMAILS` list.

### Rating scale

```
rood (1) < beige (2) < geel (3) < lichtgroen (4) < groen (5)
```
"""


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(levelname)s:%(name)s: %(message)s",
    )

    app = FastAPI(
        title="Survey Monitor",
        version="0.1.0",
        description=SWAGGER_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.schema = CURRENT_SCHEMA
    app.state.started_at = time.monotonic()

    # Innermost first: errors are enveloped before rate limiting, headers and ids wrap them.
    install_error_handlers(app, expose_details=settings.expose_error_details)

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
        max_age=600,
    )

    app.include_router(questions_router, prefix="/api")
    app.include_router(responses_router, prefix="/api")
    app.include_router(submissions_router, prefix="/api")

    @app.get("/health", tags=["Health"])
    @app.get("/api/health", include_in_schema=False)
    @limiter.exempt
    async def health(request: Request) -> dict:
        connected = await _refresh_schema(request.app)
        return {
            "status": "OK",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if connected else "disconnected",
            "environment": settings.env_name,
            "uptime": round(time.monotonic() - request.app.state.started_at, 3),
            "schema": {"has_question_mode": request.app.state.schema.has_question_mode},
        }

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app on PORT."""
    settings = get_settings()
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
