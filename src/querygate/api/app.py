"""FastAPI application exposing the query executor."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from .. import __version__
from ..config.settings import Settings, get_settings
from ..database.executor import QueryExecutor
from ..database.models import QueryRequest
from .auth import Principal, get_current_principal

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/query", tags=["query"])


def get_query_executor(request: Request) -> QueryExecutor:
    return request.app.state.executor


@router.get("/health", response_class=PlainTextResponse)
def health() -> str:
    return "JT400 Query Service is running"


@router.post("/execute")
def execute_query(
    body: QueryRequest,
    principal: Principal = Depends(get_current_principal),
    executor: QueryExecutor = Depends(get_query_executor),
) -> JSONResponse:
    """Run one statement against the endpoint described in the body.

    Any failed result, including a blank statement, is answered with 500
    and the failed result as the body.
    """
    logger.info(f"Query execution request received from user: {principal.subject}")
    result = executor.execute_query(body, principal=principal.subject)

    if result.success:
        logger.info(f"Query executed successfully for user: {principal.subject}")
        return JSONResponse(status_code=200, content=result.to_dict())

    logger.warning(f"Query execution failed for user: {principal.subject}")
    return JSONResponse(status_code=500, content=result.to_dict())


def create_app(settings: Optional[Settings] = None, executor: Optional[QueryExecutor] = None) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title="QueryGate",
        description="Runs SQL against request-supplied JT400 endpoints.",
        version=__version__,
    )
    app.state.settings = settings
    app.state.executor = executor or QueryExecutor(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    logger.info(
        f"Query service configured: query timeout {settings.query_timeout}s, "
        f"connection timeout {settings.connection_timeout}ms, "
        f"ambient pool size {settings.max_pool_size} (not used for dynamic connections)"
    )
    return app
