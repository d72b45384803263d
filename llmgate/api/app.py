"""
llmgate API Application.

FastAPI application factory for the generation gateway.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from llmgate import __version__
from llmgate.api.models import (
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    HealthResponse,
)
from llmgate.core.config import GatewayConfig, validate_config
from llmgate.llm.errors import GatewayError
from llmgate.llm.router import ProviderRouter, create_router
from llmgate.utils.logging import get_logger, setup_logging

_logger = get_logger("api")


def create_app(
    router: Optional[ProviderRouter] = None,
    config: Optional[GatewayConfig] = None,
    title: str = "llmgate",
    version: str = __version__,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        router: Pre-built router. When omitted, one is built from ``config``
            at startup and its providers are closed at shutdown.
        config: Gateway configuration. If omitted it is loaded from files and
            the environment at startup, and logging is configured from it.
        title: API title.
        version: API version.

    Returns:
        FastAPI application instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_router = app.state.router is None
        if owns_router:
            gateway_config = config
            if gateway_config is None:
                # Started as a bare factory (uvicorn --factory or --reload worker)
                gateway_config = GatewayConfig.load()
                log = gateway_config.logging
                setup_logging(
                    level=log.level,
                    log_file=log.file,
                    json_format=log.json_format,
                    max_file_size_mb=log.max_file_size_mb,
                    backup_count=log.backup_count,
                )
            for warning in validate_config(gateway_config):
                _logger.warning(warning)
            app.state.router = create_router(gateway_config.providers)

        names = [p.name for p in app.state.router.providers]
        _logger.info("Starting llmgate API server", providers=",".join(names) or "none")
        yield
        _logger.info(
            "Shutting down llmgate API server", cached_prompts=len(app.state.router.cache)
        )

        if owns_router:
            await app.state.router.close()
            app.state.router = None

    app = FastAPI(
        title=title,
        version=version,
        description="Text-generation gateway with provider fallback and prompt caching",
        lifespan=lifespan,
    )
    app.state.router = router

    @app.exception_handler(GatewayError)
    async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
        _logger.error("Generation request failed", code=exc.code, detail=str(exc))
        body = ErrorResponse(error="Request failed", detail=str(exc), code=exc.code)
        return JSONResponse(status_code=500, content=body.model_dump())

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check() -> HealthResponse:
        """Liveness probe. Does not touch providers or the cache."""
        return HealthResponse(status="healthy", version=version)

    @app.post(
        "/generate",
        response_model=GenerateResponse,
        tags=["Generation"],
        responses={500: {"model": ErrorResponse}},
    )
    async def generate(request: GenerateRequest) -> GenerateResponse:
        """
        Generate text for a prompt.

        Without ``provider`` the fallback chain is used. With ``provider`` only
        that provider is called.
        """
        router: ProviderRouter = app.state.router
        if request.provider is not None:
            result = await router.generate_with_provider(request.prompt, request.provider)
        else:
            result = await router.generate(request.prompt)

        return GenerateResponse(**result.to_dict())

    return app
