"""FastAPI application exposing the parse pipeline to external renderers."""

from __future__ import annotations

import logging
from typing import Annotated, Any

import structlog
from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

from postrecord import metrics
from postrecord.pipeline import parse_document
from postrecord.settings import Settings, get_settings

SettingsDep = Annotated[Settings, Depends(get_settings)]


def configure_logging(log_level: str) -> None:
    """Route structlog events through stdlib logging, rendered as JSON on stderr."""
    numeric_level = logging.getLevelName(log_level.upper())
    if isinstance(numeric_level, str):
        numeric_level = logging.INFO
    logging.basicConfig(level=numeric_level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class ParseRequestModel(BaseModel):
    text: str
    strict: bool = Field(default=False)


class ParseResponseModel(BaseModel):
    metadata: dict[str, str]
    blocks: list[dict[str, Any]]
    diagnostics: list[dict[str, Any]]
    missing_keys: list[str]
    steps: list[str]
    header_format: str | None
    latency_ms: float
    version: str


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="Post Record", version=settings.service_version)
    app.dependency_overrides[get_settings] = lambda: settings

    @app.get("/healthz", response_class=Response)
    async def healthz() -> Response:
        return Response(content="ok\n", media_type="text/plain")

    @app.post("/parse", response_model=ParseResponseModel)
    def parse_endpoint(request: ParseRequestModel, settings: SettingsDep) -> ParseResponseModel:
        result = parse_document(request.text, settings=settings)
        if request.strict and result.missing_keys:
            raise HTTPException(
                status_code=422,
                detail={
                    "error": "MissingRequiredMetadataKey",
                    "missing_keys": result.missing_keys,
                },
            )
        return ParseResponseModel(**result.asdict())

    @app.get("/metrics")
    async def metrics_endpoint(settings: SettingsDep) -> Response:
        if not settings.metrics_enabled:
            raise HTTPException(status_code=404, detail="metrics disabled")
        payload, content_type = metrics.render_metrics()
        return Response(content=payload, media_type=content_type)

    return app
