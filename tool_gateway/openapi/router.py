"""FastAPI router serving the synthesized API description."""

from typing import Annotated, Any

import yaml
from fastapi import APIRouter, Depends, Response
from fastapi.openapi.docs import get_swagger_ui_html
from fastapi.responses import HTMLResponse

from tool_gateway.config import Settings, get_settings
from tool_gateway.dependencies import get_registry
from tool_gateway.registry import ToolRegistry

from .descriptor import synthesize


router = APIRouter(tags=["docs"])


async def get_descriptor(
    registry: Annotated[ToolRegistry, Depends(get_registry)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> dict[str, Any]:
    return synthesize(registry, title=settings.APP_NAME, version=settings.APP_VERSION)


@router.get("/openapi.json")
async def openapi_json(descriptor: Annotated[dict[str, Any], Depends(get_descriptor)]) -> dict[str, Any]:
    return descriptor


@router.get("/openapi.yaml")
async def openapi_yaml(descriptor: Annotated[dict[str, Any], Depends(get_descriptor)]) -> Response:
    return Response(
        content=yaml.safe_dump(descriptor, sort_keys=False, allow_unicode=True),
        media_type="text/yaml",
    )


@router.get("/docs", include_in_schema=False)
async def swagger_ui(settings: Annotated[Settings, Depends(get_settings)]) -> HTMLResponse:
    return get_swagger_ui_html(openapi_url="/openapi.json", title=f"{settings.APP_NAME} - Docs")
