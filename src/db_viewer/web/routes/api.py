"""Schema and function catalog API routes."""
from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from typing import Any

from db_viewer.parser import derive_relationships
from db_viewer.web.context import ViewerContext

router = APIRouter()


def _context(request: Request) -> ViewerContext:
    return request.app.state.context


def _not_configured(what: str) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": f"No {what} file configured"})


@router.get("/schema")
async def get_schema(request: Request) -> Any:
    """Parsed tables with columns, keys and indexes."""
    schema, _ = _context(request).snapshot()
    if schema is None:
        return _not_configured("schema")
    return schema.to_dict()


@router.get("/functions")
async def get_functions(request: Request) -> Any:
    """All top-level functions, exported or not."""
    _, functions = _context(request).snapshot()
    if functions is None:
        return _not_configured("functions")
    return functions.to_dict()


@router.get("/relationships")
async def get_relationships(request: Request) -> Any:
    """Foreign keys flattened into table-to-table edges."""
    schema, _ = _context(request).snapshot()
    if schema is None:
        return _not_configured("schema")
    return {"relationships": [r.to_dict() for r in derive_relationships(schema)]}


@router.get("/info")
async def get_info(request: Request) -> dict[str, Any]:
    """File paths and headline counts. Only exported functions are counted."""
    context = _context(request)
    schema, functions = context.snapshot()
    return {
        "schemaPath": context.schema_path,
        "functionsPath": context.functions_path,
        "tableCount": len(schema.tables) if schema else 0,
        "functionCount": len(functions.exported) if functions else 0,
    }
