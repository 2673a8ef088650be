"""FastAPI server for schema scoping."""

import logging
from pathlib import Path
from typing import List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from . import config
from .errors import ClosureError, ConfigError, SchemaLoadError, SchemaScopeError
from .exporter import schema_to_dict
from .filter import FilterOption, filter_schema, separate_tables_included_or_not
from .graph_builder import build_graph_from_schema, summarize_graph
from .metadata_loader import Schema, discover_schemas, load_schema

logger = logging.getLogger(__name__)

app = FastAPI(title="Schema Scope")

# Allow CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class FilterRequest(BaseModel):
    schema_name: str = Field(alias="schema")
    include: List[str] = []
    exclude: List[str] = []
    include_labels: List[str] = []
    distance: int = Field(default_factory=config.default_distance, ge=0)
    both_directions: bool = True

    def to_option(self) -> FilterOption:
        return FilterOption(
            include=tuple(self.include),
            exclude=tuple(self.exclude),
            include_labels=tuple(self.include_labels),
            distance=self.distance,
            both_directions=self.both_directions,
        )


def _schema_path(name: str) -> Path:
    # Names come from discover_schemas; anything with a path separator is rejected
    if "/" in name or "\\" in name or name.startswith("."):
        raise HTTPException(status_code=400, detail=f"Invalid schema name: {name}")
    path = config.SCHEMA_ROOT / f"{name}.json"
    if not path.exists():
        raise HTTPException(status_code=404, detail=f"Schema not found: {name}")
    return path


def _load(name: str) -> Schema:
    # Every request works on its own copy of the schema graph
    try:
        return load_schema(_schema_path(name))
    except SchemaLoadError as e:
        raise HTTPException(status_code=422, detail=str(e))


def _raise_http(e: SchemaScopeError) -> None:
    logger.error(f"Schema filtering failed: {e}")
    if isinstance(e, (ConfigError, SchemaLoadError, ClosureError)):
        raise HTTPException(status_code=422, detail=str(e))
    raise HTTPException(status_code=500, detail=str(e))


@app.get("/")
def root():
    return {"message": "Schema Scope API is running. Go to /docs for API documentation."}


@app.get("/api/schemas")
def list_schemas():
    """List available schema documents."""
    try:
        schemas = discover_schemas(config.SCHEMA_ROOT)
    except FileNotFoundError:
        schemas = []
    return {"schemas": schemas}


@app.post("/api/separate")
def separate(req: FilterRequest):
    """Return which tables the filter keeps, leaving the schema untouched."""
    schema = _load(req.schema_name)
    try:
        includes, excludes = separate_tables_included_or_not(schema, req.to_option())
    except SchemaScopeError as e:
        _raise_http(e)

    return {
        "included": [t.name for t in includes],
        "excluded": [t.name for t in excludes],
    }


@app.post("/api/filter")
def filter_(req: FilterRequest):
    """Filter the schema and return the reduced document."""
    schema = _load(req.schema_name)
    try:
        filter_schema(schema, req.to_option())
    except SchemaScopeError as e:
        _raise_http(e)

    return {
        "schema": schema_to_dict(schema),
        "graph_stats": summarize_graph(build_graph_from_schema(schema)),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
