"""FastAPI application: all endpoints."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger("mimecat.server")

from mimecat.categorizer import CategoryMatch, get_categorizer
from mimecat.category import MimeCategory
from mimecat.settings import category_from_dict, category_to_dict
from server.models import CategoryDefinition, ClassifyRequest, ClassifyResult


@asynccontextmanager
async def lifespan(app: FastAPI):
    categorizer = get_categorizer()
    categorizer.add_listener(_log_categories_changed)
    logger.info("Loaded %d categories", len(categorizer.categories))
    yield
    categorizer.remove_listener(_log_categories_changed)


def _log_categories_changed() -> None:
    logger.info("Categories replaced (%d categories)", len(get_categorizer().categories))


app = FastAPI(title="mimecat", version="0.1.0", lifespan=lifespan)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.monotonic()
    response = await call_next(request)
    elapsed = time.monotonic() - start
    path = request.url.path
    if elapsed > 1.0:
        logger.warning(
            "%s %s %d in %.1fs", request.method, path, response.status_code, elapsed
        )
    elif request.method in ("POST", "PUT"):
        logger.info(
            "%s %s %d in %.3fs", request.method, path, response.status_code, elapsed
        )
    return response


def _definition(category: MimeCategory) -> CategoryDefinition:
    return CategoryDefinition(**category_to_dict(category))


def _result(name: str, match: Optional[CategoryMatch]) -> ClassifyResult:
    if match is None:
        return ClassifyResult(name=name)
    return ClassifyResult(
        name=name,
        category=match.category.name,
        color=match.category.color,
        pattern=match.pattern,
        suffix=match.suffix,
        case_insensitive=match.case_insensitive,
    )


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


@app.get("/categories", response_model=list[CategoryDefinition])
def list_categories():
    return [_definition(c) for c in get_categorizer().categories]


@app.get("/categories/{name}", response_model=CategoryDefinition)
def get_category(name: str):
    category = get_categorizer().find_category_by_name(name)
    if category is None:
        raise HTTPException(status_code=404, detail=f"Unknown category: {name}")
    return _definition(category)


@app.put("/categories", response_model=list[CategoryDefinition])
def replace_categories(body: list[CategoryDefinition]):
    categorizer = get_categorizer()
    categorizer.replace_categories(category_from_dict(d.model_dump()) for d in body)
    return [_definition(c) for c in categorizer.categories]


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


@app.get("/classify", response_model=ClassifyResult)
def classify(
    name: str = Query(..., description="Filename (not a path)"),
    mode: Optional[int] = Query(None, description="st_mode, enables symlink/executable fallback"),
):
    categorizer = get_categorizer()
    if mode is None:
        match = categorizer.match(name)
    else:
        match = categorizer.match_entry(name, mode)
    return _result(name, match)


@app.post("/classify", response_model=list[ClassifyResult])
def classify_many(body: ClassifyRequest):
    categorizer = get_categorizer()
    return [_result(name, categorizer.match(name)) for name in body.names]
