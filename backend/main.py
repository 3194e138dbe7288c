import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from pydantic import BaseModel, Field

# Import suggestion module
sys.path.insert(0, str(Path(__file__).parent.parent))
from suggestion_module import (  # noqa: E402
    CatalogUnavailable,
    InvalidQuery,
    SuggestionResult,
    get_catalog_status,
    get_suggestions,
    reload_catalog,
)
from suggestion_module.config import (  # noqa: E402
    SUGGEST_CORS_ORIGINS,
    SUGGEST_HOST,
    SUGGEST_PORT,
    SUGGEST_REQUEST_TIMEOUT,
)


class SuggestResponse(BaseModel):
    results: List[SuggestionResult] = Field(default_factory=list, description="Best match first")


class CatalogStatusResponse(BaseModel):
    loaded: bool
    entries: int
    source: str
    loaded_at: Optional[str] = None


app = FastAPI(
    title="Drug Suggestion Service",
    description="Fuzzy autocomplete over the prescription drug catalog",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=SUGGEST_CORS_ORIGINS,
    allow_credentials=False,  # Must be False when allow_origins=["*"]
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get("/")
async def root() -> Dict[str, str]:
    return {
        "service": "Drug Suggestion Service",
        "status": "ok",
        "docs": "/docs",
        "suggest": "GET /suggest?q=<text>",
        "catalog": "GET /catalog, POST /catalog/reload",
    }


@app.get("/health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/suggest", response_model=SuggestResponse)
async def suggest(q: str = "") -> Dict[str, Any]:
    """
    Fuzzy suggestions for the medication field.
    An empty query returns an empty result without touching the catalog.

    The timeout only bounds how long the request waits: a lookup that exceeds it
    gets a 504, but its worker thread is not cancelled and runs to completion.
    """
    query = q.strip()
    if not query:
        return {"results": []}

    try:
        return await asyncio.wait_for(
            run_in_threadpool(get_suggestions, query),
            timeout=SUGGEST_REQUEST_TIMEOUT,
        )
    except CatalogUnavailable as e:
        logger.error("Suggestion lookup failed, catalog unavailable: {}", e)
        raise HTTPException(status_code=503, detail=f"Drug catalog unavailable: {e}")
    except InvalidQuery as e:
        raise HTTPException(status_code=400, detail=str(e))
    except asyncio.TimeoutError:
        logger.error("Suggestion lookup for {!r} timed out after {}s", query, SUGGEST_REQUEST_TIMEOUT)
        raise HTTPException(status_code=504, detail="Suggestion lookup timed out")


@app.get("/catalog", response_model=CatalogStatusResponse)
async def catalog_status() -> Dict[str, Any]:
    return get_catalog_status()


@app.post("/catalog/reload", response_model=CatalogStatusResponse)
async def catalog_reload() -> Dict[str, Any]:
    """
    Re-read the catalog source. On failure the previous snapshot keeps serving.
    """
    try:
        return await run_in_threadpool(reload_catalog)
    except CatalogUnavailable as e:
        raise HTTPException(status_code=503, detail=f"Drug catalog unavailable: {e}")


if __name__ == "__main__":
    uvicorn.run(app, host=SUGGEST_HOST, port=SUGGEST_PORT)
