"""
Search Tuner - FastAPI service for tuning multi-field relevance scoring

Serves a corpus of locations and lets a client:
- search it with BM25 + field weights + match multipliers
- see why each document matched (per-field breakdown)
- adjust weights, multipliers and BM25 parameters live
- export the configuration (JSON or YAML) for reuse

Configuration is held in memory only; every service start begins from the
defaults.
"""

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

# Load environment variables from .env.local (local dev) or .env (production)
from dotenv import load_dotenv

env_local = Path(__file__).parent.parent / ".env.local"
env_file = Path(__file__).parent.parent / ".env"

if env_local.exists():
    load_dotenv(env_local, override=True)
elif env_file.exists():
    load_dotenv(env_file, override=True)

# Configure logging: console (brief) + file (detailed)
from search_tuner.logging_config import setup_logging

log_level = os.getenv("LOG_LEVEL", "INFO").upper()
console_level = getattr(logging, log_level, logging.INFO)
setup_logging(
    log_file=os.getenv("LOG_FILE", "logs/search-tuner.log"),
    console_level=console_level,
    file_level=logging.DEBUG  # Always DEBUG in file for troubleshooting
)

logger = logging.getLogger(__name__)


from fastapi import FastAPI, HTTPException, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel, ConfigDict, Field

from . import __version__
from .documents import Document, documents_from_records, load_documents
from .scoring import DEFAULT_RESULT_LIMIT, FieldContribution, ScoredResult, SearchEngine
from .scoring.corpus_stats import StatisticsNotInitializedError

# Configuration from environment variables
CORPUS_PATH = os.getenv("CORPUS_PATH")
SEARCH_RESULT_LIMIT = int(os.getenv("SEARCH_RESULT_LIMIT", str(DEFAULT_RESULT_LIMIT)))
PORT = int(os.getenv("PORT", "8080"))

APP_VERSION = __version__
APP_START_TIME = datetime.utcnow().isoformat() + "Z"

# Global instance; owns the corpus together with its statistics
search_engine = SearchEngine()


def _load_corpus(documents: List[Document]) -> None:
    search_engine.initialize(documents)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the corpus and start from default scoring configuration"""
    search_engine.reset()

    if CORPUS_PATH:
        logger.info(f"Loading corpus from {CORPUS_PATH}...")
        _load_corpus(load_documents(CORPUS_PATH))
    else:
        logger.warning("CORPUS_PATH not set - starting with an empty corpus (use PUT /v1/documents)")
        _load_corpus([])

    yield

    logger.info("Shutting down...")


app = FastAPI(
    title="Search Tuner API",
    description="Multi-field BM25 relevance scoring with live-tunable weights",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS middleware for the tuning UI
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure properly in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class HealthResponse(BaseModel):
    status: str
    version: str
    started_at: str
    uptime_seconds: float
    documents: int


class SearchRequest(BaseModel):
    query: str = Field(..., description="Free-text query (empty returns no results)")
    limit: int = Field(default=SEARCH_RESULT_LIMIT, ge=0, description="Maximum number of results")

    model_config = ConfigDict(
        json_schema_extra={"example": {"query": "mocha", "limit": 10}}
    )


class FieldContributionItem(BaseModel):
    kind: str
    field_weight: float
    match_type: str
    match_multiplier: float
    bm25_score: float
    field_score: float
    matched_text: Optional[str] = None
    match_count: Optional[int] = None
    review_boost: Optional[float] = None
    matched_texts: Optional[List[str]] = None


class SearchResultItem(BaseModel):
    document: Dict[str, Any]
    total_score: float
    normalized_score: float
    breakdown: Dict[str, FieldContributionItem]


class SearchResponse(BaseModel):
    query: str
    results: List[SearchResultItem]
    total_matches: int
    search_time_ms: float


class ConfigResponse(BaseModel):
    field_weights: Dict[str, float]
    match_multipliers: Dict[str, float]
    bm25_params: Dict[str, float]


class ConfigValueRequest(BaseModel):
    value: float = Field(..., ge=0, allow_inf_nan=False, description="New value (non-negative)")


class DocumentsRequest(BaseModel):
    documents: List[Dict[str, Any]] = Field(..., description="Full corpus; replaces the current one")


class CorpusStatsResponse(BaseModel):
    documents: int
    avg_doc_length: float
    unique_terms: int


def _contribution_item(contribution: FieldContribution) -> FieldContributionItem:
    """Breakdown entry at display precision"""
    data = contribution.to_dict()
    data["bm25_score"] = round(data["bm25_score"], 3)
    data["field_score"] = round(data["field_score"], 2)
    if "review_boost" in data:
        data["review_boost"] = round(data["review_boost"], 2)
    return FieldContributionItem(**data)


def _result_item(result: ScoredResult) -> SearchResultItem:
    return SearchResultItem(
        document=result.document.to_dict(),
        total_score=result.total_score,
        normalized_score=result.normalized_score,
        breakdown={
            field_name.value: _contribution_item(contribution)
            for field_name, contribution in result.breakdown.items()
        },
    )


def _corpus_stats() -> CorpusStatsResponse:
    stats = search_engine.statistics
    return CorpusStatsResponse(
        documents=stats.doc_count,
        avg_doc_length=round(stats.avg_doc_length, 2),
        unique_terms=stats.vocabulary_size,
    )


# Routes
@app.get("/", response_model=dict)
def root():
    """Root endpoint"""
    return {
        "service": "Search Tuner API",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/health", response_model=HealthResponse)
def health():
    """Health check endpoint"""
    start_time = datetime.fromisoformat(APP_START_TIME.rstrip('Z'))
    uptime = (datetime.utcnow() - start_time).total_seconds()

    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        started_at=APP_START_TIME,
        uptime_seconds=round(uptime, 2),
        documents=len(search_engine.documents),
    )


@app.put("/v1/documents", response_model=CorpusStatsResponse)
def replace_documents(request: DocumentsRequest):
    """
    Replace the corpus and rebuild corpus statistics.

    Example:
        PUT /v1/documents
        {
            "documents": [
                {"id": 1, "name": "Mocha Cafe", "category": "cafe", "tags": ["coffee", "mocha"]}
            ]
        }
    """
    try:
        documents = documents_from_records(request.documents)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    _load_corpus(documents)
    logger.info(f"Corpus replaced: {len(documents)} documents")
    return _corpus_stats()


@app.get("/v1/documents/stats", response_model=CorpusStatsResponse)
def corpus_stats():
    """Document count, average document length and vocabulary size"""
    return _corpus_stats()


@app.post("/v1/search", response_model=SearchResponse, response_model_exclude_none=True)
def search(request: SearchRequest):
    """
    Search the corpus with the current scoring configuration.

    Each result carries its total score, a 0-100 score relative to the top
    hit, and a breakdown of the fields that matched:
    - name / category / tags / description: matched_text
    - reviews: match_count, review_boost, matched_texts

    Example:
        POST /v1/search
        {
            "query": "mocha",
            "limit": 10
        }
    """
    try:
        results = search_engine.search(request.query, limit=request.limit)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return SearchResponse(
        query=results.query,
        results=[_result_item(r) for r in results.results],
        total_matches=results.total_matches,
        search_time_ms=round(results.search_time_ms, 2),
    )


@app.get("/v1/config", response_model=ConfigResponse)
def get_config():
    """Current field weights, match multipliers and BM25 parameters"""
    return search_engine.get_config()


@app.put("/v1/config/field-weights/{field_name}", response_model=ConfigResponse)
def set_field_weight(field_name: str, request: ConfigValueRequest):
    """Set a field weight (name, category, tags, description, reviews). Unknown fields are ignored."""
    search_engine.set_field_weight(field_name, request.value)
    return search_engine.get_config()


@app.put("/v1/config/match-multipliers/{match_type}", response_model=ConfigResponse)
def set_match_multiplier(match_type: str, request: ConfigValueRequest):
    """Set a match multiplier (exact, prefix, contains, fuzzy). Unknown types are ignored."""
    search_engine.set_match_multiplier(match_type, request.value)
    return search_engine.get_config()


@app.put("/v1/config/bm25/{param}", response_model=ConfigResponse)
def set_bm25_param(param: str, request: ConfigValueRequest):
    """Set a BM25 parameter (k1, b). Unknown parameters are ignored."""
    search_engine.set_bm25_param(param, request.value)
    return search_engine.get_config()


@app.post("/v1/config/reset", response_model=ConfigResponse)
def reset_config():
    """Restore default scoring configuration"""
    search_engine.reset()
    return search_engine.get_config()


@app.post("/v1/config/import", response_model=ConfigResponse)
def import_config(blob: Dict[str, Any]):
    """
    Apply an exported configuration.

    Accepts snake_case (field_weights) or camelCase (fieldWeights) group
    names. Unknown groups and keys are ignored. Values must be finite and
    non-negative, as for the single-value setters.
    """
    try:
        search_engine.load_config(blob, minimum=0.0)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return search_engine.get_config()


@app.get("/v1/config/export", response_class=PlainTextResponse)
def export_config(fmt: str = Query("json", alias="format", description="json or yaml")):
    """Configuration as a JSON or YAML document"""
    try:
        body = search_engine.export_config(fmt)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    media_type = "application/json" if fmt.lower() == "json" else "application/x-yaml"
    return PlainTextResponse(content=body, media_type=media_type)


@app.exception_handler(StatisticsNotInitializedError)
async def statistics_not_ready_handler(request, exc):
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "Corpus not initialized",
            "detail": str(exc),
        },
    )


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "search_tuner.main:app",
        host="0.0.0.0",
        port=PORT,
        reload=True,  # Development only
    )
