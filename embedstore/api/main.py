"""
HTTP adapter over EmbeddingService.
Maps requests to service calls and store errors to JSON error responses.
"""

from contextlib import asynccontextmanager
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from .schemas import (
    DeleteResponse,
    EmbeddingCreateRequest,
    EmbeddingCreateResponse,
    EmbeddingListResponse,
    EmbeddingResponse,
    ErrorResponse,
    HealthResponse,
    SearchRequest,
    SearchResponse,
    SearchResult,
)
from ..core.config import LOG_LEVEL, VERSION, debug_enabled, validate_config
from ..core.db import health_check
from ..core.errors import (
    CorruptVector,
    DimensionMismatch,
    EmbedStoreError,
    GenerationError,
    StorageError,
)
from ..core.service import EmbeddingService
from ..util.logging import configure_logging, logger

ERROR_STATUS = [
    (GenerationError, 502),
    (DimensionMismatch, 422),
    (CorruptVector, 500),
    (StorageError, 500),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(LOG_LEVEL)
    for issue in validate_config():
        logger.warning(f"Configuration issue: {issue}")
    yield


app = FastAPI(
    title="Embedding Store API",
    version=VERSION,
    description="Store text with embeddings and rank stored text by semantic similarity",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None,
    lifespan=lifespan,
)


def get_service(request: Request) -> EmbeddingService:
    """Process-wide service, built from configuration on first use."""
    service = getattr(request.app.state, "service", None)
    if service is None:
        service = EmbeddingService.from_config()
        request.app.state.service = service
    return service


@app.exception_handler(EmbedStoreError)
async def embed_store_error_handler(request: Request, exc: EmbedStoreError):
    status_code = 500
    for error_class, code in ERROR_STATUS:
        if isinstance(exc, error_class):
            status_code = code
            break

    logger.log_operation(f"api.{request.method.lower()}", "failed", {
        "path": request.url.path,
        "error": str(exc),
    })
    return JSONResponse(status_code=status_code, content=ErrorResponse(**exc.to_dict()).model_dump())


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(service: EmbeddingService = Depends(get_service)):
    """Check store health."""
    db_health = health_check(service.repository.db_path)
    count = service.repository.count() if db_health else 0

    return HealthResponse(
        status="healthy" if db_health else "unhealthy",
        version=VERSION,
        db_health=db_health,
        embedding_count=count,
        provider=service.provider.name,
        dimension=service.repository.dimension,
    )


@app.get("/embeddings", response_model=EmbeddingListResponse)
def list_embeddings_endpoint(service: EmbeddingService = Depends(get_service)):
    records = service.list_embeddings()
    return EmbeddingListResponse(
        embeddings=[
            EmbeddingResponse(id=r.id, reference=r.reference, text=r.text, embedding=r.vector)
            for r in records
        ]
    )


@app.post("/embeddings", response_model=EmbeddingCreateResponse, status_code=201)
def create_embeddings_endpoint(request: EmbeddingCreateRequest,
                               service: EmbeddingService = Depends(get_service)):
    ids = service.create_embeddings((item.reference, item.text) for item in request.items)
    return EmbeddingCreateResponse(stored=len(ids), ids=ids)


@app.delete("/embeddings/{key}", response_model=DeleteResponse)
def delete_embedding_endpoint(key: str, by: Literal["id", "reference"] = Query("id"),
                              service: EmbeddingService = Depends(get_service)):
    """Delete by id (default) or by reference. Missing keys delete 0 rows."""
    if by == "id":
        try:
            key = int(key)
        except ValueError:
            raise HTTPException(status_code=422, detail=f"Invalid id: {key}")

    return DeleteResponse(deleted=service.delete_embedding(key, by=by))


@app.post("/embeddings/search", response_model=SearchResponse)
def search_endpoint(request: SearchRequest, service: EmbeddingService = Depends(get_service)):
    """Rank stored embeddings by similarity to the query text."""
    result_set = service.search(request.query, top_k=request.k)
    return SearchResponse(
        query=result_set.query_text,
        results=[
            SearchResult(
                id=r.record.id,
                reference=r.record.reference,
                text=r.record.text,
                score=r.score,
            )
            for r in result_set.results
        ],
    )
