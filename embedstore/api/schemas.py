"""
Request and response models for the embeddings HTTP API.
"""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class EmbeddingItemRequest(BaseModel):
    reference: str
    text: str

    @field_validator('text')
    @classmethod
    def text_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('text cannot be empty')
        return v


class EmbeddingCreateRequest(BaseModel):
    items: List[EmbeddingItemRequest]

    @field_validator('items')
    @classmethod
    def items_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('items cannot be empty')
        return v


class EmbeddingCreateResponse(BaseModel):
    stored: int
    ids: List[int]


class EmbeddingResponse(BaseModel):
    id: int
    reference: str
    text: str
    embedding: Optional[List[float]] = None


class EmbeddingListResponse(BaseModel):
    embeddings: List[EmbeddingResponse]


class DeleteResponse(BaseModel):
    deleted: int


class SearchRequest(BaseModel):
    query: str
    k: Optional[int] = Field(default=None, ge=1)

    @field_validator('query')
    @classmethod
    def query_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('query cannot be empty')
        return v


class SearchResult(BaseModel):
    id: int
    reference: str
    text: str
    score: float


class SearchResponse(BaseModel):
    query: str
    results: List[SearchResult]


class HealthResponse(BaseModel):
    status: str
    version: str
    db_health: bool
    embedding_count: int
    provider: str
    dimension: int


class ErrorResponse(BaseModel):
    error_type: str
    message: str
    operation: Optional[str] = None
    key: Optional[Union[int, str]] = None
    stored_ids: List[int] = []
