"""Pydantic models for Hypersave SDK responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .types import EntityType, SaveState


class HypersaveModel(BaseModel):
    """Base for API payloads: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        extra="allow",
    )


class ApiResponse(HypersaveModel):
    """Envelope shared by every API response."""

    success: bool = True
    error: str | None = None


# Save


class SavedDocument(HypersaveModel):
    """Document created by a synchronous save."""

    id: str
    title: str | None = None
    type: str | None = None
    facts: int = 0
    sector: str | None = None


class SaveResult(ApiResponse):
    """Result of a save call."""

    is_async: bool | None = Field(default=None, alias="async")
    pending_id: str | None = None  # poll with get_save_status
    message: str | None = None
    check_status: str | None = None
    saved: SavedDocument | None = None


class SaveStatus(ApiResponse):
    """Status of an async save."""

    status: SaveState
    document_id: str | None = None
    title: str | None = None
    facts: int | None = None
    entities: int | None = None
    neural_indexed: bool | None = None
    full_processing: str | None = None
    started_at: str | None = None
    completed_at: str | None = None


# Ask


class AskContext(HypersaveModel):
    mode: str
    memories_used: int = 0
    retrieval_time_ms: float = 0


class AskResult(ApiResponse):
    """Verified answer built from saved memories."""

    answer: str
    confidence: float = 0.0
    sources: list[Any] = Field(default_factory=list)
    context: AskContext | None = None
    time_ms: float | None = None


# Search / Query


class SearchHit(HypersaveModel):
    """A single document or fact returned by search or query."""

    id: str
    type: str  # "document" or "fact"
    title: str | None = None
    content: str
    category: str | None = None
    relevance: float = 0.0


class SearchStats(HypersaveModel):
    documents: int | None = None
    facts: int | None = None
    facts_found: int | None = None
    docs_found: int | None = None
    total_results: int | None = None


class SearchResult(ApiResponse):
    results: list[SearchHit] = Field(default_factory=list)
    stats: SearchStats | None = None


class Reminder(HypersaveModel):
    content: str
    trigger: str
    priority: int = 0


class QueryStats(HypersaveModel):
    facts_found: int = 0
    docs_found: int = 0
    total_results: int = 0
    latency_ms: float = 0


class QueryResult(ApiResponse):
    """Multi-strategy search result with matching reminders."""

    memory_searched: bool = False
    results: list[SearchHit] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
    stats: QueryStats | None = None


# Memories / Profile


class Memory(HypersaveModel):
    """A saved document."""

    id: str
    title: str
    summary: str | None = None
    type: str
    category: str
    sector: str | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: str = Field(alias="created_at")


class MemoriesResult(ApiResponse):
    documents: list[Memory] = Field(default_factory=list)
    facts: int = 0  # fact count
    total: int = 0  # document count


class Fact(HypersaveModel):
    """A fact extracted about the user."""

    id: str
    key: str
    value: str
    category: str
    confidence: float = 0.0
    source: str | None = None
    created_at: str | None = Field(default=None, alias="created_at")


class CoreMemory(HypersaveModel):
    human_block: str
    persona_block: str | None = None


class ProfileResult(ApiResponse):
    profile: dict[str, Any] = Field(default_factory=dict)
    facts: list[Fact] = Field(default_factory=list)
    core_memory: CoreMemory | None = None


# Graph


class GraphNode(HypersaveModel):
    id: str
    label: str
    type: str
    mentions: int | None = None


class GraphEdge(HypersaveModel):
    source: str
    target: str
    relation: str
    weight: float | None = None


class GraphStats(HypersaveModel):
    node_count: int = 0
    edge_count: int = 0
    clusters: int | None = None


class GraphResult(ApiResponse):
    """Knowledge graph of entities and relations."""

    nodes: list[GraphNode] = Field(default_factory=list)
    edges: list[GraphEdge] = Field(default_factory=list)
    stats: GraphStats | None = None


# Remind / Usage / Delete


class ReminderDetails(HypersaveModel):
    content: str
    trigger: str
    trigger_type: str | None = None
    priority: int | None = None
    status: str | None = None


class RemindResult(ApiResponse):
    reminder_id: str | None = None
    reminder: ReminderDetails | None = None


class Usage(HypersaveModel):
    documents_indexed: int = 0
    facts_extracted: int = 0
    queries_processed: int = 0
    storage_used_mb: float = Field(default=0.0, alias="storageUsedMB")


class UsageLimits(HypersaveModel):
    requests_remaining: int
    reset_at: str


class UsageResult(ApiResponse):
    usage: Usage
    limits: UsageLimits | None = None


class DeleteResult(ApiResponse):
    deleted_id: str | None = None


# v7 enhanced API


class ChunkHit(HypersaveModel):
    """A chunk returned by v7 search."""

    id: str
    content: str
    score: float = 0.0
    document_id: str | None = None
    document_title: str | None = None
    chunk_index: int | None = None


class V7SearchStats(HypersaveModel):
    total_chunks: int = 0
    search_time_ms: float = 0
    mode: str | None = None


class V7SearchResult(ApiResponse):
    results: list[ChunkHit] = Field(default_factory=list)
    stats: V7SearchStats | None = None


class ChunkSource(HypersaveModel):
    content: str
    document_title: str | None = None
    relevance: float = 0.0


class V7AskResult(ApiResponse):
    answer: str
    sources: list[ChunkSource] = Field(default_factory=list)
    confidence: float = 0.0


class V7IngestResult(ApiResponse):
    document_id: str | None = None
    chunks_created: int | None = None
    entities_extracted: int | None = None


class Entity(HypersaveModel):
    """An entity extracted from saved content."""

    id: str
    name: str
    type: EntityType
    mentions: int = 0
    last_seen: str | None = None


class EntityDetails(Entity):
    facts: list[str] = Field(default_factory=list)
    related_entities: list[str] = Field(default_factory=list)


class EntityDocument(HypersaveModel):
    id: str
    title: str
    relevance: float = 0.0


class V7EntitiesResult(ApiResponse):
    entities: list[Entity] = Field(default_factory=list)
    count: int = 0


class V7EntityResult(ApiResponse):
    entity: EntityDetails | None = None
    documents: list[EntityDocument] = Field(default_factory=list)
    document_count: int = 0


class V7FactsResult(ApiResponse):
    facts: list[Fact] = Field(default_factory=list)
    count: int = 0
