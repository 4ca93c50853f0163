"""Hypersave Python SDK - client for the Hypersave memory API."""

from .client import HypersaveClient
from .config import HypersaveConfig
from .exceptions import (
    AuthenticationError,
    ErrorKind,
    HypersaveError,
    NetworkError,
    NotFoundError,
    ParseError,
    RateLimitError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
    error_from_status,
    is_error_kind,
    is_hypersave_error,
)
from .models import (
    AskResult,
    DeleteResult,
    Entity,
    Fact,
    GraphEdge,
    GraphNode,
    GraphResult,
    MemoriesResult,
    Memory,
    ProfileResult,
    QueryResult,
    RemindResult,
    SaveResult,
    SaveStatus,
    SearchResult,
    UsageResult,
    V7AskResult,
    V7EntitiesResult,
    V7EntityResult,
    V7FactsResult,
    V7IngestResult,
    V7SearchResult,
)
from .sync_client import SyncHypersaveClient, sync_client
from .types import (
    CategoryType,
    DocumentType,
    EntityType,
    SaveState,
    SearchMode,
    SectorType,
    TriggerType,
)

__version__ = "1.0.0"

__all__ = [
    # Main clients
    "HypersaveClient",
    "SyncHypersaveClient",
    "sync_client",
    "HypersaveConfig",
    # Models
    "SaveResult",
    "SaveStatus",
    "AskResult",
    "SearchResult",
    "QueryResult",
    "Memory",
    "MemoriesResult",
    "Fact",
    "ProfileResult",
    "GraphNode",
    "GraphEdge",
    "GraphResult",
    "RemindResult",
    "UsageResult",
    "DeleteResult",
    "Entity",
    "V7SearchResult",
    "V7AskResult",
    "V7IngestResult",
    "V7EntitiesResult",
    "V7EntityResult",
    "V7FactsResult",
    # Types
    "DocumentType",
    "CategoryType",
    "SectorType",
    "SearchMode",
    "TriggerType",
    "SaveState",
    "EntityType",
    # Exceptions
    "ErrorKind",
    "HypersaveError",
    "AuthenticationError",
    "ValidationError",
    "NotFoundError",
    "RateLimitError",
    "RequestTimeoutError",
    "NetworkError",
    "ServerError",
    "ParseError",
    "error_from_status",
    "is_hypersave_error",
    "is_error_kind",
]
