"""Synchronous client wrapper for Hypersave SDK."""

import logging
import time
from contextlib import contextmanager
from typing import Any, Generator, Optional, Union
from urllib.parse import quote

import httpx

from .config import HypersaveConfig
from .dispatch import (
    HttpMethod,
    RequestContext,
    build_headers,
    build_url,
    clean_body,
    load_model,
    parse_response,
    resolve_user_id,
    translate_exception,
)
from .exceptions import HypersaveError, RequestTimeoutError, ValidationError
from .models import (
    AskResult,
    DeleteResult,
    GraphResult,
    MemoriesResult,
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
from .types import (
    CategoryType,
    DocumentType,
    EntityType,
    SearchMode,
    SectorType,
    TriggerType,
)

logger = logging.getLogger(__name__)


def _to_value(v: Any) -> Any:
    """Extract string value from an enum member, or return string as-is."""
    return v.value if hasattr(v, "value") else v


def _require(value: Optional[str], message: str) -> None:
    if not value:
        raise ValidationError(message)


class SyncHypersaveClient:
    """
    Synchronous Python client for the Hypersave API.

    Usage:
        with SyncHypersaveClient(api_key="your-api-key") as client:
            client.save("User prefers dark roast coffee")
            answer = client.ask("What coffee do I like?")
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        user_id: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize Hypersave client.

        Args:
            api_key: API key for authentication (required)
            base_url: API base URL (default: https://api.hypersave.io)
            timeout_ms: Request timeout in milliseconds (default: 30000)
            user_id: Default user ID sent with every request
            transport: Optional httpx transport (custom networking or tests)

        Raises:
            AuthenticationError: api_key is empty
        """
        self.config = HypersaveConfig.create(
            api_key=api_key,
            base_url=base_url,
            timeout_ms=timeout_ms,
            user_id=user_id,
        )
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_env(cls, transport: Optional[httpx.BaseTransport] = None) -> "SyncHypersaveClient":
        """Create a client from HYPERSAVE_* environment variables."""
        config = HypersaveConfig.from_env()
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout_ms=config.timeout_ms,
            user_id=config.user_id,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return self.config.base_url

    @property
    def timeout_ms(self) -> int:
        return self.config.timeout_ms

    def __enter__(self) -> "SyncHypersaveClient":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, *args: Any) -> None:
        """Context manager exit."""
        self.close()

    def connect(self) -> None:
        """Open a pooled HTTP client reused by subsequent calls."""
        self._client = self._new_http_client()

    def close(self) -> None:
        """Close the pooled HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    def _new_http_client(self) -> httpx.Client:
        return httpx.Client(transport=self._transport, timeout=httpx.Timeout(self.config.timeout_seconds))

    @contextmanager
    def _http_client(self) -> Generator[httpx.Client, None, None]:
        if self._client is not None:
            yield self._client
            return
        with self._new_http_client() as client:
            yield client

    def _send_within_deadline(
        self,
        client: httpx.Client,
        context: RequestContext,
        url: str,
        headers: dict[str, str],
    ) -> httpx.Response:
        """
        Send a request and read its body under one deadline measured from
        the start of the call. httpx timeouts only bound each network
        operation, so the body is read chunk by chunk and abandoned once the
        deadline passes.
        """
        deadline = time.monotonic() + self.config.timeout_seconds
        with client.stream(
            context.method,
            url,
            headers=headers,
            json=context.body,
            params=context.params,
        ) as streamed:
            chunks = []
            for chunk in streamed.iter_raw():
                chunks.append(chunk)
                if time.monotonic() >= deadline:
                    raise RequestTimeoutError(self.config.timeout_ms)
            if time.monotonic() >= deadline:
                raise RequestTimeoutError(self.config.timeout_ms)
            # raw bytes with the original headers, so content decoding happens once
            return httpx.Response(
                streamed.status_code,
                headers=streamed.headers,
                content=b"".join(chunks),
                request=streamed.request,
            )

    def _request(
        self,
        method: HttpMethod,
        path: str,
        body: Optional[dict[str, Any]] = None,
        *,
        user_id: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """
        Make HTTP request with error handling.

        Args:
            method: HTTP method
            path: API path, starting with "/"
            body: JSON body (None values are dropped)
            user_id: Per-call user ID override
            params: Query parameters (None values are dropped)

        Returns:
            Response JSON

        Raises:
            HypersaveError: Any failure, classified by kind
        """
        context = RequestContext(
            method=method,
            path=path,
            body=clean_body(body),
            user_id=user_id,
            params=clean_body(params),
        )
        headers = build_headers(
            self.config.api_key,
            resolve_user_id(context.user_id, context.body, self.config.user_id),
        )
        url = build_url(self.config.base_url, context.path)
        logger.debug("%s %s", context.method, context.path)

        try:
            with self._http_client() as client:
                response = self._send_within_deadline(client, context, url, headers)
            return parse_response(response)
        except HypersaveError as e:
            logger.debug("%s %s failed: %s (%s)", context.method, context.path, e.kind.value, e.status_code)
            raise
        except Exception as e:
            error = translate_exception(e, self.config.timeout_ms)
            logger.debug("%s %s failed: %s", context.method, context.path, error.kind.value)
            raise error from e

    # Core operations

    def save(
        self,
        content: str,
        title: Optional[str] = None,
        type: Optional[Union[str, DocumentType]] = None,
        category: Optional[Union[str, CategoryType]] = None,
        async_: bool = True,
        user_id: Optional[str] = None,
    ) -> SaveResult:
        """
        Save content to Hypersave memory.

        Args:
            content: Text, URL or file content to save
            title: Optional title
            type: Document type (auto-detected if not provided)
            category: Category for organization
            async_: Process asynchronously (default: True)
            user_id: User ID (overrides client default)

        Returns:
            Save result; async saves carry a pending_id
        """
        _require(content, "Content is required")

        payload = {
            "content": content,
            "title": title,
            "type": _to_value(type),
            "category": _to_value(category),
            "async": async_,
            "userId": user_id,
        }
        data = self._request("POST", "/v1/save", payload)
        return load_model(SaveResult, data)

    def save_sync(
        self,
        content: str,
        title: Optional[str] = None,
        type: Optional[Union[str, DocumentType]] = None,
        category: Optional[Union[str, CategoryType]] = None,
        user_id: Optional[str] = None,
    ) -> SaveResult:
        """Save content and wait for processing to finish."""
        return self.save(content, title=title, type=type, category=category, async_=False, user_id=user_id)

    def get_save_status(self, pending_id: str) -> SaveStatus:
        """Check the status of an async save."""
        _require(pending_id, "Pending ID is required")

        data = self._request("GET", f"/v1/save/status/{quote(pending_id, safe='')}")
        return load_model(SaveStatus, data)

    def ask(self, query: str, user_id: Optional[str] = None) -> AskResult:
        """Ask a question and get a verified answer from saved memories."""
        _require(query, "Query is required")

        data = self._request("POST", "/v1/ask", {"query": query, "userId": user_id})
        return load_model(AskResult, data)

    def search(
        self,
        query: str,
        include_context: Optional[bool] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> SearchResult:
        """Search documents and facts."""
        _require(query, "Query is required")

        payload = {
            "query": query,
            "includeContext": include_context,
            "limit": limit,
            "userId": user_id,
        }
        data = self._request("POST", "/v1/search", payload)
        return load_model(SearchResult, data)

    def query(
        self,
        message: str,
        skip_memory: Optional[bool] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> QueryResult:
        """Multi-strategy memory search with reminders."""
        _require(message, "Message is required")

        payload = {
            "message": message,
            "skipMemory": skip_memory,
            "limit": limit,
            "userId": user_id,
        }
        data = self._request("POST", "/v1/query", payload)
        return load_model(QueryResult, data)

    def get_memories(self, limit: Optional[int] = None, user_id: Optional[str] = None) -> MemoriesResult:
        """List saved documents along with the total fact count."""
        params = {"limit": limit or None, "userId": user_id}
        data = self._request("GET", "/v1/memories", user_id=user_id, params=params)
        return load_model(MemoriesResult, data)

    def get_profile(self, user_id: Optional[str] = None) -> ProfileResult:
        data = self._request("GET", "/v1/profile", user_id=user_id, params={"userId": user_id})
        return load_model(ProfileResult, data)

    def get_graph(self, user_id: Optional[str] = None) -> GraphResult:
        data = self._request("GET", "/v1/graph", user_id=user_id, params={"userId": user_id})
        return load_model(GraphResult, data)

    def delete_memory(self, memory_id: str, user_id: Optional[str] = None) -> DeleteResult:
        """Delete a memory by ID."""
        _require(memory_id, "Memory ID is required")

        data = self._request("DELETE", f"/v1/memory/{quote(memory_id, safe='')}", user_id=user_id)
        return load_model(DeleteResult, data)

    def remind(
        self,
        content: str,
        trigger: str,
        trigger_type: Optional[Union[str, TriggerType]] = None,
        priority: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> RemindResult:
        """Create a reminder."""
        _require(content, "Reminder content is required")
        _require(trigger, "Reminder trigger is required")

        payload = {
            "content": content,
            "trigger": trigger,
            "triggerType": _to_value(trigger_type),
            "priority": priority,
            "userId": user_id,
        }
        data = self._request("POST", "/v1/remind", payload)
        return load_model(RemindResult, data)

    def get_usage(self, user_id: Optional[str] = None) -> UsageResult:
        data = self._request("GET", "/v1/usage", user_id=user_id, params={"userId": user_id})
        return load_model(UsageResult, data)

    # v7 enhanced operations

    def v7_search(
        self,
        query: str,
        mode: Optional[Union[str, SearchMode]] = None,
        sectors: Optional[list[Union[str, SectorType]]] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> V7SearchResult:
        """Chunk-level search."""
        _require(query, "Query is required")

        payload = {
            "query": query,
            "mode": _to_value(mode),
            "sectors": [_to_value(s) for s in sectors] if sectors else None,
            "limit": limit,
            "userId": user_id,
        }
        data = self._request("POST", "/api/v7/search", payload)
        return load_model(V7SearchResult, data)

    def v7_ask(
        self,
        query: str,
        mode: Optional[Union[str, SearchMode]] = None,
        user_id: Optional[str] = None,
    ) -> V7AskResult:
        _require(query, "Query is required")

        payload = {"query": query, "mode": _to_value(mode), "userId": user_id}
        data = self._request("POST", "/api/v7/ask", payload)
        return load_model(V7AskResult, data)

    def v7_ingest(
        self,
        content: str,
        title: str,
        type: Optional[Union[str, DocumentType]] = None,
        category: Optional[Union[str, CategoryType]] = None,
        sector: Optional[Union[str, SectorType]] = None,
        metadata: Optional[dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> V7IngestResult:
        """Ingest a document: chunk it and extract entities."""
        _require(content, "Content is required")
        _require(title, "Title is required")

        payload = {
            "content": content,
            "title": title,
            "type": _to_value(type),
            "category": _to_value(category),
            "sector": _to_value(sector),
            "metadata": metadata,
            "userId": user_id,
        }
        data = self._request("POST", "/api/v7/ingest", payload)
        return load_model(V7IngestResult, data)

    def get_entities(
        self,
        entity_type: Optional[Union[str, EntityType]] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> V7EntitiesResult:
        params = {"type": _to_value(entity_type), "limit": limit, "userId": user_id}
        data = self._request("GET", "/api/v7/entities", user_id=user_id, params=params)
        return load_model(V7EntitiesResult, data)

    def get_entity(self, entity_id: str, user_id: Optional[str] = None) -> V7EntityResult:
        _require(entity_id, "Entity ID is required")

        data = self._request(
            "GET",
            f"/api/v7/entities/{quote(entity_id, safe='')}",
            user_id=user_id,
            params={"userId": user_id},
        )
        return load_model(V7EntityResult, data)

    def get_facts(
        self,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> V7FactsResult:
        params = {"category": category, "limit": limit, "userId": user_id}
        data = self._request("GET", "/api/v7/facts", user_id=user_id, params=params)
        return load_model(V7FactsResult, data)


@contextmanager
def sync_client(
    api_key: Optional[str],
    base_url: Optional[str] = None,
    timeout_ms: Optional[int] = None,
    user_id: Optional[str] = None,
) -> Generator[SyncHypersaveClient, None, None]:
    """
    Context manager for synchronous Hypersave client.

    Args:
        api_key: API key for authentication
        base_url: API base URL (default: https://api.hypersave.io)
        timeout_ms: Request timeout in milliseconds (default: 30000)
        user_id: Default user ID for requests

    Yields:
        SyncHypersaveClient instance

    Example:
        with sync_client(api_key="key") as client:
            client.save("User prefers Python")
            results = client.search("coding preferences")
    """
    client = SyncHypersaveClient(
        api_key=api_key,
        base_url=base_url,
        timeout_ms=timeout_ms,
        user_id=user_id,
    )
    with client:
        yield client
