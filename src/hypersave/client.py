"""Main client for Hypersave SDK."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional, Union
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
from .exceptions import HypersaveError, ValidationError
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
    """Fail before any I/O when a required argument is empty."""
    if not value:
        raise ValidationError(message)


class HypersaveClient:
    """
    Python client for the Hypersave API.

    Usage:
        async with HypersaveClient(api_key="your-api-key") as client:
            # Save content
            saved = await client.save("Meeting notes: ship v2 on Friday")

            # Ask a question
            answer = await client.ask("When do we ship v2?")
            print(answer.answer)

    The client can also be used without ``async with``; each call then
    opens and closes its own connection.
    """

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        timeout_ms: Optional[int] = None,
        user_id: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
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
        self._client: Optional[httpx.AsyncClient] = None

    @classmethod
    def from_env(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "HypersaveClient":
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

    async def __aenter__(self) -> "HypersaveClient":
        """Async context manager entry."""
        self._client = self._new_http_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        if self._client:
            await self._client.aclose()
            self._client = None

    def _new_http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=self._transport, timeout=self.config.timeout_seconds)

    @asynccontextmanager
    async def _http_client(self) -> AsyncIterator[httpx.AsyncClient]:
        """Yield the pooled client if open, otherwise a client for this call only."""
        if self._client is not None:
            yield self._client
            return
        async with self._new_http_client() as client:
            yield client

    async def _request(
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
            AuthenticationError: Authentication failed (401/403)
            ValidationError: Validation failed (400)
            NotFoundError: Resource not found (404)
            RequestTimeoutError: Timed out locally or 408
            RateLimitError: Rate limit exceeded (429)
            ServerError: Server error (500/502/503/504)
            NetworkError: Connection failed
            ParseError: Response was not JSON
            HypersaveError: Other errors
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
            async with asyncio.timeout(self.config.timeout_seconds):
                async with self._http_client() as client:
                    response = await client.request(
                        context.method,
                        url,
                        headers=headers,
                        json=context.body,
                        params=context.params,
                    )
            return parse_response(response)
        except HypersaveError as e:
            logger.debug("%s %s failed: %s (%s)", context.method, context.path, e.kind.value, e.status_code)
            raise
        except Exception as e:
            error = translate_exception(e, self.config.timeout_ms)
            logger.debug("%s %s failed: %s", context.method, context.path, error.kind.value)
            raise error from e

    # Core operations

    async def save(
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

        Example:
            result = await client.save("https://example.com/article", category=CategoryType.RESEARCH)
            if result.pending_id:
                status = await client.get_save_status(result.pending_id)
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
        data = await self._request("POST", "/v1/save", payload)
        return load_model(SaveResult, data)

    async def save_sync(
        self,
        content: str,
        title: Optional[str] = None,
        type: Optional[Union[str, DocumentType]] = None,
        category: Optional[Union[str, CategoryType]] = None,
        user_id: Optional[str] = None,
    ) -> SaveResult:
        """
        Save content and wait for processing to finish.

        Example:
            result = await client.save_sync("My note")
            print(f"Saved with {result.saved.facts} facts")
        """
        return await self.save(
            content,
            title=title,
            type=type,
            category=category,
            async_=False,
            user_id=user_id,
        )

    async def get_save_status(self, pending_id: str) -> SaveStatus:
        """
        Check the status of an async save.

        Args:
            pending_id: Pending ID returned by save()

        Returns:
            Save status (processing, indexed, complete or error)
        """
        _require(pending_id, "Pending ID is required")

        data = await self._request("GET", f"/v1/save/status/{quote(pending_id, safe='')}")
        return load_model(SaveStatus, data)

    async def ask(self, query: str, user_id: Optional[str] = None) -> AskResult:
        """
        Ask a question and get a verified answer from saved memories.

        Example:
            result = await client.ask("What did I learn about Python?")
            print(result.answer, result.confidence)
        """
        _require(query, "Query is required")

        data = await self._request("POST", "/v1/ask", {"query": query, "userId": user_id})
        return load_model(AskResult, data)

    async def search(
        self,
        query: str,
        include_context: Optional[bool] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> SearchResult:
        """
        Search documents and facts.

        Args:
            query: Search query
            include_context: Include context from related documents (server default: True)
            limit: Maximum results to return
            user_id: User ID (overrides client default)

        Returns:
            Search results
        """
        _require(query, "Query is required")

        payload = {
            "query": query,
            "includeContext": include_context,
            "limit": limit,
            "userId": user_id,
        }
        data = await self._request("POST", "/v1/search", payload)
        return load_model(SearchResult, data)

    async def query(
        self,
        message: str,
        skip_memory: Optional[bool] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> QueryResult:
        """
        Multi-strategy memory search with reminders.

        Example:
            result = await client.query("coffee meeting", limit=20)
            for reminder in result.reminders:
                print("Reminder:", reminder.content)
        """
        _require(message, "Message is required")

        payload = {
            "message": message,
            "skipMemory": skip_memory,
            "limit": limit,
            "userId": user_id,
        }
        data = await self._request("POST", "/v1/query", payload)
        return load_model(QueryResult, data)

    async def get_memories(self, limit: Optional[int] = None, user_id: Optional[str] = None) -> MemoriesResult:
        """
        List saved documents along with the total fact count.

        Args:
            limit: Maximum documents to return (server default: 50)
            user_id: User ID (overrides client default)
        """
        params = {"limit": limit or None, "userId": user_id}
        data = await self._request("GET", "/v1/memories", user_id=user_id, params=params)
        return load_model(MemoriesResult, data)

    async def get_profile(self, user_id: Optional[str] = None) -> ProfileResult:
        """Get the user profile built from extracted facts."""
        data = await self._request("GET", "/v1/profile", user_id=user_id, params={"userId": user_id})
        return load_model(ProfileResult, data)

    async def get_graph(self, user_id: Optional[str] = None) -> GraphResult:
        """Get the knowledge graph."""
        data = await self._request("GET", "/v1/graph", user_id=user_id, params={"userId": user_id})
        return load_model(GraphResult, data)

    async def delete_memory(self, memory_id: str, user_id: Optional[str] = None) -> DeleteResult:
        """
        Delete a memory by ID.

        Example:
            await client.delete_memory("doc-123")
        """
        _require(memory_id, "Memory ID is required")

        data = await self._request("DELETE", f"/v1/memory/{quote(memory_id, safe='')}", user_id=user_id)
        return load_model(DeleteResult, data)

    async def remind(
        self,
        content: str,
        trigger: str,
        trigger_type: Optional[Union[str, TriggerType]] = None,
        priority: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> RemindResult:
        """
        Create a reminder.

        Args:
            content: What to be reminded about
            trigger: When to trigger (e.g. "tomorrow", "when I mention coffee")
            trigger_type: time, context or location
            priority: Priority level 1-5
            user_id: User ID (overrides client default)

        Example:
            await client.remind("Buy coffee", trigger="grocery store", trigger_type=TriggerType.LOCATION)
        """
        _require(content, "Reminder content is required")
        _require(trigger, "Reminder trigger is required")

        payload = {
            "content": content,
            "trigger": trigger,
            "triggerType": _to_value(trigger_type),
            "priority": priority,
            "userId": user_id,
        }
        data = await self._request("POST", "/v1/remind", payload)
        return load_model(RemindResult, data)

    async def get_usage(self, user_id: Optional[str] = None) -> UsageResult:
        """Get API usage statistics and rate limit info."""
        data = await self._request("GET", "/v1/usage", user_id=user_id, params={"userId": user_id})
        return load_model(UsageResult, data)

    # v7 enhanced operations

    async def v7_search(
        self,
        query: str,
        mode: Optional[Union[str, SearchMode]] = None,
        sectors: Optional[list[Union[str, SectorType]]] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> V7SearchResult:
        """
        Chunk-level search.

        Args:
            query: Search query
            mode: fast, balanced or deep
            sectors: Restrict to these memory sectors
            limit: Maximum results
            user_id: User ID (overrides client default)
        """
        _require(query, "Query is required")

        payload = {
            "query": query,
            "mode": _to_value(mode),
            "sectors": [_to_value(s) for s in sectors] if sectors else None,
            "limit": limit,
            "userId": user_id,
        }
        data = await self._request("POST", "/api/v7/search", payload)
        return load_model(V7SearchResult, data)

    async def v7_ask(
        self,
        query: str,
        mode: Optional[Union[str, SearchMode]] = None,
        user_id: Optional[str] = None,
    ) -> V7AskResult:
        """Answer a question from source chunks."""
        _require(query, "Query is required")

        payload = {"query": query, "mode": _to_value(mode), "userId": user_id}
        data = await self._request("POST", "/api/v7/ask", payload)
        return load_model(V7AskResult, data)

    async def v7_ingest(
        self,
        content: str,
        title: str,
        type: Optional[Union[str, DocumentType]] = None,
        category: Optional[Union[str, CategoryType]] = None,
        sector: Optional[Union[str, SectorType]] = None,
        metadata: Optional[dict[str, Any]] = None,
        user_id: Optional[str] = None,
    ) -> V7IngestResult:
        """
        Ingest a document: chunk it and extract entities.

        Example:
            result = await client.v7_ingest(
                content=article_text,
                title="Attention Is All You Need",
                sector=SectorType.SEMANTIC,
            )
            print(f"{result.chunks_created} chunks, {result.entities_extracted} entities")
        """
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
        data = await self._request("POST", "/api/v7/ingest", payload)
        return load_model(V7IngestResult, data)

    async def get_entities(
        self,
        entity_type: Optional[Union[str, EntityType]] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> V7EntitiesResult:
        """List extracted entities, optionally filtered by type."""
        params = {"type": _to_value(entity_type), "limit": limit, "userId": user_id}
        data = await self._request("GET", "/api/v7/entities", user_id=user_id, params=params)
        return load_model(V7EntitiesResult, data)

    async def get_entity(self, entity_id: str, user_id: Optional[str] = None) -> V7EntityResult:
        """Get an entity with its facts, related entities and documents."""
        _require(entity_id, "Entity ID is required")

        data = await self._request(
            "GET",
            f"/api/v7/entities/{quote(entity_id, safe='')}",
            user_id=user_id,
            params={"userId": user_id},
        )
        return load_model(V7EntityResult, data)

    async def get_facts(
        self,
        category: Optional[str] = None,
        limit: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> V7FactsResult:
        """List facts extracted about the user."""
        params = {"category": category, "limit": limit, "userId": user_id}
        data = await self._request("GET", "/api/v7/facts", user_id=user_id, params=params)
        return load_model(V7FactsResult, data)
