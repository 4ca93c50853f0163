"""Unit tests for synchronous Hypersave client."""

import json
import time

import httpx
import pytest
import respx
from httpx import Response

from hypersave import (
    AskResult,
    AuthenticationError,
    HypersaveError,
    NetworkError,
    NotFoundError,
    ParseError,
    RequestTimeoutError,
    SaveResult,
    SyncHypersaveClient,
    ValidationError,
    sync_client,
)


@pytest.fixture
def base_url() -> str:
    """Test base URL."""
    return "http://test.hypersave.io"


@pytest.fixture
def client(base_url: str) -> SyncHypersaveClient:
    """Create test client."""
    return SyncHypersaveClient(
        api_key="test_api_key",
        base_url=base_url,
        user_id="user_default",
    )


@respx.mock
def test_save(client: SyncHypersaveClient, base_url: str) -> None:
    """Test saving content."""
    mock_response = {"success": True, "async": True, "pendingId": "pend_1"}
    route = respx.post(f"{base_url}/v1/save").mock(return_value=Response(200, json=mock_response))

    with client:
        result = client.save("User prefers dark roast", title="Coffee")

    assert isinstance(result, SaveResult)
    assert result.pending_id == "pend_1"
    assert json.loads(route.calls.last.request.content) == {
        "content": "User prefers dark roast",
        "title": "Coffee",
        "async": True,
    }
    assert route.calls.last.request.headers["x-user-id"] == "user_default"


@respx.mock
def test_ask(client: SyncHypersaveClient, base_url: str) -> None:
    """Test asking a question."""
    mock_response = {
        "success": True,
        "answer": "Dark roast.",
        "confidence": 0.88,
        "sources": [],
        "context": {"mode": "fast", "memoriesUsed": 1, "retrievalTimeMs": 9},
    }
    respx.post(f"{base_url}/v1/ask").mock(return_value=Response(200, json=mock_response))

    with client:
        result = client.ask("What coffee do I like?")

    assert isinstance(result, AskResult)
    assert result.answer == "Dark roast."


@respx.mock
def test_delete_memory(client: SyncHypersaveClient, base_url: str) -> None:
    route = respx.delete(f"{base_url}/v1/memory/doc-1").mock(
        return_value=Response(200, json={"success": True, "deletedId": "doc-1"})
    )

    result = client.delete_memory("doc-1", user_id="user_9")

    assert result.deleted_id == "doc-1"
    assert route.calls.last.request.headers["x-user-id"] == "user_9"


@respx.mock
def test_get_facts(client: SyncHypersaveClient, base_url: str) -> None:
    route = respx.get(f"{base_url}/api/v7/facts").mock(
        return_value=Response(
            200,
            json={
                "success": True,
                "facts": [{"id": "f1", "key": "drink", "value": "coffee", "category": "preference", "confidence": 0.9}],
                "count": 1,
            },
        )
    )

    result = client.get_facts(category="preference", limit=10)

    assert result.facts[0].value == "coffee"
    assert route.calls.last.request.url.params["category"] == "preference"


def test_validation_before_io(client: SyncHypersaveClient) -> None:
    with respx.mock(assert_all_called=False) as mock:
        with pytest.raises(ValidationError, match="Query is required"):
            client.ask("")
        with pytest.raises(ValidationError, match="Memory ID is required"):
            client.delete_memory("")

    assert mock.calls.call_count == 0


@respx.mock
def test_not_found_error(client: SyncHypersaveClient, base_url: str) -> None:
    respx.get(f"{base_url}/api/v7/entities/e_999").mock(
        return_value=Response(404, json={"success": False, "message": "Entity not found"})
    )

    with pytest.raises(NotFoundError) as exc_info:
        client.get_entity("e_999")

    assert exc_info.value.message == "Entity not found"


@respx.mock
def test_success_false_is_generic(client: SyncHypersaveClient, base_url: str) -> None:
    respx.post(f"{base_url}/v1/ask").mock(
        return_value=Response(200, json={"success": False, "error": "quota exceeded"})
    )

    with pytest.raises(HypersaveError) as exc_info:
        client.ask("anything")

    assert type(exc_info.value) is HypersaveError
    assert exc_info.value.message == "quota exceeded"


@respx.mock
def test_non_json_success(client: SyncHypersaveClient, base_url: str) -> None:
    respx.post(f"{base_url}/v1/ask").mock(return_value=Response(200, text="pong"))

    with pytest.raises(ParseError) as exc_info:
        client.ask("ping")

    assert exc_info.value.raw_response == "pong"


class TricklingStream(httpx.SyncByteStream):
    """Response body that sends one byte at a time."""

    def __init__(self, body: bytes, delay: float) -> None:
        self.body = body
        self.delay = delay
        self.closed = False

    def __iter__(self):
        for i in range(len(self.body)):
            time.sleep(self.delay)
            yield self.body[i : i + 1]

    def close(self) -> None:
        self.closed = True


def test_timeout_covers_slow_body() -> None:
    """Test a body that keeps trickling in is cut off at the overall deadline."""
    stream = TricklingStream(b'{"success": true, "answer": "late"}', delay=0.04)

    def handler(request: httpx.Request) -> Response:
        return Response(200, headers={"content-type": "application/json"}, stream=stream)

    client = SyncHypersaveClient(
        api_key="test_api_key",
        base_url="http://test.hypersave.io",
        timeout_ms=300,
        transport=httpx.MockTransport(handler),
    )

    started = time.monotonic()
    with pytest.raises(RequestTimeoutError) as exc_info:
        client.ask("slow question")
    elapsed = time.monotonic() - started

    assert exc_info.value.timeout_ms == 300
    assert elapsed < 1.0
    assert stream.closed


@respx.mock
def test_transport_timeout(base_url: str) -> None:
    respx.post(f"{base_url}/v1/ask").mock(side_effect=httpx.ReadTimeout("read timed out"))
    client = SyncHypersaveClient(api_key="test_api_key", base_url=base_url, timeout_ms=250)

    with pytest.raises(RequestTimeoutError) as exc_info:
        client.ask("slow")

    assert exc_info.value.timeout_ms == 250


@respx.mock
def test_network_error(client: SyncHypersaveClient, base_url: str) -> None:
    respx.get(f"{base_url}/v1/usage").mock(side_effect=httpx.ConnectError("connection refused"))

    with pytest.raises(NetworkError) as exc_info:
        client.get_usage()

    assert isinstance(exc_info.value.cause, httpx.ConnectError)


def test_custom_transport() -> None:
    def handler(request: httpx.Request) -> Response:
        assert request.headers["X-API-Key"] == "test_api_key"
        return Response(200, json={"success": True, "nodes": [], "edges": []})

    client = SyncHypersaveClient(
        api_key="test_api_key",
        base_url="http://test.hypersave.io",
        transport=httpx.MockTransport(handler),
    )

    graph = client.get_graph()

    assert graph.nodes == []


@respx.mock
def test_sync_client_helper(base_url: str) -> None:
    """Test sync_client() context manager helper."""
    respx.get(f"{base_url}/v1/usage").mock(
        return_value=Response(
            200,
            json={
                "success": True,
                "usage": {"documentsIndexed": 1, "factsExtracted": 2, "queriesProcessed": 3, "storageUsedMB": 0.1},
            },
        )
    )

    with sync_client(api_key="test_api_key", base_url=base_url) as client:
        usage = client.get_usage()

    assert usage.usage.queries_processed == 3


def test_sync_client_helper_requires_api_key() -> None:
    with pytest.raises(AuthenticationError):
        with sync_client(api_key=""):
            pass


def test_manual_lifecycle(client: SyncHypersaveClient) -> None:
    """Test manual connect() and close() lifecycle."""
    assert client._client is None

    client.connect()
    assert client._client is not None

    client.close()
    assert client._client is None
