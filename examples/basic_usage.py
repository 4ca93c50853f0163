"""Basic usage examples for Hypersave Python SDK."""

import asyncio

from hypersave import (
    CategoryType,
    ErrorKind,
    HypersaveClient,
    HypersaveError,
    SearchMode,
    SectorType,
    TriggerType,
    is_error_kind,
)


async def basic_example():
    """Save, ask and search."""
    async with HypersaveClient(api_key="your-api-key", user_id="user_123") as client:
        # Save content (processed asynchronously by default)
        saved = await client.save(
            content="Meeting notes: we ship v2 on Friday",
            category=CategoryType.WORK,
        )
        if saved.pending_id:
            status = await client.get_save_status(saved.pending_id)
            print(f"Save status: {status.status}")

        # Ask a question
        answer = await client.ask("When do we ship v2?")
        print(f"Answer: {answer.answer} (confidence {answer.confidence:.2f})")

        # Search documents and facts
        results = await client.search("release plans", limit=5)
        for hit in results.results:
            print(f"  [{hit.type}] {hit.content}")


async def reminder_example():
    """Reminders surface through query()."""
    async with HypersaveClient(api_key="your-api-key") as client:
        await client.remind(
            content="Buy coffee beans",
            trigger="grocery store",
            trigger_type=TriggerType.LOCATION,
            priority=2,
        )

        result = await client.query("heading to the grocery store")
        for reminder in result.reminders:
            print(f"Reminder: {reminder.content}")


async def v7_example():
    """Ingest a document, then search chunks and browse entities."""
    async with HypersaveClient(api_key="your-api-key") as client:
        ingested = await client.v7_ingest(
            content="Ada Lovelace wrote the first published algorithm for Babbage's Analytical Engine.",
            title="Ada Lovelace",
            sector=SectorType.SEMANTIC,
        )
        print(f"{ingested.chunks_created} chunks, {ingested.entities_extracted} entities")

        chunks = await client.v7_search("first algorithm", mode=SearchMode.DEEP)
        for chunk in chunks.results:
            print(f"  {chunk.score:.2f} {chunk.content}")

        entities = await client.get_entities(entity_type="person")
        for entity in entities.entities:
            print(f"  {entity.name} ({entity.mentions} mentions)")


async def error_handling_example():
    """Branch on error kind instead of transport exceptions."""
    client = HypersaveClient(api_key="your-api-key", timeout_ms=5000)
    try:
        await client.ask("What did I save yesterday?")
    except HypersaveError as e:
        if is_error_kind(e, ErrorKind.RATE_LIMIT):
            print(f"Rate limited, retry after {e.retry_after}s")
        elif is_error_kind(e, ErrorKind.TIMEOUT):
            print(f"Timed out after {e.timeout_ms}ms")
        else:
            print(f"{e.kind.value}: {e.message}")


if __name__ == "__main__":
    asyncio.run(basic_example())
