"""Type definitions and enums for Hypersave SDK."""

from enum import Enum


class DocumentType(str, Enum):
    """Kind of saved content (auto-detected by the server when omitted)."""

    URL = "url"
    YOUTUBE = "youtube"
    PDF = "pdf"
    DOCX = "docx"
    IMAGE = "image"
    VIDEO = "video"
    TEXT = "text"
    AUDIO = "audio"
    UNKNOWN = "unknown"


class CategoryType(str, Enum):
    """Organizational category for saved content."""

    WORK = "Work"
    PERSONAL = "Personal"
    LEARNING = "Learning"
    RESEARCH = "Research"
    ENTERTAINMENT = "Entertainment"
    NEWS = "News"
    REFERENCE = "Reference"
    OTHER = "Other"


class SectorType(str, Enum):
    """Memory sectors - which part of memory the content lives in."""

    EPISODIC = "episodic"  # Events and experiences
    SEMANTIC = "semantic"  # Facts and knowledge
    PROCEDURAL = "procedural"  # How to do things
    EMOTIONAL = "emotional"  # Feelings and reactions
    REFLECTIVE = "reflective"  # Insights and conclusions


class SearchMode(str, Enum):
    """Retrieval depth for v7 search."""

    FAST = "fast"
    BALANCED = "balanced"
    DEEP = "deep"


class TriggerType(str, Enum):
    """How a reminder is triggered."""

    TIME = "time"
    CONTEXT = "context"
    LOCATION = "location"


class SaveState(str, Enum):
    """Processing state of an async save."""

    PROCESSING = "processing"
    INDEXED = "indexed"
    COMPLETE = "complete"
    ERROR = "error"


class EntityType(str, Enum):
    """Kinds of entities extracted from saved content."""

    PERSON = "person"
    ORGANIZATION = "organization"
    LOCATION = "location"
    DATE = "date"
    CONCEPT = "concept"
    OTHER = "other"
