import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RuleDocument:
    """Extracted text of one uploaded rule document (style guide, checklist)."""

    name: str
    text: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class RuleProfile:
    """A named, ordered selection of rule documents."""

    name: str
    document_ids: tuple[str, ...]
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
