"""
Document model and corpus loading.

A corpus is a JSON file holding either a list of documents or an object with
a "documents" list:

[
    {
        "id": 1,
        "name": "Mocha Cafe",
        "category": "cafe",
        "tags": ["coffee", "mocha"],
        "description": "Cozy cafe serving artisan mocha drinks",
        "reviews": ["Best mocha latte in town!"],
        "rating": 4.8,
        "location": "Downtown"
    },
    ...
]
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)


class CorpusLoadError(ValueError):
    """Corpus file is missing or not in the expected shape"""


def _as_text(value: Any) -> str:
    return str(value) if value is not None else ""


def _as_tuple(value: Any) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


@dataclass(frozen=True)
class Document:
    """Single searchable location. Never mutated by the engine."""
    id: Any
    name: str = ""
    category: str = ""
    tags: Tuple[str, ...] = ()
    description: str = ""
    reviews: Tuple[str, ...] = ()
    rating: Optional[float] = None
    location: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Document":
        """
        Build a document from a plain mapping.

        Missing text fields become empty strings, missing sequences become
        empty tuples, unknown keys are ignored.
        """
        rating = data.get("rating")
        return cls(
            id=data.get("id"),
            name=_as_text(data.get("name")),
            category=_as_text(data.get("category")),
            tags=_as_tuple(data.get("tags")),
            description=_as_text(data.get("description")),
            reviews=_as_tuple(data.get("reviews")),
            rating=float(rating) if rating is not None else None,
            location=_as_text(data.get("location")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "tags": list(self.tags),
            "description": self.description,
            "reviews": list(self.reviews),
            "rating": self.rating,
            "location": self.location,
        }


def documents_from_records(records: Iterable[Mapping[str, Any]]) -> List[Document]:
    """Convert plain records to documents, rejecting anything that is not a mapping"""
    documents = []
    for position, record in enumerate(records):
        if not isinstance(record, Mapping):
            raise CorpusLoadError(
                f"Document at position {position} must be an object, got {type(record).__name__}"
            )
        try:
            documents.append(Document.from_dict(record))
        except (TypeError, ValueError) as e:
            raise CorpusLoadError(f"Invalid document at position {position}: {e}") from e
    return documents


def load_documents(path: Union[str, Path]) -> List[Document]:
    """
    Load a corpus from a JSON file.

    Args:
        path: Path to a JSON list of documents, or an object with a
            "documents" list

    Returns:
        Documents in file order

    Raises:
        CorpusLoadError: File missing, not valid JSON, or wrong shape
    """
    corpus_path = Path(path)
    if not corpus_path.is_file():
        raise CorpusLoadError(f"Corpus file not found: {corpus_path}")

    try:
        with open(corpus_path, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except json.JSONDecodeError as e:
        raise CorpusLoadError(f"Corpus file is not valid JSON: {corpus_path} ({e})") from e

    if isinstance(payload, Mapping):
        payload = payload.get("documents")
    if not isinstance(payload, list):
        raise CorpusLoadError(
            f"Corpus must be a list of documents or an object with a 'documents' list: {corpus_path}"
        )

    documents = documents_from_records(payload)
    logger.info(f"Loaded {len(documents)} documents from {corpus_path}")
    return documents
