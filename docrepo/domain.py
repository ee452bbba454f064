"""
Domain models for the document repository.

Documents are Pydantic v2 models identified by a string ``id``. Concrete
document kinds subclass :class:`Document` and add their own fields; the
repository stores them as JSON keyed by that ``id``.
"""

import uuid
from typing import Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """Base class for every document stored through a DocumentRepository."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique identifier, also the container key",
    )


class IdNamePair(BaseModel):
    """Lookup key carrying an identity and a display name."""

    id: str = Field(..., description="Identifier of the referenced document")
    name: str = Field("", description="Human-readable name")


class LooseDocument(Document):
    """A document that keeps any field it is given.

    Used where the concrete document class is unknown, e.g. when inspecting
    a container from the command line.
    """

    model_config = ConfigDict(extra="allow")


TDocument = TypeVar("TDocument", bound=Document)


class BulkReadResult(BaseModel, Generic[TDocument]):
    """Outcome of reading every item in a container.

    Items whose JSON could not be turned back into a document are not
    returned; they are only counted in ``skipped``.
    """

    documents: List[TDocument] = Field(default_factory=list)
    skipped: int = Field(0, description="Items that failed to deserialize")
    total: int = Field(0, description="Number of items the container held")
