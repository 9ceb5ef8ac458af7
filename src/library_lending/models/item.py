"""
Catalog item models for the library lending engine.

Items form a closed tagged variant discriminated by ``kind``:

- Book: author, genre and publication year
- DVD: director and running time
- Magazine: publisher and issue number

Every variant shares an immutable ``key`` (the ISBN for books) and mutable
metadata that is re-validated on assignment. Presentation is dispatched
through ``display_details()``, implemented once per variant.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator


class LibraryItem(BaseModel, ABC):
    """Fields shared by every kind of catalog item."""

    key: str = Field(
        ...,
        description="Unique catalog key (ISBN for books)",
        min_length=1,
        frozen=True,
        examples=["978-0134685991", "dvd-inception-2010"],
    )

    title: str = Field(
        ...,
        description="Title of the item",
        min_length=1,
        max_length=500,
        examples=["Effective Java", "Inception"],
    )

    publication_year: int = Field(
        ...,
        description="Year the item was published or released",
        ge=1450,
        le=datetime.now().year + 1,
        examples=[1994, 2018],
    )

    model_config = ConfigDict(
        # Metadata edits go through the same validation as construction
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    @property
    @abstractmethod
    def creator(self) -> str:
        """Author, director or publisher, depending on the kind."""

    def text_fields(self) -> dict[str, str]:
        """Searchable text fields of this item, keyed by field name."""
        return {"title": self.title}

    @abstractmethod
    def display_details(self) -> str: ...

    def __str__(self) -> str:
        return f"{self.title} ({self.key})"


class Book(LibraryItem):
    """A book; the only kind that carries a genre."""

    kind: Literal["book"] = "book"

    author: str = Field(
        ...,
        description="Author of the book",
        min_length=1,
        max_length=300,
        examples=["Joshua Bloch", "Erich Gamma"],
    )

    genre: str = Field(
        ...,
        description="Genre used for recommendations",
        min_length=1,
        examples=["Programming", "Fantasy"],
    )

    @field_validator("genre")
    @classmethod
    def normalize_genre(cls, v: str) -> str:
        """Normalize genre to title case for consistency."""
        return v.strip().title()

    @property
    def isbn(self) -> str:
        return self.key

    @property
    def creator(self) -> str:
        return self.author

    def text_fields(self) -> dict[str, str]:
        fields = super().text_fields()
        fields.update(author=self.author, genre=self.genre)
        return fields

    def display_details(self) -> str:
        return (
            f"Book: {self.title}\n"
            f"Author: {self.author}\n"
            f"ISBN: {self.key}\n"
            f"Year: {self.publication_year}\n"
            f"Genre: {self.genre}"
        )


class DVD(LibraryItem):
    kind: Literal["dvd"] = "dvd"

    director: str = Field(..., min_length=1, max_length=300)

    duration_minutes: int = Field(
        ...,
        description="Running time in minutes",
        gt=0,
        examples=[148],
    )

    @property
    def creator(self) -> str:
        return self.director

    def text_fields(self) -> dict[str, str]:
        fields = super().text_fields()
        fields.update(director=self.director)
        return fields

    def display_details(self) -> str:
        return (
            f"DVD: {self.title}\n"
            f"Director: {self.director}\n"
            f"Duration: {self.duration_minutes} mins"
        )


class Magazine(LibraryItem):
    kind: Literal["magazine"] = "magazine"

    publisher: str = Field(..., min_length=1, max_length=300)

    issue_number: int = Field(..., ge=1, examples=[58])

    @property
    def creator(self) -> str:
        return self.publisher

    def text_fields(self) -> dict[str, str]:
        fields = super().text_fields()
        fields.update(publisher=self.publisher)
        return fields

    def display_details(self) -> str:
        return (
            f"Magazine: {self.title}\n"
            f"Issue No: {self.issue_number}\n"
            f"Published: {self.publication_year}"
        )


Item = Annotated[Book | DVD | Magazine, Field(discriminator="kind")]

_item_adapter: TypeAdapter[Item] = TypeAdapter(Item)


def parse_item(data: dict[str, Any]) -> Book | DVD | Magazine:
    """Build the matching item variant from plain data.

    Raises:
        pydantic.ValidationError: If ``kind`` is missing or unknown, or a
            field fails validation
    """
    return _item_adapter.validate_python(data)


def item_genre(item: LibraryItem) -> str | None:
    """Genre of an item, or None for kinds without one."""
    return getattr(item, "genre", None)
