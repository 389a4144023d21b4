import datetime

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _scalar_to_str(value):
    """Turn YAML scalars that resolve to non-string types back into text."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return value


class Author(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: str = ""
    email: str = ""

    @field_validator("name", "email", mode="before")
    @classmethod
    def _to_text(cls, value):
        return _scalar_to_str(value)


class PostMetadata(BaseModel):
    """Front-matter fields of a post, keyed by the names used in the Markdown files."""

    model_config = ConfigDict(
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    title: str = Field("", alias="Title")
    slug: str = Field("", alias="Slug")
    date: str = Field("", alias="Date")
    description: str = Field("", alias="Description")
    order: int = Field(0, alias="Order")
    meta_description: str = Field("", alias="MetaDescription")
    meta_property_title: str = Field("", alias="MetaPropertyTitle")
    meta_property_description: str = Field("", alias="MetaPropertyDescription")
    meta_og_url: str = Field("", alias="MetaOgURL")
    author: Author = Field(default_factory=Author)

    @field_validator(
        "title",
        "slug",
        "date",
        "description",
        "meta_description",
        "meta_property_title",
        "meta_property_description",
        "meta_og_url",
        mode="before",
    )
    @classmethod
    def _to_text(cls, value):
        return _scalar_to_str(value)

    @field_validator("order", mode="before")
    @classmethod
    def _none_to_zero(cls, value):
        return 0 if value is None else value

    @field_validator("author", mode="before")
    @classmethod
    def _none_to_author(cls, value):
        return {} if value is None else value


class Post(PostMetadata):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    content: Markup = Field(default_factory=Markup)
