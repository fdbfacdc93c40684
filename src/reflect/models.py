"""Pydantic models for the knowledge base collections."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _coerce_to_list(value):
    """Accept a bare string where a list of strings is expected."""
    if isinstance(value, str):
        return [value]
    return value


class Note(BaseModel):
    """A note: something learned, with where it came from."""

    title: str = Field(min_length=1)
    content: list[str] = Field(min_length=1)
    search: list[str] = Field(min_length=1)
    source: list[str] = Field(min_length=1)

    @field_validator("source", mode="before")
    @classmethod
    def coerce_source(cls, value):
        return _coerce_to_list(value)


class Report(BaseModel):
    """A daily report."""

    date: str = Field(min_length=1)
    done: list[str] = Field(min_length=1)
    quote: list[str] = Field(min_length=1)
    notes: list[str] = Field(min_length=1)


class VimCommand(BaseModel):
    """A vim command reference card."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    action: str = Field(min_length=1)
    key_binding: list[str] = Field(alias="keyBinding", min_length=1)
    command: str = Field(min_length=1)
    search: list[str] = Field(min_length=1)

    @field_validator("key_binding", mode="before")
    @classmethod
    def coerce_key_binding(cls, value):
        return _coerce_to_list(value)


def to_document(model: BaseModel) -> dict:
    """Serialize a model to the field names stored in MongoDB."""
    return model.model_dump(by_alias=True)
