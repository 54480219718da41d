"""Pydantic model describing one record of the external feed."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator


class RawRecord(BaseModel):
    """A feed record exactly as published, without any coercion.

    Fields are typed ``object`` on purpose: malformed values must reach the
    normalizer and validator so they can be reported per record instead of
    failing the whole payload.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    id: object = None
    name: object = None
    value: object = None
    status: object = None
    last_modified: object = Field(
        default=None,
        validation_alias=AliasChoices("lastModified", "last_modified"),
    )

    @model_validator(mode="before")
    @classmethod
    def _non_mapping_as_empty(cls, value: object) -> object:
        if isinstance(value, Mapping | BaseModel):
            return value
        return {}


def parse_raw_records(items: list[object]) -> list[RawRecord]:
    return [RawRecord.model_validate(item) for item in items]
