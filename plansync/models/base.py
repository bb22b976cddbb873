"""Shared model configuration."""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire and in API responses."""

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class Entity(CamelModel):
    """Immutable entity. Changes go through ``model_copy``/re-validation."""

    model_config = {"frozen": True}

    id: str
