"""Shared base model for API contracts.

JSON field names are camelCase on the wire and snake_case in Python.
Either form is accepted on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for request and response DTOs."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
