"""
Base for raw store documents.

Documents are schemaless; these models only pin down the types of the
fields the console reads. Unknown fields are kept, camelCase keys map onto
snake_case attributes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RawDocument(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )
