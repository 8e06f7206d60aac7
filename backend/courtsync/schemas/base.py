from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Response model serialized with camelCase keys, as the console front end expects."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
