from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Models are camelCase on the wire and snake_case in Python and MongoDB."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())
