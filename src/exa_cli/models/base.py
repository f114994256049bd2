from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ExaModel(BaseModel):
    """Base for every wire record: snake_case in Python, camelCase on the wire."""

    model_config: ClassVar[ConfigDict] = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """The JSON-compatible wire form, with unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
