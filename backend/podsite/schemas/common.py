"""
Shared schema base.

The site's wire format is camelCase (coverImage, featuredSlugs, ...) while
Python attributes stay snake_case.
"""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases, populated by either name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_wire(self) -> dict:
        """Dump to the JSON-ready camelCase representation, dropping unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
