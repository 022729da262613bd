__all__ = ["DataModel", "DataModelField"]

from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field


class DataModel(BaseModel):
    """Data model.

    Accepts both field names and aliases on input so that camelCase
    options coming from the host framework validate the same way as
    their snake_case field names.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        extra="ignore",
        populate_by_name=True,
    )

    def to_dict(self, exclude_none: bool = False) -> dict[str, Any]:
        return self.model_dump(exclude_none=exclude_none)

    @classmethod
    def from_dict(cls, obj: dict | None) -> Self:
        return cls.model_validate(obj)


def DataModelField(
    alias: str | None = None,
    exclude: bool | None = None,
    **kwargs,
) -> Any:
    return Field(
        alias=alias,
        exclude=exclude,
        **kwargs,
    )
