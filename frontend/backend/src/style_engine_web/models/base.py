"""Base model shared by every style engine API payload."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ApiModel(BaseModel):
    """Snake_case fields on the Python side, camelCase aliases on the wire."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump with the camelCase aliases clients see."""
        return self.model_dump(by_alias=True, mode="json")
