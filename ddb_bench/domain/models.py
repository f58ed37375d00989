"""
Domain models for the DynamoDB adapter bench.

Defines the synthetic `LargeItem` record stored in the table and compared
across adapters. Attribute names on the wire are the aliases below; Python
code uses the snake_case field names.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Record(BaseModel):
    """
    Representation of a single item in the `LargeItem` table.
    """

    id: str = Field(..., description="Partition key (uuid4 string).")
    boolean: bool = Field(..., description="Boolean flag.")
    string: str = Field(..., description="Category label.")
    nullable: Optional[str] = Field(..., description="String or None; never the empty string.")
    number: int = Field(..., ge=0, description="Non-negative integer.")
    external_id_list: List[str] = Field(..., alias="externalIdList")
    number_list: List[int] = Field(..., alias="numberList")
    nested: Dict[str, Any] = Field(..., description="Fixed-shape nested object.")

    model_config = {
        "frozen": True,
        "strict": True,
        "extra": "forbid",
        "populate_by_name": True,
    }

    @classmethod
    def attribute_names(cls) -> List[str]:
        """Wire attribute names in declaration order."""
        return [info.alias or name for name, info in cls.model_fields.items()]

    def get_attribute(self, attribute: str) -> Any:
        """Look up a value by its wire attribute name."""
        for name, info in type(self).model_fields.items():
            if (info.alias or name) == attribute:
                return getattr(self, name)
        raise KeyError(attribute)

    def to_item(self) -> Dict[str, Any]:
        """Plain mapping keyed by wire attribute names."""
        return self.model_dump(by_alias=True)


__all__ = ["Record"]
