"""Immutable line-item snapshot stored on every order.

Orders keep a copy of what was bought (name, unit price, quantity) instead of
joining live products, so editing or deleting a product never changes history.

Stored shape (version 1)::

    {"version": 1, "lines": [{"product_id": 3, "name": "...", "unit_price": "450.00", "quantity": 2}]}

Rows written before versioning hold a bare list of lines and are read as
version 0.
"""

import json
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SNAPSHOT_VERSION = 1


class SnapshotLine(BaseModel):
    model_config = ConfigDict(frozen=True)

    product_id: int
    name: str
    unit_price: Decimal
    quantity: int = Field(..., ge=1)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    version: int = SNAPSHOT_VERSION
    lines: tuple[SnapshotLine, ...] = ()

    @property
    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @property
    def total_quantity(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_stored(self) -> dict[str, Any]:
        return self.model_dump(mode="json")

    @classmethod
    def from_stored(cls, value: Any) -> "OrderSnapshot":
        """Decode a stored snapshot, accepting JSON text and the legacy bare list."""
        if isinstance(value, (str, bytes)):
            value = json.loads(value)
        if value is None:
            return cls(lines=())
        if isinstance(value, list):
            lines = [
                {
                    "product_id": raw["product_id"],
                    "name": raw.get("name", ""),
                    # legacy rows carry the live price column name
                    "unit_price": raw.get("unit_price", raw.get("price", "0")),
                    "quantity": raw["quantity"],
                }
                for raw in value
            ]
            return cls(version=0, lines=lines)
        return cls.model_validate(value)
