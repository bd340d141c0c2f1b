"""Product read model handed out by the catalogue."""

import json
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Product:
    """Point-in-time view of one catalogue row."""

    id: str
    name: str
    price: int
    stock: int
    is_active: bool = True
    description: str = ""
    category: str = ""
    images: list[str] = field(default_factory=list)
    sizes: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_row(cls, row) -> "Product":
        data = row._mapping
        return cls(
            id=data["id"],
            name=data["name"],
            price=data["price"],
            stock=data["stock"],
            is_active=bool(data["is_active"]),
            description=data["description"] or "",
            category=data["category"] or "",
            images=json.loads(data["images"] or "[]"),
            sizes=json.loads(data["sizes"] or "[]"),
            colors=json.loads(data["colors"] or "[]"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )

    def snapshot(self) -> dict:
        """Fields copied onto an order line so later catalogue edits don't leak into history."""
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "images": list(self.images),
            "sizes": list(self.sizes),
            "colors": list(self.colors),
        }
