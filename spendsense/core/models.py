# spendsense/core/models.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

# Rows come back from Supabase as plain dicts; these types describe the shapes
# the rest of the code produces and consumes.


class Category(str, Enum):
    FOOD = "food"
    TRANSPORTATION = "transportation"
    SCHOOL = "school"
    ENTERTAINMENT = "entertainment"
    SHOPPING = "shopping"
    UTILITIES = "utilities"
    HEALTH = "health"
    OTHER = "other"

    @classmethod
    def from_label(cls, raw: Any) -> "Category":
        """Maps any stored label to a category; unknown or empty labels become OTHER."""
        if isinstance(raw, str):
            try:
                return cls(raw.strip().lower())
            except ValueError:
                pass
        return cls.OTHER

    @property
    def display_name(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    Category.FOOD: "Food",
    Category.TRANSPORTATION: "Transportation",
    Category.SCHOOL: "School Supplies",
    Category.ENTERTAINMENT: "Entertainment",
    Category.SHOPPING: "Shopping",
    Category.UTILITIES: "Utilities",
    Category.HEALTH: "Health",
    Category.OTHER: "Other",
}


class GoalTier(str, Enum):
    WELL_UNDER = "WELL_UNDER"
    ON_TRACK = "ON_TRACK"
    APPROACHING_LIMIT = "APPROACHING_LIMIT"
    OVER_BUDGET = "OVER_BUDGET"


TIER_LABELS = {
    GoalTier.WELL_UNDER: "WELL UNDER BUDGET",
    GoalTier.ON_TRACK: "ON TRACK",
    GoalTier.APPROACHING_LIMIT: "APPROACHING LIMIT",
    GoalTier.OVER_BUDGET: "OVER BUDGET",
}


@dataclass
class GoalStatus:
    tier: GoalTier
    percentage: int
    display_percentage: int
    bar_percentage: int

    @property
    def label(self) -> str:
        return TIER_LABELS[self.tier]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "tier": self.tier.value,
            "percentage": self.display_percentage,
            "bar_percentage": self.bar_percentage,
        }


@dataclass
class Budget:
    user_id: Optional[str]
    amount: float
    month: int
    year: int
    id: Optional[str] = None

    @property
    def is_default(self) -> bool:
        """True when this budget was never saved to the store."""
        return self.id is None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Budget":
        return cls(
            id=row.get("id"),
            user_id=row.get("user_id"),
            amount=float(row["amount"]),
            month=int(row["month"]),
            year=int(row["year"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "amount": self.amount,
            "month": self.month,
            "year": self.year,
        }


@dataclass
class ProductInfo:
    barcode: str
    name: str
    price: Optional[float]
    category: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "barcode": self.barcode,
            "name": self.name,
            "price": self.price,
            "category": self.category,
        }


@dataclass
class CatalogProduct:
    barcode: str
    name: str
    brand: Optional[str] = None
    image_url: Optional[str] = None
    category: str = Category.FOOD.value


@dataclass
class LookupResult:
    product: Optional[ProductInfo] = None
    source: Optional[str] = None  # "user", "catalog" or None
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def found(self) -> bool:
        return self.product is not None

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            "product": self.product.to_dict() if self.product else None,
            "source": self.source,
        }
        if self.details:
            payload.update(self.details)
        if self.error:
            payload["error"] = self.error
        return payload


NOT_AUTHENTICATED = "Not authenticated"


@dataclass
class ActionResult:
    success: bool
    error: Optional[str] = None
    data: Any = None
    invalid_input: bool = False

    @classmethod
    def ok(cls, data: Any = None) -> "ActionResult":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> "ActionResult":
        return cls(success=False, error=error, data=data)

    @classmethod
    def invalid(cls, error: str) -> "ActionResult":
        """Input rejected before any store call."""
        return cls(success=False, error=error, invalid_input=True)

    @classmethod
    def not_authenticated(cls, data: Any = None) -> "ActionResult":
        return cls(success=False, error=NOT_AUTHENTICATED, data=data)

    @property
    def is_not_authenticated(self) -> bool:
        return self.error == NOT_AUTHENTICATED
