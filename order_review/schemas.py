"""
Pydantic Schemas for Request/Response Validation

Accepted orders travel as JSON documents using the store's camelCase
field names (``_id``, ``supplierName``, ``orderQuantity`` ...). Python code
works with the snake_case attribute names; ``to_document()`` produces the
wire form again.

Author: Khalil Bannouri
Version: 1.0.0
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# ENUMS
# =============================================================================

class Category(str, Enum):
    """Known order categories. The store accepts any other value as well."""
    VEGETABLES = "Vegetables"
    SPICES = "Spices"
    MEAT = "Meat"
    FISHERIES = "Fisheries"
    FRUITS = "Fruits"
    BEVERAGES = "Beverages"


class ExpiryStatus(str, Enum):
    EXPIRED = "Expired"
    NOT_EXPIRED = "Not Expired"


class ReportFormat(str, Enum):
    XLSX = "xlsx"
    CSV = "csv"


# =============================================================================
# DATE HELPERS
# =============================================================================

def parse_naive_datetime(value: Any) -> Any:
    """
    Normalize a delivery date into a timezone-naive datetime.

    Date-only strings and ``date`` objects become midnight of that day.
    Offset-carrying values are converted to local wall-clock time first.
    Anything else is left for pydantic to validate.
    """
    if value is None or value == "":
        return None
    if isinstance(value, str) and len(value) == 10:
        value = date.fromisoformat(value)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime(value.year, value.month, value.day)
    return value


def strip_timezone(value: Optional[datetime]) -> Optional[datetime]:
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


# =============================================================================
# ACCEPTED ORDER SCHEMAS
# =============================================================================

class AcceptedOrderBase(BaseModel):
    """Fields shared by every accepted-order payload."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    supplier_name: str = Field(..., alias="supplierName", min_length=1, examples=["Acme Foods"])
    order_quantity: int = Field(..., alias="orderQuantity", ge=0, examples=[10])
    category: str = Field(..., min_length=1, examples=["Meat"])
    amount: int = Field(..., ge=0, examples=[8])
    delivery_date: datetime = Field(..., alias="deliveryDate", examples=["2024-06-01T00:00:00"])
    special_note: Optional[str] = Field(None, alias="specialNote")

    @field_validator("supplier_name")
    @classmethod
    def validate_supplier_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Supplier name must not be blank")
        return v

    @field_validator("delivery_date", mode="before")
    @classmethod
    def parse_delivery_date(cls, v: Any) -> Any:
        return parse_naive_datetime(v)

    @field_validator("delivery_date")
    @classmethod
    def make_delivery_date_naive(cls, v: datetime) -> datetime:
        return strip_timezone(v)


class AcceptedOrderCreate(AcceptedOrderBase):
    """Request schema for storing a newly accepted order."""


class AcceptedOrderReplace(AcceptedOrderBase):
    """
    Request schema for a full-document replace.

    Clients usually send back the whole record including ``_id``; the
    identifier in the URL is the one that counts.
    """
    id: Optional[str] = Field(None, alias="_id")


class AcceptedOrder(AcceptedOrderBase):
    """An accepted order as held by the store and the review engine."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    id: str = Field(..., alias="_id", min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    def to_document(self) -> dict[str, Any]:
        """Serialize using the store's wire field names."""
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# FILTER CRITERIA
# =============================================================================

class FilterCriteria(BaseModel):
    """
    Filter criteria held by a review session.

    An empty value disables its predicate.
    """

    model_config = ConfigDict(populate_by_name=True)

    category: Optional[str] = None
    delivery_date_cutoff: Optional[datetime] = Field(None, alias="deliveryDateCutoff")
    supplier_search_term: Optional[str] = Field(None, alias="search")

    @field_validator("delivery_date_cutoff", mode="before")
    @classmethod
    def parse_cutoff(cls, v: Any) -> Any:
        return parse_naive_datetime(v)

    @field_validator("delivery_date_cutoff")
    @classmethod
    def make_cutoff_naive(cls, v: Optional[datetime]) -> Optional[datetime]:
        return strip_timezone(v)

    @property
    def is_empty(self) -> bool:
        return not (self.category or self.delivery_date_cutoff or self.supplier_search_term)


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class CategoryListResponse(BaseModel):
    """Categories offered by the filter drop-down."""
    categories: List[str]


class ReportJobResponse(BaseModel):
    """Response after queuing a background report export."""
    success: bool
    message: str
    task_id: str


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    database: str
    redis: str
    timestamp: datetime
