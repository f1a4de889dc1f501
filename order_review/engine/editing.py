"""
Edit Buffer

Schema-driven staging of a single accepted order under edit. Every editable
field is described once (input kind plus validator) and ``stage`` validates
by lookup. Fields may be addressed by attribute name or by wire name.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

from pydantic import NonNegativeInt, TypeAdapter, ValidationError

from order_review.core.exceptions import StagingError
from order_review.schemas import AcceptedOrder, parse_naive_datetime, strip_timezone

_int_adapter = TypeAdapter(NonNegativeInt)
_str_adapter = TypeAdapter(str)
_optional_str_adapter = TypeAdapter(Optional[str])
_datetime_adapter = TypeAdapter(datetime)


def _required_text(value: Any) -> str:
    text = _str_adapter.validate_python(value)
    if not text.strip():
        raise ValueError("must not be blank")
    return text


def _non_empty_text(value: Any) -> str:
    text = _str_adapter.validate_python(value)
    if not text:
        raise ValueError("must not be empty")
    return text


def _optional_text(value: Any) -> Optional[str]:
    return _optional_str_adapter.validate_python(value)


def _non_negative_int(value: Any) -> int:
    return _int_adapter.validate_python(value)


def _naive_datetime(value: Any) -> datetime:
    parsed = _datetime_adapter.validate_python(parse_naive_datetime(value))
    return strip_timezone(parsed)


@dataclass(frozen=True)
class FieldSpec:
    attribute: str
    alias: str
    input_type: str
    validator: Callable[[Any], Any]


EDITABLE_FIELDS: dict[str, FieldSpec] = {
    spec.attribute: spec
    for spec in (
        FieldSpec("supplier_name", "supplierName", "text", _required_text),
        FieldSpec("order_quantity", "orderQuantity", "number", _non_negative_int),
        FieldSpec("category", "category", "text", _non_empty_text),
        FieldSpec("amount", "amount", "number", _non_negative_int),
        FieldSpec("delivery_date", "deliveryDate", "date", _naive_datetime),
        FieldSpec("special_note", "specialNote", "text", _optional_text),
    )
}

_FIELDS_BY_ALIAS = {spec.alias: spec for spec in EDITABLE_FIELDS.values()}


def resolve_field(name: str) -> FieldSpec:
    """Look up an editable field by attribute or wire name."""
    spec = EDITABLE_FIELDS.get(name) or _FIELDS_BY_ALIAS.get(name)
    if spec is None:
        raise StagingError(name, "not an editable field")
    return spec


@dataclass
class EditBuffer:
    """Staged copy of one accepted order. The id is never editable."""
    order_id: str
    original: AcceptedOrder
    values: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_order(cls, order: AcceptedOrder) -> "EditBuffer":
        values = {name: getattr(order, name) for name in EDITABLE_FIELDS}
        return cls(order_id=order.id, original=order, values=values)

    def stage(self, name: str, value: Any) -> Any:
        spec = resolve_field(name)
        try:
            cleaned = spec.validator(value)
        except (ValidationError, ValueError) as e:
            raise StagingError(spec.attribute, str(e)) from e
        # The staged document must still be a valid order as a whole.
        candidate = self._build({**self.values, spec.attribute: cleaned})
        cleaned = getattr(candidate, spec.attribute)
        self.values[spec.attribute] = cleaned
        return cleaned

    @property
    def is_dirty(self) -> bool:
        return any(
            getattr(self.original, name) != value for name, value in self.values.items()
        )

    def to_order(self) -> AcceptedOrder:
        """Full replacement document for the store."""
        return self._build(self.values)

    def _build(self, values: dict[str, Any]) -> AcceptedOrder:
        try:
            return AcceptedOrder(id=self.order_id, **values)
        except ValidationError as e:
            errors = e.errors()
            location = errors[0]["loc"] if errors and errors[0]["loc"] else ("order",)
            raise StagingError(str(location[0]), str(e)) from e
