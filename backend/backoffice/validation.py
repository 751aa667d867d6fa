from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeMeta

from backoffice.time_utils import as_naive_utc, parse_iso_datetime


# Prices in Won; anything above this is a data entry mistake
MAX_PRICE_WON = 999_999_999

ORDER_STATUSES = ("pending", "processing", "shipped", "delivered", "cancelled")
PAYMENT_STATUSES = ("pending", "completed", "failed")


class BackofficeError(Exception):
    """Base for errors that map to an explicit failure result."""

    status_code = 500

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_result(self) -> dict:
        result = {"success": False, "error": self.message}
        result.update(self.details)
        return result


class ValidationError(BackofficeError, ValueError):
    """400-level input problem."""

    status_code = 400


class NotFoundError(BackofficeError, LookupError):
    """404: referenced brand/product/variant/order does not exist."""

    status_code = 404


class ConflictError(BackofficeError, ValueError):
    """409-level business rule conflict (e.g., deleting a brand that owns products)."""

    status_code = 409


class StoreError(BackofficeError):
    """The data store call itself failed; carries the store's message."""

    status_code = 500


def require_json_object(payload: Any) -> dict:
    """Request body as a dict; a missing body is empty, anything but an object is rejected."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    return payload


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - writable_fields: what clients are allowed to set
    - required_on_create: fields required for POST
    - list_fields: JSON columns that must hold a list of strings
    """
    writable_fields: set[str]
    required_on_create: set[str] = field(default_factory=set)
    list_fields: set[str] = field(default_factory=set)


def _columns_by_key(model: DeclarativeMeta) -> dict[str, Any]:
    mapper = model.__mapper__
    return {c.key: c for c in mapper.columns}


def _coerce_int(key: str, value: Any) -> int:
    # bool is a subclass of int
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        if "e" in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        if "." in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def _coerce_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    # HTML checkboxes post "on"
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"on", "true", "1", "yes"}:
            return True
        if lowered in {"", "off", "false", "0", "no"}:
            return False
    if isinstance(value, int):
        return bool(value)
    raise ValidationError(f"{key} must be a boolean")


def _coerce_string_list(key: str, value: Any) -> list[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValidationError(f"{key} must be a list of strings")
    items = []
    for item in value:
        if not isinstance(item, str):
            raise ValidationError(f"{key} must be a list of strings")
        item = item.strip()
        # empty upload slots are dropped
        if item:
            items.append(item)
    return items


def _coerce_value(col, value: Any, policy: ModelValidationPolicy):
    coltype = col.type

    if value is None:
        return None

    if col.key in policy.list_fields or isinstance(coltype, JSON):
        return _coerce_string_list(col.key, value)

    if isinstance(coltype, Integer):
        return _coerce_int(col.key, value)

    if isinstance(coltype, Boolean):
        return _coerce_bool(col.key, value)

    # Datetimes (accept ISO-8601 strings; normalize to UTC)
    if isinstance(coltype, DateTime):
        if isinstance(value, datetime):
            return value
        if isinstance(value, str):
            if not value.strip():
                return None
            try:
                dt = parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"{col.key} must be an ISO-8601 datetime")
            return dt
        raise ValidationError(f"{col.key} must be a datetime")

    if isinstance(coltype, (String, Text)):
        return str(value).strip()

    return value


def validate_payload(
    *,
    model: DeclarativeMeta,
    payload: dict,
    policy: ModelValidationPolicy,
    partial: bool,
) -> dict:
    """
    Validates + normalizes incoming JSON against:
    - SQLAlchemy column metadata (nullable, type, String length)
    - a policy allowlist (writable_fields)
    - required_on_create (if partial=False)
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    payload = require_json_object(payload)

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cols = _columns_by_key(model)

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")
        if k not in cols:
            raise ValidationError(f"Unknown field: {k}")

    patch: dict = {}

    for k, raw in payload.items():
        col = cols[k]

        if raw is None:
            if not col.nullable:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(col, raw, policy)

        if val is None and not col.nullable:
            raise ValidationError(f"{k} cannot be null")

        # Blank string check for non-nullable text fields
        if isinstance(col.type, (String, Text)) and not col.nullable:
            if isinstance(val, str) and val == "":
                raise ValidationError(f"{k} cannot be blank")

        # Blank optional strings are stored as NULL
        if isinstance(col.type, (String, Text)) and col.nullable and val == "":
            val = None

        if isinstance(col.type, String) and col.type.length and isinstance(val, str):
            if len(val) > col.type.length:
                raise ValidationError(f"{k} exceeds max length {col.type.length}")

        patch[k] = val

    return patch


def _require_non_negative(patch: dict, key: str) -> None:
    if key in patch and patch[key] is not None and patch[key] < 0:
        raise ValidationError(f"{key} must be >= 0")


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by SQLAlchemy metadata alone.
    Keep these small and centralized.
    """
    for key in ("price", "original_price"):
        _require_non_negative(patch, key)
        if patch.get(key) is not None and patch[key] > MAX_PRICE_WON:
            raise ValidationError(f"{key} cannot exceed {MAX_PRICE_WON:,} won")
    _require_non_negative(patch, "stock")


def enforce_rules_variant(patch: dict) -> None:
    if "size" in patch and not (patch["size"] or "").strip():
        raise ValidationError("size is required")
    _require_non_negative(patch, "stock")


def require_contract_window(start: datetime | None, end: datetime | None) -> None:
    start, end = as_naive_utc(start), as_naive_utc(end)
    if start is not None and end is not None and end < start:
        raise ValidationError("valid_period_end must not be before valid_period_start")


def enforce_rules_brand(patch: dict) -> None:
    require_contract_window(patch.get("valid_period_start"), patch.get("valid_period_end"))


def require_order_status(status: Any) -> str:
    if not isinstance(status, str) or status.strip() not in ORDER_STATUSES:
        raise ValidationError(f"status must be one of: {', '.join(ORDER_STATUSES)}")
    return status.strip()


def require_payment_status(status: Any) -> str:
    if not isinstance(status, str) or status.strip() not in PAYMENT_STATUSES:
        raise ValidationError(f"payment_status must be one of: {', '.join(PAYMENT_STATUSES)}")
    return status.strip()
