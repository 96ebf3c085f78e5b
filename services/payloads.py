from __future__ import annotations

from typing import Mapping, Optional

from services.errors import ValidationError


def required_text(payload: Mapping, field: str, message: str | None = None) -> str:
    value = (payload.get(field) or "")
    value = value.strip() if isinstance(value, str) else str(value).strip()
    if not value:
        raise ValidationError(message or f"'{field}' es obligatorio.", field=field)
    return value


def optional_text(payload: Mapping, field: str) -> Optional[str]:
    value = payload.get(field)
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def optional_int(payload: Mapping, field: str) -> Optional[int]:
    raw = payload.get(field)
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValidationError(f"'{field}' debe ser un número entero.", field=field)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"'{field}' debe ser un número entero.", field=field) from exc


def optional_bool(payload: Mapping, field: str, default: bool = False) -> bool:
    raw = payload.get(field)
    if raw is None or raw == "":
        return default
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in {"true", "1", "sim", "si", "sí", "yes", "on"}
