# apps/common/params.py
"""
Parsing de query params / body con errores 400 uniformes.
"""

from datetime import date

from rest_framework.exceptions import ValidationError


def int_param(params, name, required=False, default=None):
    raw = params.get(name)
    if raw in (None, ""):
        if required:
            raise ValidationError({name: ["This field is required."]})
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError({name: ["Must be a positive integer."]})
    if value <= 0:
        raise ValidationError({name: ["Must be a positive integer."]})
    return value


def int_list_param(params, name):
    """Acepta "1,2,3" (query string) o [1, 2, 3] (JSON)."""
    raw = params.get(name)
    if raw in (None, "", []):
        return []
    items = raw if isinstance(raw, (list, tuple)) else str(raw).split(",")
    values = []
    for item in items:
        item = str(item).strip()
        if not item:
            continue
        if not item.isdigit() or int(item) <= 0:
            raise ValidationError({name: [f"Invalid id: {item}"]})
        values.append(int(item))
    return values


def date_param(params, name, required=False, default=None):
    raw = params.get(name)
    if raw in (None, ""):
        if required:
            raise ValidationError({name: ["This field is required."]})
        return default
    try:
        return date.fromisoformat(str(raw))
    except ValueError:
        raise ValidationError({name: ["Date must be YYYY-MM-DD."]})


def checked_items(data):
    """Body de bulk delete: {"checkedItems": [ids]} -> lista de ints sin duplicados."""
    ids = int_list_param(data, "checkedItems")
    if not ids:
        raise ValidationError({"checkedItems": ["Select at least one item."]})
    return list(dict.fromkeys(ids))
