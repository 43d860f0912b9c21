# api_responses.py
import json
from decimal import Decimal, ROUND_HALF_UP

from django.http import JsonResponse

TWO_PLACES = Decimal("0.01")
MAX_ID = 2 ** 63 - 1


_UNSET = object()


def ok(data=_UNSET, status=200, **extra):
    body = {"success": True}
    if data is not _UNSET:
        body["data"] = data
    body.update(extra)
    return JsonResponse(body, status=status)


def fail(message, code, status=400):
    return JsonResponse({"success": False, "error": {"message": message, "code": code}}, status=status)


def read_json(request):
    """
    Body of a JSON request as a dict. Empty body reads as {}.
    Raises ValueError on malformed JSON or a non-object payload.
    """
    cached = getattr(request, "_cached_json", None)
    if cached is not None:
        return cached
    try:
        data = json.loads(request.body or b"{}")
    except json.JSONDecodeError as e:
        raise ValueError("Invalid JSON") from e
    if not isinstance(data, dict):
        raise ValueError("JSON body must be an object")
    request._cached_json = data
    return data


def parse_id(raw):
    """Integer primary key from a path segment, or None."""
    raw = str(raw or "").strip()
    if not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    # bigint primary keys
    return value if value <= MAX_ID else None


def parse_bool(value):
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def quantize(value) -> Decimal:
    return Decimal(value).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def to_money(value):
    if value is None:
        return None
    return float(quantize(value))


def iso(dt):
    return dt.isoformat() if dt else None
