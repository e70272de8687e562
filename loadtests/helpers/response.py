"""Error reading for Welcome Winks API responses.

Domain rejections come back as ``{"error": {field: [messages]}, "correlation_id": ...}``
(ValidationError) or ``{"error": "message"}`` (not found). Request body
problems caught by FastAPI come back as ``{"detail": [{"loc": [...], "msg": ...}]}``.
"""

from requests import JSONDecodeError, Response

MAX_DETAIL = 300

# Error fields of the rating and report rules an ordinary user can trip.
EXPECTED_REJECTION_FIELDS = frozenset({"device", "rate_limit", "account", "report"})


def error_messages(response: Response) -> dict[str, list[str]]:
    """Field -> messages for an error response; non-field errors land under ``""``."""
    try:
        body = response.json()
    except JSONDecodeError:
        return {"": [(response.text or "")[:MAX_DETAIL] or "(empty response body)"]}

    if not isinstance(body, dict):
        return {"": [str(body)[:MAX_DETAIL]]}

    if isinstance(body.get("detail"), list):
        messages: dict[str, list[str]] = {}
        for err in body["detail"]:
            field = ".".join(str(p) for p in err.get("loc", []) if p != "body")
            messages.setdefault(field, []).append(err.get("msg", str(err)))
        return messages

    error = body.get("error", body.get("detail"))
    if isinstance(error, dict):
        return {field: msgs if isinstance(msgs, list) else [str(msgs)] for field, msgs in error.items()}
    return {"": [str(error)[:MAX_DETAIL]]}


def extract_error_detail(response: Response) -> str:
    """One-line summary for Locust failure messages, with the correlation id when present."""
    parts = [
        f"{field}: {'; '.join(msgs)}" if field else "; ".join(msgs)
        for field, msgs in error_messages(response).items()
    ]
    detail = " | ".join(parts)[:MAX_DETAIL]

    try:
        correlation_id = response.json().get("correlation_id")
    except (JSONDecodeError, AttributeError):
        correlation_id = None
    return f"{detail} [correlation_id={correlation_id}]" if correlation_id else detail


def is_expected_rejection(response: Response) -> bool:
    """True for a 400 caused only by the per-user and per-device rating rules."""
    if response.status_code != 400:
        return False
    fields = set(error_messages(response))
    return bool(fields) and fields <= EXPECTED_REJECTION_FIELDS
