"""Response error extraction for load test observability.

Parses PetalBox API error envelopes into human-readable messages:
``{"success": false, "error": "msg", "code": "...", "details"?: {field: [msgs]}}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON, return raw text truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict) or "error" not in body:
        return str(body)[:300]

    message = f"{body.get('code', 'ERROR')}: {body['error']}"
    details = body.get("details")
    if isinstance(details, dict):
        fields = " | ".join(f"{field}: {', '.join(map(str, msgs))}" for field, msgs in details.items())
        message = f"{message} ({fields})"
    return message
