"""HMAC-SHA256 request signing for the Lalamove API v3."""

import hashlib
import hmac


def canonical_string(timestamp: int, method: str, path: str, body: str = "") -> str:
    """Build the string that gets signed for a request.

    The blank line between path and body is always present, even for
    requests without a body.

    Args:
        timestamp: Unix timestamp in milliseconds.
        method: HTTP method, e.g. "POST".
        path: API endpoint path (e.g. /v3/quotations).
        body: Serialized JSON body, or "" when there is none.

    Returns:
        The canonical string.
    """
    return f"{timestamp}\r\n{method}\r\n{path}\r\n\r\n{body}"


def sign(api_secret: str, timestamp: int, method: str, path: str, body: str = "") -> str:
    """Generate the HMAC-SHA256 signature for a Lalamove API request.

    Args:
        api_secret: Lalamove API secret.
        timestamp: Unix timestamp in milliseconds.
        method: HTTP method.
        path: API endpoint path.
        body: Serialized JSON body, or "".

    Returns:
        Lowercase hex-encoded HMAC-SHA256 signature string.
    """
    return hmac.new(
        api_secret.encode("utf-8"),
        canonical_string(timestamp, method, path, body).encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()


def authorization_header(api_key: str, timestamp: int, signature: str) -> str:
    return f"hmac {api_key}:{timestamp}:{signature}"
