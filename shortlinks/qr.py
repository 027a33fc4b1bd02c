"""QR code links for short URLs.

Images are rendered by an external service; this module only builds the
request URL pointing at it.
"""

from urllib.parse import urlencode

__all__ = ["build_qr_code_url"]


def build_qr_code_url(service_url: str, data: str, size: int = 200) -> str:
    assert size > 0, f"size must be positive, got {size!r}"
    query = urlencode({"size": f"{size}x{size}", "data": data})
    return f"{service_url}?{query}"
