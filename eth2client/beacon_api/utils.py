"""Beacon API utility functions."""

from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def to_hex(value, length: int = 0) -> str:
    """Convert a bytes or int value to hex string with 0x prefix."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex()
    elif isinstance(value, int):
        if length > 0:
            return "0x" + format(value, f'0{length * 2}x')
        return hex(value)
    return str(value)


def url_for_call(base_url: str, endpoint: str, query: str = "") -> str:
    """Join the node address with an endpoint path and query.

    Query parameters already on the base address (e.g. API keys) are kept
    ahead of the call's own parameters.
    """
    base = urlsplit(base_url)
    path = base.path.rstrip("/") + "/" + endpoint.lstrip("/")

    params = parse_qsl(base.query, keep_blank_values=True)
    if query:
        params.extend(parse_qsl(query.lstrip("?"), keep_blank_values=True))
    encoded = urlencode(params).replace("=&", "&")
    if encoded.endswith("="):
        encoded = encoded[:-1]
    return urlunsplit((base.scheme, base.netloc, path, encoded, ""))


__all__ = ["to_hex", "url_for_call"]
