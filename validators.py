"""Caption payload validation at the service boundary."""

from __future__ import annotations

from config import DEFAULT_MAX_PAYLOAD_BYTES


class InvalidPayloadError(Exception):
    """Raised when a caption payload is not a string or exceeds the size budget."""


def validate_payload(raw: object, max_bytes: int = DEFAULT_MAX_PAYLOAD_BYTES) -> str:
    """Check a caption payload before it reaches the parser.

    Empty and whitespace-only payloads are valid; they parse to empty results.
    A *max_bytes* of 0 disables the size check.

    Returns:
        The payload unchanged.

    Raises:
        InvalidPayloadError: If *raw* is not a str or is larger than *max_bytes*.
    """
    if not isinstance(raw, str):
        raise InvalidPayloadError(
            f"Caption payload must be a string, got {type(raw).__name__}"
        )
    if max_bytes:
        size = len(raw.encode("utf-8", errors="surrogatepass"))
        if size > max_bytes:
            raise InvalidPayloadError(
                f"Caption payload is {size} bytes, limit is {max_bytes}"
            )
    return raw
