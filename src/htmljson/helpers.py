from typing import Callable

from htmljson.error import NotBytesLikeError
from htmljson.types import BytesLike, IByteSink

HEX_DIGITS = frozenset(b"0123456789abcdefABCDEF")


def as_bytes(chunk: BytesLike) -> bytes:
    if isinstance(chunk, bytes):
        return chunk
    if isinstance(chunk, (bytearray, memoryview)):
        return bytes(chunk)
    raise NotBytesLikeError(actual_type=type(chunk).__name__)


def decode_hex_low_byte(digits: bytes) -> int | None:
    """
    Decode the four digits of a ``\\uXXXX`` escape.

    Returns the value when all four bytes are hex digits and the value fits in
    a single byte, otherwise ``None``. Callers treat ``None`` as "no match".
    """
    if len(digits) != 4 or not all(d in HEX_DIGITS for d in digits):
        return None
    value = int(digits, 16)
    if value > 0xFF:
        return None
    return value


def resolve_write(sink: object) -> Callable[[bytes], object]:
    if isinstance(sink, IByteSink):
        return sink.write
    if callable(sink):
        return sink
    raise TypeError(
        f"Sink must have a write() method or be callable, got {type(sink).__name__}."
    )


def is_plausibly_escaped(s: str) -> bool:
    """
    Best-effort check whether ``s`` looks HTML escaped.

    Not authoritative and not used by the escaper itself. Any of ``<``, ``>``,
    ``'`` or ``"`` means not escaped. Text without those and without ``&`` is
    escaped. Text with a bare ``&`` is reported as escaped without checking
    that it starts a real entity.
    """
    if any(ch in s for ch in "<>'\""):
        return False
    if "&" not in s:
        return True
    # TODO: validate that each '&' begins a named or numeric entity
    return True


is_html_escaped = is_plausibly_escaped
