from enum import Enum
from typing import Awaitable, Callable, Dict, Protocol, runtime_checkable


class ScanMode(Enum):
    TOP = "top"
    IN_STRING = "in_string"
    SAW_BACKSLASH = "saw_backslash"
    # collecting the digits of a \uXXXX escape
    UNICODE_1 = "unicode_1"
    UNICODE_2 = "unicode_2"
    UNICODE_3 = "unicode_3"
    UNICODE_4 = "unicode_4"


UNICODE_MODES = (
    ScanMode.UNICODE_1,
    ScanMode.UNICODE_2,
    ScanMode.UNICODE_3,
    ScanMode.UNICODE_4,
)

PASS_THROUGH_MODES = (ScanMode.TOP, ScanMode.IN_STRING)

ESCAPED_GT = b"&gt;"
ESCAPED_LT = b"&lt;"
ESCAPED_AMP = b"&amp;"
ESCAPED_SINGLE_QUOTE = b"&#x27;"
ESCAPED_DOUBLE_QUOTE = b"&quot;"

# keyed by byte value, as produced by iterating over `bytes`
ESCAPE_TABLE: Dict[int, bytes] = {
    ord('"'): ESCAPED_DOUBLE_QUOTE,
    ord("&"): ESCAPED_AMP,
    ord("<"): ESCAPED_LT,
    ord(">"): ESCAPED_GT,
    ord("'"): ESCAPED_SINGLE_QUOTE,
}

QUOTE = ord('"')
BACKSLASH = ord("\\")
LOWER_U = ord("u")

type BytesLike = bytes | bytearray | memoryview


@runtime_checkable
class IByteSink(Protocol):
    def write(self, data: bytes, /) -> object:
        """Write bytes downstream. Raising signals a failed write."""
        ...


@runtime_checkable
class IAsyncByteSink(Protocol):
    async def write(self, data: bytes, /) -> object:
        """Write bytes downstream. Raising signals a failed write."""
        ...


type SinkCallable = Callable[[bytes], object]
type AsyncSinkCallable = Callable[[bytes], Awaitable[object]]
