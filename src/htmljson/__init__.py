from htmljson.error import SinkWriteError, StreamClosedError
from htmljson.escaper import AsyncStreamEscaper, StreamEscaper, new_encoder
from htmljson.helpers import is_html_escaped, is_plausibly_escaped
from htmljson.serialize import dump_model, dumps, escape_bytes, escape_text
from htmljson.state import ScanState
from htmljson.types import ScanMode

__all__ = [
    "AsyncStreamEscaper",
    "ScanMode",
    "ScanState",
    "SinkWriteError",
    "StreamClosedError",
    "StreamEscaper",
    "dump_model",
    "dumps",
    "escape_bytes",
    "escape_text",
    "is_html_escaped",
    "is_plausibly_escaped",
    "new_encoder",
]
