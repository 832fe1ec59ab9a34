import io
import json
from typing import Any

from pydantic import BaseModel

from htmljson.escaper import StreamEscaper


def escape_bytes(data: bytes, chunk_size: int | None = None) -> bytes:
    if chunk_size is not None and chunk_size < 1:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size}.")
    buffer = io.BytesIO()
    with StreamEscaper(buffer) as escaper:
        if chunk_size is None:
            escaper.process(data)
        else:
            for start in range(0, len(data), chunk_size):
                escaper.process(data[start : start + chunk_size])
    return buffer.getvalue()


def escape_text(text: str) -> str:
    return escape_bytes(text.encode("utf-8")).decode("utf-8")


def dumps(obj: Any, **json_kwargs: Any) -> str:
    """``json.dumps`` whose string values are safe to place inside HTML."""
    return escape_text(json.dumps(obj, **json_kwargs))


def dump_model(model: BaseModel, **dump_kwargs: Any) -> str:
    """Serialize a pydantic model to JSON that is safe to place inside HTML."""
    return escape_text(model.model_dump_json(**dump_kwargs))
