from __future__ import annotations

import inspect
import logging
from types import TracebackType
from typing import Awaitable, Callable, Iterator, Optional, Tuple, Type, cast

from htmljson.error import SinkWriteError, StreamClosedError
from htmljson.helpers import as_bytes, decode_hex_low_byte, resolve_write
from htmljson.state import ScanState
from htmljson.types import (
    BACKSLASH,
    ESCAPE_TABLE,
    ESCAPED_DOUBLE_QUOTE,
    LOWER_U,
    PASS_THROUGH_MODES,
    QUOTE,
    AsyncSinkCallable,
    BytesLike,
    IAsyncByteSink,
    IByteSink,
    ScanMode,
    SinkCallable,
)

logger = logging.getLogger(__name__)

_NEXT_UNICODE_MODE = {
    ScanMode.UNICODE_1: ScanMode.UNICODE_2,
    ScanMode.UNICODE_2: ScanMode.UNICODE_3,
    ScanMode.UNICODE_3: ScanMode.UNICODE_4,
}


def scan(state: ScanState, data: bytes) -> Iterator[Tuple[bytes, ScanMode]]:
    """
    Run ``data`` through the state machine and yield the output pieces.

    Each piece comes with the mode to restore if writing it fails. For a
    substituted byte that is the mode before the byte, which the state has not
    left yet. For a run of plain bytes it is the mode at the start of the run,
    since the state has already moved past every byte in it.
    """
    last = 0
    run_mode = state.mode
    for pos, c in enumerate(data):
        mode = state.mode

        if mode is ScanMode.TOP:
            if c == QUOTE:
                state.set_mode(ScanMode.IN_STRING)

        elif mode is ScanMode.IN_STRING:
            if c == QUOTE:
                state.set_mode(ScanMode.TOP)
            elif c == BACKSLASH:
                # backslash is a barrier: write what came before it so a split
                # escape never shares a write with the plain run
                if last < pos:
                    yield data[last:pos], run_mode
                last = pos + 1
                state.set_mode(ScanMode.SAW_BACKSLASH)
                run_mode = state.mode
            elif c in ESCAPE_TABLE:
                if last < pos:
                    yield data[last:pos], run_mode
                run_mode = mode
                yield ESCAPE_TABLE[c], mode
                last = pos + 1

        elif mode is ScanMode.SAW_BACKSLASH:
            if c == QUOTE:
                yield ESCAPED_DOUBLE_QUOTE, mode
                state.set_mode(ScanMode.IN_STRING)
            elif c == LOWER_U:
                state.clear_hex()
                state.set_mode(ScanMode.UNICODE_1)
            else:
                # some other escape, it is not in the table so pass it on
                yield bytes((BACKSLASH, c)), mode
                state.set_mode(ScanMode.IN_STRING)
            last = pos + 1
            run_mode = state.mode

        elif mode is ScanMode.UNICODE_4:
            digits = state.pending_hex + bytes((c,))
            value = decode_hex_low_byte(digits)
            entity = ESCAPE_TABLE.get(value) if value is not None else None
            yield (entity if entity is not None else b"\\u" + digits), mode
            state.clear_hex()
            state.set_mode(ScanMode.IN_STRING)
            last = pos + 1
            run_mode = state.mode

        else:
            state.push_hex(c)
            state.set_mode(_NEXT_UNICODE_MODE[mode])
            last = pos + 1
            run_mode = state.mode

    if last < len(data) and state.mode in PASS_THROUGH_MODES:
        yield data[last:], run_mode


class StreamEscaper:
    """
    Writable byte stream that makes serialized JSON safe to embed in HTML.

    Every chunk given to :meth:`process` is scanned as a continuation of the
    previous ones and the escaped result is written to ``sink``. Not safe for
    concurrent use; one escaper serves one output stream.
    """

    def __init__(self, sink: IByteSink | SinkCallable) -> None:
        self._write = resolve_write(sink)
        self._state = ScanState()
        self._closed = False

    @property
    def mode(self) -> ScanMode:
        return self._state.mode

    @property
    def closed(self) -> bool:
        return self._closed

    def process(self, chunk: BytesLike) -> int:
        if self._closed:
            raise StreamClosedError()
        data = as_bytes(chunk)
        for piece, restore_mode in scan(self._state, data):
            self._emit(piece, restore_mode)
        return len(data)

    def write(self, chunk: BytesLike) -> int:
        return self.process(chunk)

    def close(self) -> None:
        if self._closed:
            return
        held = self._state.held_bytes()
        if held:
            logger.debug(
                "Stream closed inside an escape sequence, writing %r verbatim", held
            )
            self._emit(held, self._state.mode)
            self._state.clear_hex()
            self._state.set_mode(ScanMode.IN_STRING)
        self._closed = True

    def _emit(self, piece: bytes, restore_mode: ScanMode) -> None:
        try:
            self._write(piece)
        except Exception as exc:
            self._state.set_mode(restore_mode)
            logger.warning("Sink write failed in mode %s: %s", restore_mode, exc)
            raise SinkWriteError(restore_mode, exc) from exc

    def __enter__(self) -> StreamEscaper:
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        # no further writes to a sink that has already failed
        if isinstance(exc, SinkWriteError):
            self._closed = True
            return
        self.close()


class AsyncStreamEscaper:
    """Same scan as :class:`StreamEscaper`, writing to an async sink."""

    def __init__(self, sink: IAsyncByteSink | AsyncSinkCallable) -> None:
        write = resolve_write(sink)
        if not (
            inspect.iscoroutinefunction(write)
            or inspect.iscoroutinefunction(getattr(write, "__call__", None))
        ):
            raise TypeError(
                f"Async sink must have a coroutine write() method or be an async callable, got {type(sink).__name__}."
            )
        self._write = cast(Callable[[bytes], Awaitable[object]], write)
        self._state = ScanState()
        self._closed = False

    @property
    def mode(self) -> ScanMode:
        return self._state.mode

    @property
    def closed(self) -> bool:
        return self._closed

    async def process(self, chunk: BytesLike) -> int:
        if self._closed:
            raise StreamClosedError()
        data = as_bytes(chunk)
        for piece, restore_mode in scan(self._state, data):
            await self._emit(piece, restore_mode)
        return len(data)

    async def write(self, chunk: BytesLike) -> int:
        return await self.process(chunk)

    async def close(self) -> None:
        if self._closed:
            return
        held = self._state.held_bytes()
        if held:
            logger.debug(
                "Stream closed inside an escape sequence, writing %r verbatim", held
            )
            await self._emit(held, self._state.mode)
            self._state.clear_hex()
            self._state.set_mode(ScanMode.IN_STRING)
        self._closed = True

    async def _emit(self, piece: bytes, restore_mode: ScanMode) -> None:
        try:
            await self._write(piece)
        except Exception as exc:
            self._state.set_mode(restore_mode)
            logger.warning("Sink write failed in mode %s: %s", restore_mode, exc)
            raise SinkWriteError(restore_mode, exc) from exc

    async def __aenter__(self) -> AsyncStreamEscaper:
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if isinstance(exc, SinkWriteError):
            self._closed = True
            return
        await self.close()


def new_encoder(sink: IByteSink | SinkCallable) -> StreamEscaper:
    return StreamEscaper(sink)
