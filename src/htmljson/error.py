from htmljson.types import ScanMode


class SinkWriteError(Exception):
    def __init__(self, mode: ScanMode, cause: BaseException) -> None:
        super().__init__(
            f"Sink write failed in scan mode '{mode.value}': {type(cause).__name__}: {cause}"
        )
        self.mode = mode
        self.cause = cause


class StreamClosedError(ValueError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            "Cannot process input on a closed stream"
            + (f": {message}" if message else "")
        )


class NotBytesLikeError(TypeError):
    def __init__(self, actual_type: str) -> None:
        super().__init__(
            f"Expected a bytes-like chunk (bytes, bytearray or memoryview), got {actual_type}"
        )
        self.actual_type = actual_type
