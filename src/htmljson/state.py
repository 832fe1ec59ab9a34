from htmljson.types import UNICODE_MODES, ScanMode


class ScanState:
    """
    Position of the scanner relative to JSON string literals.

    ``pending_hex`` holds the digits of a ``\\uXXXX`` escape received so far.
    It survives across chunks, which is what lets an escape be split anywhere.
    """

    def __init__(self) -> None:
        self._mode: ScanMode = ScanMode.TOP
        self._pending_hex = bytearray()

    @property
    def mode(self) -> ScanMode:
        return self._mode

    @property
    def pending_hex(self) -> bytes:
        return bytes(self._pending_hex)

    def set_mode(self, new_mode: ScanMode) -> None:
        self._mode = new_mode

    def push_hex(self, digit: int) -> None:
        if len(self._pending_hex) >= 4:
            raise IndexError("Unicode escape already holds four digits.")
        self._pending_hex.append(digit)

    def clear_hex(self) -> None:
        self._pending_hex.clear()

    def held_bytes(self) -> bytes:
        """Raw input bytes consumed into an escape that has not resolved yet."""
        if self._mode is ScanMode.SAW_BACKSLASH:
            return b"\\"
        if self._mode in UNICODE_MODES:
            return b"\\u" + bytes(self._pending_hex)
        return b""
