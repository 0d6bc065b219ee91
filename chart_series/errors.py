from __future__ import annotations


class SeriesDataError(ValueError):
    """Raised when records or series definitions cannot be interpreted."""


class UnregisteredLineError(SeriesDataError, KeyError):
    """Raised when a query names a line id that was never registered."""

    def __init__(self, line_id: int, line_count: int) -> None:
        super().__init__(f"line id {line_id} is not registered ({line_count} lines registered)")
        self.line_id = line_id
        self.line_count = line_count

    def __str__(self) -> str:
        return str(self.args[0])
