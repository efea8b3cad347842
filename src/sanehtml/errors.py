"""Error records reported while parsing untrusted markup."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, repr=False)
class ParseError:
    """A recoverable parse error with location information.

    The parser never fails on malformed markup; these records only describe
    what it recovered from. Two errors are equal when code and position match.
    """

    code: str
    line: int | None = None
    column: int | None = None
    message: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.message:
            object.__setattr__(self, "message", self.code)

    @property
    def has_position(self) -> bool:
        return self.line is not None and self.column is not None

    def __repr__(self) -> str:
        if self.has_position:
            return f"ParseError({self.code!r}, line={self.line}, column={self.column})"
        return f"ParseError({self.code!r})"

    def __str__(self) -> str:
        text = self.code if self.message == self.code else f"{self.code} - {self.message}"
        if self.has_position:
            return f"({self.line},{self.column}): {text}"
        return text
