"""Byte-range source editing.

Code generation never re-prints a syntax tree. Every transformation is
recorded as a replacement of a byte range of the original source, and the
edits are applied back to front, so untouched code is emitted verbatim and
the output is byte-identical for identical edits.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SourceEdit:
    start: int
    end: int
    text: bytes
    seq: int = 0


class OverlappingEditError(ValueError):
    """Two edits partially overlap and cannot both be applied."""


class SourceEditor:
    """Collects byte-range edits against one source and applies them."""

    def __init__(self, source: str | bytes):
        self.source = source.encode("utf-8") if isinstance(source, str) else source
        self._edits: list[SourceEdit] = []

    def __len__(self) -> int:
        return len(self._edits)

    def replace(self, start: int, end: int, text: str) -> None:
        if start > end or start < 0 or end > len(self.source):
            raise ValueError(f"Invalid edit range {start}:{end}")
        self._edits.append(
            SourceEdit(start, end, text.encode("utf-8"), seq=len(self._edits))
        )

    def insert(self, position: int, text: str) -> None:
        self.replace(position, position, text)

    def delete(self, start: int, end: int, trailing_newline: bool = True) -> None:
        """Delete a range, optionally swallowing the newline that follows it."""
        if trailing_newline:
            while end < len(self.source) and self.source[end : end + 1] in (b" ", b"\t"):
                end += 1
            if self.source[end : end + 1] == b"\n":
                end += 1
        self.replace(start, end, "")

    def apply(self) -> str:
        """Apply all edits and return the new source text.

        Edits nested inside a larger replaced range are discarded, the
        outer edit wins. Partially overlapping edits raise. An insertion at
        the start of a replaced range lands before the replacement text.
        """
        accepted: list[SourceEdit] = []
        covered_until = -1
        for edit in sorted(
            self._edits, key=lambda e: (e.start, e.end > e.start, -(e.end - e.start), e.seq)
        ):
            if edit.start < covered_until:
                if edit.end <= covered_until:
                    continue
                raise OverlappingEditError(
                    f"Edit {edit.start}:{edit.end} overlaps a previous edit ending at {covered_until}"
                )
            accepted.append(edit)
            if edit.end > edit.start:
                covered_until = edit.end

        output = bytearray(self.source)
        for edit in reversed(accepted):
            output[edit.start : edit.end] = edit.text
        return output.decode("utf-8")
