"""
Editor capability surface.

The conversion pipeline never touches a real editor widget. It talks to an
Editor: selection access, range replacement and whole-document reads. Hosts
adapt their widget to this interface; TextBuffer is the in-memory version
used by the HTTP function and the tests.
"""

from abc import ABC, abstractmethod
from typing import NamedTuple, Optional


class EditorPosition(NamedTuple):
    line: int
    ch: int


def position_from_index(text: str, index: int) -> EditorPosition:
    """Convert a character offset in text to a line/column position."""
    before = text[:index]
    line = before.count('\n')
    ch = index - (before.rfind('\n') + 1)
    return EditorPosition(line, ch)


def index_from_position(text: str, pos: EditorPosition) -> int:
    """Convert a line/column position back to a character offset."""
    lines = text.split('\n')
    if pos.line >= len(lines):
        return len(text)
    offset = sum(len(line) + 1 for line in lines[:pos.line])
    return offset + min(pos.ch, len(lines[pos.line]))


class Editor(ABC):
    @abstractmethod
    def get_value(self) -> str:
        pass

    @abstractmethod
    def get_selection(self) -> str:
        pass

    @abstractmethod
    def replace_selection(self, text: str) -> None:
        pass

    @abstractmethod
    def replace_range(self, text: str, start: EditorPosition,
                      end: Optional[EditorPosition] = None) -> None:
        pass

    @abstractmethod
    def get_cursor(self) -> EditorPosition:
        """Insertion point: the start of the selection."""
        pass

    @abstractmethod
    def get_line(self, line: int) -> str:
        pass


class TextBuffer(Editor):
    """A plain string document with a single selection."""

    def __init__(self, value: str = '', selection: Optional[tuple] = None):
        self.value = value
        if selection is None:
            selection = (len(value), len(value))
        start, end = selection
        if not 0 <= start <= end <= len(value):
            raise ValueError(f"Selection {selection} out of range for document of length {len(value)}")
        self.sel_start = start
        self.sel_end = end

    def get_value(self) -> str:
        return self.value

    def get_selection(self) -> str:
        return self.value[self.sel_start:self.sel_end]

    def set_selection(self, start: int, end: Optional[int] = None) -> None:
        self.sel_start = start
        self.sel_end = start if end is None else end

    def replace_selection(self, text: str) -> None:
        self.value = self.value[:self.sel_start] + text + self.value[self.sel_end:]
        self.sel_start = self.sel_end = self.sel_start + len(text)

    def replace_range(self, text: str, start: EditorPosition,
                      end: Optional[EditorPosition] = None) -> None:
        begin = index_from_position(self.value, start)
        finish = begin if end is None else index_from_position(self.value, end)
        delta = len(text) - (finish - begin)

        def shift(offset):
            if offset >= finish and offset > begin:
                return offset + delta
            if offset > begin:
                return begin + len(text)
            if offset == begin and finish == begin:
                # Insertions at the cursor push it forward
                return offset + delta
            return offset

        self.value = self.value[:begin] + text + self.value[finish:]
        self.sel_start, self.sel_end = shift(self.sel_start), shift(self.sel_end)

    def get_cursor(self) -> EditorPosition:
        return position_from_index(self.value, self.sel_start)

    def get_line(self, line: int) -> str:
        lines = self.value.split('\n')
        return lines[line] if 0 <= line < len(lines) else ''
