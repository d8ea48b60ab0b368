# --- tmap_lib/span.py ---
import logging
from typing import Any, Iterator, List, Tuple

from . import value_tree as vt
from .errors import InvalidSpan, OutOfOrderExtension

log = logging.getLogger("tmap.span")


class Span:
    """An inclusive range of columns from a to b."""

    __slots__ = ("a", "b")

    def __init__(self, a: int, b: int):
        if a > b:
            raise InvalidSpan(a, b)
        self.a = a
        self.b = b

    def contains(self, x: int) -> bool:
        return self.a <= x <= self.b

    def size(self) -> int:
        return self.b - self.a + 1

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.a, self.b + 1))

    def __eq__(self, other):
        if not isinstance(other, Span):
            return NotImplemented
        return (self.a, self.b) == (other.a, other.b)

    def __repr__(self):
        return f"Span({self.a}, {self.b})"

    def to_value_tree(self) -> vt.Object:
        return vt.Object().add("a", vt.Number(self.a)).add("b", vt.Number(self.b))


class Span2d:
    """Run-length encoding of a region: one ordered list of spans per grid row."""

    def __init__(self, rows: List[List[Span]] = None):
        self.rows: List[List[Span]] = rows if rows is not None else []

    @classmethod
    def from_desc(cls, desc: List[List[Any]]) -> "Span2d":
        """
        Rebuilds a Span2d from its [[{"a": .., "b": ..}, ...], ...] form.

        Every row is replayed through a SpanBuilder, so overlapping or unsorted
        spans are rejected exactly as they would be during a scan. Touching
        spans in the description are merged.
        """
        builder = SpanBuilder()
        for row in desc:
            builder.start_row()
            for span_desc in row:
                span = Span(span_desc["a"], span_desc["b"])
                for x in span:
                    builder.extend(x)
        return builder.span2d

    @property
    def num_rows(self) -> int:
        return len(self.rows)

    def contains(self, x: int, y: int) -> bool:
        if y < 0 or y >= len(self.rows):
            return False
        return any(span.contains(x) for span in self.rows[y])

    def __iter__(self) -> Iterator[Tuple[int, int]]:
        """Yields every covered (x, y) cell, row by row."""
        for y, row in enumerate(self.rows):
            for span in row:
                for x in span:
                    yield x, y

    def __eq__(self, other):
        if not isinstance(other, Span2d):
            return NotImplemented
        return self.rows == other.rows

    def __repr__(self):
        return f"Span2d({self.rows!r})"

    def to_value_tree(self) -> vt.Array:
        rows_json = vt.Array()
        for row in self.rows:
            row_json = vt.Array()
            for span in row:
                row_json.append(span.to_value_tree())
            rows_json.append(row_json)
        return rows_json


class SpanBuilder:
    """
    Accumulates a Span2d from column indices presented in scan order.

    Call start_row() once per grid row, then extend(x) with strictly increasing
    columns for that row. Adjacent columns grow the last span; gaps open a new one.
    """

    def __init__(self):
        self._span2d = Span2d()

    @property
    def span2d(self) -> Span2d:
        return self._span2d

    def start_row(self):
        self._span2d.rows.append([])

    def extend(self, x: int):
        if not self._span2d.rows:
            self.start_row()

        row = self._span2d.rows[-1]
        if not row:
            row.append(Span(x, x))
            return

        last = row[-1]
        if x == last.b + 1:
            last.b = x
        elif x > last.b + 1:
            row.append(Span(x, x))
        else:
            log.debug("Rejected column %d after %r", x, last)
            raise OutOfOrderExtension(x, last.b)


def rect_span2d(x: int, y: int, w: int, h: int) -> Span2d:
    """
    Builds the Span2d of a w x h block of cells whose top-left cell is (x, y).

    Rows are numbered by grid row, so rows above y are present and empty.
    """
    builder = SpanBuilder()
    for _ in range(y):
        builder.start_row()
    for _ in range(h):
        builder.start_row()
        for col in range(x, x + w):
            builder.extend(col)
    return builder.span2d
