"""Tabular result model and the outcome variants every inspector returns."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Union


@dataclass(frozen=True)
class TabularResult:
    columns: tuple[str, ...]
    rows: tuple[Mapping[str, Any], ...] = field(default_factory=tuple)

    def __post_init__(self):
        columns = tuple(self.columns)
        allowed = set(columns)
        rows = []
        for row in self.rows:
            extra = [key for key in row if key not in allowed]
            if extra:
                raise ValueError(f"Row has undeclared columns: {', '.join(map(str, extra))}")
            rows.append(MappingProxyType(dict(row)))
        object.__setattr__(self, "columns", columns)
        object.__setattr__(self, "rows", tuple(rows))

    @classmethod
    def from_records(cls, columns: Iterable[str], records: Iterable[Mapping[str, Any]]) -> "TabularResult":
        """Project arbitrary records onto the declared columns, dropping extra keys."""
        columns = tuple(columns)
        rows = [{c: record[c] for c in columns if c in record} for record in records]
        return cls(columns=columns, rows=tuple(rows))


@dataclass(frozen=True)
class Data:
    result: TabularResult
    title: str | None = None
    warning: str | None = None
    summary: str | None = None


@dataclass(frozen=True)
class Report:
    """Several tables shown one after another."""
    parts: tuple[Data, ...]
    preamble: str | None = None


@dataclass(frozen=True)
class Empty:
    message: str


@dataclass(frozen=True)
class Advisory:
    message: str


@dataclass(frozen=True)
class Failure:
    reason: str


Outcome = Union[Data, Report, Empty, Advisory, Failure]


def tabulate(columns: Iterable[str], records: Iterable[Mapping[str, Any]], empty_message: str,
             **extras) -> Outcome:
    """Wrap collaborator records as Data, or Empty when there are none."""
    result = TabularResult.from_records(columns, records)
    if not result.rows:
        return Empty(empty_message)
    return Data(result, **extras)
