"""In-memory model of an Istanbul-style coverage map.

The browser-side collector produces one record per instrumented file holding
hit counters for statements, functions and branch arms together with their
source locations.  Line coverage is not stored; it is derived from the
statement counters (a line is as covered as the best statement starting on it).
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from scriptcov.core.types import FULL_COVERAGE, CoveragePercent, Metric


@dataclass(frozen=True, slots=True)
class Totals:
    """Covered/total counter pair for a single metric."""

    total: int = 0
    covered: int = 0

    @property
    def pct(self) -> CoveragePercent:
        """Covered share as a percentage; an empty metric counts as fully covered."""
        if self.total == 0:
            return FULL_COVERAGE
        return self.covered / self.total * FULL_COVERAGE

    def __add__(self, other: Totals) -> Totals:
        return Totals(total=self.total + other.total, covered=self.covered + other.covered)


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    """Totals for all four metrics."""

    statements: Totals = Totals()
    branches: Totals = Totals()
    functions: Totals = Totals()
    lines: Totals = Totals()

    def __getitem__(self, metric: Metric | str) -> Totals:
        return getattr(self, Metric(metric).value)

    def __add__(self, other: CoverageSummary) -> CoverageSummary:
        return CoverageSummary(
            statements=self.statements + other.statements,
            branches=self.branches + other.branches,
            functions=self.functions + other.functions,
            lines=self.lines + other.lines,
        )


def _totals(values: list[int]) -> Totals:
    return Totals(total=len(values), covered=sum(1 for v in values if v > 0))


@dataclass(slots=True)
class FileCoverage:
    """Counters and locations recorded for one instrumented file."""

    path: str
    statement_map: dict[str, Any] = field(default_factory=dict)
    fn_map: dict[str, Any] = field(default_factory=dict)
    branch_map: dict[str, Any] = field(default_factory=dict)
    s: dict[str, int] = field(default_factory=dict)
    f: dict[str, int] = field(default_factory=dict)
    b: dict[str, list[int]] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> FileCoverage:
        return cls(
            path=str(data["path"]),
            statement_map=dict(data.get("statementMap", {})),
            fn_map=dict(data.get("fnMap", {})),
            branch_map=dict(data.get("branchMap", {})),
            s={k: int(v) for k, v in data.get("s", {}).items()},
            f={k: int(v) for k, v in data.get("f", {}).items()},
            b={k: [int(x) for x in v] for k, v in data.get("b", {}).items()},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "statementMap": self.statement_map,
            "fnMap": self.fn_map,
            "branchMap": self.branch_map,
            "s": dict(self.s),
            "f": dict(self.f),
            "b": {k: list(v) for k, v in self.b.items()},
        }

    def line_hits(self) -> dict[int, int]:
        """Return line number -> hit count derived from statement counters."""
        lines: dict[int, int] = {}
        for sid, loc in self.statement_map.items():
            line = loc.get("start", {}).get("line")
            if line is None:
                continue
            count = self.s.get(sid, 0)
            prev = lines.get(line)
            if prev is None or prev < count:
                lines[line] = count
        return lines

    def merge(self, other: FileCoverage) -> None:
        """Add the hit counts of *other* (same file) into this record."""
        for sid, count in other.s.items():
            self.s[sid] = self.s.get(sid, 0) + count
        for fid, count in other.f.items():
            self.f[fid] = self.f.get(fid, 0) + count
        for bid, arms in other.b.items():
            mine = self.b.get(bid)
            if mine is None:
                self.b[bid] = list(arms)
                continue
            if len(mine) < len(arms):
                mine.extend([0] * (len(arms) - len(mine)))
            for i, count in enumerate(arms):
                mine[i] += count
        for src, dst in (
            (other.statement_map, self.statement_map),
            (other.fn_map, self.fn_map),
            (other.branch_map, self.branch_map),
        ):
            for key, loc in src.items():
                dst.setdefault(key, loc)

    def summary(self) -> CoverageSummary:
        return CoverageSummary(
            statements=_totals(list(self.s.values())),
            branches=_totals([hit for arms in self.b.values() for hit in arms]),
            functions=_totals(list(self.f.values())),
            lines=_totals(list(self.line_hits().values())),
        )


class CoverageMap:
    """Ordered mapping of file path to :class:`FileCoverage`.

    Files keep the order in which they were first added; reports that list
    files rely on it.
    """

    def __init__(self, files: Mapping[str, Mapping[str, Any]] | None = None) -> None:
        self._files: dict[str, FileCoverage] = {}
        for key, data in (files or {}).items():
            record = dict(data)
            record.setdefault("path", key)
            self.add_file_coverage(FileCoverage.from_dict(record))

    def add_file_coverage(self, fc: FileCoverage | Mapping[str, Any]) -> None:
        if not isinstance(fc, FileCoverage):
            fc = FileCoverage.from_dict(fc)
        existing = self._files.get(fc.path)
        if existing is None:
            self._files[fc.path] = fc
        else:
            existing.merge(fc)

    def files(self) -> list[str]:
        return list(self._files)

    def file_coverage_for(self, path: str) -> FileCoverage:
        try:
            return self._files[path]
        except KeyError as exc:
            msg = f"no coverage recorded for {path!r}"
            raise KeyError(msg) from exc

    def summary(self) -> CoverageSummary:
        total = CoverageSummary()
        for fc in self._files.values():
            total += fc.summary()
        return total

    def to_dict(self) -> dict[str, Any]:
        return {path: fc.to_dict() for path, fc in self._files.items()}

    def __iter__(self) -> Iterator[FileCoverage]:
        return iter(self._files.values())

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files


__all__ = ["CoverageMap", "CoverageSummary", "FileCoverage", "Totals"]
