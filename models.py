"""Shared typed models for the availability feed pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

SourceMode = Literal["xml", "csv"]


@dataclass(frozen=True, slots=True)
class NormalizedRecord:
    """Product record produced by either source reader."""

    id: str
    availability_raw: str


@dataclass(frozen=True, slots=True)
class ClassifiedRecord:
    """Record after availability classification; include=False means skip."""

    id: str
    availability: str
    include: bool


@dataclass(frozen=True, slots=True)
class RunConfig:
    """Settings for one pipeline run. Read-only for the duration of the run."""

    source_location: str
    target_location: str
    days_offset: int
    shop_base_url: str
    cron_secret: str


@dataclass(frozen=True, slots=True)
class RunResult:
    mode: SourceMode
    emitted_count: int
    target_location: str
    availability_date: str


@dataclass(frozen=True, slots=True)
class StructuredParse:
    """Outcome of the XML reader.

    Three shapes are possible:
      - records present        -> success with records
      - no records, no errors  -> well-formed document without usable items
      - diagnostics present    -> parse failure
    Only the first counts as a successful XML read.
    """

    records: list[NormalizedRecord] = field(default_factory=list)
    diagnostics: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return bool(self.records)

    @property
    def failed(self) -> bool:
        return bool(self.diagnostics)
