from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from note_raster.event_parser import BadEvent, Event, parse_event_line

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LineRead:
    """One line pulled from the input stream.

    ``text`` is ``None`` when the line could not be decoded; ``error`` then
    says why.
    """

    line_number: int
    text: str | None
    error: str | None = None


@dataclass
class IngestReport:
    events: list[Event] = field(default_factory=list)
    bad_lines: int = 0
    unreadable_lines: int = 0


def read_event_lines(stream: BinaryIO, encoding: str = "utf-8") -> Iterator[LineRead]:
    for line_number, raw in enumerate(stream, start=1):
        raw = raw.rstrip(b"\n")
        if raw.endswith(b"\r"):
            raw = raw[:-1]
        try:
            text = raw.decode(encoding)
        except UnicodeDecodeError as exc:
            yield LineRead(line_number=line_number, text=None, error=str(exc))
            continue
        yield LineRead(line_number=line_number, text=text)


def _as_line_reads(lines: Iterable[str | LineRead]) -> Iterator[LineRead]:
    for line_number, line in enumerate(lines, start=1):
        if isinstance(line, LineRead):
            yield line
        else:
            yield LineRead(line_number=line_number, text=line)


def ingest_events_with_report(lines: Iterable[str | LineRead]) -> IngestReport:
    report = IngestReport()
    for line in _as_line_reads(lines):
        if line.text is None:
            report.unreadable_lines += 1
            logger.warning("line %d: unreadable input (%s)", line.line_number, line.error)
            continue
        result = parse_event_line(line.text)
        if isinstance(result, BadEvent):
            report.bad_lines += 1
            logger.warning("line %d: %s", line.line_number, result)
            continue
        report.events.append(result)
    logger.debug(
        "ingested %d events (%d bad, %d unreadable)",
        len(report.events),
        report.bad_lines,
        report.unreadable_lines,
    )
    return report


def ingest_events(lines: Iterable[str | LineRead]) -> list[Event]:
    return ingest_events_with_report(lines).events


def load_events_file(path: str | Path) -> list[Event]:
    with Path(path).open("rb") as stream:
        return ingest_events(read_event_lines(stream))
