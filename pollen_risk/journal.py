"""
Symptom journal: storage for SymptomLog entries plus the insights shown on
the journal screen.

Edits change symptom values and notes only. The historical risk snapshot is
frozen at creation time, so editing an old entry never re-labels it with
today's dominant allergen.
"""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .models import PollenType, SymptomLog


def severity_by_allergen(logs: List[SymptomLog]) -> List[Tuple[PollenType, int]]:
    """
    Total symptom severity per historical dominant allergen, highest first.
    Ties are broken by pollen name for deterministic output.
    """
    scores: Dict[PollenType, int] = {}
    for entry in logs:
        if entry.historical_dominant_allergen is None:
            continue
        pollen = entry.historical_dominant_allergen
        scores[pollen] = scores.get(pollen, 0) + entry.total_severity()
    return sorted(scores.items(), key=lambda kv: (-kv[1], kv[0].value))


def top_allergen(logs: List[SymptomLog], minimum_logs: int = 3) -> Optional[PollenType]:
    """The pollen most associated with symptoms, once there is enough history."""
    if len(logs) < minimum_logs:
        return None
    ranked = severity_by_allergen(logs)
    return ranked[0][0] if ranked else None


class SymptomJournal:
    """
    Base interface for journal storage. list_logs returns newest first.
    """

    def list_logs(self) -> List[SymptomLog]:
        raise NotImplementedError

    def add(self, entry: SymptomLog) -> SymptomLog:
        raise NotImplementedError

    def update(
        self,
        log_id: str,
        sneezing: Optional[int] = None,
        itchy_eyes: Optional[int] = None,
        congestion: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> SymptomLog:
        raise NotImplementedError

    def delete(self, log_id: str) -> None:
        raise NotImplementedError

    def get(self, log_id: str) -> SymptomLog:
        for entry in self.list_logs():
            if entry.id == log_id:
                return entry
        raise KeyError(log_id)


def _apply_edit(
    entry: SymptomLog,
    sneezing: Optional[int],
    itchy_eyes: Optional[int],
    congestion: Optional[int],
    notes: Optional[str],
) -> None:
    if sneezing is not None:
        entry.sneezing = int(sneezing)
    if itchy_eyes is not None:
        entry.itchy_eyes = int(itchy_eyes)
    if congestion is not None:
        entry.congestion = int(congestion)
    if notes is not None:
        entry.notes = notes


class InMemorySymptomJournal(SymptomJournal):
    def __init__(self, logs: Optional[List[SymptomLog]] = None):
        self._logs: List[SymptomLog] = list(logs or [])

    def list_logs(self) -> List[SymptomLog]:
        return sorted(self._logs, key=lambda e: e.date, reverse=True)

    def add(self, entry: SymptomLog) -> SymptomLog:
        self._logs.append(entry)
        return entry

    def update(self, log_id, sneezing=None, itchy_eyes=None, congestion=None, notes=None):
        entry = self.get(log_id)
        _apply_edit(entry, sneezing, itchy_eyes, congestion, notes)
        return entry

    def delete(self, log_id: str) -> None:
        entry = self.get(log_id)
        self._logs = [e for e in self._logs if e.id != entry.id]


class CsvSymptomJournal(SymptomJournal):
    """
    Journal persisted to a CSV file, one row per entry. Writes complete before
    the call returns, so a following list_logs sees the new entry.
    """

    FIELDNAMES = [
        "id",
        "date",
        "sneezing",
        "itchy_eyes",
        "congestion",
        "notes",
        "historical_risk_score",
        "historical_dominant_allergen",
    ]

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self.log = logging.getLogger(self.__class__.__name__)

    def list_logs(self) -> List[SymptomLog]:
        return sorted(self._read_all(), key=lambda e: e.date, reverse=True)

    def add(self, entry: SymptomLog) -> SymptomLog:
        write_header = not self.path.exists() or self.path.stat().st_size == 0
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=self.FIELDNAMES)
            if write_header:
                writer.writeheader()
            writer.writerow(self._to_row(entry))
        self.log.info("Logged symptoms %s for %s", entry.id, entry.date.date())
        return entry

    def update(self, log_id, sneezing=None, itchy_eyes=None, congestion=None, notes=None):
        entries = self._read_all()
        for entry in entries:
            if entry.id == log_id:
                _apply_edit(entry, sneezing, itchy_eyes, congestion, notes)
                self._write_all(entries)
                return entry
        raise KeyError(log_id)

    def delete(self, log_id: str) -> None:
        entries = self._read_all()
        remaining = [e for e in entries if e.id != log_id]
        if len(remaining) == len(entries):
            raise KeyError(log_id)
        self._write_all(remaining)

    def _read_all(self) -> List[SymptomLog]:
        if not self.path.exists():
            return []
        entries: List[SymptomLog] = []
        with self.path.open("r", newline="", encoding="utf-8") as fh:
            for row in csv.DictReader(fh):
                try:
                    entries.append(self._from_row(row))
                except (ValueError, KeyError, TypeError) as exc:
                    self.log.warning("Skipping malformed journal row %s: %s", row.get("id"), exc)
        return entries

    def _write_all(self, entries: List[SymptomLog]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", newline="", encoding="utf-8") as fh:
            writer = csv.DictWriter(fh, fieldnames=self.FIELDNAMES)
            writer.writeheader()
            for entry in entries:
                writer.writerow(self._to_row(entry))

    @staticmethod
    def _to_row(entry: SymptomLog) -> Dict[str, str]:
        return {
            "id": entry.id,
            "date": entry.date.isoformat(),
            "sneezing": str(entry.sneezing),
            "itchy_eyes": str(entry.itchy_eyes),
            "congestion": str(entry.congestion),
            "notes": entry.notes,
            "historical_risk_score": (
                "" if entry.historical_risk_score is None else repr(float(entry.historical_risk_score))
            ),
            "historical_dominant_allergen": (
                entry.historical_dominant_allergen.value
                if entry.historical_dominant_allergen
                else ""
            ),
        }

    @staticmethod
    def _from_row(row: Dict[str, str]) -> SymptomLog:
        score = row.get("historical_risk_score") or ""
        dominant = row.get("historical_dominant_allergen") or ""
        return SymptomLog(
            id=row["id"],
            date=datetime.fromisoformat(row["date"]),
            sneezing=int(row.get("sneezing") or 0),
            itchy_eyes=int(row.get("itchy_eyes") or 0),
            congestion=int(row.get("congestion") or 0),
            notes=row.get("notes") or "",
            historical_risk_score=float(score) if score else None,
            historical_dominant_allergen=PollenType(dominant) if dominant else None,
        )
