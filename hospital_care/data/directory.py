"""
Doctor directory backends. Every backend exposes the same two reads:
list_all() ordered by name, and by_specialty(substring) matched
case-insensitively. Backend failures surface as DirectoryError.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Tuple

import pandas as pd
import requests

from hospital_care.common.logging import get_logger

log = get_logger("directory")

DOCTOR_DIRECTORY = os.environ.get("DOCTOR_DIRECTORY", "memory")
DOCTORS_CSV = os.environ.get(
    "DOCTORS_CSV", str(Path(__file__).resolve().parent / "doctors.csv")
)
SUPABASE_URL = os.environ.get("SUPABASE_URL", "")
SUPABASE_SERVICE_ROLE_KEY = os.environ.get("SUPABASE_SERVICE_ROLE_KEY", "")
DIRECTORY_TIMEOUT_SECONDS = float(os.environ.get("DIRECTORY_TIMEOUT_SECONDS", "5.0"))

CSV_COLUMNS = ["name", "specialty", "days", "start_hour", "end_hour"]


class DirectoryError(RuntimeError):
    """The doctor directory could not be read."""


def _present(val: Any) -> bool:
    return val is not None and not (isinstance(val, float) and pd.isna(val))


@dataclass(frozen=True)
class DoctorRecord:
    name: str
    specialty: str
    days: Tuple[str, ...]
    start_hour: int
    end_hour: int
    slot_duration: int = 30
    id: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "DoctorRecord":
        days = row.get("days") or ()
        if isinstance(days, str):
            days = [d.strip() for d in days.split(";") if d.strip()]
        slot = row.get("slot_duration")
        doc_id = row.get("id")
        return cls(
            name=str(row["name"]),
            specialty=str(row["specialty"]),
            days=tuple(days),
            start_hour=int(row["start_hour"]),
            end_hour=int(row["end_hour"]),
            slot_duration=int(slot) if _present(slot) else 30,
            id=str(doc_id) if _present(doc_id) else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "specialty": self.specialty,
            "days": list(self.days),
            "start_hour": self.start_hour,
            "end_hour": self.end_hour,
            "slot_duration": self.slot_duration,
        }


_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")

SEED_DOCTORS: Tuple[DoctorRecord, ...] = (
    DoctorRecord("Dr. Sarah Johnson", "Cardiology", _WEEKDAYS, 9, 17),
    DoctorRecord("Dr. Michael Chen", "Orthopedics", ("Monday", "Wednesday", "Friday"), 10, 18),
    DoctorRecord("Dr. Emily Rodriguez", "Pediatrics", ("Tuesday", "Thursday", "Saturday"), 8, 16),
    DoctorRecord("Dr. David Kumar", "Neurology", ("Monday", "Tuesday", "Thursday", "Friday"), 9, 17),
    DoctorRecord("Dr. Lisa Thompson", "General Medicine", _WEEKDAYS + ("Saturday",), 8, 20),
)


class DoctorDirectory(Protocol):
    name: str

    def list_all(self) -> List[DoctorRecord]: ...

    def by_specialty(self, substring: str) -> List[DoctorRecord]: ...


def _by_name(records: Iterable[DoctorRecord]) -> List[DoctorRecord]:
    return sorted(records, key=lambda r: r.name)


def _postgrest_literal(value: str) -> str:
    # wildcards and filter separators would change the ilike pattern
    return "".join(ch for ch in value if ch not in "*%,()\\")


def _specialty_contains(record: DoctorRecord, substring: str) -> bool:
    return substring.lower() in record.specialty.lower()


class InMemoryDirectory:
    """Directory over a fixed list of records; used for tests and local runs."""

    name = "memory"

    def __init__(self, records: Iterable[DoctorRecord] = SEED_DOCTORS) -> None:
        self._records: Tuple[DoctorRecord, ...] = tuple(records)

    def list_all(self) -> List[DoctorRecord]:
        return _by_name(self._records)

    def by_specialty(self, substring: str) -> List[DoctorRecord]:
        return _by_name(r for r in self._records if _specialty_contains(r, substring))


class CsvDirectory:
    """Directory backed by a CSV export; ``days`` is ``;``-separated."""

    name = "csv"

    def __init__(self, path: str = DOCTORS_CSV) -> None:
        self.path = path

    def _load(self) -> List[DoctorRecord]:
        try:
            df = pd.read_csv(self.path)
        except (OSError, ValueError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            # ValueError covers undecodable bytes
            raise DirectoryError(f"cannot read doctor CSV {self.path}: {exc}") from exc

        missing = [c for c in CSV_COLUMNS if c not in df.columns]
        if missing:
            raise DirectoryError(f"doctor CSV {self.path} is missing columns: {missing}")

        df = df.dropna(subset=CSV_COLUMNS)
        try:
            return [DoctorRecord.from_row(row) for row in df.to_dict(orient="records")]
        except (KeyError, TypeError, ValueError) as exc:
            raise DirectoryError(f"malformed row in doctor CSV {self.path}: {exc}") from exc

    def list_all(self) -> List[DoctorRecord]:
        return _by_name(self._load())

    def by_specialty(self, substring: str) -> List[DoctorRecord]:
        return _by_name(r for r in self._load() if _specialty_contains(r, substring))


class SupabaseDirectory:
    """Reads the ``doctors`` table through Supabase's PostgREST endpoint."""

    name = "supabase"

    def __init__(
        self,
        url: str = SUPABASE_URL,
        key: str = SUPABASE_SERVICE_ROLE_KEY,
        timeout: float = DIRECTORY_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.endpoint = url.rstrip("/") + "/rest/v1/doctors"
        self.headers = {"apikey": key, "Authorization": f"Bearer {key}"}
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, params: Dict[str, str]) -> List[DoctorRecord]:
        try:
            resp = self.session.get(
                self.endpoint, params=params, headers=self.headers, timeout=self.timeout
            )
            if resp.status_code >= 400:
                log.error("Doctor GET failed %s %s -> %s", self.endpoint, params, resp.status_code)
                resp.raise_for_status()
            rows = resp.json()
        except requests.RequestException as exc:
            raise DirectoryError(f"doctor lookup failed: {exc}") from exc
        except ValueError as exc:
            raise DirectoryError("doctor lookup returned invalid JSON") from exc

        if not isinstance(rows, list):
            raise DirectoryError("doctor lookup returned an unexpected payload")
        try:
            return [DoctorRecord.from_row(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise DirectoryError(f"malformed doctor row: {exc}") from exc

    def list_all(self) -> List[DoctorRecord]:
        return self._get({"select": "*", "order": "name.asc"})

    def by_specialty(self, substring: str) -> List[DoctorRecord]:
        return self._get({"select": "*", "specialty": f"ilike.*{_postgrest_literal(substring)}*", "order": "name.asc"})


def load_directory(kind: Optional[str] = None) -> DoctorDirectory:
    kind = (kind or DOCTOR_DIRECTORY).lower()
    log.info("Using %s doctor directory", kind)
    if kind == "memory":
        return InMemoryDirectory()
    if kind == "csv":
        return CsvDirectory()
    if kind == "supabase":
        if not SUPABASE_URL:
            raise ValueError("SUPABASE_URL must be set for the supabase directory")
        return SupabaseDirectory()
    raise ValueError(f"Unknown DOCTOR_DIRECTORY backend: {kind}")
