"""Build the admin dashboard aggregates from appointment and conversation exports."""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from hospital_care.common.time import format_dt, parse_dt

APPOINTMENT_STATUSES = ["pending", "confirmed", "cancelled", "completed"]

APPOINTMENT_COLUMNS = [
    "id", "appointment_date", "appointment_time", "status", "notes",
    "patient_name", "doctor_name", "specialty",
]
CONVERSATION_COLUMNS = ["id", "title", "created_at", "user_name"]


def _with_columns(df: pd.DataFrame, columns: List[str]) -> pd.DataFrame:
    out = df.copy()
    for col in columns:
        if col not in out.columns:
            out[col] = None
    return out[columns]


def _records(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # NaN -> None so the rows serialise cleanly
    return df.astype(object).where(df.notna(), None).to_dict(orient="records")


def _appointments_table(raw: pd.DataFrame) -> pd.DataFrame:
    df = _with_columns(raw, APPOINTMENT_COLUMNS)
    df["status"] = df["status"].fillna("pending").astype(str).str.lower()
    df["patient_name"] = df["patient_name"].fillna("Unknown")
    df["_sort"] = df["appointment_date"].apply(parse_dt)
    df = df.sort_values("_sort", ascending=False, na_position="last", kind="stable")
    df["appointment_date"] = df["_sort"].apply(lambda d: "" if pd.isna(d) else format_dt(d, with_time=False))
    return df.drop(columns=["_sort"]).reset_index(drop=True)


def _conversations_table(raw: pd.DataFrame) -> pd.DataFrame:
    df = _with_columns(raw, CONVERSATION_COLUMNS)
    df["title"] = df["title"].fillna("New Conversation")
    df["user_name"] = df["user_name"].fillna("Unknown")
    df["_sort"] = df["created_at"].apply(parse_dt)
    df = df.sort_values("_sort", ascending=False, na_position="last", kind="stable")
    df["created_at"] = df["_sort"].apply(lambda d: "" if pd.isna(d) else format_dt(d))
    return df.drop(columns=["_sort"]).reset_index(drop=True)


def build_admin_summary(appointments: pd.DataFrame, conversations: pd.DataFrame) -> Dict[str, Any]:
    """Counters and newest-first tables shown on the admin dashboard."""
    appts = _appointments_table(appointments)
    convs = _conversations_table(conversations)

    by_status = {s: 0 for s in APPOINTMENT_STATUSES}
    for status, n in appts["status"].value_counts().items():
        by_status[status] = int(n)

    by_specialty = {
        str(k): int(v)
        for k, v in appts["specialty"].dropna().value_counts().sort_index().items()
    }

    return {
        "totals": {
            "appointments": int(len(appts)),
            "pending": by_status["pending"],
            "completed": by_status["completed"],
            "conversations": int(len(convs)),
        },
        "by_status": by_status,
        "by_specialty": by_specialty,
        "appointments": _records(appts),
        "conversations": _records(convs),
    }
