"""Print the admin dashboard summary from CSV exports.

Usage:
    python -m hospital_care.cli.admin_cli --appointments appts.csv --conversations convs.csv
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List, Optional

import pandas as pd

from hospital_care.common.logging import get_logger
from hospital_care.data.stats import build_admin_summary

log = get_logger("admin_cli")


def _read(path: Optional[str]) -> pd.DataFrame:
    if not path:
        return pd.DataFrame()
    return pd.read_csv(path)


def _table(title: str, rows: List[Dict[str, Any]], columns: List[str]) -> str:
    if not rows:
        return f"{title}\n  (none yet)"
    df = pd.DataFrame(rows)[columns]
    return f"{title}\n{df.to_string(index=False)}"


def format_summary(summary: Dict[str, Any]) -> str:
    t = summary["totals"]
    lines = [
        "ADMIN SUMMARY",
        f"  Total Appointments: {t['appointments']}",
        f"  Pending: {t['pending']}",
        f"  Completed: {t['completed']}",
        f"  Conversations: {t['conversations']}",
        "",
        _table(
            "APPOINTMENTS",
            summary["appointments"],
            ["patient_name", "doctor_name", "specialty", "appointment_date", "appointment_time", "status"],
        ),
        "",
        _table("CONVERSATIONS", summary["conversations"], ["user_name", "title", "created_at"]),
    ]
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> None:
    ap = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    ap.add_argument("--appointments", help="CSV export of appointments")
    ap.add_argument("--conversations", help="CSV export of conversations")
    args = ap.parse_args(argv)

    summary = build_admin_summary(_read(args.appointments), _read(args.conversations))
    log.info(
        "Summarised %d appointments, %d conversations",
        summary["totals"]["appointments"], summary["totals"]["conversations"],
    )
    print(format_summary(summary))


if __name__ == "__main__":
    main()
