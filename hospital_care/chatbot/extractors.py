"""Pull structured values (currently just a specialty) out of free text."""

from __future__ import annotations

from typing import Optional, Tuple

# keyword fragment -> specialty name; first hit wins, in this order
SPECIALTY_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("cardio", "Cardiology"),
    ("ortho", "Orthopedics"),
    ("pediat", "Pediatrics"),
    ("neuro", "Neurology"),
    ("general", "General Medicine"),
)


def extract_specialty(
    text: str,
    keywords: Tuple[Tuple[str, str], ...] = SPECIALTY_KEYWORDS,
) -> Optional[str]:
    t = (text or "").lower()
    for fragment, specialty in keywords:
        if fragment in t:
            return specialty
    return None
