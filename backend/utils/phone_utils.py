# backend/utils/phone_utils.py
from __future__ import annotations

import re
from typing import Optional

_NON_DIGITS = re.compile(r"\D")


def normalize_ugandan_phone(phone: Optional[str]) -> Optional[str]:
    """
    Normalize a Ugandan phone number to 256XXXXXXXXX.

    Accepts 07XXXXXXXX, 7XXXXXXXX / 4XXXXXXXX, 256XXXXXXXXX and +256XXXXXXXXX
    (spaces, dashes and brackets ignored). Returns None when invalid.
    """
    if not phone:
        return None

    clean = _NON_DIGITS.sub("", str(phone))

    if len(clean) == 12 and clean.startswith("256"):
        return clean

    if len(clean) == 10 and clean.startswith("0"):
        return "256" + clean[1:]

    if len(clean) == 9 and clean[0] in ("7", "4"):
        return "256" + clean

    return None
