from __future__ import annotations

import re


_WS = re.compile(r"\s+")


def normalize_query(q: str) -> str:
    q = q.strip()
    q = _WS.sub(" ", q)
    return q


def is_numeric(s: str) -> bool:
    return bool(s) and all("0" <= ch <= "9" for ch in s)


def is_house_number(s: str) -> bool:
    """Digits and '-' only, non-empty (e.g. '123', '12-14')."""
    return bool(s) and all(("0" <= ch <= "9") or ch == "-" for ch in s)


def split_street_line(street_line: str) -> tuple[str, str]:
    """
    '123 Main St' -> ('123', 'Main St')
    'Main St'     -> ('', 'Main St')
    """
    parts = street_line.split()
    if not parts:
        return "", ""

    if is_house_number(parts[0]):
        return parts[0], " ".join(parts[1:])
    return "", street_line
