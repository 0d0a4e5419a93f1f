"""Caption text canonicalization for duplicate detection only; stored text is never normalized."""
from __future__ import annotations

import re

_PUNCT_RE = re.compile(r"[.,?!'\"’]")
_WS_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lowercase, drop . , ? ! ' " ’ and collapse whitespace."""
    text = _PUNCT_RE.sub("", (text or "").lower())
    return _WS_RE.sub(" ", text).strip()
