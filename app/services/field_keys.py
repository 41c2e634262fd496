from __future__ import annotations

import re

_NON_KEY_CHARS_RE = re.compile(r"[^a-z0-9]+")


def derive_field_key(label: str | None) -> str:
    """Map a field label to the snake_case key its submission value is stored under.

    Every place that reads or writes submission data must go through this
    function so the authoring and submission sides never disagree on keys.
    """
    text = str(label or "").lower()
    key = _NON_KEY_CHARS_RE.sub("_", text)
    if key.startswith("_"):
        key = key[1:]
    if key.endswith("_"):
        key = key[:-1]
    return key
