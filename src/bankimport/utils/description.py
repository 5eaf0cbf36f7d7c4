"""Transaction description normalization."""

import re

_WHITESPACE = re.compile(r"\s+")
# Keep ASCII lowercase letters, digits and Hangul syllables.
_NON_KEY_CHARS = re.compile(r"[^가-힣a-z0-9]")


def normalize_description(description: str) -> str:
    """Normalize a free-text memo into a classification lookup key.

    Lower-cases, removes whitespace and strips everything except ``a-z``,
    ``0-9`` and Hangul syllables. Idempotent.

    Example:
        >>> normalize_description("국민연금 납부 (3월)")
        '국민연금납부3월'
    """
    lowered = (description or "").lower()
    return _NON_KEY_CHARS.sub("", _WHITESPACE.sub("", lowered))
