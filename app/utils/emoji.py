"""Emoji-only text detection.

Matches the rule used by common schema validators: a string is "emoji" when
every code point is either Extended_Pictographic or an Emoji_Component
(ZWJ, variation selectors, skin tones, keycap bases, regional indicators).
Python's ``re`` has no Unicode property classes, hence ``regex``.
"""

from __future__ import annotations

import regex

_EMOJI_ONLY = regex.compile(r"^(?:\p{Extended_Pictographic}|\p{Emoji_Component})+$")


def is_emoji_only(text: str) -> bool:
    """Return True when ``text`` is non-empty and made only of emoji code points.

    Examples:
        >>> is_emoji_only("🔥🔥")
        True
        >>> is_emoji_only("👩🏽‍💻")
        True
        >>> is_emoji_only("hello")
        False
        >>> is_emoji_only("")
        False
    """
    return bool(_EMOJI_ONLY.match(text))
