"""Right-to-left support: language detection and style mirroring."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from sitebuildr_py.core.types import Language, TextDirection

if TYPE_CHECKING:
    from collections.abc import Mapping

# Arabic script blocks, which cover Urdu.
_ARABIC_SCRIPT = re.compile("[\u0600-\u06FF\u0750-\u077F\u08A0-\u08FF\uFB50-\uFDFF\uFE70-\uFEFF]")

_SWAPPED_VALUES = {
    "textAlign": {"left": "right", "right": "left"},
    "justifyContent": {"flex-start": "flex-end", "flex-end": "flex-start"},
    "flexDirection": {"row": "row-reverse", "row-reverse": "row"},
    "float": {"left": "right", "right": "left"},
}

_SWAPPED_KEYS = {
    "paddingLeft": "paddingRight",
    "paddingRight": "paddingLeft",
    "marginLeft": "marginRight",
    "marginRight": "marginLeft",
    "borderLeft": "borderRight",
    "borderRight": "borderLeft",
    "left": "right",
    "right": "left",
}


def detect_language(text: str) -> Language:
    """Guess the language of a piece of text.

    Text containing Arabic-script characters is treated as Urdu.
    """
    return Language.URDU if _ARABIC_SCRIPT.search(text) else Language.ENGLISH


def direction_for(language: Language | str) -> TextDirection:
    """Text direction used for a language."""
    return TextDirection.RTL if Language(language) is Language.URDU else TextDirection.LTR


def mirror_style(style: Mapping[str, Any]) -> dict[str, Any]:
    """Mirror horizontal style properties for a right-to-left layout.

    Left and right paddings, margins, borders and offsets trade places, and
    alignment values flip. Applying it twice returns the original style.
    """
    mirrored: dict[str, Any] = {}
    for key, value in style.items():
        swaps = _SWAPPED_VALUES.get(key)
        if swaps is not None and isinstance(value, str):
            value = swaps.get(value, value)
        mirrored[_SWAPPED_KEYS.get(key, key)] = value
    return mirrored
