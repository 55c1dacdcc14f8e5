"""Resolution of base styles and per-breakpoint overrides."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sitebuildr_py.core.types import Breakpoint

if TYPE_CHECKING:
    from sitebuildr_py.core.models import Element

TABLET_MAX_WIDTH = 768
MOBILE_MAX_WIDTH = 480

# Overrides applied on top of the base style, widest first.
_CASCADE: dict[Breakpoint, tuple[Breakpoint, ...]] = {
    Breakpoint.DESKTOP: (),
    Breakpoint.TABLET: (Breakpoint.TABLET,),
    Breakpoint.MOBILE: (Breakpoint.TABLET, Breakpoint.MOBILE),
}


def resolve_style(element: Element, breakpoint: Breakpoint | str) -> dict[str, Any]:
    """Compute the effective style of an element at a breakpoint.

    Desktop uses the base style. Tablet layers its overrides on top, and mobile
    layers tablet then mobile overrides, so a mobile view inherits a tablet
    override unless mobile sets the same property.

    Args:
        element: The element to resolve.
        breakpoint: The breakpoint being rendered.

    Returns:
        A new dictionary; the element is never modified.
    """
    resolved = dict(element.style)
    for step in _CASCADE[Breakpoint(breakpoint)]:
        resolved.update(element.responsive.get(step, {}))
    return resolved


def override_keys(element: Element, breakpoint: Breakpoint | str) -> set[str]:
    """Style properties overridden at exactly ``breakpoint``."""
    return set(element.responsive.get(Breakpoint(breakpoint), {}))


def has_overrides(element: Element) -> bool:
    """Whether the element has any responsive override."""
    return any(element.responsive.values())


def breakpoint_for_width(width: float) -> Breakpoint:
    """Map a viewport width in pixels to a breakpoint."""
    if width <= MOBILE_MAX_WIDTH:
        return Breakpoint.MOBILE
    if width <= TABLET_MAX_WIDTH:
        return Breakpoint.TABLET
    return Breakpoint.DESKTOP
