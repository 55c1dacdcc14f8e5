"""Typed props for each element kind.

Every element kind has its own props dataclass. ``parse_props`` picks the class
for a kind with an exhaustive ``match`` and validates the incoming mapping
against the dataclass fields, so unknown keys and wrongly typed values are
rejected before they reach the document.
"""

from __future__ import annotations

import types
from dataclasses import asdict, dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any, Union, assert_never, get_args, get_origin, get_type_hints

from sitebuildr_py.core.types import ElementType
from sitebuildr_py.exceptions import ValidationError

if TYPE_CHECKING:
    from collections.abc import Mapping


@dataclass(frozen=True)
class HeroProps:
    """Props for a hero banner."""

    title: str = "Welcome"
    subtitle: str = ""
    button_text: str = "Get Started"
    button_url: str = "#"
    background_image: str | None = None


@dataclass(frozen=True)
class FeaturesProps:
    """Props for a features grid.

    Attributes:
        title: Section heading.
        features: Feature cards, each a mapping with ``title`` and ``description``.
        columns: Number of grid columns (1 to 6).
    """

    title: str = "Our Features"
    features: list[dict[str, str]] = field(default_factory=list)
    columns: int = 3

    def __post_init__(self) -> None:
        """Validate the column count."""
        if not 1 <= self.columns <= 6:
            msg = f"columns must be between 1 and 6, got {self.columns}"
            raise ValidationError(msg, field="columns")


@dataclass(frozen=True)
class HeadingProps:
    """Props for a heading."""

    text: str = "Heading"
    level: int = 2

    def __post_init__(self) -> None:
        """Validate the heading level."""
        if not 1 <= self.level <= 6:
            msg = f"level must be between 1 and 6, got {self.level}"
            raise ValidationError(msg, field="level")


@dataclass(frozen=True)
class TextProps:
    """Props for a paragraph of text."""

    content: str = ""


@dataclass(frozen=True)
class ImageProps:
    """Props for an image."""

    src: str = ""
    alt: str = ""
    link: str | None = None


@dataclass(frozen=True)
class ButtonProps:
    """Props for a call-to-action button."""

    text: str = "Click me"
    url: str = "#"
    variant: str = "primary"


@dataclass(frozen=True)
class ContainerProps:
    """Props for a generic layout container."""

    tag: str = "div"


@dataclass(frozen=True)
class SectionProps:
    """Props for a page section."""

    name: str = ""
    full_width: bool = True


@dataclass(frozen=True)
class DividerProps:
    """Props for a horizontal divider."""

    thickness: int = 1


@dataclass(frozen=True)
class SpacerProps:
    """Props for vertical whitespace."""

    height: int = 40


@dataclass(frozen=True)
class VideoProps:
    """Props for an embedded video."""

    url: str = ""
    autoplay: bool = False
    controls: bool = True


@dataclass(frozen=True)
class FormProps:
    """Props for a form."""

    action: str = ""
    method: str = "post"
    submit_text: str = "Submit"

    def __post_init__(self) -> None:
        """Validate the HTTP method."""
        if self.method not in ("get", "post"):
            msg = f"method must be 'get' or 'post', got {self.method!r}"
            raise ValidationError(msg, field="method")


@dataclass(frozen=True)
class GroupProps:
    """Props for a group of elements."""

    name: str = ""


ElementProps = Union[  # noqa: UP007
    HeroProps,
    FeaturesProps,
    HeadingProps,
    TextProps,
    ImageProps,
    ButtonProps,
    ContainerProps,
    SectionProps,
    DividerProps,
    SpacerProps,
    VideoProps,
    FormProps,
    GroupProps,
]


def props_class_for(kind: ElementType) -> type[ElementProps]:  # noqa: C901, PLR0911
    """Return the props dataclass for an element kind."""
    match kind:
        case ElementType.HERO:
            return HeroProps
        case ElementType.FEATURES:
            return FeaturesProps
        case ElementType.HEADING:
            return HeadingProps
        case ElementType.TEXT:
            return TextProps
        case ElementType.IMAGE:
            return ImageProps
        case ElementType.BUTTON:
            return ButtonProps
        case ElementType.CONTAINER:
            return ContainerProps
        case ElementType.SECTION:
            return SectionProps
        case ElementType.DIVIDER:
            return DividerProps
        case ElementType.SPACER:
            return SpacerProps
        case ElementType.VIDEO:
            return VideoProps
        case ElementType.FORM:
            return FormProps
        case ElementType.GROUP:
            return GroupProps
        case _:
            assert_never(kind)


def _matches(value: Any, hint: Any) -> bool:  # noqa: PLR0911
    """Check a value against a (simple) type hint."""
    origin = get_origin(hint)
    if origin in (Union, types.UnionType):
        return any(_matches(value, arg) for arg in get_args(hint))
    if hint is type(None):
        return value is None
    if origin is list:
        (item_hint,) = get_args(hint) or (Any,)
        return isinstance(value, list) and all(_matches(item, item_hint) for item in value)
    if origin is dict:
        key_hint, value_hint = get_args(hint) or (Any, Any)
        return isinstance(value, dict) and all(
            _matches(k, key_hint) and _matches(v, value_hint) for k, v in value.items()
        )
    if hint is Any:
        return True
    if hint is bool:
        return isinstance(value, bool)
    if hint is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if hint is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    return isinstance(value, hint)


def _check_changes(cls: type[ElementProps], changes: Mapping[str, Any]) -> None:
    hints = get_type_hints(cls)
    allowed = {f.name for f in fields(cls)}
    for key, value in changes.items():
        if key not in allowed:
            msg = f"Unknown prop {key!r} for {cls.__name__}"
            raise ValidationError(msg, field=key)
        if not _matches(value, hints[key]):
            msg = f"Invalid value for prop {key!r}: {value!r}"
            raise ValidationError(msg, field=key)


def parse_props(kind: ElementType, data: Mapping[str, Any] | None = None) -> ElementProps:
    """Build validated props for an element kind.

    Args:
        kind: The element kind.
        data: Raw props. Missing keys take their defaults.

    Returns:
        The typed props instance.

    Raises:
        ValidationError: If a key is unknown or a value has the wrong type.
    """
    cls = props_class_for(kind)
    data = dict(data or {})
    _check_changes(cls, data)
    return cls(**data)


def merge_props(props: ElementProps, changes: Mapping[str, Any]) -> ElementProps:
    """Return a copy of ``props`` with ``changes`` applied and validated."""
    _check_changes(type(props), changes)
    return replace(props, **changes)


def props_to_dict(props: ElementProps) -> dict[str, Any]:
    """Convert props to a plain dictionary."""
    return asdict(props)
