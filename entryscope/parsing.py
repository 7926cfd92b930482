"""Value parsing for `ENTRYSCOPE_*` variables and YAML resolver settings."""

from __future__ import annotations

from collections.abc import Iterable


_ENABLED_TOKENS = frozenset({"1", "true", "yes", "on"})
_DISABLED_TOKENS = frozenset({"0", "false", "no", "off"})


def normalize_optional_string(value: object) -> str | None:
    """Return `value` as trimmed text, treating unset and blank as `None`."""

    if value is None:
        return None
    return str(value).strip() or None


def parse_permissive_boolean(value: object) -> bool | None:
    """Read a switch such as `ENTRYSCOPE_DEBUG`; unrecognized text gives `None`."""

    if isinstance(value, bool):
        return value
    token = normalize_optional_string(value)
    if token is None:
        return None
    if token.lower() in _ENABLED_TOKENS:
        return True
    if token.lower() in _DISABLED_TOKENS:
        return False
    return None


def parse_required_boolean(value: object, field_name: str) -> bool:
    """Read a switch that must be spelled as an on/off token.

    Raises:
        ValueError: Naming `field_name` when the token is not recognized.
    """

    parsed = parse_permissive_boolean(value)
    if parsed is None:
        raise ValueError(f"`{field_name}` must be one of: 1/0, true/false, yes/no, on/off.")
    return parsed


def parse_extension_list(value: object, field_name: str) -> tuple[str, ...]:
    """Parse file extensions from a comma-separated string or a sequence.

    Each extension is normalized to start with a single dot; order is kept and
    duplicates are dropped.

    Raises:
        ValueError: If no extension remains or an entry is not a string.
    """

    if isinstance(value, str):
        raw_items: Iterable[object] = value.split(",")
    elif isinstance(value, Iterable):
        raw_items = value
    else:
        raise ValueError(f"`{field_name}` must be a list or comma-separated string.")

    extensions: list[str] = []
    for raw in raw_items:
        if not isinstance(raw, str):
            raise ValueError(f"`{field_name}` entries must be strings.")
        token = normalize_optional_string(raw)
        if token is None:
            continue
        extension = "." + token.lstrip(".")
        if extension == ".":
            raise ValueError(f"`{field_name}` contains an empty extension.")
        if extension not in extensions:
            extensions.append(extension)

    if not extensions:
        raise ValueError(f"`{field_name}` must name at least one extension.")
    return tuple(extensions)
