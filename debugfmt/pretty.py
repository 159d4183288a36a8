"""
Readable text for any object, for debugging and diagnostic output.

pretty() renders None, strings, numbers, iterables and arbitrary objects without
requiring the object's type to implement any formatting. Types can be customized
through layered Settings; the process-wide DEFAULT_SETTINGS knows how to render
UUIDs, dates, durations, paths, types, callables, enums and exceptions.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import functools

from typing import Any, Callable, Final, Iterable, Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import register_defaults
from .members import KeyValue, MemberDetails, introspect
from .sentinels import iffound
from .settings import Settings
from .text import NEWLINE, indent_lines, is_multiline, items_need_multiline, join_lines, lines_need_multiline
from .utils import fmt_type, is_anonymous, is_named_tuple, type_name

PRIMITIVE_TYPES = (
    bool,
    int,
    float,
    complex,
)

# Member rendered as label when no prepended member is registered for a type
DEFAULT_LABEL_MEMBER = "name"

DEFAULT_SETTINGS: Final[Settings] = register_defaults(Settings()).omit_null_members(True)
"""
Process-wide default settings.

Shared by every pretty() call without explicit settings; customize a child
layer from create_custom_settings() instead of mutating it.
"""


# Methods --------------------------------------------------------------------------------------------------------------


def create_custom_settings() -> Settings:
    """Create a settings layer on top of DEFAULT_SETTINGS, ready for customization."""
    return Settings(DEFAULT_SETTINGS)


def pretty(
    obj: Any,
    declared_type: Any = object,
    settings: Settings | Callable[[Settings], Settings] | None = None,
) -> str:
    """
    Format any object as human-readable text for debugging and logging.

    Args:
        obj: Any Python object.
        declared_type: Static type of the slot holding obj, shown for None values.
        settings: A Settings layer; a callable receiving a fresh child of
            DEFAULT_SETTINGS and returning the settings to use; or None for
            DEFAULT_SETTINGS.

    Returns:
        Formatted text, spanning several lines for large or nested values.

    Raises:
        TypeError: If settings is neither Settings, callable nor None.

    Dispatch Logic:
        - None → '<null>', or '<null, T>' when declared_type T is not object
        - custom formatter registered for the type → its result, verbatim
        - str → the string itself, '<String.Empty>' when empty
        - bool, int, float, complex → str(obj)
        - iterables (named tuples excluded) → '[a, b, c]', mappings as '[k => v]'
        - all others → member introspection: 'label <Type> { a = 1, b = 2 }'

    Examples:
        >>> pretty(None, int)
        '<null, int>'

        >>> pretty([1, 2, 3])
        '[1, 2, 3]'

        >>> pretty({"a": 1})
        '[a => 1]'

        >>> @dataclass
        ... class User:
        ...     name: str
        ...     age: int
        >>> pretty(User("alice", 30))
        'alice <User> { age = 30 }'

        >>> pretty(user, settings=lambda s: s.ignore_member(User, "age"))
        'alice <User>'

    Notes:
        - Objects already being formatted higher up the same call render as
          '<cycle, T>', so self-referencing graphs terminate
        - Exceptions raised by custom formatters and property getters propagate
    """
    return _pretty(obj, declared_type, _resolve_settings(settings), frozenset())


def fmt_enumerable(iterable: Iterable[Any], settings: Settings | None = None) -> str:
    """
    Format the items of an iterable as '[a, b, c]' or one indented item per line.

    Mappings are formatted as their 'key => value' entries.
    """
    return _fmt_enumerable(iterable, _resolve_settings(settings), frozenset({id(iterable)}))


def fmt_object(obj: Any, settings: Settings | None = None) -> str:
    """
    Format an object from its members, ignoring custom formatters registered for its own type.

    Raises:
        ValueError: If obj is None.
    """
    if obj is None:
        raise ValueError("obj must not be None")
    return _fmt_object(obj, _resolve_settings(settings), frozenset({id(obj)}))


# Private Methods ------------------------------------------------------------------------------------------------------

def _resolve_settings(settings: Any) -> Settings:
    if settings is None:
        return DEFAULT_SETTINGS
    if isinstance(settings, Settings):
        return settings
    if callable(settings):
        customized = settings(create_custom_settings())
        if not isinstance(customized, Settings):
            raise TypeError(f"settings customizer must return Settings, got {fmt_type(customized)}")
        return customized
    raise TypeError(f"settings must be Settings, callable or None, got {fmt_type(settings)}")


def _pretty(obj: Any, declared_type: Any, settings: Settings, path: frozenset[int]) -> str:
    if obj is None:
        if declared_type is object or declared_type is Any:
            return "<null>"
        return f"<null, {type_name(declared_type)}>"

    formatter = settings.get_formatter(obj)
    if formatter is not None:
        return formatter(obj)

    if isinstance(obj, str):
        return obj if obj else "<String.Empty>"

    if isinstance(obj, PRIMITIVE_TYPES):
        return str(obj)

    # Composite values recurse, guard against self-references
    if id(obj) in path:
        return f"<cycle, {type_name(type(obj))}>"
    path = path | {id(obj)}

    if isinstance(obj, abc.Iterable) and not is_named_tuple(obj):
        return _fmt_enumerable(obj, settings, path)

    return _fmt_object(obj, settings, path)


def _fmt_enumerable(iterable: Iterable[Any], settings: Settings, path: frozenset[int]) -> str:
    if isinstance(iterable, abc.Mapping):
        entries: Iterable[Any] = (KeyValue(k, v) for k, v in iterable.items())
    else:
        entries = iterable

    items = [_pretty(item, object, settings, path) for item in entries]
    if not items:
        return "[]"

    multiline = settings.prefers_multiline
    if multiline is None:
        multiline = items_need_multiline(items)

    if multiline:
        return "[" + NEWLINE + ("," + NEWLINE).join(indent_lines(i) for i in items) + NEWLINE + "]"
    return "[" + ", ".join(items) + "]"


def _fmt_object(obj: Any, settings: Settings, path: frozenset[int]) -> str:
    members = list(_iter_members(obj, settings, path))
    if settings.omits_null_members:
        members = [m for m in members if m.value is not None]

    pair = _fmt_key_value(members)
    if pair is not None:
        return pair

    return _fmt_member_list(type(obj), members, settings)


def _iter_members(obj: Any, settings: Settings, path: frozenset[int]) -> Iterator[MemberDetails]:
    """Read and format each member; members whose formatter returns None are skipped."""
    provider = settings.get_members_provider(type(obj))
    infos = provider(obj) if provider is not None else introspect(obj)

    for info in infos:
        value = info.read(obj)
        formatter = iffound(settings.get_member_formatter(obj, info.name),
                            default=functools.partial(_pretty, declared_type=info.declared_type,
                                                      settings=settings, path=path))
        text = formatter(value)
        if text is not None:
            yield MemberDetails(info.name, info.declared_type, value, text)


def _fmt_key_value(members: list[MemberDetails]) -> str | None:
    """Render exactly two members 'key' and 'value' as 'key => value'."""
    if len(members) != 2:
        return None
    by_name = {m.name: m for m in members}
    if "key" in by_name and "value" in by_name:
        return by_name["key"].pretty + " => " + by_name["value"].pretty
    return None


def _fmt_member_list(cls: type, members: list[MemberDetails], settings: Settings) -> str:
    label_name = settings.get_prepended_member(cls) or DEFAULT_LABEL_MEMBER
    label = next((m for m in members if m.name == label_name), None)
    content = [m for m in members if m.name != label_name]

    parts: list[str] = []
    if label is not None and label.value is not None:
        parts.append(label.pretty)

    if not (is_anonymous(cls) and content):
        parts.append(f"<{type_name(cls)}>")

    if content:
        lines = [_fmt_member(m) for m in content]
        multiline = settings.prefers_multiline
        if multiline is None:
            multiline = lines_need_multiline(lines)

        if multiline:
            parts.append("{" + NEWLINE + join_lines(lines) + NEWLINE + "}")
        else:
            parts.append("{ " + ", ".join(s.strip() for s in lines) + " }")

    return " ".join(s.strip() for s in parts if s.strip())


def _fmt_member(member: MemberDetails) -> str:
    """Indented 'name = value' line; multi-line strings move to their own block below the name."""
    value = member.pretty
    if isinstance(member.value, str) and is_multiline(value):
        value = NEWLINE + indent_lines(value)
    return indent_lines(f"{member.name} = {value}")
