"""
Member introspection for the generic object formatter.

Discovers the instance-level members of arbitrary objects: named tuple fields,
dataclass fields, public instance attributes and public properties.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import functools
import typing

from dataclasses import dataclass, fields, is_dataclass
from operator import attrgetter
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import anonymous, is_named_tuple


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class MemberInfo:
    """
    One introspected member slot.

    Attributes:
        name: Member name.
        declared_type: Annotated type of the member, object when unknown.
        getter: Callable reading the member value from its owner.
    """
    name: str
    declared_type: Any
    getter: Callable[[Any], Any]

    def read(self, obj: Any) -> Any:
        return self.getter(obj)


@dataclass(frozen=True)
class MemberDetails:
    """
    A member read and formatted during a single pretty() call.

    Attributes:
        name: Member name.
        declared_type: Annotated type of the member.
        value: Raw member value.
        pretty: Formatted member value.
    """
    name: str
    declared_type: Any
    value: Any
    pretty: str


@anonymous
@dataclass(frozen=True, slots=True)
class KeyValue:
    """A mapping entry, rendered as 'key => value'."""
    key: Any
    value: Any


# Methods --------------------------------------------------------------------------------------------------------------


def introspect(obj: Any) -> list[MemberInfo]:
    """
    List the members of an object in declaration order.

    Sources, first match decides the fields part:
        - named tuples: _fields
        - dataclasses: fields()
        - other objects: public entries of __dict__, then public __slots__
    followed by public properties and cached properties of the class and its
    bases, base classes first.

    Notes:
        - Names starting with '_' are private and never members
        - Class attributes are static and never members
        - Unassigned slots are skipped
    """
    cls = type(obj)
    hints = _type_hints(cls)
    members: list[MemberInfo] = []
    seen: set[str] = set()

    def add(name: str, getter: Callable[[Any], Any], declared: Any = None) -> None:
        if name in seen or name.startswith("_"):
            return
        seen.add(name)
        if declared is None:
            declared = hints.get(name, object)
        members.append(MemberInfo(name, declared, getter))

    if is_named_tuple(obj):
        for name in cls._fields:
            add(name, attrgetter(name))
    elif is_dataclass(obj):
        for f in fields(obj):
            add(f.name, attrgetter(f.name))
    else:
        for name in getattr(obj, "__dict__", {}):
            add(name, attrgetter(name))
        for name in _slot_names(cls):
            if hasattr(obj, name):
                add(name, attrgetter(name))

    for name, attr in _class_attrs(cls):
        if isinstance(attr, property):
            add(name, attrgetter(name), _return_type(attr.fget))
        elif isinstance(attr, functools.cached_property):
            add(name, attrgetter(name), _return_type(attr.func))

    return members


# Private Methods ------------------------------------------------------------------------------------------------------

def _class_attrs(cls: type) -> list[tuple[str, Any]]:
    """Class namespace entries along the MRO, base classes first, overrides replacing in place."""
    attrs: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        if klass is object:
            continue
        for name, attr in vars(klass).items():
            attrs[name] = attr
    return list(attrs.items())


def _slot_names(cls: type) -> list[str]:
    names = []
    for klass in reversed(cls.__mro__):
        slots = vars(klass).get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        names.extend(s for s in slots if s not in ("__dict__", "__weakref__"))
    return names


def _type_hints(cls: type) -> dict[str, Any]:
    try:
        return typing.get_type_hints(cls)
    except (NameError, TypeError, AttributeError):
        # Unresolvable forward references
        hints: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            hints.update(vars(klass).get("__annotations__", {}))
        return hints


def _return_type(fn: Callable | None) -> Any:
    if fn is None:
        return object
    try:
        hints = typing.get_type_hints(fn)
    except (NameError, TypeError, AttributeError):
        hints = getattr(fn, "__annotations__", {})
    return hints.get("return", object)
