"""
Debugfmt utilities shared across the package.

Type and callable naming, anonymous type detection, and the short
type/value renderings used in exception messages.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import inspect
import types
import typing

from typing import Any, Literal, TypeVar, Union, get_args, get_origin

# Anonymous types are rendered without a '<TypeName>' tag once they have content
_ANONYMOUS_TYPES: set[type] = {types.SimpleNamespace}

T = TypeVar("T", bound=type)


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.

    Examples:
        >>> class_name(10)
        'int'
        >>> class_name(None)
        'NoneType'
    """
    cls = obj if isinstance(obj, type) else obj.__class__
    return cls.__name__


def type_name(tp: Any) -> str:
    """
    Pretty name of a class or a typing construct.

    Parameterized generics keep their arguments and unions use the PEP 604 spelling.

    Examples:
        >>> type_name(int)
        'int'
        >>> type_name(dict[str, list[int]])
        'dict[str, list[int]]'
        >>> type_name(typing.Optional[int])
        'int | None'
    """
    if tp is None or tp is type(None):
        return "None"
    if tp is Ellipsis:
        return "..."
    if tp is Any:
        return "Any"
    if isinstance(tp, str):
        return tp
    if isinstance(tp, typing.ForwardRef):
        return tp.__forward_arg__
    if isinstance(tp, TypeVar):
        return tp.__name__
    if isinstance(tp, (list, tuple)):
        # Callable parameter lists
        return "[" + ", ".join(type_name(a) for a in tp) + "]"

    origin = get_origin(tp)
    if origin is not None:
        args = get_args(tp)
        if origin is Union or origin is types.UnionType:
            return " | ".join(type_name(a) for a in args)
        if origin is Literal:
            return "Literal[" + ", ".join(repr(a) for a in args) + "]"
        if origin is typing.Annotated:
            return type_name(args[0])
        name = "Callable" if origin is abc.Callable else type_name(origin)
        if not args:
            return name
        return name + "[" + ", ".join(type_name(a) for a in args) + "]"

    if isinstance(tp, type):
        return tp.__name__
    return getattr(tp, "__name__", None) or repr(tp)


def callable_name(fn: Any) -> str:
    """
    Qualified name and signature of a function or method, e.g. 'Parser.feed(self, data: str) -> None'.

    Callables without an introspectable signature render their parameters as '(...)'.
    """
    name = getattr(fn, "__qualname__", None) or getattr(fn, "__name__", None) or class_name(fn)
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return f"{name}(...)"
    return f"{name}{signature}"


def anonymous(cls: T) -> T:
    """Class decorator: render instances of cls without a type tag when they have content."""
    _ANONYMOUS_TYPES.add(cls)
    return cls


def is_anonymous(cls: type) -> bool:
    """Whether cls is an ad-hoc record type (SimpleNamespace and types marked with @anonymous)."""
    return cls in _ANONYMOUS_TYPES


def is_named_tuple(obj: Any) -> bool:
    """Check for collections.namedtuple and typing.NamedTuple instances."""
    return isinstance(obj, tuple) and isinstance(getattr(type(obj), "_fields", None), tuple)


def fmt_type(obj: Any) -> str:
    """Short type rendering for exception messages, e.g. '<int>'."""
    return f"<{class_name(obj)}>"


def fmt_value(obj: Any, max_repr: int = 120) -> str:
    """Short type-value rendering for exception messages, e.g. "<str: 'abc'>"."""
    try:
        repr_ = repr(obj)
    except Exception as e:
        repr_ = f"<{type(obj).__name__} object (repr failed: {type(e).__name__})>"
    if len(repr_) > max_repr:
        repr_ = repr_[:max_repr] + "..."
    return f"<{type(obj).__name__}: {repr_}>"
