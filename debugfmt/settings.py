"""
Debugfmt Settings

Layered registry of custom formatters, member overrides and layout preferences.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Callable, Iterable, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from .sentinels import NOT_FOUND, UNSET, NotFoundType, ifnotunset
from .utils import fmt_type, fmt_value

Formatter = Callable[[Any], str]
MemberFormatter = Callable[[Any], "str | None"]
MembersProvider = Callable[[Any], Iterable[Any]]


# Classes --------------------------------------------------------------------------------------------------------------


class Settings:
    """
    Layered configuration for pretty().

    A Settings instance holds its own registrations and an optional parent. Lookups
    consult the local layer first and fall back to the parent at read time, so a
    child layer can override a shared default without copying or mutating it.

    Registries:
        formatters: type -> fn(obj) -> str, replaces all structural formatting
        member_formatters: (type, member) -> fn(value) -> str | None, where None
            drops the member from output
        prepended_members: type -> member name rendered as a leading label
            (the 'name' member when nothing is registered)
        members providers: type -> fn(obj) -> iterable of MemberInfo, replaces
            built-in member introspection

    Layout flags (tri-state, None means "inherit from the parent, else decide heuristically"):
        prefers_multiline: force or forbid multi-line layout
        omits_null_members: drop members whose value is None

    Type matching:
        - Registered types match instances of subclasses
        - The nearest ancestor in the MRO wins
        - Virtual subclasses (ABC.register, __subclasshook__) match after MRO
          entries, in registration order

    Examples:
        >>> settings = (
        ...     Settings(DEFAULT_SETTINGS)
        ...     .register_formatter(Money, lambda m: f"{m.amount} {m.currency}")
        ...     .ignore_member(User, "password")
        ...     .prefer_multiline(True)
        ... )
        >>> pretty(user, settings=settings)

    Notes:
        - Registration is configuration-time only, do not mutate a layer while
          another thread formats with it
        - Builder methods return self for chaining
    """

    def __init__(self, parent: "Settings | None" = None) -> None:
        if parent is not None and not isinstance(parent, Settings):
            raise TypeError(f"parent must be Settings or None, got {fmt_type(parent)}")

        self._parent = parent
        self._formatters: dict[type, Formatter] = {}
        self._member_formatters: dict[type, dict[str, MemberFormatter]] = {}
        self._prepended_members: dict[type, str] = {}
        self._members_providers: dict[type, MembersProvider] = {}
        self._prefers_multiline: bool | None = UNSET
        self._omits_null_members: bool | None = UNSET

    def __repr__(self) -> str:
        return (f"Settings(formatters={len(self._formatters)}, "
                f"member_formatters={sum(len(v) for v in self._member_formatters.values())}, "
                f"parent={'yes' if self._parent is not None else 'no'})")

    # Layering -----------------------------------

    @property
    def parent(self) -> "Settings | None":
        return self._parent

    def child(self) -> "Settings":
        """Create a new layer that inherits everything unset from this one."""
        return Settings(self)

    # Layout flags -------------------------------

    @property
    def prefers_multiline(self) -> bool | None:
        """Forced layout, or None when no layer sets it and the layout heuristics decide."""
        return ifnotunset(self._prefers_multiline,
                          default_factory=lambda: self._parent.prefers_multiline if self._parent else None)

    @property
    def omits_null_members(self) -> bool | None:
        """Whether members with a None value are dropped, None when no layer sets it."""
        return ifnotunset(self._omits_null_members,
                          default_factory=lambda: self._parent.omits_null_members if self._parent else None)

    def prefer_multiline(self, multiline: bool | None) -> "Settings":
        """
        Force multi-line (True) or single-line (False) layout; None inherits the parent's choice.

        Returns:
            Self, to allow chaining.
        """
        if multiline is not None and not isinstance(multiline, bool):
            raise TypeError(f"multiline must be bool or None, got {fmt_type(multiline)}")
        self._prefers_multiline = UNSET if multiline is None else multiline
        return self

    def omit_null_members(self, omit: bool | None) -> "Settings":
        """
        Drop (True) or keep (False) members whose value is None; None inherits the parent's choice.

        Returns:
            Self, to allow chaining.
        """
        if omit is not None and not isinstance(omit, bool):
            raise TypeError(f"omit must be bool or None, got {fmt_type(omit)}")
        self._omits_null_members = UNSET if omit is None else omit
        return self

    # Registration -------------------------------

    def register_formatter(self, typ: type, formatter: Formatter) -> "Settings":
        """
        Register or override a formatter for a type and its subclasses.

        The formatter output is final: no null, empty or layout handling is applied to it.

        Args:
            typ: The type to format.
            formatter: A callable receiving the object and returning its text.

        Returns:
            Self, to allow chaining.

        Raises:
            TypeError: If typ is not a type or formatter is not callable.
        """
        _validate_type(typ)
        if not callable(formatter):
            raise TypeError(f"formatter must be callable, got {fmt_type(formatter)}")
        self._formatters[typ] = formatter
        return self

    def register_str_formatter(self, typ: type) -> "Settings":
        """Render instances of typ with str()."""
        return self.register_formatter(typ, str)

    def register_member_formatter(self, typ: type, name: str, formatter: MemberFormatter) -> "Settings":
        """
        Register a formatter for one member of a type and its subclasses.

        Args:
            typ: The owner type.
            name: Member name.
            formatter: A callable receiving the member value and returning its text,
                or None to drop the member from output.

        Returns:
            Self, to allow chaining.

        Raises:
            TypeError: If typ is not a type, name is not a str or formatter is not callable.
            ValueError: If name is empty or (typ, name) is already registered in this layer.
        """
        _validate_type(typ)
        _validate_member_name(name)
        if not callable(formatter):
            raise TypeError(f"formatter must be callable, got {fmt_type(formatter)}")

        by_name = self._member_formatters.setdefault(typ, {})
        if name in by_name:
            raise ValueError(f"member formatter for {typ.__name__}.{name} already registered")
        by_name[name] = formatter
        return self

    def ignore_member(self, typ: type, name: str) -> "Settings":
        """Drop a member of typ from output."""
        return self.register_member_formatter(typ, name, _ignore)

    def register_prepended_member(self, typ: type, name: str) -> "Settings":
        """
        Render the named member as a label in front of the '<TypeName>' tag.

        Raises:
            TypeError: If typ is not a type or name is not a str.
            ValueError: If name is empty or typ is already registered in this layer.
        """
        _validate_type(typ)
        _validate_member_name(name)
        if typ in self._prepended_members:
            raise ValueError(f"prepended member for {typ.__name__} already registered")
        self._prepended_members[typ] = name
        return self

    def register_members(self, typ: type, provider: MembersProvider) -> "Settings":
        """
        Replace member introspection for a type and its subclasses.

        Args:
            typ: The owner type.
            provider: A callable receiving the object and returning an iterable of MemberInfo.

        Returns:
            Self, to allow chaining.
        """
        _validate_type(typ)
        if not callable(provider):
            raise TypeError(f"provider must be callable, got {fmt_type(provider)}")
        self._members_providers[typ] = provider
        return self

    # Lookup -------------------------------------

    def get_formatter(self, obj: Any) -> Formatter | None:
        """
        Get the custom formatter for the object's type (exact or via inheritance).

        Searches this layer for the nearest ancestor, then the parent layers.

        Returns:
            The formatter if found; otherwise None.
        """
        formatter = _nearest(self._formatters, type(obj))
        if formatter is not NOT_FOUND:
            return formatter
        if self._parent is not None:
            return self._parent.get_formatter(obj)
        return None

    def get_member_formatter(self, obj: Any, name: str) -> MemberFormatter | NotFoundType:
        """
        Get the formatter for a member of obj.

        Returns:
            The member formatter, or NOT_FOUND when no layer registers one.
        """
        cls = type(obj)
        for typ in _matching_types(self._member_formatters, cls):
            by_name = self._member_formatters[typ]
            if name in by_name:
                return by_name[name]
        if self._parent is not None:
            return self._parent.get_member_formatter(obj, name)
        return NOT_FOUND

    def get_prepended_member(self, cls: type) -> str | None:
        """Get the registered label member name for cls, None if no layer registers one."""
        name = _nearest(self._prepended_members, cls)
        if name is not NOT_FOUND:
            return name
        if self._parent is not None:
            return self._parent.get_prepended_member(cls)
        return None

    def get_members_provider(self, cls: type) -> MembersProvider | None:
        """Get the registered members provider for cls, None if no layer registers one."""
        provider = _nearest(self._members_providers, cls)
        if provider is not NOT_FOUND:
            return provider
        if self._parent is not None:
            return self._parent.get_members_provider(cls)
        return None

    # Read-only views of this layer ---------------

    @property
    def formatters(self) -> Mapping[type, Formatter]:
        return frozendict(self._formatters)

    @property
    def member_formatters(self) -> Mapping[type, Mapping[str, MemberFormatter]]:
        return frozendict({typ: frozendict(by_name) for typ, by_name in self._member_formatters.items()})

    @property
    def prepended_members(self) -> Mapping[type, str]:
        return frozendict(self._prepended_members)


# Private Methods ------------------------------------------------------------------------------------------------------

def _ignore(value: Any) -> None:
    return None


def _matching_types(table: Mapping[type, Any], cls: type) -> list[type]:
    """Registered types matching cls, most specific first: MRO order, then virtual bases in registration order."""
    matches = [base for base in cls.__mro__ if base in table]
    for typ in table:
        if typ not in matches and issubclass(cls, typ):
            matches.append(typ)
    return matches


def _nearest(table: Mapping[type, Any], cls: type) -> Any:
    """Value registered for the nearest ancestor of cls, or NOT_FOUND."""
    # Fast path: exact type match
    if cls in table:
        return table[cls]
    for base in cls.__mro__[1:]:
        if base in table:
            return table[base]
    for typ, value in table.items():
        if issubclass(cls, typ):
            return value
    return NOT_FOUND


def _validate_type(typ: Any) -> None:
    if not isinstance(typ, type):
        raise TypeError(f"typ must be a type, got {fmt_value(typ)}")


def _validate_member_name(name: Any) -> None:
    if not isinstance(name, str):
        raise TypeError(f"member name must be a str, got {fmt_type(name)}")
    if not name:
        raise ValueError("member name must not be empty")
