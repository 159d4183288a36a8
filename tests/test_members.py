#
# Debugfmt - Member Introspection Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
from collections import namedtuple
from dataclasses import dataclass, field
from functools import cached_property
from types import SimpleNamespace
from typing import ClassVar, NamedTuple

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from debugfmt.members import KeyValue, MemberDetails, MemberInfo, introspect
from debugfmt.utils import is_anonymous


# Local Classes & Methods ----------------------------------------------------------------------------------------------

@dataclass
class Order:
    id: int
    customer: str
    notes: list[str] = field(default_factory=list)
    total: float | None = None
    registry: ClassVar[dict] = {}

    @property
    def is_empty(self) -> bool:
        return not self.notes


class Account:
    kind = "static"

    def __init__(self, owner, balance):
        self.owner = owner
        self.balance = balance
        self._secret = "pin"

    @property
    def overdrawn(self) -> bool:
        return self.balance < 0

    @property
    def _internal(self):
        return 1

    def deposit(self, amount):
        self.balance += amount


class SavingsAccount(Account):
    @property
    def rate(self) -> float:
        return 0.5

    @cached_property
    def yearly(self) -> float:
        return self.balance * self.rate


class Slotted:
    __slots__ = ("a", "b", "_c")

    def __init__(self):
        self.a = 1
        self._c = 3


Coord = namedtuple("Coord", "x y")


class Size(NamedTuple):
    width: int
    height: int


def names(obj):
    return [m.name for m in introspect(obj)]


# Tests ----------------------------------------------------------------------------------------------------------------

class TestIntrospect:
    def test_dataclass(self):
        """Dataclass fields in declaration order, then properties; class vars excluded."""
        assert names(Order(1, "ann")) == ["id", "customer", "notes", "total", "is_empty"]

    def test_dataclass_declared_types(self):
        """Declared types come from the type hints."""
        types_ = {m.name: m.declared_type for m in introspect(Order(1, "ann"))}
        assert types_["id"] is int
        assert types_["total"] == (float | None)
        assert types_["is_empty"] is bool

    def test_plain_class(self):
        """Public instance attributes then public properties; methods, statics and privates excluded."""
        assert names(Account("bob", 10)) == ["owner", "balance", "overdrawn"]

    def test_inherited_properties(self):
        """Base class properties come before derived ones, cached properties included."""
        assert names(SavingsAccount("bob", 10)) == ["owner", "balance", "overdrawn", "rate", "yearly"]

    def test_cached_property_once(self):
        """A computed cached property stored in __dict__ is listed once."""
        acc = SavingsAccount("bob", 10)
        _ = acc.yearly
        assert names(acc).count("yearly") == 1

    def test_slots(self):
        """Assigned public slots only."""
        assert names(Slotted()) == ["a"]

    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(Coord(1, 2), ["x", "y"], id="namedtuple"),
            pytest.param(Size(3, 4), ["width", "height"], id="typing-namedtuple"),
        ],
    )
    def test_named_tuple(self, obj, expected):
        """Named tuple fields."""
        assert names(obj) == expected

    def test_named_tuple_types(self):
        """typing.NamedTuple annotations become declared types."""
        assert [m.declared_type for m in introspect(Size(3, 4))] == [int, int]

    def test_simple_namespace(self):
        """Namespace attributes in assignment order."""
        assert names(SimpleNamespace(b=1, a=2)) == ["b", "a"]

    def test_no_members(self):
        """Plain objects have no members."""
        assert introspect(object()) == []

    def test_untyped_default(self):
        """Members without annotation are declared as object."""
        assert all(m.declared_type is object for m in introspect(Account("bob", 1))[:2])

    def test_read(self):
        """Member getters read current values."""
        acc = Account("bob", 10)
        overdrawn = introspect(acc)[-1]
        acc.balance = -1
        assert overdrawn.read(acc) is True

    def test_getter_error_propagates(self):
        """Errors raised by property getters are not swallowed."""

        class Broken:
            @property
            def value(self):
                raise RuntimeError("boom")

        member = introspect(Broken())[0]
        with pytest.raises(RuntimeError, match="boom"):
            member.read(Broken())


class TestRecords:
    def test_key_value(self):
        """KeyValue is an anonymous two-member record."""
        assert names(KeyValue("a", 1)) == ["key", "value"]
        assert is_anonymous(KeyValue)

    def test_member_info(self):
        """MemberInfo reads through its getter."""
        info = MemberInfo("upper", str, str.upper)
        assert info.read("abc") == "ABC"

    def test_member_details(self):
        """MemberDetails is an immutable record."""
        details = MemberDetails("id", int, 7, "7")
        with pytest.raises(AttributeError):
            details.pretty = "8"
