"""
Tristate values: the three-way logical value and its flag-friendly holder.

Overview
- TriState
  • Closed enumeration with exactly three members: NONE (unset, “don't care”,
    the default), FALSE and TRUE. Python reserves None/False/True, hence the
    upper-case spelling; str() still yields "None", "False" and "True".
  • parse(text): case-insensitive parse of the accepted spellings below.
  • as_optional_bool(), match(expected, none_result), is_set(): query helpers
    for filtering code.

- Value
  • Runtime-checkable protocol a flag set expects from anything it binds a
    flag to: set(text), get(), type() and str().

- TriStateValue
  • Mutable holder for a TriState. Enum members are immutable, so this is the
    “variable” a flag writes into. It satisfies Value.

Accepted spellings (any casing)
    TRUE   1, t, true, y, yes
    FALSE  0, f, false, n, no
    NONE   -1, u, unknown, e, either, b, both, a, all, any, none, null, nil

Quick example
    >>> state = TriStateValue()
    >>> state.set("Yes")
    >>> state.get()
    <TriState.TRUE: 2>
    >>> state.match(True, False)
    True
"""
from enum import Enum, unique
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from rich.text import Text

from .faults import InvalidLiteralError


@unique
class TriState(Enum):
    """
    Three-way logical value: NONE, FALSE or TRUE.

    The numeric values only give each member a stable identity (NONE is the
    zero value); members are never compared relationally.
    """
    __typename__ = "TriState"

    NONE = 0
    FALSE = 1
    TRUE = 2

    @classmethod
    def parse(cls, text, /):
        """
        Resolve a command-line token into a member.

        Matching is case-insensitive (the token is lowercased first).

        Raises
        - TypeError: when text is not a string.
        - InvalidLiteralError: when text is none of the accepted spellings.
        """
        if not isinstance(text, str):
            raise TypeError("TriState.parse() argument must be a string")
        try:
            return _LITERALS[text.lower()]
        except KeyError:
            raise InvalidLiteralError(text) from None

    @classmethod
    def from_bool(cls, value, /):
        """
        Inverse of as_optional_bool(): None -> NONE, False -> FALSE, True -> TRUE.
        """
        match value:
            case None:
                return cls.NONE
            case bool():
                return cls.TRUE if value else cls.FALSE
            case _:
                raise TypeError("TriState.from_bool() argument must be a bool or None")

    @classmethod
    def typename(cls):
        return cls.__typename__

    def as_optional_bool(self):
        """
        NONE -> None, FALSE -> False, TRUE -> True.

        Lets callers branch on “was a preference expressed at all”.
        """
        match self:
            case TriState.NONE:
                return None
            case TriState.FALSE:
                return False
            case TriState.TRUE:
                return True

    def match(self, expected, none_result, /):
        """
        Filter policy helper.

        A set value matches when it equals `expected`. For NONE, `expected` is
        ignored and `none_result` is returned, so each call site decides
        whether “don't care” counts as a match.
        """
        if (value := self.as_optional_bool()) is not None:
            return value == expected
        return none_result

    def is_set(self):
        return self is not TriState.NONE

    def __str__(self):
        match self:
            case TriState.NONE:
                return "None"
            case TriState.FALSE:
                return "False"
            case TriState.TRUE:
                return "True"

    def __rich__(self):
        match self:
            case TriState.NONE:
                return Text(str(self), style="dim")
            case TriState.FALSE:
                return Text(str(self), style="red")
            case TriState.TRUE:
                return Text(str(self), style="green")


_LITERALS = MappingProxyType(
    dict.fromkeys(("1", "t", "true", "y", "yes"), TriState.TRUE) |
    dict.fromkeys(("0", "f", "false", "n", "no"), TriState.FALSE) |
    dict.fromkeys((
        "-1", "u", "unknown", "e", "either", "b", "both",
        "a", "all", "any", "none", "null", "nil",
    ), TriState.NONE)
)


@runtime_checkable
class Value(Protocol):
    """
    What a flag set needs from a flag's storage.

    - set(text): parse `text` and store it; raise (typically ValueError) and
      keep the previous value when the text is rejected.
    - get(): the current typed value.
    - type(): a short type label for usage output.
    - __str__(): the current value formatted back to text.
    """

    def set(self, text, /): ...

    def get(self): ...

    def type(self): ...

    def __str__(self): ...


class TriStateValue:
    """
    Mutable TriState storage bound to a flag.

    A fresh holder is NONE. The owning program may assign `state` directly;
    flag parsing goes through set(text).
    """
    __slots__ = ("_state",)
    __hash__ = None

    def __init__(self, state=TriState.NONE, /):
        self.state = state

    @property
    def state(self):
        return self._state

    @state.setter
    def state(self, state):
        if not isinstance(state, TriState):
            raise TypeError("TriStateValue state must be a TriState")
        self._state = state

    def set(self, text, /):
        # parse before assigning so a rejected token leaves the state as it was
        self._state = TriState.parse(text)

    def get(self):
        return self._state

    def type(self):
        return TriState.typename()

    def is_set(self):
        return self._state.is_set()

    def match(self, expected, none_result, /):
        return self._state.match(expected, none_result)

    def as_optional_bool(self):
        return self._state.as_optional_bool()

    def __eq__(self, other):
        if isinstance(other, TriStateValue):
            return self._state is other._state
        if isinstance(other, TriState):
            return self._state is other
        return NotImplemented

    def __str__(self):
        return str(self._state)

    def __repr__(self):
        return "TriStateValue(%s)" % self._state

    def __rich__(self):
        return self._state.__rich__()


__all__ = (
    "TriState",
    "Value",
    "TriStateValue",
)
