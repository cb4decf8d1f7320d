"""
Argline parse results.

Overview
- ParsedArg: one satisfied positional rule (name + bound value).
- ParsedCommand: the immutable outcome of matching one schema level. It holds the
  flags found in the leading run of tokens, the bound positionals in order, and at
  most one nested ParsedCommand for the subcommand that matched.

Accessors
- has_flag(token) → bool
- arg(name)       → str | None
- args()          → list[str] (fresh list on every call)
- subcommand()    → (name, ParsedCommand) | None (an independent copy on every call)
- command()       → str

Results compare by value and are hashable, so they can be asserted on directly
or collected in sets.
"""
import copy
from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ParsedArg:
    """Bound name/value pair for one positional rule."""

    name: str
    value: str


class ParsedCommand:
    """
    Structured, read-only result of Command.parse_from().

    Construction normalizes the inputs: flags become a frozenset, args a tuple of
    ParsedArg (plain (name, value) pairs are accepted) and the subcommand match
    either None or a (name, ParsedCommand) pair.
    """

    __slots__ = ("_command", "_flags", "_args", "_subcommand")

    def __init__(self, command, /, flags=(), args=(), subcommand=None):
        if not isinstance(command, str):
            raise TypeError("ParsedCommand() argument 'command' must be a string")
        if isinstance(flags, str) or not isinstance(flags, Iterable):
            raise TypeError("ParsedCommand() argument 'flags' must be an iterable of strings")

        parsed = []
        for arg in args:
            if not isinstance(arg, ParsedArg):
                arg = ParsedArg(*arg)
            parsed.append(arg)

        if subcommand is not None:
            name, result = subcommand
            if not isinstance(name, str) or not isinstance(result, ParsedCommand):
                raise TypeError("ParsedCommand() argument 'subcommand' must be a (str, ParsedCommand) pair")
            subcommand = (name, result)

        object.__setattr__(self, "_command", command)
        object.__setattr__(self, "_flags", frozenset(flags))
        object.__setattr__(self, "_args", tuple(parsed))
        object.__setattr__(self, "_subcommand", subcommand)

    def __setattr__(self, name, value, /):
        raise AttributeError("%s object is read-only" % type(self).__name__)

    def __delattr__(self, name, /):
        raise AttributeError("%s object is read-only" % type(self).__name__)

    def has_flag(self, flag, /):
        return flag in self._flags

    def arg(self, name, /):
        """
        Return the value bound to the first rule called `name`, or None when that
        rule was optional and left unbound (or was never declared).
        """
        for arg in self._args:
            if arg.name == name:
                return arg.value
        return None

    def args(self):
        """Return the bound values in binding order."""
        return [arg.value for arg in self._args]

    def subcommand(self):
        """
        Return (name, result) for the matched subcommand, or None.

        The nested result is copied on each call so the returned handle never
        aliases this result's internals.
        """
        if self._subcommand is None:
            return None
        name, result = self._subcommand
        return name, copy.replace(result)

    def command(self):
        return self._command

    def __replace__(self, /, **changes):
        return type(self)(
            changes.pop("command", self._command),
            flags=changes.pop("flags", self._flags),
            args=changes.pop("args", self._args),
            subcommand=changes.pop("subcommand", self._subcommand),
            **changes
        )

    def __copy__(self):
        return copy.replace(self)

    def __deepcopy__(self, memo, /):
        if self._subcommand is None:
            return copy.replace(self)
        name, result = self._subcommand
        return copy.replace(self, subcommand=(name, copy.deepcopy(result, memo)))

    def __reduce__(self):
        return type(self), (self._command, self._flags, self._args, self._subcommand)

    def __eq__(self, other, /):
        if not isinstance(other, ParsedCommand):
            return NotImplemented
        return (
            self._command == other._command and
            self._flags == other._flags and
            self._args == other._args and
            self._subcommand == other._subcommand
        )

    def __hash__(self):
        return hash((self._command, self._flags, self._args, self._subcommand))

    def __repr__(self):
        return "parsed-command(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "command", self._command
        yield "flags", sorted(self._flags)
        yield "args", self._args
        yield "subcommand", self._subcommand


__all__ = (
    "ParsedArg",
    "ParsedCommand",
)
