"""
Argline command layer: declare command trees and match tokens against them.

What this module provides
- ArgRule: one named positional slot with a required/optional policy.
- Command: an immutable schema for one command level (name, recognized flags,
  ordered positional rules and ordered subcommands) with a fluent builder and the
  recursive matcher (parse_from / parse).
- Factories and helpers:
  • command(...): build a whole Command level in one call.
  • invoke(cmd, prompt): convenience runner that surfaces faults via trigger().

Matching, per command level
1. if the first token is the command's own name, drop it (the root may be invoked
   with or without its name, and every level re-applies the rule).
2. the first child (declaration order) whose name equals the next token is parsed
   recursively from the token after it; its faults propagate unchanged.
3. the leading contiguous run of declared flags is consumed as flags. scanning stops
   at the first token that is not a declared flag, so flag-looking tokens after a
   positional are positionals.
4. rules are zipped with the remaining tokens: bound when a token is available,
   RequiredArgMissingError when a required rule has none, omitted when optional.
   tokens beyond the last rule are ignored.

Quick start
    from argline import Command

    hello = (
        Command("/hello")
        .flags(["-loud", "-quiet"])
        .arg("who", True)
        .arg("greeting", False)
        .subcommand(Command("twice").arg("who", True))
    )

    result = hello.parse("/hello -loud world")
    result.has_flag("-loud")   # True
    result.arg("who")          # "world"
    result.arg("greeting")     # None

Design notes
- Builder methods never mutate: each returns a new Command (copy.replace), so every
  intermediate schema is valid and a schema can be shared across threads.
- A matched subcommand's tokens stay in the parent's working list; the parent's
  flag scan and positional binding run over them as well.
"""
import copy
import functools
import itertools
import operator
import re
import sys
from collections import deque
from collections.abc import Iterable
from dataclasses import dataclass

from .faults import *
from .results import ParsedArg, ParsedCommand
from .utils import *


@dataclass(frozen=True, slots=True)
class ArgRule:
    """
    Positional slot declaration.

    Rules are bound to tokens in declaration order; `required` only decides what
    happens when the tokens run out before this rule.
    """

    name: str
    required: bool = False

    def __post_init__(self):
        if not isinstance(self.name, str):
            raise TypeError("%s name must be a string" % type(self).__name__)
        if not isinstance(self.required, bool):
            raise TypeError("%s required must be a boolean" % type(self).__name__)


class CommandType(type):
    """
    Metaclass that gives Command classes stable introspection.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all names
      listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics and rich UI.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      for consistent, human-friendly labels in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='build', switches=frozenset({'-v'}), ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            """
            Yield a sequence of (name, object) pairs for pretty printers.
            """
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


@functools.cache
def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return f"{number}th"

    return f'{number}%s' % {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th")


def _sanitize_rules(rules, /):
    """
    Normalize rule declarations into a tuple of ArgRule.

    Each entry is either an ArgRule or a (name, required) pair.
    """
    if isinstance(rules, str) or not isinstance(rules, Iterable):
        raise TypeError("command rules must be an iterable of rules")
    sanitized = []
    for rule in rules:
        if not isinstance(rule, ArgRule):
            try:
                name, required = rule
            except (TypeError, ValueError):
                raise TypeError("command rule must be an ArgRule or a (name, required) pair") from None
            rule = ArgRule(name, required)
        sanitized.append(rule)
    return tuple(sanitized)


def _sanitize_switches(switches, /):
    if isinstance(switches, str) or not isinstance(switches, Iterable):
        raise TypeError("command flags must be an iterable of strings")
    switches = frozenset(switches)
    for switch in switches:
        if not isinstance(switch, str):
            raise TypeError("command flag must be a string")
    return switches


class Command(metaclass=CommandType):
    """
    Declarative, immutable schema for one command level.

    Responsibilities
    - Introspection: name, switches (recognized flag tokens), rules (ordered ArgRule
      declarations) and children (ordered subcommand schemas) as read-only properties.
    - Composition: flag/flags/arg/subcommand return a new Command with the addition,
      so chains like Command("x").flag("-v").arg("file", True) never expose a
      half-built schema.
    - Matching: parse_from(tokens) and parse(string) produce a ParsedCommand or
      raise RequiredArgMissingError.

    Notes
    - switches has set semantics: declaring a flag twice is a no-op.
    - rules and children keep declaration order; children order is match priority.
    """

    __introspectable__ = (
        "name",
        "switches",
        "rules",
        "children",
    )

    def __new__(cls, name, /, switches=(), rules=(), children=()):
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} name must be a string")
        if isinstance(children, str) or not isinstance(children, Iterable):
            raise TypeError(f"{cls.__typename__} children must be an iterable of commands")
        children = tuple(children)
        for child in children:
            if not isinstance(child, Command):
                raise TypeError(f"{cls.__typename__} subcommand must be a {cls.__typename__}")

        self = super().__new__(cls)
        self._name = name
        self._switches = _sanitize_switches(switches)
        self._rules = _sanitize_rules(rules)
        self._children = children
        return self

    def __getnewargs__(self):
        return self._name, self._switches, self._rules, self._children

    def __replace__(self, /, **changes):
        return type(self)(
            changes.pop("name", self._name),
            switches=changes.pop("switches", self._switches),
            rules=changes.pop("rules", self._rules),
            children=changes.pop("children", self._children),
            **changes
        )

    def flag(self, flag, /):
        """
        Return a copy of this command that also recognizes `flag`.
        """
        return copy.replace(self, switches=self._switches | {flag})

    def flags(self, *flags):
        """
        Return a copy of this command that also recognizes every given flag.

        Accepts either varargs (flags("-a", "-b")) or a single iterable
        (flags(["-a", "-b"])).
        """
        if len(flags) == 1 and not isinstance(flags[0], str):
            flags, = flags
        return copy.replace(self, switches=self._switches | _sanitize_switches(flags))

    def arg(self, name, /, required):
        """
        Return a copy of this command with one more positional rule appended.

        Rules bind in the order they are declared. A required rule may follow an
        optional one; each slot is checked on its own.
        """
        return copy.replace(self, rules=self._rules + (ArgRule(name, required),))

    def subcommand(self, command, /):
        """
        Return a copy of this command with `command` appended as a child.

        Children declared first win when several share a name.
        """
        if not isinstance(command, Command):
            raise TypeError(f"subcommand() argument must be a {type(self).__typename__}")
        return copy.replace(self, children=self._children + (command,))

    def parse_from(self, tokens, /):
        """
        Match an iterable of tokens against this schema.

        Parameters
        - tokens: Iterable of token-like items; each is converted with str().

        Returns
        - ParsedCommand for this level (with the nested subcommand result, if any).

        Raises
        - RequiredArgMissingError: a required rule at this level or any nested level
          could not be bound.
        - TypeError: tokens is a bare string or not iterable.
        """
        if isinstance(tokens, str) or not isinstance(tokens, Iterable):
            raise TypeError("parse_from() argument must be an iterable of tokens; use parse() for a string")

        tokens = deque(map(str, tokens))

        if tokens and tokens[0] == self._name:
            tokens.popleft()

        match = None
        if tokens:
            for child in self._children:
                if child._name == tokens[0]:
                    match = child._name, child.parse_from(itertools.islice(tokens, 1, None))
                    break

        flags = set()
        while tokens and tokens[0] in self._switches:
            flags.add(tokens.popleft())

        args = []
        for index, rule in enumerate(self._rules, 1):
            if tokens:
                args.append(ParsedArg(rule.name, tokens.popleft()))
                continue
            if rule.required:
                raise RequiredArgMissingError(
                    rule.name,
                    title="missing required arg",
                    code=FaultCode.REQUIRED_ARG_MISSING,
                    command=self._name,
                    index=index,
                    hint="add a value for %r, the %s positional argument of %r" % (
                        rule.name, _ordinal(index), self._name
                    ),
                    docs=getdoc(FaultCode.REQUIRED_ARG_MISSING),
                )

        return ParsedCommand(self._name, flags, args, match)

    def parse(self, input, /):
        """
        Split `input` on single spaces and match the pieces.

        Consecutive spaces yield empty tokens, which are bound as empty values.
        """
        if not isinstance(input, str):
            raise TypeError("parse() argument must be a string")
        return self.parse_from(input.split(" "))


def command(name, /, *, flags=(), args=(), subcommands=()):
    """
    Build a Command level in a single call.

    Parameters
    - name: str
    - flags: Iterable[str] of recognized flag tokens.
    - args: Iterable of ArgRule or (name, required) pairs, in binding order.
    - subcommands: Iterable[Command] in match priority order.

    Example
        command("/hello", flags=["-v"], args=[("who", True)], subcommands=[command("twice")])
    """
    return Command(name, switches=flags, rules=args, children=subcommands)


def invoke(object, prompt=Unset, /, *, shell=False, fancy=False, colorful=True):
    """
    Convenience runner for commands.

    Parameters
    - object: Command to match against.
    - prompt:
      • Unset: use sys.argv[1:].
      • str: split on single spaces (Command.parse).
      • Iterable: used as tokens (Command.parse_from).
    - shell/fancy/colorful: presentation of faults (see faults.trigger).

    Behavior
    - Returns the ParsedCommand on success.
    - On a fault, surfaces it through trigger(): raised again outside shell mode,
      rendered to stderr followed by exit status 1 in shell mode.

    Raises
    - TypeError: when 'object' is not a Command or the prompt type is invalid.
    """
    if not isinstance(object, Command):
        raise TypeError("invoke() first argument must be a command")

    if prompt is Unset:
        prompt = sys.argv[1:]
    elif isinstance(prompt, str):
        prompt = prompt.split(" ")
    elif not isinstance(prompt, Iterable):
        raise TypeError("invoke() second argument must be a string or an iterable of tokens")

    try:
        return object.parse_from(prompt)
    except CommandException as fault:
        trigger(fault, tool=object, shell=shell, fancy=fancy, colorful=colorful)


__all__ = (
    "ArgRule",
    "Command",
    "command",
    "invoke",
)

# Not part of the public API.
del CommandType
