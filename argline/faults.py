"""
Argline faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for user-facing issues.
- CommandException: base type that carries message + options and knows how to
  render itself with rich in a short, actionable way.
- RequiredArgMissingError: the single fault the matcher can raise.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The matcher raises faults directly; str(fault) is a stable message such as
  'Missing required arg "name"'.
- Runners call trigger(fault, **ctx). In non-shell mode the fault is raised again
  with the context merged in; in shell mode it is rendered via rich and the
  process exits with status 1.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset, coalesce

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    numeric ranges encode domains; the positional (cardinal) range is 1112x,
    which leaves room for future additions without reshuffling.
    """
    # --- positional errors (11xxx) ---
    REQUIRED_ARG_MISSING = 11125

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault raised while matching tokens against a command schema.

    options
    - title, code, hint, docs: copy shown when rendered.
    - tool: root command used to label the header (overridden by __prog__ in __main__).
    - shell, fancy, colorful: runtime presentation switches (see trigger()).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(coalesce(message, ""))
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",  # dimmed documentation footer
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        try:
            name = self.options["tool"].name
        except (KeyError, AttributeError):
            name = self.options.get("command", "")
        prog = text(getattr(main, "__prog__", name), styler("prog-name"))

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else code, styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        renders = [message]
        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))
        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if fancy:
            width = console.width - 4
            try:
                width = int(width * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(*renders), title=header, title_align="left", width=width)

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RequiredArgMissingError(CommandException):
    """
    a required positional rule could not be bound to a token.

    the offending rule name is kept on .name; the message is always
    'Missing required arg "<name>"'.
    """

    def __init__(self, name, /, **options):
        if not isinstance(name, str):
            raise TypeError("RequiredArgMissingError() argument must be a string")
        super().__init__('Missing required arg "%s"' % name, **options)
        self.name = name

    def __reduce__(self):
        return type(self), (self.name,), {"options": dict(self.options)}

    def __setstate__(self, state):
        self.options = MappingProxyType(state.get("options", {}))

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.name, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the rich stderr console; otherwise the
      merged fault is raised.

    typical options
    - tool, shell, fancy, colorful, title, code, hint, docs.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "RequiredArgMissingError",
    "FaultCode",
    "trigger",
    "getdoc",
)
