"""
Argshape faults (stop signals and schema errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing stop
  signal. Codes are grouped by domain to keep copy consistent and make
  logs/searches predictable.
- StopSignal: base type for every non-result outcome of a parse. It carries a
  message plus read-only options and knows how to render itself with rich and
  how to trigger (raise, or exit the process in shell mode).
  • HelpRequested: not an error; "print help, exit cleanly".
  • MissingRequired: a required parameter had no matching token, or a switch
    expecting a value was the last token.
  • InvalidValue: a matched value failed coercion to the declared type.
- SchemaError: malformed schema, raised eagerly at construction time and never
  produced by a parse.
- trigger(): central entry point to surface a stop signal.

Integration
- The parsing engine raises stop signals internally; the top-level parse
  writes the signal to the diagnostics sink once and returns it.
- Command.__invoke__ hands the returned signal to trigger(): outside shell mode
  it is raised, in shell mode the process exits with the signal's status.
"""
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from . import helps


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - help (100xx)
      • HELP_REQUESTED
    - missing values (111xx)
      • MISSING_REQUIRED, MISSING_VALUE
    - conversion (113xx)
      • INVALID_VALUE

    normalize() allows host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- help (10xxx) ---
    HELP_REQUESTED   = 10001

    # --- missing values (11xxx) ---
    MISSING_REQUIRED = 11125
    MISSING_VALUE    = 11117

    # --- conversion (11xxx) ---
    INVALID_VALUE    = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class SchemaError(ValueError):
    """
    A schema (value type, parameter or command) is malformed.

    Raised while the schema is being constructed, so a broken command fails at
    startup instead of at parse time.
    """


class StopSignal(Exception):
    """
    Base class of every outcome that halts a parse without a result.

    Options
    - command: the Command schema the signal was produced for.
    - title, code, hint: presentation copy used by __rich__.
    - colorful, fancy: rendering switches (set by the sink via __replace__).
    - shell: whether __trigger__ exits the process instead of raising.
    """
    status = 1

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__}() message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def command(self):
        return self.options.get("command")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            return Text(str(fragment), styles[style])

        prog = getattr(main, "__prog__", getattr(self.command, "name", "argshape"))

        header = Text.assemble(
            "[ ",
            text(prog, "prog-name"),
            " — ",
            text(self.options["code"].normalize(), "code"),
            " | ",
            text(self.options.get("title", "stop").title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        hint = Text.assemble(text(" → ", "hint-arrow"), text(self.options.get("hint"), "hint"))

        if self.options.get("fancy", False):
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        sys.exit(self.status)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class HelpRequested(StopSignal):
    """
    The user asked for help (``--help``/``-h``) or gave no tokens at all.

    Not an error: the status is 0 and rendering shows the command's help text.
    """
    status = 0

    def __rich__(self):
        return helps.format(self.command, colorful=self.options.get("colorful", False))


class MissingRequired(StopSignal):
    """
    A required parameter got no value.

    code is FaultCode.MISSING_REQUIRED when nothing matched the parameter and
    FaultCode.MISSING_VALUE when its switch was the last token.
    """
    __match_args__ = ("parameter",)

    @property
    def parameter(self):
        return self.options["parameter"]


class InvalidValue(StopSignal):
    """
    A value token could not be coerced to the parameter's type.

    The raw token and the underlying coercion error are kept in the options.
    """
    __match_args__ = ("parameter", "token")

    @property
    def parameter(self):
        return self.options["parameter"]

    @property
    def token(self):
        return self.options["token"]

    @property
    def error(self):
        return self.options.get("error")


def trigger(signal, /, **options):
    """
    surface a stop signal with the given runtime options.

    contract
    - signal must provide __trigger__ and __replace__ methods (see StopSignal).
    - options are merged into the signal via __replace__(**options) before triggering.
    - outside shell mode the signal is raised; in shell mode the process exits
      with the signal's status (0 for help, 1 otherwise).
    """
    if (
        not hasattr(signal, "__trigger__") or
        not callable(signal.__trigger__) or
        not hasattr(signal, "__replace__") or
        not callable(signal.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    signal.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "SchemaError",
    "StopSignal",
    "HelpRequested",
    "MissingRequired",
    "InvalidValue",
    "trigger",
)
