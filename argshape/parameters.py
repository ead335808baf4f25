r"""
Argshape parameter specifications.

Overview
- Parameter: static description of one named parameter of a command:
  • name: identifier, unique within its command (letters first; segments may be
    joined with single hyphens, e.g. "dry-run").
  • type: a ValueType (or its name, or a builtin; see argshape.values.resolve).
  • long: matches "--<name>".
  • short: matches "-<first letter of name>" (only the first two characters of
    the token are compared).
  • help: short description shown by the help renderer.
  • default: literal parsed into the type when no token matches.
  When neither long nor short is set, the parameter is positional.

- Factories
  • option(name, type, ...): long-matching, value-bearing parameter.
  • flag(name, ...): long-matching boolean parameter.
  • positional(name, type, ...): parameter filled by declaration order.

- Introspection & representation
  • ParameterType metaclass provides stable __repr__/__rich_repr__ and exposes
    the fields listed in __introspectable__ as read-only properties.

Validation highlights (SchemaError unless noted)
- Names must match r"[^\W\d_](-?\w+)*" (TypeError when not a string).
- Booleans never carry a default and are never positional.
- Defaults must be strings (TypeError otherwise) that coerce to the type.
- "--help" and "-h" are reserved: a long parameter named "help" or a short
  parameter whose initial is "h" could never be matched.

Quick example:
    >>> from argshape.parameters import Parameter, flag
    >>> width = Parameter("width", "u32", short=True, help="the width of the image")
    >>> width.matches("-w"), width.matches("--width"), width.matches("--w")
    (True, True, False)
    >>> quiet = flag("quiet", short=True, help="start quietly")
"""
import functools
import operator
import re

from rich.text import Text

from .faults import SchemaError
from .utils import *
from .values import resolve

HELP_TOKENS = frozenset({"--help", "-h"})


class ParameterType(type):
    """
    Metaclass that turns parameter specs into introspectable, read-only objects.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and pretty printing.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
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
            - parameter(name='width', type=u32, long=True, short=True, ...)
            """
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
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


def _sanitize_name(cls, metadata, /):
    """
    Internal: validate the parameter name.

    Raises
    - TypeError: when the name is not a string.
    - SchemaError: when it is empty or not an identifier-like name.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise SchemaError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](-?\w+)*", name):
        raise SchemaError(f"{cls.__typename__} name {name!r} must start with a letter (unicodes are allowed)")
    metadata["name"] = name


def _sanitize_matching(cls, metadata, /):
    """
    Internal: resolve the type and validate the matching rules against it.

    Notes
    - A boolean parameter is a flag: it is selected by presence, hence it must
      be long and/or short matching.
    - The help tokens win over every parameter, so parameters that could only be
      spelled like them are rejected.
    """
    metadata["type"] = resolve(metadata["type"])
    metadata["long"] = bool(metadata["long"])
    metadata["short"] = bool(metadata["short"])

    name = metadata["name"]
    if metadata["type"].flag and not (metadata["long"] or metadata["short"]):
        raise SchemaError(f"{cls.__typename__} {name!r} is a flag and cannot be positional")
    if metadata["long"] and "--" + name in HELP_TOKENS:
        raise SchemaError(f"{cls.__typename__} {name!r} clashes with the reserved '--help' token")
    if metadata["short"] and "-" + name[0] in HELP_TOKENS:
        raise SchemaError(f"{cls.__typename__} {name!r} short form clashes with the reserved '-h' token")


def _sanitize_help(cls, metadata, /):
    """
    Internal: validate the help text (None when omitted, non-empty otherwise).
    """
    if not isinstance(help := metadata["help"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise SchemaError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)


def _sanitize_default(cls, metadata, /):
    """
    Internal: validate the default literal eagerly.

    The literal is coerced once here so a bad default fails at startup; the
    parser coerces it again whenever no token matches.
    """
    if not isinstance(default := metadata["default"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'default' must be a string literal")

    name = metadata["name"]
    if isinstance(default, str):
        if metadata["type"].flag:
            raise SchemaError(f"{cls.__typename__} {name!r} is a flag and cannot have a default")
        try:
            metadata["type"].coerce(default)
        except ValueError as error:
            raise SchemaError(f"{cls.__typename__} {name!r} default is invalid: {error}") from None
    metadata["default"] = coalesce(default)


class Parameter(metaclass=ParameterType):
    """
    Named parameter specification.

    Highlights
    - Typed via a ValueType: the parser coerces matched values with it.
    - Long ("--name") and/or short ("-n") matching; positional when neither.
    - Booleans are flags: presence sets True, absence leaves False.
    - Optional types rest at None when unmatched; other types need a default
      or a matching token.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes.
    """

    __introspectable__ = (
        "name",
        "type",
        "long",
        "short",
        "help",
        "default",
    )

    def __new__(
            cls,
            name,
            /,
            type="string",
            *,
            long=True,
            short=False,
            help=Unset,
            default=Unset,
    ):
        """
        Construct a Parameter spec.

        Parameters
        - name: str
          Identifier of the parameter, unique within its command.
        - type: ValueType | str | builtin type
          Declared semantic type (see argshape.values.resolve).
        - long: bool
          Match "--<name>".
        - short: bool
          Match "-<initial>".
        - help: Unset | str | Text
          Help text; None when omitted.
        - default: Unset | str
          Literal coerced to the type when nothing matches.
        """
        metadata = {
            "name": name,
            "type": type,
            "long": long,
            "short": short,
            "help": help,
            "default": default,
        }
        _sanitize_name(cls, metadata)
        _sanitize_matching(cls, metadata)
        _sanitize_help(cls, metadata)
        _sanitize_default(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        return self

    @property
    def flag(self):
        return self.type.flag

    @property
    def optional(self):
        return self.type.optional

    @property
    def positional(self):
        return not (self.long or self.short)

    @property
    def initial(self):
        return self.name[0]

    @property
    def switches(self):
        """
        The token spellings this parameter answers to ("--name", "-n").
        """
        return tuple(
            switch for enabled, switch in (
                (self.long, "--" + self.name),
                (self.short, "-" + self.initial),
            ) if enabled
        )

    def matches(self, token, /):
        """
        Tell whether a token selects this parameter.

        - long: the token is "--" followed by exactly the name.
        - short: the token starts with "-" and its second character is the
          name's initial (the rest of the token is not inspected).
        """
        if self.long and token.startswith("--") and token[2:] == self.name:
            return True
        return self.short and len(token) > 1 and token[0] == "-" and token[1] == self.initial


def option(name, /, type="string", **options):
    """
    Build a long-matching, value-bearing parameter.

        >>> option("scene", "string", help="scene file to render")
    """
    return Parameter(name, type, **options)


def flag(name, /, **options):
    """
    Build a boolean parameter (long-matching unless told otherwise).

        >>> flag("quiet", short=True, help="start quietly")
    """
    if "default" in options:
        raise SchemaError(f"flag {name!r} cannot have a default")
    return Parameter(name, "bool", **options)


def positional(name, /, type="string", **options):
    """
    Build a positional parameter, filled by declaration order.

        >>> positional("input", "string", help="file to read")
    """
    if options.get("long") or options.get("short"):
        raise SchemaError(f"positional {name!r} cannot be long or short matching")
    options.pop("long", None)
    options.pop("short", None)
    return Parameter(name, type, long=False, short=False, **options)


__all__ = (
    "Parameter",
    "option",
    "flag",
    "positional",
    "HELP_TOKENS",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del ParameterType
