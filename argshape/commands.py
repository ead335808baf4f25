r"""
Argshape command schemas and invocation.

Overview
- Command: immutable schema of one command:
  • name: identifier, unique among its siblings.
  • about: description shown under the name in help.
  • parameters: ordered Parameter specs with unique names.
  • subcommands: ordered child Commands with unique names; a parse selects at
    most one of them.
  • shell, colorful, fancy, sink: runtime options (see below).
  The typed result shape of the command is derived once, at construction
  (Command.shape, see argshape.shapes.derive).

- Runtime options
  • shell: __invoke__ exits the process on stop signals (status 0 for help, 1
    otherwise) instead of raising them.
  • colorful / fancy: styling of the default ConsoleSink.
  • sink: callable receiving stop signals; ConsoleSink(colorful, fancy) when
    omitted.

- Invocation
  • Command.parse(tokens): Result or StopSignal (written to the sink).
  • Command.__invoke__(prompt): tokens from sys.argv[1:], a shell-like string
    or an iterable of strings; returns the Result and triggers stop signals.
  • invoke(command, prompt): functional alias of __invoke__.

Validation highlights (SchemaError unless noted)
- Names must match r"[^\W\d_](-?\w+)*" (TypeError when not a string).
- Parameter and subcommand names are unique within a command.
- Two short-matching parameters cannot share an initial.
- parameters/subcommands must hold Parameter/Command instances (TypeError).

Quick example:
    >>> from argshape import Command, Parameter, flag
    >>> start = Command("start", "start the scene", [flag("quiet", short=True)])
    >>> cli = Command("image", "render images", [Parameter("width", "u32")], [start])
    >>> cli.parse(["start", "--quiet", "--width", "640"]).subcommand.result.args.quiet
    True
"""
import functools
import operator
import re
import shlex
import sys
from collections import Counter
from collections.abc import Iterable

from rich.text import Text

from .faults import *
from .helps import render
from .parameters import Parameter
from .parsing import parse
from .shapes import derive
from .sinks import ConsoleSink
from .utils import *


class CommandType(type):
    """
    Metaclass giving commands a stable repr and read-only introspectable fields.

    - __typename__: hyphenated lowercase class name, used in messages.
    - mirror() properties for every name in __introspectable__.
    - __repr__/__rich_repr__ over __displayable__ (or __introspectable__).
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
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_name(cls, metadata, /):
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not (name := name.strip()):
        raise SchemaError(f"{cls.__typename__} 'name' cannot be empty")
    elif not re.fullmatch(r"[^\W\d_](-?\w+)*", name):
        raise SchemaError(f"{cls.__typename__} name {name!r} must start with a letter (unicodes are allowed)")
    metadata["name"] = name


def _sanitize_about(cls, metadata, /):
    if not isinstance(about := metadata["about"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'about' must be a string")
    elif isinstance(about, str) and not (about := about.strip()):
        raise SchemaError(f"{cls.__typename__} 'about' cannot be empty")
    metadata["about"] = coalesce(about)


def _sanitize_parameters(cls, metadata, /):
    """
    Internal: validate the parameter list of a command.

    Raises
    - TypeError: when it is not an iterable of Parameter.
    - SchemaError: on duplicate names or short-form initial collisions.
    """
    if not isinstance(parameters := metadata["parameters"], Iterable) or isinstance(parameters, str):
        raise TypeError(f"{cls.__typename__} 'parameters' must be an iterable of parameters")
    parameters = tuple(parameters)
    for parameter in parameters:
        if not isinstance(parameter, Parameter):
            raise TypeError(f"{cls.__typename__} 'parameters' must only hold parameters, got {parameter!r}")

    name = metadata["name"]
    for duplicate, count in Counter(parameter.name for parameter in parameters).items():
        if count > 1:
            raise SchemaError(f"{cls.__typename__} {name!r} declares the parameter {duplicate!r} {count} times")
    for initial, count in Counter(parameter.initial for parameter in parameters if parameter.short).items():
        if count > 1:
            raise SchemaError(f"{cls.__typename__} {name!r} has {count} short parameters answering to '-{initial}'")
    metadata["parameters"] = parameters


def _sanitize_subcommands(cls, metadata, /):
    if not isinstance(subcommands := metadata["subcommands"], Iterable) or isinstance(subcommands, str):
        raise TypeError(f"{cls.__typename__} 'subcommands' must be an iterable of commands")
    subcommands = tuple(subcommands)
    for subcommand in subcommands:
        if not isinstance(subcommand, Command):
            raise TypeError(f"{cls.__typename__} 'subcommands' must only hold commands, got {subcommand!r}")

    name = metadata["name"]
    for duplicate, count in Counter(subcommand.name for subcommand in subcommands).items():
        if count > 1:
            raise SchemaError(f"{cls.__typename__} {name!r} declares the subcommand {duplicate!r} {count} times")
    metadata["subcommands"] = subcommands
    metadata["children"] = {subcommand.name: subcommand for subcommand in subcommands}


def _sanitize_options(cls, metadata, /):
    for name in ("shell", "colorful", "fancy"):
        metadata[name] = bool(metadata[name])
    if metadata["sink"] is Unset:
        metadata["sink"] = ConsoleSink(metadata["colorful"], metadata["fancy"])
    elif not callable(metadata["sink"]):
        raise TypeError(f"{cls.__typename__} 'sink' must be callable")


class Command(metaclass=CommandType):
    """
    Command schema: name, about, parameters and subcommands.

    Highlights
    - Immutable and reusable across any number of parses.
    - shape is the derived Result class, built once at construction.
    - children maps subcommand names to subcommands.
    """

    __introspectable__ = (
        "name",
        "about",
        "parameters",
        "subcommands",
        "children",
        "shell",
        "colorful",
        "fancy",
        "sink",
    )
    __displayable__ = (
        "name",
        "about",
        "parameters",
        "subcommands",
    )

    def __new__(
            cls,
            name,
            /,
            about=Unset,
            parameters=(),
            subcommands=(),
            *,
            shell=False,
            colorful=False,
            fancy=False,
            sink=Unset,
    ):
        """
        Construct a Command schema.

        Parameters
        - name: str
        - about: Unset | str | Text
        - parameters: Iterable[Parameter]
        - subcommands: Iterable[Command]
        - shell, colorful, fancy: bool
        - sink: Unset | Callable[[StopSignal], object]

        Raises
        - TypeError / SchemaError: see the module documentation.
        """
        metadata = {
            "name": name,
            "about": about,
            "parameters": parameters,
            "subcommands": subcommands,
            "shell": shell,
            "colorful": colorful,
            "fancy": fancy,
            "sink": sink,
        }
        _sanitize_name(cls, metadata)
        _sanitize_about(cls, metadata)
        _sanitize_parameters(cls, metadata)
        _sanitize_subcommands(cls, metadata)
        _sanitize_options(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._shape = derive(self)
        return self

    @property
    def shape(self):
        return self._shape

    def parse(self, tokens, /, *, sink=Unset):
        """
        Parse tokens (program name excluded) into this command's Result.

        Stop signals are written to the sink (this command's own when omitted)
        and returned.
        """
        return parse(self, tokens, sink=sink)

    def render(self):
        """
        Return the plain help text of this command.
        """
        return render(self)

    def __invoke__(self, prompt=Unset):
        """
        Execute this command with a token stream.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence.

        Returns
        - the Result of the parse.

        Stop signals are written to the sink, then triggered: raised when
        shell is False, exiting the process with their status otherwise.

        Raises
        - TypeError: when prompt is not Unset/str/Iterable[str].
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            tokens = list(prompt)
            if not all(isinstance(token, str) for token in tokens):
                raise TypeError("__invoke__() argument must be a string or an iterable of strings")
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        outcome = self.parse(tokens)
        if isinstance(outcome, StopSignal):
            trigger(outcome, shell=self.shell)
        return outcome


def invoke(object, prompt=Unset, /):
    """
    Run an invocable object (usually a Command) and return its outcome.

    - prompt: Unset (sys.argv[1:]), a shell-like string or an iterable of strings.

    Raises
    - TypeError: when object does not implement __invoke__.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)
    raise TypeError(f"invoke() argument must implement __invoke__, got {type(object).__name__!r}")


__all__ = (
    "Command",
    "invoke",
)

del CommandType
