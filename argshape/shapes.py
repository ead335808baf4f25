"""
Argshape result derivation: typed result shapes built from command schemas.

What this module provides
- Arguments: read-only mapping with one slot per parameter, each checked
  against the parameter's ValueType. Slots are also reachable as attributes
  (hyphens become underscores: args.dry_run for "dry-run").
- Choice: closed tagged variant selecting exactly one subcommand by name and
  carrying that subcommand's own Result.
- Result: couples the Arguments of a command with its optional Choice.
- derive(command): build the three classes above for one command schema.

Core ideas
- A command schema is static, so its result shape is derived once, when the
  command is constructed, and reused for every parse.
- Every derived class is closed over its schema: an Arguments subclass knows
  its fields, a Choice subclass knows the allowed subcommand names and their
  shapes, and construction rejects anything else with TypeError.
- Recursion follows subcommand nesting: the Choice of a command refers to the
  already-derived Result classes of its children.

Pattern matching
    match command.parse(tokens):
        case Result(args, Choice("start", Result(start_args))):
            ...
        case Result(args, None):
            ...
"""
from collections.abc import Mapping
from types import MappingProxyType

from .faults import SchemaError
from .utils import camelize


class Arguments(Mapping):
    """
    Read-only mapping from parameter name to coerced value.

    Subclasses produced by derive() set
    - __fields__: mapping name -> ValueType, in declaration order.
    - __aliases__: mapping attribute name -> parameter name.
    """
    __slots__ = ("_values",)

    __fields__ = MappingProxyType({})
    __aliases__ = MappingProxyType({})

    def __init__(self, values=(), /, **kwargs):
        values = dict(values, **kwargs)

        if unknown := values.keys() - self.__fields__.keys():
            raise TypeError(f"{type(self).__name__} got unknown fields: {', '.join(sorted(unknown))}")
        if missing := [name for name in self.__fields__ if name not in values]:
            raise TypeError(f"{type(self).__name__} is missing fields: {', '.join(missing)}")

        for name, type_ in self.__fields__.items():
            if not type_.accepts(values[name]):
                raise TypeError(f"{type(self).__name__} field {name!r} expects {type_.name}, got {values[name]!r}")

        object.__setattr__(self, "_values", MappingProxyType({name: values[name] for name in self.__fields__}))

    def __getitem__(self, name):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self._values[self.__aliases__[name]]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no field {name!r}") from None

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __dir__(self):
        return [*super().__dir__(), *self.__aliases__]

    def __repr__(self):
        return f"{type(self).__name__}({', '.join('%s=%r' % item for item in self._values.items())})"

    def __rich_repr__(self):
        yield from self._values.items()


class Choice:
    """
    Tagged variant: the one subcommand selected by a parse.

    Subclasses produced by derive() set __choices__, a mapping from subcommand
    name to the Result class of that subcommand.
    """
    __slots__ = ("_name", "_result")
    __match_args__ = ("name", "result")

    __choices__ = MappingProxyType({})

    def __init__(self, name, result, /):
        try:
            shape = self.__choices__[name]
        except (KeyError, TypeError):
            raise TypeError(f"{type(self).__name__} has no arm named {name!r}") from None
        if not isinstance(result, shape):
            raise TypeError(f"{type(self).__name__} arm {name!r} expects {shape.__name__}, got {result!r}")
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_result", result)

    @property
    def name(self):
        return self._name

    @property
    def result(self):
        return self._result

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __eq__(self, other):
        if not isinstance(other, Choice):
            return NotImplemented
        return (self.name, self.result) == (other.name, other.result)

    def __hash__(self):
        return hash((type(self), self.name))

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, {self.result!r})"

    def __rich_repr__(self):
        yield self.name
        yield self.result


class Result:
    """
    Typed outcome of one successful parse.

    - args: the command's Arguments.
    - subcommand: None, or the Choice naming the selected subcommand.

    Subclasses produced by derive() set __command__ (the command name),
    __arguments__ (Arguments subclass) and __selection__ (Choice subclass).
    """
    __slots__ = ("_args", "_subcommand")
    __match_args__ = ("args", "subcommand")

    __command__ = None
    __arguments__ = Arguments
    __selection__ = Choice

    def __init__(self, args, subcommand=None, /):
        if not isinstance(args, self.__arguments__):
            args = self.__arguments__(args)
        if subcommand is not None and not isinstance(subcommand, self.__selection__):
            raise TypeError(f"{type(self).__name__} subcommand must be a {self.__selection__.__name__} or None")
        object.__setattr__(self, "_args", args)
        object.__setattr__(self, "_subcommand", subcommand)

    @property
    def args(self):
        return self._args

    @property
    def subcommand(self):
        return self._subcommand

    def __getitem__(self, name):
        return self._args[name]

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return type(self) is type(other) and (self.args, self.subcommand) == (other.args, other.subcommand)

    __hash__ = None

    def __repr__(self):
        return f"{type(self).__name__}({self.args!r}, {self.subcommand!r})"

    def __rich_repr__(self):
        yield "args", self.args
        yield "subcommand", self.subcommand, None


_reserved = frozenset(name for name in dir(Arguments) if not name.startswith("_"))


def derive(command, /):
    """
    Derive the Result class of a command schema.

    Parameters
    - command: any object exposing name, parameters (each with name/type) and
      subcommands (each already carrying its derived shape as .shape).

    Returns
    - type[Result]: named after the command ("image-tool" -> ImageToolResult),
      whose __arguments__ and __selection__ are the derived Arguments and
      Choice classes.

    Raises
    - SchemaError: when two parameter names collapse to the same attribute
      name ("dry-run" and "dry_run"), or when a parameter name is taken
      by a mapping method ("keys", "values", ...).
    """
    prefix = camelize(command.name)

    fields = {}
    aliases = {}
    for parameter in command.parameters:
        fields[parameter.name] = parameter.type
        for alias in dict.fromkeys((parameter.name, parameter.name.replace("-", "_"))):
            if alias in _reserved:
                raise SchemaError(f"command {command.name!r} parameter {parameter.name!r} would shadow Arguments.{alias}()")
            if aliases.setdefault(alias, parameter.name) != parameter.name:
                raise SchemaError(f"command {command.name!r} parameters {aliases[alias]!r} and {parameter.name!r} share the attribute {alias!r}")

    arguments = type(prefix + "Arguments", (Arguments,), {
        "__slots__": (),
        "__module__": "dynamic-factory::shapes",
        "__fields__": MappingProxyType(fields),
        "__aliases__": MappingProxyType(aliases),
    })

    selection = type(prefix + "Choice", (Choice,), {
        "__slots__": (),
        "__module__": "dynamic-factory::shapes",
        "__choices__": MappingProxyType({child.name: child.shape for child in command.subcommands}),
    })

    return type(prefix + "Result", (Result,), {
        "__slots__": (),
        "__module__": "dynamic-factory::shapes",
        "__command__": command.name,
        "__arguments__": arguments,
        "__selection__": selection,
    })


__all__ = (
    "Arguments",
    "Choice",
    "Result",
    "derive",
)
