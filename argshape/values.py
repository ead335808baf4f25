"""
Argshape value types and token coercion.

Overview
- ValueType: base of the fixed set of semantic types a parameter may declare.
  • Integer: signed/unsigned integers of 8..128 bits, plus usize (pointer width).
  • Floating: f16/f32/f64/f128.
  • String: the token itself.
  • Boolean: flags, set by presence only (never coerced from a token).
  • Optional: wraps any non-boolean, non-optional type; absence becomes None.

- Module-level constants: i8 … i128, u8 … u128, usize, f16 … f128, string, boolean.
- optional(T): build the optional-wrapped variant of T.
- resolve(spec): accept a ValueType, its name ("u32", "?u32", "bool", ...) or a
  builtin (int, float, str, bool) and return the ValueType; anything else is a
  SchemaError.
- coerce(value_type, token): convert a raw token, raising ValueError when the
  token is not a valid literal of the type.

Literal rules
- integers: optional sign, base auto-detected from 0x/0o/0b prefixes (decimal
  otherwise, leading zeros allowed), "_" digit separators allowed; surrounding
  whitespace and out-of-range values are rejected.
- floats: decimal, scientific, inf/nan and hexadecimal (0x1p-2) notations.
  f16/f32 values are rounded to their precision, overflowing to ±inf.
  f64/f128 are held as Python floats.

Quick example:
    >>> coerce(u8, "0xff")
    255
    >>> coerce(optional(f32), "1e3")
    1000.0
    >>> coerce(u8, "256")
    Traceback (most recent call last):
    ValueError: u8 literal '256' is out of range
"""
import functools
import math
import struct

from .faults import SchemaError
from .utils import mirror


class ValueType:
    """
    Base of the semantic types a parameter can declare.

    Subclasses implement coerce() (token → value) and accepts() (validation of
    an already-built value, used by derived result shapes). Two value types are
    equal when their names are, so optional(u32) == optional(u32).
    """

    __introspectable__ = ("name",)

    name = mirror("name")
    flag = False
    optional = False

    def __init__(self, name, /):
        self._name = name

    def coerce(self, token, /):
        raise NotImplementedError

    def accepts(self, object, /):
        raise NotImplementedError

    def _reject(self, token, reason="is not a valid literal"):
        return ValueError(f"{self.name} literal {token!r} {reason}")

    def _check(self, token):
        if not isinstance(token, str):
            raise TypeError(f"{self.name} coercion expects a string token")
        if not token or token != token.strip():
            raise self._reject(token)
        if not token.isascii():
            raise self._reject(token, "is not plain ASCII")

    def __eq__(self, other):
        if not isinstance(other, ValueType):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash(self.name)

    def __repr__(self):
        return self.name

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)


class Integer(ValueType):
    """
    Fixed-width integer type.

    The accepted range is [-(2**(bits-1)), 2**(bits-1) - 1] when signed and
    [0, 2**bits - 1] otherwise.
    """

    __introspectable__ = ("name", "bits", "signed")

    bits = mirror("bits")
    signed = mirror("signed")

    def __init__(self, name, /, bits, signed):
        super().__init__(name)
        self._bits = bits
        self._signed = signed

    @property
    def minimum(self):
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self):
        return (1 << (self.bits - 1 if self.signed else self.bits)) - 1

    def coerce(self, token, /):
        self._check(token)
        try:
            value = int(token, 0)
        except ValueError:
            # base 0 refuses leading zeros ("007"), plain decimal does not
            try:
                value = int(token, 10)
            except ValueError:
                raise self._reject(token) from None
        if not self.minimum <= value <= self.maximum:
            raise self._reject(token, "is out of range")
        return value

    def accepts(self, object, /):
        return isinstance(object, int) and not isinstance(object, bool) and self.minimum <= object <= self.maximum


class Floating(ValueType):
    """
    Floating point type.

    f16 and f32 values are rounded through their IEEE-754 binary formats.
    """

    __introspectable__ = ("name", "bits")

    bits = mirror("bits")

    _formats = {16: "<e", 32: "<f"}

    def __init__(self, name, /, bits):
        super().__init__(name)
        self._bits = bits

    def coerce(self, token, /):
        self._check(token)
        try:
            value = float(token)
        except ValueError:
            try:
                value = float.fromhex(token)
            except ValueError:
                raise self._reject(token) from None
        try:
            format = self._formats[self.bits]
        except KeyError:
            return value
        try:
            return struct.unpack(format, struct.pack(format, value))[0]
        except OverflowError:
            return math.copysign(math.inf, value)

    def accepts(self, object, /):
        return isinstance(object, float)


class String(ValueType):
    """
    Text type: the token is the value.
    """

    def coerce(self, token, /):
        if not isinstance(token, str):
            raise TypeError(f"{self.name} coercion expects a string token")
        return token

    def accepts(self, object, /):
        return isinstance(object, str)


class Boolean(ValueType):
    """
    Flag type: presence of the switch sets True, absence leaves False.
    """

    flag = True

    def coerce(self, token, /):
        raise ValueError(f"{self.name} values are set by presence and never take a literal (got {token!r})")

    def accepts(self, object, /):
        return isinstance(object, bool)


class Optional(ValueType):
    """
    Optional-wrapped type: coerces like its inner type, rests at None.
    """

    __introspectable__ = ("name", "inner")

    inner = mirror("inner")
    optional = True

    def __init__(self, inner, /):
        if not isinstance(inner, ValueType):
            raise SchemaError(f"optional type must wrap a value type, not {inner!r}")
        if inner.flag:
            raise SchemaError("optional type cannot wrap a boolean, flags already default to false")
        if inner.optional:
            raise SchemaError(f"optional type cannot wrap another optional type ({inner.name})")
        super().__init__("?" + inner.name)
        self._inner = inner

    def coerce(self, token, /):
        return self.inner.coerce(token)

    def accepts(self, object, /):
        return object is None or self.inner.accepts(object)


i8 = Integer("i8", bits=8, signed=True)
i16 = Integer("i16", bits=16, signed=True)
i32 = Integer("i32", bits=32, signed=True)
i64 = Integer("i64", bits=64, signed=True)
i128 = Integer("i128", bits=128, signed=True)
u8 = Integer("u8", bits=8, signed=False)
u16 = Integer("u16", bits=16, signed=False)
u32 = Integer("u32", bits=32, signed=False)
u64 = Integer("u64", bits=64, signed=False)
u128 = Integer("u128", bits=128, signed=False)
usize = Integer("usize", bits=struct.calcsize("P") * 8, signed=False)
f16 = Floating("f16", bits=16)
f32 = Floating("f32", bits=32)
f64 = Floating("f64", bits=64)
f128 = Floating("f128", bits=128)
string = String("string")
boolean = Boolean("bool")

_registry = {
    value.name: value for value in (
        i8, i16, i32, i64, i128,
        u8, u16, u32, u64, u128, usize,
        f16, f32, f64, f128,
        string, boolean,
    )
} | {
    # friendlier spellings
    "str": string,
    "boolean": boolean,
}

_builtins = {
    int: i64,
    float: f64,
    str: string,
    bool: boolean,
}


def optional(inner, /):
    """
    Return the optional-wrapped variant of a value type (or of its name).
    """
    return Optional(resolve(inner))


@functools.singledispatch
def resolve(spec, /):
    """
    Normalize a declared parameter type into a ValueType.

    Accepted
    - ValueType instances (returned as-is).
    - names: "i8" … "u128", "usize", "f16" … "f128", "string"/"str",
      "bool"/"boolean"; a leading "?" wraps the rest in optional().
    - builtins: int (i64), float (f64), str (string), bool (boolean).

    Raises
    - SchemaError for anything else (including None/void-like types).
    """
    try:
        return _builtins[spec]
    except (KeyError, TypeError):
        raise SchemaError(f"unsupported parameter type {spec!r}") from None


@resolve.register
def _(spec: ValueType, /):
    return spec


@resolve.register
def _(spec: str, /):
    name = spec.strip()
    if name.startswith("?"):
        return optional(name[1:])
    try:
        return _registry[name]
    except KeyError:
        raise SchemaError(f"unknown parameter type {spec!r}") from None


def coerce(value_type, token, /):
    """
    Convert a raw token into a value of the given type.

    Raises
    - ValueError when the token is not a valid literal of the type.
    - SchemaError when value_type is not a supported type.
    """
    return resolve(value_type).coerce(token)


__all__ = (
    # Types
    "ValueType",
    "Integer",
    "Floating",
    "String",
    "Boolean",
    "Optional",

    # Constants
    "i8",
    "i16",
    "i32",
    "i64",
    "i128",
    "u8",
    "u16",
    "u32",
    "u64",
    "u128",
    "usize",
    "f16",
    "f32",
    "f64",
    "f128",
    "string",
    "boolean",

    # Functions
    "optional",
    "resolve",
    "coerce",
)
