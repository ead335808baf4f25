"""
Argshape parsing engine.

parse(command, tokens) fills the derived Result of a command schema from an
ordered token sequence (program name excluded), or stops with a signal.

Algorithm, for one command and its tokens
1. No tokens at all: HelpRequested, even when every parameter could rest at
   its fallback.
2. The first token naming a subcommand recurses into that subcommand with the
   remaining tokens; its outcome (result or stop signal) propagates unchanged.
   The command's own parameters are still scanned against the entire token
   sequence, subcommand name included.
3. "--help" or "-h" anywhere: HelpRequested for this command.
4. Each long/short parameter, in declaration order, scans every token:
   - a flag is set by each match and consumes nothing else;
   - any other type takes the next token as its value (MissingRequired when
     the switch is the last token), coerced to the type (InvalidValue on
     failure), and the scan skips past it;
   - the last match wins.
   Unmatched parameters fall back: flags to False, then the default literal,
   then None for optional types; anything else is MissingRequired.
5. Positional parameters, in declaration order, take the tokens no switch or
   switch value consumed and that do not look like switches (a lone "-" is
   fine). Positionals are left to their fallbacks when a subcommand was
   selected; surplus free tokens are ignored.
6. The Result is assembled.

Every stop signal aborts the whole parse, recursion included. The top-level
call writes it to the diagnostics sink once and returns it.
"""
from collections.abc import Iterable

from .faults import *
from .parameters import HELP_TOKENS
from .utils import Unset, coalesce, ordinal


def _snapshot(tokens):
    """
    Internal: copy the caller's tokens into a tuple of strings.

    The tuple is what every scan reads, so mutating the caller's sequence
    during or after the parse has no effect on the outcome.
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("parse() tokens must be an iterable of strings")
    tokens = tuple(tokens)
    for token in tokens:
        if not isinstance(token, str):
            raise TypeError(f"parse() tokens must be strings, got {token!r}")
    return tokens


def _help(command):
    return HelpRequested(
        f"help requested for {command.name}",
        command=command,
        title="help requested",
        code=FaultCode.HELP_REQUESTED,
    )


def _usage(parameter):
    if parameter.positional:
        return f"<{parameter.name}>"
    return f"{' | '.join(parameter.switches)} <{parameter.type.name}>"


def _coerce(command, parameter, token, index):
    try:
        return parameter.type.coerce(token)
    except ValueError as error:
        raise InvalidValue(
            f"invalid value for argument {parameter.name}: {token!r} ({ordinal(index + 1)} token)",
            command=command,
            parameter=parameter.name,
            token=token,
            error=error,
            index=index,
            title="invalid value",
            code=FaultCode.INVALID_VALUE,
            hint=str(error),
        ) from None


def _fallback(command, parameter):
    if parameter.flag:
        return False
    if parameter.default is not None:
        return parameter.type.coerce(parameter.default)
    if parameter.optional:
        return None
    raise MissingRequired(
        f"missing required argument: {parameter.name}",
        command=command,
        parameter=parameter.name,
        title="missing argument",
        code=FaultCode.MISSING_REQUIRED,
        hint=f"pass {_usage(parameter)}",
    )


def _scan(command, parameter, tokens, consumed):
    """
    Internal: resolve one long/short parameter against every token.

    Indices of matched switches and of their values are added to consumed.
    """
    matched, value = False, None

    index = 0
    while index < len(tokens):
        if not parameter.matches(token := tokens[index]):
            index += 1
            continue

        matched = True
        consumed.add(index)

        if parameter.flag:
            value = True
            index += 1
            continue

        if index + 1 == len(tokens):
            raise MissingRequired(
                f"missing value for argument: {parameter.name}",
                command=command,
                parameter=parameter.name,
                index=index,
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint=f"{token!r} expects a {parameter.type.name} after it",
            )

        value = _coerce(command, parameter, tokens[index + 1], index + 1)
        consumed.add(index + 1)
        index += 2

    return value if matched else _fallback(command, parameter)


def _parse(command, tokens):
    if not tokens:
        raise _help(command)

    selection = None
    if (child := command.children.get(tokens[0])) is not None:
        selection = command.shape.__selection__(child.name, _parse(child, tokens[1:]))

    if not HELP_TOKENS.isdisjoint(tokens):
        raise _help(command)

    values = {}
    consumed = set()
    for parameter in command.parameters:
        if not parameter.positional:
            values[parameter.name] = _scan(command, parameter, tokens, consumed)

    free = iter(()) if selection is not None else (
        (index, token) for index, token in enumerate(tokens)
        if index not in consumed and (token == "-" or not token.startswith("-"))
    )
    for parameter in command.parameters:
        if parameter.positional:
            match next(free, None):
                case (index, token):
                    values[parameter.name] = _coerce(command, parameter, token, index)
                case None:
                    values[parameter.name] = _fallback(command, parameter)

    return command.shape(values, selection)


def parse(command, tokens, /, *, sink=Unset):
    """
    Parse tokens against a command schema.

    Parameters
    - command: the Command schema.
    - tokens: iterable of strings, program name excluded. It is snapshotted
      before scanning.
    - sink: callable receiving the stop signal, if any; defaults to the
      command's own sink.

    Returns
    - the command's derived Result on success;
    - otherwise the StopSignal (HelpRequested, MissingRequired or
      InvalidValue), after it was written to the sink.

    Raises
    - TypeError: when tokens is not an iterable of strings.
    """
    tokens = _snapshot(tokens)
    try:
        return _parse(command, tokens)
    except StopSignal as signal:
        coalesce(sink, command.sink)(signal)
        return signal


__all__ = (
    "parse",
)
