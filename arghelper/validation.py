"""
arghelper validation: parse, check and normalize a script's arguments.

What this module provides
- validate_argument(parsed, argument): check one argument against its rule, reporting
  the failure on the error console.
- check_args(args, definition, ...): the full cycle, returning a tagged outcome:
  • Proceed(values): every argument passed; values is the normalized mapping.
  • Halt(status, fault): help was shown (status 0, fault None) or an argument was
    rejected (status 1, fault describes it). Help text and cleanup already happened.
- validate_args(args, definition, ...): same cycle, but a Halt terminates the process
  with its status. This is the entry point scripts normally use: nothing past it runs
  on invalid input.

Cycle
1. parse the tokens (see arghelper.parsing).
2. help gate: an empty invocation of a script with any_arg_required, or any help flag,
   shows help and halts with status 0, before any validation.
3. validate the arguments in declaration order; the first rejected one is reported, the
   help text follows, the cleanup callback runs and the cycle halts with status 1.
4. otherwise every declared argument is written under its long name (the short-name key
   is removed; None marks an argument nobody supplied) and the mapping is returned.

Example
    >>> import sys
    >>> from arghelper import Argument, ScriptDefinition, validate_args
    >>> definition = ScriptDefinition([Argument("firstArg", "first argument", short_name="f")],
    ...                               "This script does the thing")
    >>> validate_args(["-f", "firstArgValue"], definition)
    {'_': [], 'firstArg': 'firstArgValue'}
"""
import shlex
import sys
from collections import namedtuple
from collections.abc import Iterable, Mapping

from rich.console import Console

from .faults import FaultCode, MissingArgumentError, InvalidArgumentError, trigger
from .formatting import help_renderable
from .models import Argument, ScriptDefinition
from .parsing import parse_args
from .utils import *

console = Console()

Proceed = namedtuple("Proceed", ("values",))
Halt = namedtuple("Halt", ("status", "fault"))

EXIT_HELP = 0
EXIT_INVALID = 1


def _tokens(args):
    """
    Normalize the accepted argument shapes into a list of tokens.

    - Unset: sys.argv[1:]
    - str: shell-like string, split with shlex.split
    - Iterable[str]: used as-is (items are not trimmed; empty values are legitimate)
    """
    if args is Unset:
        return sys.argv[1:]
    if isinstance(args, str):
        return shlex.split(args)
    if isinstance(args, Iterable):
        tokens = list(args)
        if all(isinstance(token, str) for token in tokens):
            return tokens
    raise TypeError("args must be a string or an iterable of strings")


def lookup(parsed, argument, /):
    """
    Current value of an argument: its long-name key, else its short-name key, else None.
    """
    for key in argument.keys:
        if key in parsed:
            return parsed[key]
    return None


def _inspect(parsed, argument):
    """
    Apply the argument's rule; return the fault describing a rejection, or None.
    """
    value = lookup(parsed, argument)
    rule = argument.rule
    if rule(value):
        return None
    if rule.custom:
        return InvalidArgumentError(rule.describe(value), argument=argument, value=value, code=FaultCode.INVALID_ARGUMENT)
    return MissingArgumentError(rule.describe(value), argument=argument, value=value, code=FaultCode.MISSING_ARGUMENT)


def validate_argument(parsed, argument, /):
    """
    Check one argument of a parsed mapping against its rule.

    parameters
    - parsed: Mapping
      output of parse_args (or any mapping keyed by flag names).
    - argument: Argument

    returns
    - bool: True when the value is accepted. On rejection, "<name>: <message>" is written
      to the error console and False is returned. Nothing is written on success.
    """
    if not isinstance(parsed, Mapping):
        raise TypeError("validate_argument() first argument must be a mapping")
    if not isinstance(argument, Argument):
        raise TypeError("validate_argument() second argument must be an argument")
    fault = _inspect(parsed, argument)
    if fault is None:
        return True
    trigger(fault)
    return False


def _halt(status, fault, definition, cleanup):
    console.print(help_renderable(definition), soft_wrap=True)
    if cleanup is not Unset:
        cleanup()
    return Halt(status, fault)


def check_args(args, definition, /, *, parse_options=Unset, cleanup=Unset):
    """
    Parse and validate arguments without terminating the process.

    parameters
    - args: Unset | str | Iterable[str]
      raw tokens, usually sys.argv[1:] (Unset reads it for you).
    - definition: ScriptDefinition
    - parse_options: ParseOptions | Mapping (keyword-only)
      forwarded to parse_args.
    - cleanup: Callable[[], Any] (keyword-only)
      run once, after the help text, whenever the outcome is a Halt; never on Proceed.

    returns
    - Proceed(values) | Halt(status, fault)
    """
    if not isinstance(definition, ScriptDefinition):
        raise TypeError("check_args() second argument must be a script definition")
    if cleanup is not Unset and not callable(cleanup):
        raise TypeError("check_args() cleanup must be callable")
    tokens = _tokens(args)

    parsed = parse_args(tokens, parse_options)

    long, short = definition.help_flags
    if (not tokens and definition.any_arg_required) or long in parsed or (short is not None and short in parsed):
        return _halt(EXIT_HELP, None, definition, cleanup)

    for argument in definition.arguments:
        fault = _inspect(parsed, argument)
        if fault is not None:
            trigger(fault)
            return _halt(EXIT_INVALID, fault, definition, cleanup)
        # one key per argument from here on: the long name, None when nothing was supplied
        value = lookup(parsed, argument)
        if argument.short_name is not None:
            parsed.pop(argument.short_name, None)
        parsed[argument.name] = value

    return Proceed(parsed)


def validate_args(args, definition, /, *, parse_options=Unset, cleanup=Unset):
    """
    Parse and validate arguments, returning the normalized mapping.

    Behaves like check_args, except that a Halt terminates the process: status 0 after
    showing help, status 1 after reporting the first rejected argument and the help text.
    The cleanup callback (if any) runs before termination.

    returns
    - dict: parsed values keyed by long names, plus '_' for leftover positionals.
    """
    outcome = check_args(args, definition, parse_options=parse_options, cleanup=cleanup)
    if isinstance(outcome, Halt):
        sys.exit(outcome.status)
    return outcome.values


__all__ = (
    "Proceed",
    "Halt",
    "EXIT_HELP",
    "EXIT_INVALID",
    "lookup",
    "validate_argument",
    "check_args",
    "validate_args",
)
