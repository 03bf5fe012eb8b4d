r"""
arghelper declarations: what a script accepts.

Overview
- Argument: one named argument (``--name`` and optionally ``-n``) with a description,
  a required marker and an optional validity rule/message pair.
- ScriptDefinition: the ordered argument list of a script, its description, the help
  flags and the empty-invocation policy.
- Rule: the resolved validity rule of an argument (check + failure description).

Declarations are sanitized on construction and read-only afterwards: every field is
exposed through a read-only property, containers come back frozen.

Quick example:
    >>> from arghelper import Argument, ScriptDefinition
    >>> definition = ScriptDefinition(
    ...     [
    ...         Argument("firstArg", "the first argument"),
    ...         Argument("env", "dev or prod", short_name="e",
    ...                  validator=lambda value: str(value).lower() in ("dev", "prod"),
    ...                  message=lambda value: f"{value} is not either `dev` or `prod`"),
    ...     ],
    ...     "this script does the thing",
    ... )
"""
import functools
import operator
import re
from collections.abc import Iterable, Sequence

from .utils import *

REQUIRED_MESSAGE = "is a required argument"
DEFAULT_HELP_FLAGS = ("help", "h")

# Long names: no leading dash, no whitespace, no '='.
_NAME = re.compile(r"[^\s\-=][^\s=]*")


def _required_message(value, /):
    return REQUIRED_MESSAGE


def _represent(self):
    return f"{type(self).__name__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"


class Rule:
    """
    Validity rule of one argument value.

    A rule is a composition of two callables: ``check(value) -> bool`` decides whether the
    value is acceptable and ``describe(value) -> str`` explains a rejection. The default
    rule of an argument (see Argument.rule) and caller-supplied validators share this shape,
    so the validator never needs to know which one it runs.
    """
    __slots__ = ("_check", "_describe", "_custom")

    def __init__(self, check, describe=_required_message, /, *, custom=False):
        if not callable(check):
            raise TypeError("Rule() check must be callable")
        if not callable(describe):
            raise TypeError("Rule() describe must be callable")
        self._check = check
        self._describe = describe
        self._custom = bool(custom)

    custom = mirror("custom")

    def __call__(self, value, /):
        return bool(self._check(value))

    def describe(self, value, /):
        return str(self._describe(value))

    def __rich_repr__(self):
        yield "check", self._check
        yield "describe", self._describe
        yield "custom", self._custom

    __repr__ = _represent


class Argument:
    """
    Named argument accepted by a script.

    Parameters
    - name: str
      Long name, parsed from ``--name``. Must be non-empty, dash-less and whitespace-free.
    - descr: str
      Description displayed in help text (defaults to an empty string).
    - short_name: str (keyword-only)
      One character, parsed from ``-n``.
    - required: bool (keyword-only, default True)
      Whether the default rule rejects a missing/falsy value.
    - validator: Callable[[Any], bool] (keyword-only)
      Replaces the default rule; returning a falsy value rejects the argument.
    - message: Callable[[Any], str] (keyword-only)
      Produces the diagnostic for a rejected value; defaults to "is a required argument".

    Raises
    - TypeError: wrong field types.
    - ValueError: malformed names.
    """
    __slots__ = ("_name", "_descr", "_short_name", "_required", "_validator", "_message")
    __introspectable__ = ("name", "short_name", "descr", "required", "validator", "message")

    def __init__(
            self,
            name,
            descr="",
            /,
            *,
            short_name=Unset,
            required=True,
            validator=Unset,
            message=Unset,
    ):
        if not isinstance(name, str):
            raise TypeError("Argument() name must be a string")
        if not _NAME.fullmatch(name) or name == "_":
            raise ValueError("Argument() name must be a non-empty name without dashes or spaces, got %r" % name)
        if not isinstance(descr, str):
            raise TypeError("Argument() descr must be a string")
        if short_name is not Unset:
            if not isinstance(short_name, str):
                raise TypeError("Argument() short_name must be a string")
            if len(short_name) != 1 or not _NAME.fullmatch(short_name) or short_name == "_":
                raise ValueError("Argument() short_name must be a single character, got %r" % short_name)
        if not isinstance(required, bool):
            raise TypeError("Argument() required must be a boolean")
        if validator is not Unset and not callable(validator):
            raise TypeError("Argument() validator must be callable")
        if message is not Unset and not callable(message):
            raise TypeError("Argument() message must be callable")

        self._name = name
        self._descr = descr
        self._short_name = short_name
        self._required = required
        self._validator = validator
        self._message = message

    name = mirror("name")
    descr = mirror("descr")
    short_name = mirror("short_name")
    required = mirror("required")
    validator = mirror("validator")
    message = mirror("message")

    @property
    def keys(self):
        """
        Keys this argument may appear under in a parsed mapping (long name first).
        """
        if self._short_name is Unset:
            return (self._name,)
        return self._name, self._short_name

    @property
    def rule(self):
        """
        The resolved Rule: the declared validator/message, or the defaults.

        The default check accepts any truthy value, and anything at all when the
        argument is explicitly optional.
        """
        check = self._validator
        if check is Unset:
            @rename("present")
            def check(value, /):
                return bool(value) or self._required is False

        return Rule(check, coalesce(self._message, _required_message), custom=self._validator is not Unset)

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    __repr__ = _represent


def _help_flags(flags):
    """
    Normalize help flags to a (long, short | None) pair.

    Accepts a single long flag or a sequence holding the long flag and, optionally,
    the short one.
    """
    if isinstance(flags, str):
        flags = (flags,)
    if not isinstance(flags, Sequence) or not 1 <= len(flags) <= 2:
        raise TypeError("ScriptDefinition() help_flags must be a string or a sequence of one or two strings")

    long, short = (*flags, None) if len(flags) == 1 else flags
    if not isinstance(long, str) or not _NAME.fullmatch(long):
        raise ValueError("ScriptDefinition() help_flags long flag must be a non-empty name, got %r" % (long,))
    if short is not None and (not isinstance(short, str) or len(short) != 1 or not _NAME.fullmatch(short)):
        raise ValueError("ScriptDefinition() help_flags short flag must be a single character, got %r" % (short,))
    return long, short


class ScriptDefinition:
    """
    Overall description of a script's command line.

    Parameters
    - arguments: Iterable[Argument]
      Declared arguments; order is significant (help text and validation follow it).
    - descr: str
      What the script does; first line of the help text.
    - help_flags: str | Sequence[str] (keyword-only, default ("help", "h"))
      Flags that explicitly show the help text.
    - any_arg_required: bool (keyword-only, default False)
      Show help when the script is invoked without any argument.

    Raises
    - TypeError: wrong field types.
    - ValueError: duplicated argument keys.

    Argument keys may coincide with a help flag: the help gate runs first, so such an
    argument is reachable through its other spelling only.
    """
    __slots__ = ("_arguments", "_descr", "_help_flags", "_any_arg_required")
    __introspectable__ = ("arguments", "descr", "help_flags", "any_arg_required")

    def __init__(
            self,
            arguments=(),
            descr="",
            /,
            *,
            help_flags=DEFAULT_HELP_FLAGS,
            any_arg_required=False,
    ):
        if not isinstance(arguments, Iterable) or isinstance(arguments, str):
            raise TypeError("ScriptDefinition() arguments must be an iterable of arguments")
        arguments = tuple(arguments)
        if not all(isinstance(argument, Argument) for argument in arguments):
            raise TypeError("ScriptDefinition() arguments must be an iterable of arguments")
        if not isinstance(descr, str):
            raise TypeError("ScriptDefinition() descr must be a string")
        if not isinstance(any_arg_required, bool):
            raise TypeError("ScriptDefinition() any_arg_required must be a boolean")
        help_flags = _help_flags(help_flags)

        seen = set()
        for argument in arguments:
            for key in argument.keys:
                if key in seen:
                    raise ValueError("ScriptDefinition() argument key %r is declared more than once" % key)
                seen.add(key)

        self._arguments = arguments
        self._descr = descr
        self._help_flags = help_flags
        self._any_arg_required = any_arg_required

    arguments = mirror("arguments")
    descr = mirror("descr")
    help_flags = mirror("help_flags")
    any_arg_required = mirror("any_arg_required")

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    __repr__ = _represent


__all__ = (
    "Argument",
    "ScriptDefinition",
    "Rule",
    "REQUIRED_MESSAGE",
    "DEFAULT_HELP_FLAGS",
)
