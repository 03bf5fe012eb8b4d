r"""
arghelper token parser: raw argv-like tokens into a flat value mapping.

What this module provides
- ParseOptions: parse configuration (booleans, strings, collected keys, negatable keys,
  aliases, defaults, early stop, double-dash handling, unknown-token hook).
- parse_args(tokens, options): the parser itself.

Token grammar
- '--key=value'  → key: value
- '--key value'  → key: value (unless the next token looks like a flag, or key is boolean)
- '--key'        → key: True  ("" for string keys)
- '--no-key'     → key: False (only for negatable keys; otherwise 'no-key': True)
- '-abc'         → a: True, b: True, c: True (the last letter may take the next token)
- '-n5' / '-k=v' → n: 5 / k: 'v'
- '--'           → every later token is positional (or stored under '--', see double_dash)
- anything else  → appended to the reserved '_' list, never coerced

Values
- flag values that look numeric (decimal, exponent, 0x-hex) become int/float unless the
  key is declared in 'string'.
- boolean keys read 'false' as False and anything else as True.
- a key listed in 'collect' accumulates every occurrence into a list.
- aliases are symmetric: setting any name of an alias group sets all of them.

Quick example:
    >>> parse_args(["--name", "value", "file.txt", "-vx"])
    {'_': ['file.txt'], 'name': 'value', 'v': True, 'x': True}
"""
import re
from collections.abc import Iterable, Mapping

from .utils import *

_NUMBER = re.compile(r"0[xX][0-9a-fA-F]+|[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?", re.ASCII)
# A token is flag-like when it starts with one or two dashes followed by something else.
_FLAGGISH = re.compile(r"--?[^-]")


def _names(object, label, /):
    """
    Sanitize a key collection option into a frozenset of strings.
    """
    if isinstance(object, str):
        object = (object,)
    if not isinstance(object, Iterable):
        raise TypeError("ParseOptions() %s must be a string or an iterable of strings" % label)
    object = frozenset(object)
    if not all(isinstance(item, str) for item in object):
        raise TypeError("ParseOptions() %s must be a string or an iterable of strings" % label)
    return object


def _aliases(alias, /):
    """
    Expand an alias mapping into symmetric groups: every name maps to all the others.

    Example
    - {"help": "h", "verbose": ["v", "V"]}
      → {"help": ("h",), "h": ("help",), "verbose": ("v", "V"), "v": ("verbose", "V"), ...}
    """
    if not isinstance(alias, Mapping):
        raise TypeError("ParseOptions() alias must be a mapping")
    groups = {}
    for key, names in alias.items():
        group = [key, *_names(names, "alias values")] if not isinstance(names, str) else [key, names]
        if not all(isinstance(name, str) and name for name in group):
            raise TypeError("ParseOptions() alias keys and values must be non-empty strings")
        # Merge with groups already known through any member.
        merged = dict.fromkeys(group)
        for name in group:
            merged.update(dict.fromkeys(groups.get(name, ())))
        for name in merged:
            groups[name] = tuple(merged)
    return {name: tuple(other for other in group if other != name) for name, group in groups.items()}


class ParseOptions:
    """
    Configuration for parse_args.

    Parameters (all keyword-only)
    - boolean: Iterable[str] | str | True
      Keys that never consume the following token. True makes every bare '--flag' boolean.
    - string: Iterable[str] | str
      Keys whose values stay strings (no numeric coercion; bare flags become "").
    - collect: Iterable[str] | str
      Keys that accumulate repeated occurrences into a list.
    - negatable: Iterable[str] | str
      Keys that accept the '--no-key' form to set False.
    - alias: Mapping[str, str | Iterable[str]]
      Alternative names for keys.
    - default: Mapping[str, Any]
      Values for keys (and their aliases) that were not supplied.
    - stop_early: bool
      Stop parsing at the first positional; every later token is positional.
    - double_dash: bool
      Store tokens after '--' under the '--' key instead of appending them to '_'.
    - unknown: Callable[[str, str | None, Any], Any]
      Called as unknown(token, key, value) for undeclared flags and unknown(token, None, None)
      for positionals. Returning False drops the token.
    """
    __slots__ = (
        "_boolean", "_string", "_collect", "_negatable", "_alias",
        "_default", "_stop_early", "_double_dash", "_unknown",
    )

    def __init__(
            self,
            *,
            boolean=(),
            string=(),
            collect=(),
            negatable=(),
            alias=Unset,
            default=Unset,
            stop_early=False,
            double_dash=False,
            unknown=Unset,
    ):
        default = coalesce(default, {})
        if not isinstance(default, Mapping):
            raise TypeError("ParseOptions() default must be a mapping")
        if unknown is not Unset and not callable(unknown):
            raise TypeError("ParseOptions() unknown must be callable")

        self._alias = _aliases(coalesce(alias, {}))
        self._boolean = boolean if boolean is True else self._expand(_names(boolean, "boolean"))
        self._string = self._expand(_names(string, "string"))
        self._collect = self._expand(_names(collect, "collect"))
        self._negatable = self._expand(_names(negatable, "negatable"))
        self._default = dict(default)
        self._stop_early = bool(stop_early)
        self._double_dash = bool(double_dash)
        self._unknown = unknown

    boolean = mirror("boolean")
    string = mirror("string")
    collect = mirror("collect")
    negatable = mirror("negatable")
    alias = mirror("alias")
    default = mirror("default")
    stop_early = mirror("stop_early")
    double_dash = mirror("double_dash")
    unknown = mirror("unknown")

    def _expand(self, keys, /):
        """
        Extend a key set with every alias of its members.
        """
        return frozenset(keys).union(*(self._alias.get(key, ()) for key in keys))

    def group(self, key, /):
        """
        The key followed by all of its aliases.
        """
        return key, *self._alias.get(key, ())

    def isboolean(self, key, /):
        return self._boolean is not True and key in self._boolean

    def isdeclared(self, key, /):
        """
        Whether the key was mentioned in any option (and may skip the unknown hook).
        """
        return (
            key in self._alias or
            key in self._string or
            key in self._collect or
            key in self._negatable or
            self.isboolean(key)
        )

    @classmethod
    def coerce(cls, object, /):
        """
        Accept None/Unset, a ParseOptions instance or a mapping of keyword arguments.
        """
        if object is None or object is Unset:
            return cls()
        if isinstance(object, cls):
            return object
        if isinstance(object, Mapping):
            return cls(**object)
        raise TypeError("parse options must be a ParseOptions instance or a mapping")


def parse_args(tokens, options=Unset, /):
    """
    Parse argv-like tokens into a value mapping.

    parameters
    - tokens: Iterable[str]
      raw tokens (typically sys.argv[1:]); the iterable is not modified.
    - options: ParseOptions | Mapping | None
      parse configuration (see ParseOptions).

    returns
    - dict: flag keys mapped to their values, plus '_' (leftover positionals, in order)
      and '--' when double_dash is enabled.

    raises
    - TypeError: when tokens is not an iterable of strings or options has the wrong shape.
    """
    if isinstance(tokens, str) or not isinstance(tokens, Iterable):
        raise TypeError("parse_args() first argument must be an iterable of strings")
    tokens = list(tokens)
    if not all(isinstance(token, str) for token in tokens):
        raise TypeError("parse_args() first argument must be an iterable of strings")
    options = ParseOptions.coerce(options)

    namespace = {"_": []}

    # everything after a bare '--' bypasses flag parsing
    tail = []
    if "--" in tokens:
        index = tokens.index("--")
        tokens, tail = tokens[:index], tokens[index + 1:]

    def convert(key, value):
        if options.isboolean(key) and isinstance(value, str):
            return value != "false"
        if isinstance(value, str) and key not in options.string and _NUMBER.fullmatch(value):
            if value[:2].lower() == "0x":
                return int(value, 16)
            try:
                return int(value)
            except ValueError:
                return float(value)
        return value

    def assign(key, value, token):
        if options.unknown is not None and not options.isdeclared(key):
            if options.boolean is not True or not re.fullmatch(r"--[^=]+", token):
                if options.unknown(token, key, value) is False:
                    return
        value = convert(key, value)
        for name in options.group(key):
            if name in options.collect:
                namespace.setdefault(name, []).append(value)
            else:
                namespace[name] = value

    def bare(key):
        # value of a flag given without any payload
        return "" if key in options.string else True

    def consume(key, index):
        """
        settle a flag that may take the following token; returns the next index.
        """
        following = tokens[index + 1] if index + 1 < len(tokens) else None
        if (
                following is not None and
                not _FLAGGISH.match(following) and
                not options.isboolean(key) and
                options.boolean is not True
        ):
            assign(key, following, tokens[index])
            return index + 2
        if following in ("true", "false"):
            assign(key, following == "true", tokens[index])
            return index + 2
        assign(key, bare(key), tokens[index])
        return index + 1

    index = 0
    while index < len(tokens):
        token = tokens[index]

        if match := re.fullmatch(r"--([^=]+)=(.*)", token, re.DOTALL):
            assign(match[1], match[2], token)
        elif (match := re.fullmatch(r"--no-(.+)", token, re.DOTALL)) and match[1] in options.negatable:
            assign(match[1], False, token)
        elif match := re.fullmatch(r"--(.+)", token, re.DOTALL):
            index = consume(match[1], index)
            continue
        elif re.fullmatch(r"-[^-].*", token, re.DOTALL):
            letters = token[1:-1]
            broken = False
            for position, letter in enumerate(letters):
                rest = token[position + 2:]
                if rest == "-":
                    assign(letter, rest, token)
                    continue
                if letter.isalpha() and _NUMBER.fullmatch(rest):
                    assign(letter, rest, token)
                    broken = True
                    break
                if re.match(r"\W", token[position + 2]):
                    assign(letter, token[position + 3:] if token[position + 2] == "=" else rest, token)
                    broken = True
                    break
                assign(letter, bare(letter), token)
            if not broken and token[-1] != "-":
                index = consume(token[-1], index)
                continue
        else:
            if options.unknown is None or options.unknown(token, None, None) is not False:
                namespace["_"].append(token)
            if options.stop_early:
                namespace["_"].extend(tokens[index + 1:])
                break
        index += 1

    # defaults only fill keys (and alias groups) nobody set
    for key, value in options.default.items():
        if not any(name in namespace for name in options.group(key)):
            for name in options.group(key):
                namespace[name] = value

    if options.double_dash:
        namespace["--"] = tail
    else:
        namespace["_"].extend(tail)

    return namespace


__all__ = (
    "ParseOptions",
    "parse_args",
)
