"""
arghelper help text rendering.

What this module provides
- label(name, short_name): the flag spelling shown in help ("--name" or "--name, -n").
- format_argument_line(argument, width): one aligned, annotated, styled argument line.
- format_help_line(help_flags, width): the line advertising the help flags.
- build_help_text(definition): the whole help document of a script.
- help_renderable(definition): the same document as a rich Text, ready for a console.
- stylesheet(): the active palette; strip_styles(text): plain text of a styled string.

Layout
    <script description>
    Arguments:
      --firstArg         (required) - the first argument
      --secondArg, -s    (required) - the second argument
      --thirdArg         (optional) - the third argument

      --help, -h         - show this help text

- Every label is padded against the widest label of the document (arguments and the
  help flags alike), so annotations start on the same column.
- Argument lines pad with max(width - len(label) + 4, 4) spaces; the help line pads with
  max(3, width - len(label) + 3) spaces and then " - ", landing its dash on that column.

Styling
- Lines are built as fragments (text, palette key); the plain form joins the texts, the
  styled form wraps each fragment in the ANSI SGR sequence rich renders for its style.
  Styles decorate, never change, the characters, so strip_styles() always recovers the
  exact plain layout.
- Palette keys: argument-name, required, optional, error.
- Define a mapping named __styles__ in __main__ to override any palette entry.
"""
import re
from collections import defaultdict

from rich.style import Style
from rich.text import Text

HELP_DESCRIPTION = "show this help text"

# characters rich either drops or treats as line breaks while decoding ANSI text
_BREAKS = re.compile(r"([\x07\x08\x0b\x0c\r\n\x1c\x1d\x1e\x85\u2028\u2029])")


def stylesheet():
    """
    Return the active palette (defaults merged with __main__.__styles__).

    Unknown keys resolve to the empty style, i.e. plain text.
    """
    return defaultdict(str, {
        "argument-name": "cyan",  # flag spellings
        "required": "magenta",  # (required) annotation
        "optional": "yellow",  # (optional) annotation
        "error": "red",  # validation diagnostics
    } | getattr(__import__("__main__"), "__styles__", {}))


def _render(fragments, colorful):
    if not colorful:
        return "".join(text for text, _ in fragments)
    styles = stylesheet()
    return "".join(
        Style.parse(styles[key]).render(text) if key and styles[key] else text
        for text, key in fragments
    )


def _assemble(fragments):
    styles = stylesheet()
    return Text.assemble(*((text, styles[key] if key else "") for text, key in fragments))


def strip_styles(text, /):
    """
    Remove ANSI styling from a rendered string.

    Control characters and line breaks are kept as they are; only the styling goes.
    """
    if not isinstance(text, str):
        raise TypeError("strip_styles() argument must be a string")
    if "\x1b" not in text:
        return text
    return "".join(
        part if index % 2 else Text.from_ansi(part).plain
        for index, part in enumerate(_BREAKS.split(text))
    )


def label(name, short_name=None, /):
    """
    Flag spelling of an argument: "--name", plus ", -s" when a short name exists.
    """
    return "--" + name + (", -" + short_name if short_name else "")


def _label_fragments(text):
    # each comma-delimited token is styled on its own
    for index, token in enumerate(text.split(",")):
        if index:
            yield ",", None
        yield token, "argument-name"


def _argument_fragments(argument, width):
    text = label(argument.name, argument.short_name)
    yield "  ", None
    yield from _label_fragments(text)
    yield " " * max(width - len(text) + 4, 4), None
    if argument.required is False:
        yield "(optional)", "optional"
    else:
        yield "(required)", "required"
    yield " - " + argument.descr, None


def _help_fragments(help_flags, width):
    name, short_name = (*help_flags, None)[:2]
    text = label(name, short_name)
    yield "  ", None
    yield from _label_fragments(text)
    yield " " * max(3, width - len(text) + 3) + " - " + HELP_DESCRIPTION, None


def _document_fragments(definition):
    width = column_width(definition)
    yield definition.descr + "\nArguments:\n", None
    for argument in definition.arguments:
        yield from _argument_fragments(argument, width)
        yield "\n", None
    yield "\n", None
    yield from _help_fragments(definition.help_flags, width)


def format_argument_line(argument, width, /, *, colorful=True):
    """
    Render one argument as a help line.

    parameters
    - argument: Argument
    - width: int
      widest label of the whole document; labels are padded against it.
    - colorful: bool (keyword-only)
      emit ANSI styling (default True).

    example (styles stripped)
    - format_argument_line(Argument("arg", "argument description", short_name="a"), 0)
      → "  --arg, -a    (required) - argument description"
    """
    if not isinstance(width, int):
        raise TypeError("format_argument_line() width must be an integer")
    return _render(list(_argument_fragments(argument, width)), colorful)


def format_help_line(help_flags, width, /, *, colorful=True):
    """
    Render the help flag line (no required/optional annotation).

    example (styles stripped)
    - format_help_line(("help", "h"), 0) → "  --help, -h    - show this help text"
    """
    if not isinstance(width, int):
        raise TypeError("format_help_line() width must be an integer")
    return _render(list(_help_fragments(help_flags, width)), colorful)


def column_width(definition, /):
    """
    Widest label across the declared arguments and the help flags.

    A zero-width entry keeps the computation defined for scripts without arguments.
    """
    return max(
        0,
        *(len(label(argument.name, argument.short_name)) for argument in definition.arguments),
        len(label(*definition.help_flags)),
    )


def build_help_text(definition, /, *, colorful=True):
    """
    Create the help text of a script definition.

    Output
    - the script description, then "Arguments:";
    - one line per argument, in declaration order;
    - a blank line, then the help flag line (no trailing newline).

    Arguments are listed as required unless explicitly declared with required=False.
    The result only depends on the definition (and the palette): building twice yields
    byte-identical text.
    """
    return _render(list(_document_fragments(definition)), colorful)


def help_renderable(definition, /):
    """
    The help document as a rich Text, styled span by span with the active palette.

    Its plain text matches build_help_text(definition, colorful=False) up to the control
    characters rich refuses to print.
    """
    return _assemble(list(_document_fragments(definition)))


__all__ = (
    "HELP_DESCRIPTION",
    "stylesheet",
    "strip_styles",
    "label",
    "format_argument_line",
    "format_help_line",
    "column_width",
    "build_help_text",
    "help_renderable",
)
