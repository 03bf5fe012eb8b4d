"""
arghelper faults (validation failures) and rendering.

Scope
- FaultCode: stable numeric identifiers for every way an argument can be rejected.
- ArgumentFault: base type carrying the rejected argument, its value and the message;
  renders itself through rich as a single "<name>: <message>" diagnostic line.
- trigger(): print a fault on the error console.

Integration
- The validator builds a fault on the first rejected argument and triggers it; the
  orchestrator hands the same fault back inside Halt so callers can inspect it.
- Faults are exceptions, so embedding code may raise them as well; arghelper itself
  never raises them, it reports them and halts.
"""
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from .formatting import stylesheet

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes for argument validation.

    grouping
    - argument values (2110x)
      • MISSING_ARGUMENT: the default rule rejected an absent or empty required value.
      • INVALID_ARGUMENT: a declared validator rejected the value.
    """
    MISSING_ARGUMENT = 21101
    INVALID_ARGUMENT = 21102


class ArgumentFault(Exception):
    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def value(self):
        return self.options.get("value")

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        name = getattr(self.argument, "name", None)
        return self.message if name is None else "%s: %s" % (name, self.message)

    def __rich__(self):
        return Text(str(self), stylesheet()["error"])

    def __trigger__(self):
        console.print(self, soft_wrap=True)


class MissingArgumentError(ArgumentFault): ...
class InvalidArgumentError(ArgumentFault): ...


def trigger(fault, /):
    """
    surface a fault on the error console.

    contract
    - fault must provide a __trigger__ method (see ArgumentFault).
    """
    if not hasattr(fault, "__trigger__") or not callable(fault.__trigger__):
        raise TypeError("trigger() argument must have a __trigger__ method")
    fault.__trigger__()


__all__ = (
    "FaultCode",
    "ArgumentFault",
    "MissingArgumentError",
    "InvalidArgumentError",
    "trigger",
)
