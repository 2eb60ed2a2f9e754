"""
envflag faults (errors and warnings) and rendering.

Scope
- FaultCode: stable numeric identifiers for every user-facing issue, grouped
  by domain (command-line syntax, flag definition, environment, warnings).
- ErrorHandling: what a flag set does once a command-line fault was raised
  (continue by raising, exit the process, or raise silently).
- FlagError / FlagWarning: base types that carry a message plus read-only
  options and know how to render themselves through rich.
- trigger(): central entry point to surface any fault.

Integration
- FlagSet collects the runtime context (console, policy, usage callback) and
  hands the fault to trigger(fault, **context).
- Parse faults follow the flag set's ErrorHandling policy; definition faults
  always raise, since they are programming errors rather than user input.
"""
import os
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

console = Console(stderr=True, highlight=False, soft_wrap=True)

# warnings are attributed to the first caller outside this package
_PACKAGE = os.path.dirname(os.path.abspath(__file__)) + os.sep


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - command-line syntax (211xx)
      • BAD_FLAG_SYNTAX, UNDEFINED_FLAG, MISSING_ARGUMENT, INVALID_VALUE,
        INVALID_BOOLEAN, HELP_REQUESTED
    - flag definition (221xx)
      • INVALID_NAME, REDEFINED_FLAG, NO_SUCH_FLAG
    - environment (231xx)
      • INVALID_ENVIRONMENT
    - warnings (291xx)
      • LATE_REGISTRATION
    """
    # --- command-line syntax errors (211xx) ---
    BAD_FLAG_SYNTAX     = 21101
    UNDEFINED_FLAG      = 21102
    MISSING_ARGUMENT    = 21103
    INVALID_VALUE       = 21104
    INVALID_BOOLEAN     = 21105
    HELP_REQUESTED      = 21106

    # --- definition errors (221xx) ---
    INVALID_NAME        = 22101
    REDEFINED_FLAG      = 22102
    NO_SUCH_FLAG        = 22103

    # --- environment errors (231xx) ---
    INVALID_ENVIRONMENT = 23101

    # --- warnings (291xx) ---
    LATE_REGISTRATION   = 29101

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ErrorHandling(IntEnum):
    """
    policy applied by FlagSet.parse() when the command line is faulty.

    - CONTINUE: print the message and the usage, then raise the fault.
    - EXIT: print the message and the usage, then exit with status 2
      (status 0 when help was requested).
    - RAISE: raise the fault without printing anything.
    """
    CONTINUE = 0
    EXIT = 1
    RAISE = 2


def _styler(options):
    main = __import__("__main__")
    styles = defaultdict(str, {
        "error-message": "bold #FF4DA6",  # friendly pinky error line
        "warning-message": "bold #FFB400",  # amber warning line
    } | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if options.get("colorful", False) else ""

    return styler


class FlagError(Exception):
    """
    base type for every envflag error.

    attributes
    - message: str, the one-line, lowercased description.
    - options: read-only mapping with the fault context (code, flag, value,
      and the runtime options injected by trigger()).
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return self.message

    def __rich__(self):
        return Text(self.message, _styler(self.options)("error-message"))

    def __trigger__(self):
        handling = self.options.get("handling", ErrorHandling.RAISE)
        if handling is ErrorHandling.RAISE:
            raise self
        self.options.get("console", console).print(self)
        if usage := self.options.get("usage"):
            usage()
        if handling is ErrorHandling.EXIT:
            sys.exit(2)
        raise self

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class FlagSyntaxError(FlagError): ...
class UndefinedFlagError(FlagError): ...
class MissingArgumentError(FlagError): ...
class InvalidValueError(FlagError): ...


class HelpRequested(FlagError):
    """
    raised when -h or -help is given but not defined; only the usage is printed.
    """

    def __trigger__(self):
        handling = self.options.get("handling", ErrorHandling.RAISE)
        if handling is ErrorHandling.RAISE:
            raise self
        if usage := self.options.get("usage"):
            usage()
        if handling is ErrorHandling.EXIT:
            sys.exit(0)
        raise self


class DefinitionError(FlagError):
    """
    base type for programming errors made while defining flags.

    definition errors ignore the exit policy: the message is printed (unless
    the policy is RAISE) and the error is always raised to the caller.
    """

    def __trigger__(self):
        if self.options.get("handling", ErrorHandling.RAISE) is not ErrorHandling.RAISE:
            self.options.get("console", console).print(self)
        raise self


class FlagNameError(DefinitionError): ...
class FlagRedefinedError(DefinitionError): ...
class EnvironmentValueError(DefinitionError): ...


class FlagWarning(Warning):
    """
    base type for non-fatal envflag diagnostics, surfaced through `warnings`.
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return self.message

    def __rich__(self):
        return Text(self.message, _styler(self.options)("warning-message"))

    def __trigger__(self):
        warnings.warn(self, stacklevel=self.options.get("stacklevel", 2), skip_file_prefixes=(_PACKAGE,))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class LateRegistrationWarning(FlagWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.

    typical options
    - console, handling, usage, colorful, stacklevel.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "ErrorHandling",
    "FlagError",
    "FlagSyntaxError",
    "UndefinedFlagError",
    "MissingArgumentError",
    "InvalidValueError",
    "HelpRequested",
    "DefinitionError",
    "FlagNameError",
    "FlagRedefinedError",
    "EnvironmentValueError",
    "FlagWarning",
    "LateRegistrationWarning",
    "trigger",
)
