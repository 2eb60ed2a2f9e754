"""
envflag flag sets: define, parse, and introspect single-dash command-line flags.

What this module provides
- Flag: one registered flag (name, usage, settable value, default string).
- FlagSet: a caller-owned registry with its own environment prefix, error
  handling policy, output stream and parse state.
- unquote_usage(): split a back-quoted parameter name out of a usage string.

Command-line syntax
- "-name", "--name": boolean flags, set to true.
- "-name=value", "--name=value": any flag.
- "-name value": non-boolean flags only.
- parsing stops at the first non-flag token (a lone "-" is a non-flag
  token) or right after the terminator "--".

Environment defaults
- every typed constructor consults the environment through
  envflag.environment.resolve() before the flag is registered, so
  "APP_PORT=9090" turns `integer("port", 8080, ...)` into a flag whose
  default is 9090 when the set's prefix is "APP".

Verbs
- FlagSet.verbs() returns the leading tokens of the last parsed command line
  that do not start with "-" (e.g., "deploy" in "deploy -env=prod").
  parsing stops at those tokens, so flags that follow verbs are read by
  parsing the remainder once the verbs are known.

Quick example:
    >>> from envflag import FlagSet
    >>> flags = FlagSet("tool", prefix="TOOL")
    >>> port = flags.integer("port", 8080, "listen `port`")
    >>> flags.parse(["-port=9000", "serve"])
    >>> port.value, flags.args()
    (9000, ['serve'])
"""
import itertools
import os
import sys
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .environment import apply, lenient_bool, resolve
from .faults import *
from .strings import quote
from .utils import Unset, nullify, rename
from .values import *


class Flag:
    """
    a registered flag.

    attributes
    - name: str, the flag name without the leading dash.
    - usage: str, the help text (may hold a back-quoted parameter name).
    - value: the settable value object receiving command-line input.
    - default: str, the string form of the effective default at registration.
    """
    __slots__ = ("name", "usage", "value", "default")

    def __init__(self, name, usage, value, default):
        self.name = name
        self.usage = usage
        self.value = value
        self.default = default

    def __rich_repr__(self):
        yield "name", self.name
        yield "usage", self.usage
        yield "default", self.default
        yield "value", str(self.value)

    def __repr__(self):
        return "flag(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def unquote_usage(usage, value=None, /):
    """
    extract a back-quoted name from a usage string.

    given "a `name` to show" it returns ("name", "a name to show"). without
    back quotes the name is derived from `value`: "" for boolean values, the
    value's __kind__ for typed values ("int", "duration", ...), and "value"
    otherwise (including when no value is given).
    """
    if (start := usage.find("`")) >= 0:
        if (end := usage.find("`", start + 1)) >= 0:
            name = usage[start + 1:end]
            return name, usage[:start] + name + usage[end + 1:]
    if value is None:
        return "value", usage
    if is_bool_flag(value):
        return "", usage
    return getattr(value, "__kind__", "value"), usage


def _is_zero_value(flag):
    zero = getattr(flag.value, "__zero__", Unset)
    if zero is Unset:
        try:
            zero = str(type(flag.value)())
        except (TypeError, ValueError):
            return False
    return flag.default == zero


class FlagSet:
    """
    named set of flags with its own parse state.

    parameters
    - name: str | Unset
      shown in usage output ("Usage of <name>:"); defaults to the program name.
    - error_handling: ErrorHandling
      what parse() does with a faulty command line (default CONTINUE).
    - prefix: str
      environment prefix; "APP" maps flag "max-retries" to APP_MAX_RETRIES.
    - strict: bool
      raise EnvironmentValueError for malformed environment values instead of
      silently keeping the declared default; booleans then also require one
      of the conventional boolean spellings.
    - colorful: bool
      style usage and error output (palette overridable via __styles__ in __main__).
    - output: file-like | Unset
      destination for usage and error messages (stderr when Unset).
    - environ: Mapping[str, str] | None
      environment to read defaults from (os.environ when None).

    lifecycle
    - flags are registered, then parse() runs. parse() may run again; each run
      replaces the recorded arguments. registering after parse() works but
      emits LateRegistrationWarning since the flag missed that command line.
    """

    def __init__(
            self,
            name=Unset,
            error_handling=ErrorHandling.CONTINUE,
            *,
            prefix="",
            strict=False,
            colorful=False,
            output=Unset,
            environ=None
    ):
        if not isinstance(error_handling, ErrorHandling):
            raise TypeError("flag set 'error_handling' must be an ErrorHandling member")
        if not isinstance(prefix, str):
            raise TypeError("flag set 'prefix' must be a string")
        self.name = nullify(name, os.path.basename(sys.argv[0]) if sys.argv else "")
        self.error_handling = error_handling
        self.prefix = prefix
        self.strict = bool(strict)
        self.colorful = bool(colorful)
        self.environ = environ
        self.usage = self.default_usage
        self._output = output
        self._formal = {}
        self._actual = {}
        self._arguments = []
        self._args = []
        self._parsed = False

    def __rich_repr__(self):
        yield "name", self.name
        yield "prefix", self.prefix
        yield "parsed", self._parsed
        yield "flags", sorted(self._formal)

    def __repr__(self):
        return "flag-set(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    # ── output ──────────────────────────────────────────────────────────────

    @property
    def output(self):
        """
        the stream usage and error messages are written to (stderr by default).
        """
        return sys.stderr if self._output is Unset else self._output

    def set_output(self, output, /):
        """
        redirect usage and error messages; None restores stderr.
        """
        self._output = Unset if output is None else output

    def _console(self):
        return Console(
            file=self.output,
            highlight=False,
            soft_wrap=True,
            markup=False,
            emoji=False,
            no_color=not self.colorful,
        )

    def _styler(self):
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",  # cyan header
            "program-name": "bold #FF4D94",  # magenta-pink program name
            "flag-name": "bold #22C55E",  # green flag names
            "metavar": "bold #FFD600",  # amber parameter names
            "flag-usage": "#9CA3AF",  # muted gray usage text
            "default": "italic #737373",  # dim default values
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        return styler

    def trigger(self, fault, /, **options):
        """
        surface a fault with this set's console, policy and usage callback.
        """
        trigger(
            fault,
            **options,
            console=self._console(),
            handling=self.error_handling,
            usage=lambda: self.usage(),
            colorful=self.colorful,
        )

    def print_defaults(self):
        """
        print every flag with its parameter name, usage and non-zero default.

        layout (one entry per flag, sorted by name):

            -port int
                listen port (default 8080)

        the usage goes on the same line, after a tab, for one-letter boolean
        flags. the default is omitted when it equals the type's zero value;
        string defaults are quoted. a back-quoted word in the usage replaces
        the type name (see unquote_usage).
        """
        console = self._console()
        styler = self._styler()
        for flag in self._sorted(self._formal):
            name, usage = unquote_usage(flag.usage, flag.value)
            line = Text("  -")
            line.append(flag.name, styler("flag-name"))
            if name:
                line.append(" ")
                line.append(name, styler("metavar"))
            line.append("\t" if len(line) <= 4 else "\n    \t")
            line.append(usage.replace("\n", "\n    \t"), styler("flag-usage"))
            if not _is_zero_value(flag):
                default = quote(flag.default) if isinstance(flag.value, StringValue) else flag.default
                line.append(" (default %s)" % default, styler("default"))
            console.print(line)

    def default_usage(self):
        """
        print "Usage of <name>:" followed by print_defaults().
        """
        styler = self._styler()
        prog = getattr(__import__("__main__"), "__prog__", self.name)
        if prog:
            header = Text.assemble(("Usage of ", styler("usage-label")), (prog, styler("program-name")), ":")
        else:
            header = Text("Usage:", styler("usage-label"))
        self._console().print(header)
        self.print_defaults()

    # ── definition ──────────────────────────────────────────────────────────

    def _default(self, name, value, kind):
        parse = lenient_bool if kind is BoolValue and not self.strict else kind.parse
        try:
            return resolve(name, value, parse, prefix=self.prefix, strict=self.strict, environ=self.environ)
        except EnvironmentValueError as error:
            self.trigger(error)

    def _validate(self, name, usage):
        if not isinstance(name, str):
            raise TypeError("flag name must be a string")
        if not isinstance(usage, str):
            raise TypeError("flag usage must be a string")

        if not name:
            self.trigger(FlagNameError("flag name cannot be empty", code=FaultCode.INVALID_NAME, flag=name))
        elif name.startswith("-"):
            self.trigger(FlagNameError("flag %s begins with -" % quote(name), code=FaultCode.INVALID_NAME, flag=name))
        elif "=" in name:
            self.trigger(FlagNameError("flag %s contains =" % quote(name), code=FaultCode.INVALID_NAME, flag=name))

        if name in self._formal:
            self.trigger(FlagRedefinedError(
                "%sflag redefined: %s" % (self.name + " " if self.name else "", name),
                code=FaultCode.REDEFINED_FLAG,
                flag=name,
            ))

    def _register(self, value, name, usage):
        if self._parsed:
            self.trigger(LateRegistrationWarning(
                "flag -%s was registered after the command line was parsed" % name,
                code=FaultCode.LATE_REGISTRATION,
                flag=name,
            ))

        self._formal[name] = flag = Flag(name, usage, value, str(value))
        return flag

    def _define(self, value, name, usage):
        self._validate(name, usage)
        return self._register(value, name, usage)

    def var(self, value, name, usage, /):
        """
        define a flag backed by a user-supplied settable value.

        the value must implement set(text) and __str__(); see envflag.values.
        when the flag's environment variable is set, its text is fed to
        value.set() before registration (malformed text is ignored unless the
        set is strict), so the recorded default reflects it.
        """
        if not is_settable(value):
            raise TypeError("var() value must implement set(text)")
        self._validate(name, usage)
        try:
            apply(name, value, prefix=self.prefix, strict=self.strict, environ=self.environ)
        except EnvironmentValueError as error:
            self.trigger(error)
        self._register(value, name, usage)

    def func(self, name, usage, callback, /):
        """
        define a flag that calls `callback(text)` every time it is seen.

        a ValueError raised by the callback is reported as an invalid value.
        the environment is not consulted for callback flags.
        """
        self._define(FuncValue(callback), name, usage)

    def bool_func(self, name, usage, callback, /):
        """
        like func(), but the flag takes no value; `callback("true")` runs when
        it is given bare, `callback(text)` for "-name=text".
        """
        self._define(BoolFuncValue(callback), name, usage)

    # ── parsing ─────────────────────────────────────────────────────────────

    def _parse_one(self):
        if not self._args:
            return False
        token = self._args[0]
        if len(token) < 2 or token[0] != "-":
            return False

        minuses = 1
        if token[1] == "-":
            minuses += 1
            if len(token) == 2:  # "--" terminates the flags
                del self._args[0]
                return False

        name = token[minuses:]
        if not name or name[0] in "-=":
            return self.trigger(FlagSyntaxError(
                "bad flag syntax: %s" % token,
                code=FaultCode.BAD_FLAG_SYNTAX,
                token=token,
            ))

        del self._args[0]
        name, separator, value = name.partition("=")
        has_value = bool(separator)

        try:
            flag = self._formal[name]
        except KeyError:
            if name in ("help", "h"):
                return self.trigger(HelpRequested("flag: help requested", code=FaultCode.HELP_REQUESTED))
            return self.trigger(UndefinedFlagError(
                "flag provided but not defined: -%s" % name,
                code=FaultCode.UNDEFINED_FLAG,
                flag=name,
            ))

        if is_bool_flag(flag.value):
            try:
                flag.value.set(value if has_value else "true")
            except ValueError as error:
                if has_value:
                    message = "invalid boolean value %s for -%s: %s" % (quote(value), name, error)
                else:
                    message = "invalid boolean flag %s: %s" % (name, error)
                return self.trigger(InvalidValueError(
                    message,
                    code=FaultCode.INVALID_BOOLEAN,
                    flag=name,
                    value=value,
                ))
        else:
            if not has_value and self._args:
                has_value = True
                value = self._args.pop(0)
            if not has_value:
                return self.trigger(MissingArgumentError(
                    "flag needs an argument: -%s" % name,
                    code=FaultCode.MISSING_ARGUMENT,
                    flag=name,
                ))
            try:
                flag.value.set(value)
            except ValueError as error:
                return self.trigger(InvalidValueError(
                    "invalid value %s for flag -%s: %s" % (quote(value), name, error),
                    code=FaultCode.INVALID_VALUE,
                    flag=name,
                    value=value,
                ))

        self._actual[name] = flag
        return True

    def parse(self, arguments=Unset, /):
        """
        parse flags from `arguments` (sys.argv[1:] when Unset).

        must run after all flags are defined and before their values are
        read. faults are handled according to error_handling: CONTINUE prints
        and raises, EXIT prints and exits (status 2, or 0 for -h/-help), RAISE
        raises quietly.
        """
        if arguments is Unset:
            arguments = sys.argv[1:]
        elif isinstance(arguments, str):
            raise TypeError("parse() argument must be an iterable of strings, not a string")
        arguments = list(arguments)
        if not all(isinstance(argument, str) for argument in arguments):
            raise TypeError("parse() argument must be an iterable of strings")

        self._parsed = True
        self._arguments = arguments
        self._args = list(arguments)
        while self._parse_one():
            pass

    def parsed(self):
        """
        report whether parse() has run.
        """
        return self._parsed

    def verbs(self):
        """
        return the leading tokens of the parsed command line that precede the
        first flag-like token ("-..."), in order; [] before parse().
        """
        if not self._parsed:
            return []
        return list(itertools.takewhile(lambda token: not token.startswith("-"), self._arguments))

    # ── introspection ───────────────────────────────────────────────────────

    def set(self, name, value, /):
        """
        set flag `name` from its string form, as if given on the command line.

        errors
        - UndefinedFlagError when no such flag exists.
        - InvalidValueError when the value cannot parse the text.
        """
        try:
            flag = self._formal[name]
        except KeyError:
            raise UndefinedFlagError(
                "no such flag -%s" % name,
                code=FaultCode.NO_SUCH_FLAG,
                flag=name,
            ) from None
        try:
            flag.value.set(value)
        except ValueError as error:
            raise InvalidValueError(
                "invalid value %s for flag -%s: %s" % (quote(value), name, error),
                code=FaultCode.INVALID_VALUE,
                flag=name,
                value=value,
            ) from error
        self._actual[name] = flag

    def lookup(self, name, /):
        """
        return the Flag registered as `name`, or None.
        """
        return self._formal.get(name)

    def nflag(self):
        """
        number of flags that have been set (on the command line or via set()).
        """
        return len(self._actual)

    def narg(self):
        """
        number of arguments remaining after flags have been processed.
        """
        return len(self._args)

    def args(self):
        """
        the non-flag arguments remaining after parse().
        """
        return list(self._args)

    def arg(self, index, /):
        """
        the index-th remaining argument, or "" when out of range.
        """
        if not 0 <= index < len(self._args):
            return ""
        return self._args[index]

    @staticmethod
    def _sorted(flags):
        return [flags[name] for name in sorted(flags)]

    def visit(self, callback, /):
        """
        call `callback(flag)` for each flag that has been set, in name order.
        """
        for flag in self._sorted(self._actual):
            callback(flag)

    def visit_all(self, callback, /):
        """
        call `callback(flag)` for every defined flag, set or not, in name order.
        """
        for flag in self._sorted(self._formal):
            callback(flag)


# Typed constructors share one body per form; only the value type differs.
_KINDS = {
    "boolean": BoolValue,
    "duration": DurationValue,
    "float64": Float64Value,
    "integer": IntValue,
    "int64": Int64Value,
    "uint": UintValue,
    "uint64": Uint64Value,
    "string": StringValue,
}


def _constructor(name, kind, /):
    @rename(name)
    def constructor(self, flag, value, usage, /):
        self._validate(flag, usage)
        holder = kind(self._default(flag, value, kind))
        self._register(holder, flag, usage)
        return holder

    constructor.__doc__ = f"""
        define a {kind.__name__.removesuffix('Value').lower()} flag with a name, default and usage.

        the default is replaced by the flag's environment variable when that
        is set and parses; returns the {kind.__name__} holding the flag's
        value (read it through `.value`).
    """
    return constructor


def _var_constructor(name, kind, /):
    @rename(name + "_var")
    def constructor(self, target, flag, value, usage, /, attribute=Unset):
        self._validate(flag, usage)
        attribute = nullify(attribute, flag.replace("-", "_"))
        holder = kind(self._default(flag, value, kind), target, attribute)
        self._register(holder, flag, usage)
        return holder

    constructor.__doc__ = f"""
        define a {kind.__name__.removesuffix('Value').lower()} flag stored on `target`.

        the value lives in `target.<attribute>` (the flag name with "-"
        replaced by "_" when attribute is Unset); the effective default is
        written there immediately.
    """
    return constructor


for _name, _kind in _KINDS.items():
    setattr(FlagSet, _name, _constructor(_name, _kind))
    setattr(FlagSet, _name + "_var", _var_constructor(_name, _kind))
del _name, _kind


__all__ = (
    "Flag",
    "FlagSet",
    "unquote_usage",
)
