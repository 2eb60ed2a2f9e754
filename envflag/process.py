"""
Process-wide flag set and its module-level shortcuts.

`commandline` is the FlagSet behind the module-level functions; it is named
after the program, exits on faulty input (status 2), and reads sys.argv[1:]
when parsed without arguments. Every shortcut looks `commandline` up at call
time, so rebinding it (e.g., in a test) redirects all of them.

Typical program:
    import envflag

    envflag.set_env_prefix("APP")
    port = envflag.integer("port", 8080, "listen `port`")
    debug = envflag.boolean("debug", False, "enable debug output")
    envflag.parse()

    verbs = envflag.get_verbs()
"""
import os
import sys

from .faults import ErrorHandling
from .flags import FlagSet
from .utils import rename

commandline = FlagSet(os.path.basename(sys.argv[0]) if sys.argv else "", ErrorHandling.EXIT)


def set_env_prefix(prefix, /):
    """
    set the environment prefix used by flags defined from now on.

    call it before defining flags; calling it between definitions groups the
    following flags under another prefix.
    """
    if not isinstance(prefix, str):
        raise TypeError("set_env_prefix() argument must be a string")
    commandline.prefix = prefix


def get_verbs():
    """
    return the leading non-flag tokens of the parsed command line.
    """
    return commandline.verbs()


def usage():
    """
    print the usage message of the process-wide set (replaceable through
    `commandline.usage`).
    """
    commandline.usage()


def set_flag(name, value, /):
    """
    set flag `name` of the process-wide set from its string form.
    """
    commandline.set(name, value)


def output():
    """
    the stream the process-wide set writes usage and errors to.
    """
    return commandline.output


def _forward(name, /):
    @rename(name)
    def forward(*args, **kwargs):
        return getattr(commandline, name)(*args, **kwargs)

    forward.__doc__ = getattr(FlagSet, name).__doc__
    return forward


_FORWARDED = (
    # value constructors
    "boolean",
    "duration",
    "float64",
    "integer",
    "int64",
    "uint",
    "uint64",
    "string",
    # var constructors
    "boolean_var",
    "duration_var",
    "float64_var",
    "integer_var",
    "int64_var",
    "uint_var",
    "uint64_var",
    "string_var",
    # generic definitions
    "var",
    "func",
    "bool_func",
    # parsing and introspection
    "parse",
    "parsed",
    "nflag",
    "narg",
    "args",
    "arg",
    "lookup",
    "visit",
    "visit_all",
    "print_defaults",
    "set_output",
)

for _name in _FORWARDED:
    globals()[_name] = _forward(_name)
del _name


__all__ = (
    "commandline",
    "set_env_prefix",
    "get_verbs",
    "usage",
    "set_flag",
    "output",
) + _FORWARDED
