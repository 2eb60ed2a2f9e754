"""
Environment-variable defaults for flags.

Every flag may take its default from an environment variable whose name is
derived from an optional prefix and the flag name:

    env_name("APP", "max-retries") → "APP_MAX_RETRIES"
    env_name("", "max-retries")    → "MAX_RETRIES"

The variable is read once, when the flag is registered; a value given on the
command line later still wins over it.

Fallback
- When the variable holds text the flag's type cannot parse, the declared
  default is kept and nothing is reported. Strict resolution raises
  EnvironmentValueError instead.
- Booleans are lenient by default: only the exact text "true" yields True;
  any other text (including "TRUE" or "1") yields False rather than the
  declared default.
"""
import os

from .faults import EnvironmentValueError, FaultCode
from .strings import quote


def env_name(prefix, name, /):
    """
    derive the environment variable name for flag `name` under `prefix`.
    """
    if prefix:
        name = f"{prefix}_{name}"
    return name.replace("-", "_").upper()


def lenient_bool(text, /):
    """
    boolean reading used for environment defaults: exactly "true" is True.
    """
    return text == "true"


def resolve(name, default, parse, /, prefix="", strict=False, environ=None):
    """
    return the effective default of flag `name`.

    parameters
    - name: str, the flag name.
    - default: the declared default, returned when the variable is unset or,
      outside strict mode, when its text is malformed.
    - parse: callable turning the variable's text into a value; signals
      malformed text by raising ValueError.
    - prefix: str, the environment prefix ("" for none).
    - strict: bool, raise EnvironmentValueError on malformed text.
    - environ: Mapping[str, str] | None, defaults to os.environ.

    errors
    - EnvironmentValueError (strict only).
    """
    environ = os.environ if environ is None else environ
    try:
        text = environ[variable := env_name(prefix, name)]
    except KeyError:
        return default

    try:
        return parse(text)
    except ValueError as error:
        if not strict:
            return default
        raise EnvironmentValueError(
            "invalid value %s for environment variable %s of flag -%s: %s" % (quote(text), variable, name, error),
            code=FaultCode.INVALID_ENVIRONMENT,
            flag=name,
            variable=variable,
            value=text,
        ) from error


def apply(name, value, /, prefix="", strict=False, environ=None):
    """
    feed the environment default of flag `name` into a settable `value`.

    used for user-supplied values, which parse through their own set();
    returns `value` for chaining.
    """
    def parse(text):
        value.set(text)
        return value

    return resolve(name, value, parse, prefix=prefix, strict=strict, environ=environ)


__all__ = (
    "env_name",
    "lenient_bool",
    "resolve",
    "apply",
)
