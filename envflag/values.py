"""
Typed, settable flag values.

Every value follows the same small protocol, which is also what a
user-supplied value passed to FlagSet.var() must provide:

- set(text): parse `text` and store the result; raise ValueError on bad input.
- __str__(): render the current value in the literal form set() accepts.
- get() (optional): return the current Python object.
- is_bool_flag() (optional): True when the flag may be given without a value.

Storage
- Built-in values store their payload on a target object under an attribute.
  When no target is given (the "value" constructors), the value owns a private
  namespace and exposes the payload through `.value`; the "var" constructors
  pass the caller's object and attribute so the parsed result lands there.
"""
import math
from decimal import Decimal
from types import SimpleNamespace

from .durations import format_duration, parse_duration
from .strings import PARSE_ERROR, parse_bool, parse_float, parse_int, parse_uint
from .utils import Unset


def _format_float(number):
    """
    shortest round-trip rendering, switching to exponent form for large or
    tiny magnitudes (1.5 → "1.5", 3.0 → "3", 1e6 → "1e+06").
    """
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "+Inf" if number > 0 else "-Inf"
    if number == 0:
        return "-0" if math.copysign(1.0, number) < 0 else "0"

    sign, digits, exponent = Decimal(repr(number)).normalize().as_tuple()
    digits = "".join(map(str, digits))
    point = len(digits) + exponent
    precision = 6
    if precision > len(digits) >= point:
        precision = len(digits)

    prefix = "-" if sign else ""
    scale = point - 1
    if scale < -4 or scale >= precision:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{prefix}{mantissa}e{'+' if scale >= 0 else '-'}{abs(scale):02d}"
    if point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return prefix + digits + "0" * (point - len(digits))
    return f"{prefix}{digits[:point]}.{digits[point:]}"


class Value:
    """
    base class for the built-in typed values.

    class attributes
    - __kind__: type name shown by usage output when the usage text has no
      back-quoted parameter name.
    - __zero__: string form of the type's zero value; defaults equal to it
      are not repeated in usage output.
    """
    __kind__ = "value"
    __zero__ = ""

    def __init__(self, default, /, target=Unset, attribute=Unset):
        if target is Unset:
            target, attribute = SimpleNamespace(), "value"
        elif not isinstance(attribute, str) or not attribute.isidentifier():
            raise TypeError(f"{type(self).__name__} 'attribute' must be an identifier string")
        self._target = target
        self._attribute = attribute
        self._store(default)

    @property
    def value(self):
        return getattr(self._target, self._attribute)

    def get(self):
        return self.value

    def set(self, text, /):
        self._store(self.parse(text))

    def _store(self, object):
        setattr(self._target, self._attribute, object)

    @staticmethod
    def parse(text, /):
        raise NotImplementedError

    @staticmethod
    def format(object, /):
        return str(object)

    def __str__(self):
        return self.format(self.value)

    def __repr__(self):
        return f"{type(self).__name__}({self.value!r})"


class BoolValue(Value):
    __kind__ = ""
    __zero__ = "false"

    parse = staticmethod(parse_bool)

    @staticmethod
    def format(object, /):
        return "true" if object else "false"

    def is_bool_flag(self):
        return True


class IntValue(Value):
    __kind__ = "int"
    __zero__ = "0"
    __bits__ = 64

    @classmethod
    def parse(cls, text, /):
        return parse_int(text, cls.__bits__)


class Int64Value(IntValue): ...


class UintValue(Value):
    __kind__ = "uint"
    __zero__ = "0"
    __bits__ = 64

    @classmethod
    def parse(cls, text, /):
        return parse_uint(text, cls.__bits__)


class Uint64Value(UintValue): ...


class Float64Value(Value):
    __kind__ = "float"
    __zero__ = "0"

    parse = staticmethod(parse_float)
    format = staticmethod(_format_float)


class StringValue(Value):
    __kind__ = "string"
    __zero__ = ""

    @staticmethod
    def parse(text, /):
        return text


class DurationValue(Value):
    __kind__ = "duration"
    __zero__ = "0s"

    @staticmethod
    def parse(text, /):
        try:
            return parse_duration(text)
        except ValueError:
            raise ValueError(PARSE_ERROR) from None

    format = staticmethod(format_duration)


class FuncValue:
    """
    value that hands every occurrence of its flag to a callback.

    the callback receives the raw text; raising ValueError marks the text as
    invalid. nothing is stored, so the string form is always empty.
    """
    __kind__ = "value"
    __zero__ = ""

    def __init__(self, callback, /):
        if not callable(callback):
            raise TypeError(f"{type(self).__name__} callback must be callable")
        self._callback = callback

    def set(self, text, /):
        self._callback(text)

    def get(self):
        return None

    def __str__(self):
        return ""


class BoolFuncValue(FuncValue):
    """
    FuncValue whose flag may be given without a value (the callback then receives "true").
    """

    def is_bool_flag(self):
        return True


def is_bool_flag(value, /):
    """
    report whether `value` opts into the value-less, boolean command-line form.
    """
    probe = getattr(value, "is_bool_flag", None)
    return callable(probe) and bool(probe())


def is_settable(value, /):
    """
    report whether `value` implements the settable-value protocol.
    """
    return callable(getattr(value, "set", None))


__all__ = (
    "Value",
    "BoolValue",
    "IntValue",
    "Int64Value",
    "UintValue",
    "Uint64Value",
    "Float64Value",
    "StringValue",
    "DurationValue",
    "FuncValue",
    "BoolFuncValue",
    "is_bool_flag",
    "is_settable",
)
