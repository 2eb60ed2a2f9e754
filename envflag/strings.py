"""
Literal parsing helpers shared by flag values and the environment resolver.

Scope
- parse_bool: the conventional boolean spellings (1/t/T/TRUE/true/True and
  their false counterparts).
- parse_int / parse_uint: base-prefixed integer literals (0x, 0o, 0b, legacy
  leading-zero octal, digit-separating underscores) bounded to a bit size.
- parse_float: decimal, exponent, inf/nan and hexadecimal floating literals.
- quote: double-quoted rendering used in messages and usage defaults.
- split_list: comma-separated configuration values.

Errors
- Every parser raises ValueError with either "parse error" or
  "value out of range"; flag values surface that text verbatim in their
  "invalid value" messages.
"""
import json
import math
import re

PARSE_ERROR = "parse error"
RANGE_ERROR = "value out of range"

_TRUE = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSE = frozenset(("0", "f", "F", "FALSE", "false", "False"))


def parse_bool(text, /):
    """
    parse a boolean literal.

    returns
    - True for 1, t, T, TRUE, true, True.
    - False for 0, f, F, FALSE, false, False.

    errors
    - ValueError("parse error") for anything else.
    """
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(PARSE_ERROR)


def _parse_integer(text, signed):
    body = text
    negative = False
    if signed and body[:1] in ("+", "-"):
        negative = body[0] == "-"
        body = body[1:]

    # ascii alphanumerics and underscores only: no whitespace, no inner signs
    if not re.fullmatch(r"[0-9A-Za-z_]+", body):
        raise ValueError(PARSE_ERROR)

    # a leading zero without an explicit base letter means octal
    if len(body) > 1 and body[0] == "0" and body[1] not in "xXoObB":
        body = "0o" + body[1:]

    try:
        number = int(body, 0)
    except ValueError:
        raise ValueError(PARSE_ERROR) from None
    return -number if negative else number


def parse_int(text, /, bits=64):
    """
    parse a signed, base-prefixed integer literal bounded to `bits`.

    accepted forms
    - decimal: "42", "-7", "+3", "1_000"
    - hexadecimal: "0x2A", "0X_ff"
    - octal: "0o52", "052"
    - binary: "0b101010"

    errors
    - ValueError("parse error") for malformed text (including surrounding spaces).
    - ValueError("value out of range") when the number does not fit in `bits`.
    """
    number = _parse_integer(text, signed=True)
    if not -(1 << (bits - 1)) <= number < (1 << (bits - 1)):
        raise ValueError(RANGE_ERROR)
    return number


def parse_uint(text, /, bits=64):
    """
    parse an unsigned, base-prefixed integer literal bounded to `bits`.

    same forms as parse_int, except that no sign (not even '+') is accepted.
    """
    number = _parse_integer(text, signed=False)
    if not 0 <= number < (1 << bits):
        raise ValueError(RANGE_ERROR)
    return number


def parse_float(text, /):
    """
    parse a 64-bit floating point literal.

    accepts decimal and exponent notation, "inf"/"infinity"/"nan" in any case
    (optionally signed) and hexadecimal mantissas with a binary exponent
    ("0x1.8p1"). only ASCII text is accepted; finite literals that overflow
    are out of range.
    """
    if not text or not text.isascii() or text != text.strip():
        raise ValueError(PARSE_ERROR)

    unsigned = text.lstrip("+-")
    try:
        if unsigned[:2].lower() == "0x":
            if len(text) - len(unsigned) > 1 or "p" not in unsigned.lower():
                raise ValueError(PARSE_ERROR)
            number = float.fromhex(text)
        else:
            number = float(text)
    except (ValueError, OverflowError):
        raise ValueError(PARSE_ERROR) from None

    if math.isinf(number) and unsigned.lower() not in ("inf", "infinity"):
        raise ValueError(RANGE_ERROR)
    return number


def quote(text, /):
    """
    render `text` as a double-quoted, escaped literal (e.g., 'a"b' → '"a\\"b"').
    """
    return json.dumps(text, ensure_ascii=False)


def split_list(text, /):
    """
    split a comma-separated configuration value into its items.

    no trimming and no escaping are applied; an empty string yields [""].
    """
    return text.split(",")


__all__ = (
    "PARSE_ERROR",
    "RANGE_ERROR",
    "parse_bool",
    "parse_int",
    "parse_uint",
    "parse_float",
    "quote",
    "split_list",
)
