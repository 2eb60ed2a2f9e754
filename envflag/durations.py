"""
Duration literals ("300ms", "1h30m", "-1.5h") to and from datetime.timedelta.

Grammar
- an optional sign followed by one or more <decimal><unit> components,
  e.g. "2h45m", "1.5s", ".5ms"; a bare "0" is also accepted.
- units: ns, us, µs (micro sign), μs (greek mu), ms, s, m, h.

Resolution
- timedelta stores microseconds, so sub-microsecond parts are truncated
  toward zero ("1500ns" → 1µs, "300ns" → 0).
- magnitudes beyond (2**63 - 1) nanoseconds (about 292 years) are rejected.
"""
import re
from datetime import timedelta

from .strings import quote

_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # U+00B5 micro sign
    "μs": 1_000,  # U+03BC greek small letter mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"(?P<whole>[0-9]*)(?:\.(?P<fraction>[0-9]*))?(?P<unit>[^0-9.]*)")

MAX_NANOSECONDS = (1 << 63) - 1


def parse_duration(text, /):
    """
    parse a duration literal into a timedelta.

    errors
    - ValueError with a message naming the offending literal
      (invalid duration, missing unit, unknown unit).
    """
    source = text
    negative = False
    if text[:1] in ("+", "-"):
        negative = text[0] == "-"
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError("invalid duration %s" % quote(source))

    limit = MAX_NANOSECONDS + negative
    total = 0
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        whole, fraction, unit = match["whole"], match["fraction"], match["unit"]
        if not whole and not fraction:
            raise ValueError("invalid duration %s" % quote(source))
        if not unit:
            raise ValueError("missing unit in duration %s" % quote(source))
        try:
            scale = _UNITS[unit]
        except KeyError:
            raise ValueError("unknown unit %s in duration %s" % (quote(unit), quote(source))) from None

        total += int(whole or "0") * scale
        if fraction:
            total += int(fraction) * scale // 10 ** len(fraction)
        if total > limit:
            raise ValueError("invalid duration %s" % quote(source))
        position = match.end()

    delta = timedelta(microseconds=total // 1_000)
    return -delta if negative else delta


def _decimal(value, scale):
    whole, fraction = divmod(value, scale)
    if not fraction:
        return str(whole)
    digits = str(fraction).rjust(len(str(scale)) - 1, "0").rstrip("0")
    return f"{whole}.{digits}"


def format_duration(delta, /):
    """
    render a timedelta in the same literal form parse_duration accepts.

    examples
    - timedelta(0)                    → "0s"
    - timedelta(microseconds=300)     → "300µs"
    - timedelta(microseconds=1500)    → "1.5ms"
    - timedelta(minutes=90)           → "1h30m0s"
    - timedelta(seconds=60.5)         → "1m0.5s"
    """
    micros = (delta.days * 86_400 + delta.seconds) * 1_000_000 + delta.microseconds
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if not micros:
        return "0s"
    if micros < 1_000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        return f"{sign}{_decimal(micros, 1_000)}ms"

    seconds, fraction = divmod(micros, 1_000_000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    tail = _decimal(seconds * 1_000_000 + fraction, 1_000_000) + "s"
    if hours:
        return f"{sign}{hours}h{minutes}m{tail}"
    if minutes:
        return f"{sign}{minutes}m{tail}"
    return sign + tail


__all__ = (
    "MAX_NANOSECONDS",
    "parse_duration",
    "format_duration",
)
