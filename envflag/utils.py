"""
envflag helpers shared by the value and flag set layers.

- Unset: "not provided" marker for optional parameters whose legitimate values
  include None, zero and the empty string (flag defaults, output streams).
- nullify(): materialize Unset into a fallback.
- rename(): give generated callables (the typed constructors and the
  process-wide shortcuts) readable names in help and tracebacks.
"""
import functools
from typing import final


@final
class UnsetType:
    """
    sentinel type of Unset; UnsetType() always returns the same falsy instance.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()


def nullify(object, default=None, /):
    """
    return `default` when `object` is Unset; otherwise return `object` unchanged.
    """
    return default if object is Unset else object


def rename(x, /, name=None):
    """
    set a stable __name__/__qualname__ on a callable, or return a curried renamer.

    parameters
    - x: callable | str
      • callable → rename in place.
      • str      → desired name; returns a callable that will rename a future function.
    - name: str | None
      target name to assign.

    errors
    - TypeError if a callable is given and the name is not a string.
    """
    if isinstance(x, str):
        return functools.partial(rename, name=x)
    if not isinstance(name, str):
        raise TypeError("callable name must be a string")
    x.__qualname__ = name
    x.__name__ = name
    return x


__all__ = (
    "UnsetType",
    "Unset",
    "nullify",
    "rename",
)
