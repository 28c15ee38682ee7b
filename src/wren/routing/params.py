"""Path parameter converters.

Built-in converters for route path segments like ``{id:int}``. The router
only uses the patterns; the captured values are handed to handlers as
strings, the same way the request schema's ``params`` would see them.
"""

import re

# converter name -> regex matched against a single path segment
CONVERTERS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}


def converter_pattern(param_type: str, *, path: str) -> re.Pattern[str]:
    """Compiled full-match pattern for *param_type*.

    Raises ``ConfigurationError`` naming *path* for unknown converters.
    """
    from wren.errors import ConfigurationError

    try:
        pattern = CONVERTERS[param_type]
    except KeyError:
        known = ", ".join(sorted(CONVERTERS))
        msg = f"Unknown path converter {param_type!r} in {path!r}. Known converters: {known}"
        raise ConfigurationError(msg) from None
    return re.compile(f"^{pattern}$")
