"""Environment variable expansion for configuration text."""

from __future__ import annotations

import os
import re

_PATTERN = re.compile(r"\$(?:(?P<escape>\$)|\{(?P<braced>[^}]*)\}|(?P<bare>[A-Za-z0-9_]+))")


def expand_env_vars(text: str) -> str:
    """Expand ``${VAR}``, ``$VAR`` and the ``$$`` escape in *text*.

    A ``$`` that starts none of these forms, including ``${`` with no
    closing brace, is kept as it is.

    Raises:
        KeyError: a referenced variable is not set; the key is its name.
    """

    def substitute(match: re.Match[str]) -> str:
        if match.group("escape") is not None:
            return "$"
        name = match.group("braced")
        if name is None:
            name = match.group("bare")
        try:
            return os.environ[name]
        except KeyError:
            raise KeyError(name) from None

    return _PATTERN.sub(substitute, text)