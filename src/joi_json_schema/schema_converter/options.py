"""Conversion options, optionally loaded from a ``.env`` file or the environment."""

import os

from typing import Callable, NotRequired, Optional, TypedDict

from dotenv import dotenv_values, find_dotenv


ENV_STRICT = "JOI_JSON_SCHEMA_STRICT"
ENV_MAX_DEPTH = "JOI_JSON_SCHEMA_MAX_DEPTH"

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("", "0", "false", "no", "off")


class ConversionOptions(TypedDict):
    strict: NotRequired[bool]
    max_depth: NotRequired[int]
    warning_callback: NotRequired[Callable[[str], None]]


def _parse_bool(name: str, value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {value!r}")


def _parse_positive_int(name: str, value: str) -> int:
    try:
        parsed = int(value.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if parsed < 1:
        raise ValueError(f"{name} must be at least 1, got {parsed}")
    return parsed


def conversion_options_from_env(
    dotenv_path: Optional[str | os.PathLike] = None,
) -> ConversionOptions:
    """Read conversion options from a ``.env`` file and the process environment.

    ``JOI_JSON_SCHEMA_STRICT`` and ``JOI_JSON_SCHEMA_MAX_DEPTH`` are looked up
    first in ``dotenv_path`` (or the nearest ``.env`` above the working
    directory), then in ``os.environ``, which wins. Unset variables are left
    out of the result so that the converter's defaults apply.

    Raises:
        ValueError: If a variable is set to something unparseable.
    """
    if dotenv_path is None:
        dotenv_path = find_dotenv(usecwd=True)

    values = {k: v for k, v in dotenv_values(dotenv_path).items() if v is not None}
    values.update(os.environ)

    retval: ConversionOptions = {}
    if ENV_STRICT in values:
        retval["strict"] = _parse_bool(ENV_STRICT, values[ENV_STRICT])
    if ENV_MAX_DEPTH in values:
        retval["max_depth"] = _parse_positive_int(ENV_MAX_DEPTH, values[ENV_MAX_DEPTH])
    return retval
