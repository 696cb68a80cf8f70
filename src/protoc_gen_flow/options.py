from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

FLAVORS = ("flow", "typescript")
MODES = ("files", "index")

_TRUE = {"true", "1", "yes", "on", ""}
_FALSE = {"false", "0", "no", "off"}


class OptionsError(ValueError):
    """Raised for an unknown or malformed plugin parameter."""


@dataclass
class GeneratorOptions:
    flavor: str = "flow"
    mode: str = "files"
    package_prefix: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        if self.flavor not in FLAVORS:
            raise OptionsError(f"Unknown flavor '{self.flavor}'. Expected one of: {', '.join(FLAVORS)}")
        if self.mode not in MODES:
            raise OptionsError(f"Unknown mode '{self.mode}'. Expected one of: {', '.join(MODES)}")


def _parse_bool(key: str, value: str) -> bool:
    lowered = value.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise OptionsError(f"Option '{key}' expects a boolean, got '{value}'")


def _split_parameter(parameter: str) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for chunk in parameter.split(","):
        chunk = chunk.strip()
        if not chunk:
            continue
        key, _, value = chunk.partition("=")
        values[key.strip()] = value.strip()
    return values


def parse_parameter(parameter: str) -> GeneratorOptions:
    """Parse a protoc plugin parameter such as ``flavor=typescript,mode=index``.

    A bare key (``package_prefix``) switches a boolean option on.
    """
    kwargs = {}
    for key, value in _split_parameter(parameter or "").items():
        if key in ("flavor", "mode"):
            kwargs[key] = value
        elif key in ("package_prefix", "verbose"):
            kwargs[key] = _parse_bool(key, value)
        else:
            raise OptionsError(f"Unknown option '{key}'")
    return GeneratorOptions(**kwargs)
