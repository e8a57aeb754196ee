"""Form and query string encoding"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import quote

# Characters a URL component encoder leaves untouched besides alphanumerics
_COMPONENT_SAFE = "-_.!~*'()"


def _to_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_component(value: Any) -> str:
    """Percent-encode a single key or value"""
    return quote(_to_text(value), safe=_COMPONENT_SAFE)


def encode_query_data(data: Mapping[Any, Any]) -> str:
    """Build a ``key=value&...`` string in insertion order

    Args:
        data: Flat mapping of parameter names to values

    Returns:
        Encoded string, empty for an empty mapping
    """
    return "&".join(
        f"{encode_component(key)}={encode_component(value)}"
        for key, value in data.items()
    )
