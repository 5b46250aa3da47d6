"""Syntactic validation of indicator values."""

import re
from typing import Dict, Optional, Union

from .types import IndicatorKind

_OCTET = r'(?:25[0-5]|2[0-4][0-9]|1[0-9][0-9]|[1-9][0-9]|[0-9])'

# Best-effort patterns, not full grammars. The URL pattern in particular
# accepts some malformed URLs and rejects some valid ones.
INDICATOR_PATTERNS: Dict[IndicatorKind, re.Pattern] = {
    IndicatorKind.IPV4: re.compile(rf'^{_OCTET}(?:\.{_OCTET}){{3}}$'),
    IndicatorKind.MD5: re.compile(r'^[a-fA-F0-9]{32}$'),
    IndicatorKind.SHA1: re.compile(r'^[a-fA-F0-9]{40}$'),
    IndicatorKind.SHA256: re.compile(r'^[a-fA-F0-9]{64}$'),
    IndicatorKind.DOMAIN: re.compile(
        r'^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z](?:[a-z-]{0,61}[a-z])?$',
        re.IGNORECASE | re.ASCII,
    ),
    IndicatorKind.URL: re.compile(
        r'^(?:https?://)?[0-9a-z.-]+\.[a-z.]{2,6}[/\w .-]*/?$',
        re.ASCII,
    ),
    IndicatorKind.EMAIL: re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$'),
}


def validate_indicator(kind: Union[IndicatorKind, str, None], value: Optional[str]) -> bool:
    """
    Check whether a raw indicator value is well-formed for its kind.

    Args:
        kind: Indicator kind or its tag string
        value: Raw (fanged) indicator value

    Returns:
        True if the value matches the pattern for the kind. Kinds outside
        IndicatorKind are not rejected and always return True.
    """
    indicator_kind = IndicatorKind.from_tag(kind)
    if indicator_kind is None:
        return True

    candidate = (value or '').strip()
    return INDICATOR_PATTERNS[indicator_kind].fullmatch(candidate) is not None
