"""Indicator kinds recognized by the extractor."""

from enum import Enum
from typing import Any, Optional


class IndicatorKind(str, Enum):
    """Closed set of indicator kinds, valued by their canonical tag."""

    IPV4 = 'ipv4-addr'
    DOMAIN = 'domain-name'
    MD5 = 'file-hash-md5'
    SHA1 = 'file-hash-sha1'
    SHA256 = 'file-hash-sha256'
    URL = 'url'
    EMAIL = 'email-addr'

    @classmethod
    def from_tag(cls, tag: Any) -> Optional['IndicatorKind']:
        """Return the kind for a tag, or None if the tag is not recognized."""
        try:
            return cls(tag)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value
