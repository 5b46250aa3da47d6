"""Indicators package initialization."""

from .types import IndicatorKind
from .validation import INDICATOR_PATTERNS, validate_indicator
from .defang import defang, refang

__all__ = ['IndicatorKind', 'INDICATOR_PATTERNS', 'validate_indicator', 'defang', 'refang']
