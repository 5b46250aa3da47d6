"""Extraction package initialization."""

from .errors import AuthError, ErrorKind, ExtractionError, FormatError
from .models import Entity, ExtractionResult, Indicator, Relationship, Technique
from .client import GeminiExtractor, extract_report, parse_extraction
from .session import ExtractionSession, ParseState

__all__ = [
    'AuthError', 'ErrorKind', 'ExtractionError', 'FormatError',
    'Entity', 'ExtractionResult', 'Indicator', 'Relationship', 'Technique',
    'GeminiExtractor', 'extract_report', 'parse_extraction',
    'ExtractionSession', 'ParseState',
]
