"""Export package initialization."""

from .exporter import (
    clipboard_text,
    export_filename,
    to_stix_bundle,
    write_indicators_csv,
    write_json,
    write_stix_bundle,
)

__all__ = [
    'clipboard_text', 'export_filename', 'to_stix_bundle',
    'write_indicators_csv', 'write_json', 'write_stix_bundle',
]
