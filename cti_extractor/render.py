"""Dashboard view of an extraction result."""

from typing import List, Optional, Tuple

from tabulate import tabulate

from cti_extractor.extraction.models import ExtractionResult
from cti_extractor.indicators import defang, validate_indicator

MAX_TEXT = 60

CATEGORY_LABELS = {
    'threat_actors': 'Threat Actors',
    'victims': 'Victims',
    'malware': 'Malware',
    'ttps': 'TTPs',
    'indicators': 'Indicators',
    'relationships': 'Relationships',
}

Section = Tuple[str, str]


def _clip(text: Optional[str], limit: int = MAX_TEXT) -> str:
    if not text:
        return ''
    return text if len(text) <= limit else text[:limit - 3] + '...'


def _table(rows, headers, empty_message):
    if not rows:
        return empty_message
    return tabulate(rows, headers=headers, tablefmt='grid', disable_numparse=True)


def _endpoint_label(result: ExtractionResult, ref: str, defanged: bool) -> str:
    label = result.entity_label(ref)
    if defanged and any(indicator.value == ref for indicator in result.indicators):
        return defang(label)
    return label


def render_dashboard(result: ExtractionResult, defanged: bool = True) -> List[Section]:
    """
    Build the dashboard sections for a result.

    Args:
        result: Extraction result
        defanged: Show indicator values defanged

    Returns:
        List of (title, body) pairs in display order
    """
    counts = result.counts()
    summary = tabulate(
        [[CATEGORY_LABELS[name], count] for name, count in counts.items()],
        headers=['Category', 'Count'],
        tablefmt='grid',
        disable_numparse=True,
    )

    actors = _table(
        [[a.id, a.name or '', _clip(a.description)] for a in result.threat_actors],
        ['ID', 'Name', 'Description'],
        'No threat actors identified',
    )
    victims = _table(
        [[v.id, v.name or '', v.kind] for v in result.victims],
        ['ID', 'Name', 'Type'],
        'No victims identified',
    )
    malware = _table(
        [[m.id, m.name or '', _clip(m.description)] for m in result.malware],
        ['ID', 'Name', 'Description'],
        'No malware identified',
    )
    ttps = _table(
        [[t.technique_id, t.technique_name, _clip(t.description)] for t in result.ttps],
        ['Technique', 'Name', 'Description'],
        'No techniques identified',
    )
    indicators = _table(
        [[
            i.kind,
            i.display_value if defanged else i.value,
            'VALID' if validate_indicator(i.kind, i.value) else 'INVALID',
            _clip(i.description),
        ] for i in result.indicators],
        ['Type', 'Value', 'Status', 'Description'],
        'No indicators identified',
    )
    relationships = _table(
        [[
            _endpoint_label(result, r.source, defanged),
            r.relationship_type,
            _endpoint_label(result, r.target, defanged),
        ] for r in result.relationships],
        ['Source', 'Relationship', 'Target'],
        'No relationships identified',
    )

    return [
        ('Summary', summary),
        ('Threat Actors', actors),
        ('Victims', victims),
        ('Malware', malware),
        ('TTPs', ttps),
        ('Indicators of Compromise', indicators),
        ('Relationships', relationships),
    ]

