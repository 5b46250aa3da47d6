"""Export of extraction results as JSON, CSV and STIX 2.1 bundles."""

import csv
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Union

import stix2
from stix2.exceptions import STIXError

from cti_extractor.extraction.models import ExtractionResult
from cti_extractor.indicators import IndicatorKind, validate_indicator

logger = logging.getLogger(__name__)

CSV_FIELDS = ['type', 'value', 'valid', 'description']

STIX_PATTERNS = {
    IndicatorKind.IPV4: "[ipv4-addr:value = '{}']",
    IndicatorKind.DOMAIN: "[domain-name:value = '{}']",
    IndicatorKind.URL: "[url:value = '{}']",
    IndicatorKind.EMAIL: "[email-addr:value = '{}']",
    IndicatorKind.MD5: "[file:hashes.MD5 = '{}']",
    IndicatorKind.SHA1: "[file:hashes.'SHA-1' = '{}']",
    IndicatorKind.SHA256: "[file:hashes.'SHA-256' = '{}']",
}

PathLike = Union[str, Path]


def export_filename(now: Optional[datetime] = None) -> str:
    """Timestamped name for a downloaded result."""
    now = now or datetime.now(timezone.utc)
    return f"stix-bundle-{int(now.timestamp() * 1000)}.json"


def clipboard_text(result: ExtractionResult, defanged: bool = False) -> str:
    """JSON text of the result, with defanged indicator values if requested."""
    if defanged:
        result = result.defanged()
    return result.to_json()


def write_json(result: ExtractionResult, directory: PathLike = '.',
               now: Optional[datetime] = None) -> Path:
    """
    Write the full, non-defanged result to a timestamped JSON file.

    Args:
        result: Extraction result
        directory: Output directory, created if missing
        now: Timestamp used for the filename

    Returns:
        Path of the written file
    """
    output_dir = Path(directory)
    output_dir.mkdir(parents=True, exist_ok=True)

    output_path = output_dir / export_filename(now)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(result.to_json())

    logger.info(f"Wrote extraction result to {output_path}")
    return output_path


def write_indicators_csv(result: ExtractionResult, path: PathLike,
                         defanged: bool = False) -> Path:
    """Write one CSV row per indicator with its validation status."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for indicator in result.indicators:
            writer.writerow({
                'type': indicator.kind,
                'value': indicator.display_value if defanged else indicator.value,
                'valid': validate_indicator(indicator.kind, indicator.value),
                'description': indicator.description or '',
            })

    logger.info(f"Wrote {len(result.indicators)} indicators to {output_path}")
    return output_path


def _pattern_literal(value: str) -> str:
    return value.replace('\\', '\\\\').replace("'", "\\'")


def _build(factory, **kwargs):
    """Create a STIX object, leaving out unset optional properties."""
    return factory(**{k: v for k, v in kwargs.items() if v is not None})


def to_stix_bundle(result: ExtractionResult) -> stix2.Bundle:
    """
    Convert a result into a STIX 2.1 bundle.

    Victims become identities and techniques become attack patterns.
    Indicators of unknown kinds, objects the stix2 library rejects and
    relationships whose endpoints do not resolve are skipped.
    """
    objects = []
    refs: Dict[str, str] = {}

    def add(obj, *keys):
        objects.append(obj)
        for key in keys:
            if key:
                refs.setdefault(key, obj.id)

    for actor in result.threat_actors:
        add(_build(stix2.ThreatActor, name=actor.label, description=actor.description),
            actor.id, actor.name)

    for victim in result.victims:
        add(_build(stix2.Identity, name=victim.label, description=victim.description),
            victim.id, victim.name)

    for malware in result.malware:
        add(_build(stix2.Malware, name=malware.label, is_family=True,
                   description=malware.description),
            malware.id, malware.name)

    for technique in result.ttps:
        add(_build(stix2.AttackPattern,
                   name=technique.technique_name,
                   description=technique.description,
                   external_references=[{
                       'source_name': 'mitre-attack',
                       'external_id': technique.technique_id,
                   }]),
            technique.technique_id, technique.technique_name)

    now = datetime.now(timezone.utc)
    for indicator in result.indicators:
        kind = indicator.indicator_kind
        if kind is None:
            logger.warning(f"Skipping indicator of unknown type '{indicator.kind}'")
            continue
        try:
            stix_indicator = _build(
                stix2.Indicator,
                name=indicator.value,
                description=indicator.description,
                pattern=STIX_PATTERNS[kind].format(_pattern_literal(indicator.value)),
                pattern_type='stix',
                valid_from=now,
            )
        except STIXError as e:
            logger.warning(f"Skipping indicator '{indicator.value}': {e}")
            continue
        add(stix_indicator, indicator.value)

    for relationship in result.relationships:
        source_ref = refs.get(relationship.source)
        target_ref = refs.get(relationship.target)
        if not source_ref or not target_ref:
            logger.warning(
                f"Skipping relationship {relationship.source} -> {relationship.target}: "
                f"unresolved reference"
            )
            continue
        try:
            objects.append(stix2.Relationship(
                source_ref=source_ref,
                relationship_type=relationship.relationship_type,
                target_ref=target_ref,
            ))
        except STIXError as e:
            logger.warning(f"Skipping relationship {relationship.source} -> {relationship.target}: {e}")

    return stix2.Bundle(*objects, allow_custom=True)


def write_stix_bundle(result: ExtractionResult, path: PathLike) -> Path:
    """Write the STIX 2.1 bundle of a result to a file."""
    output_path = Path(path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    bundle = to_stix_bundle(result)
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(bundle.serialize(pretty=True))

    logger.info(f"Wrote STIX bundle to {output_path}")
    return output_path
