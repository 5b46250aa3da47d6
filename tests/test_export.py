import csv
import json
from datetime import datetime, timezone

from cti_extractor.export import (
    clipboard_text,
    export_filename,
    to_stix_bundle,
    write_indicators_csv,
    write_json,
    write_stix_bundle,
)
from cti_extractor.extraction import ExtractionResult

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def test_export_filename_is_timestamped():
    assert export_filename(NOW) == 'stix-bundle-1704067200000.json'
    assert export_filename().startswith('stix-bundle-')


def test_write_json_saves_raw_result(tmp_path, sample_result):
    path = write_json(sample_result, tmp_path / 'downloads', now=NOW)

    assert path == tmp_path / 'downloads' / 'stix-bundle-1704067200000.json'
    saved = ExtractionResult.from_json(path.read_text(encoding='utf-8'))
    assert saved == sample_result
    assert saved.indicators[0].value == '45.138.22.109'


def test_clipboard_text_raw_and_defanged(sample_result):
    raw = json.loads(clipboard_text(sample_result))
    defanged = json.loads(clipboard_text(sample_result, defanged=True))

    assert raw['indicators'][0]['value'] == '45.138.22.109'
    assert defanged['indicators'][0]['value'] == '45[.]138[.]22[.]109'
    assert defanged['threat_actors'] == raw['threat_actors']


def test_indicators_csv(tmp_path, sample_result):
    path = write_indicators_csv(sample_result, tmp_path / 'iocs.csv', defanged=True)

    with open(path, newline='', encoding='utf-8') as f:
        rows = list(csv.DictReader(f))

    assert len(rows) == 6
    assert rows[0] == {
        'type': 'ipv4-addr',
        'value': '45[.]138[.]22[.]109',
        'valid': 'True',
        'description': 'Primary beacon',
    }
    assert rows[5]['valid'] == 'True'


def test_stix_bundle_contents(sample_result):
    bundle = json.loads(to_stix_bundle(sample_result).serialize())
    objects = bundle['objects']
    by_type = {}
    for obj in objects:
        by_type.setdefault(obj['type'], []).append(obj)

    assert bundle['type'] == 'bundle'
    assert len(by_type['threat-actor']) == 1
    assert by_type['identity'][0]['name'] == 'Medico Corp'
    assert by_type['malware'][0]['is_family'] is True
    assert [ap['external_references'][0]['external_id'] for ap in by_type['attack-pattern']] == [
        'T1566', 'T1059.001',
    ]
    patterns = [indicator['pattern'] for indicator in by_type['indicator']]
    assert "[ipv4-addr:value = '45.138.22.109']" in patterns
    assert "[file:hashes.MD5 = 'a9b8c7d6e5f43210987654321fedcba0']" in patterns
    assert "[email-addr:value = 'ops@health-research-portal.org']" in patterns
    assert len(patterns) == 5

    ids = {obj['id']: obj for obj in objects}
    relationships = by_type['relationship']
    assert len(relationships) == 3
    uses = relationships[0]
    assert uses['relationship_type'] == 'uses'
    assert ids[uses['source_ref']]['name'] == 'APT-41'
    assert ids[uses['target_ref']]['name'] == 'ShadowLink'


def test_stix_bundle_of_empty_result(empty_result):
    bundle = json.loads(to_stix_bundle(empty_result).serialize())
    assert bundle.get('objects', []) == []


def test_write_stix_bundle(tmp_path, sample_result):
    path = write_stix_bundle(sample_result, tmp_path / 'out' / 'bundle.json')
    assert json.loads(path.read_text(encoding='utf-8'))['type'] == 'bundle'
