import copy

import pytest

from cti_extractor.extraction import ExtractionResult

SAMPLE_PAYLOAD = {
    'threat_actors': [
        {'id': 'actor-1', 'type': 'threat-actor', 'name': 'APT-41',
         'description': 'Chinese state-sponsored group'},
    ],
    'victims': [
        {'id': 'victim-1', 'type': 'identity', 'name': 'Medico Corp'},
    ],
    'malware': [
        {'id': 'malware-1', 'type': 'malware', 'name': 'ShadowLink',
         'description': 'Customized backdoor'},
    ],
    'ttps': [
        {'technique_id': 'T1566', 'technique_name': 'Phishing',
         'description': 'Initial access through spearphishing'},
        {'technique_id': 'T1059.001', 'technique_name': 'PowerShell'},
    ],
    'indicators': [
        {'type': 'ipv4-addr', 'value': '45.138.22.109', 'description': 'Primary beacon'},
        {'type': 'domain-name', 'value': 'secure.health-research-portal.org'},
        {'type': 'file-hash-md5', 'value': 'a9b8c7d6e5f43210987654321fedcba0'},
        {'type': 'url', 'value': 'http://dev-ops.cloud-service-api.com/stage'},
        {'type': 'email-addr', 'value': 'ops@health-research-portal.org'},
        {'type': 'ipv6-addr', 'value': '2001:db8::1'},
    ],
    'relationships': [
        {'source': 'actor-1', 'target': 'malware-1', 'relationship_type': 'uses'},
        {'source': 'APT-41', 'target': 'Medico Corp', 'relationship_type': 'targets'},
        {'source': '45.138.22.109', 'target': 'ShadowLink', 'relationship_type': 'indicates'},
        {'source': 'APT-41', 'target': 'Unknown Group', 'relationship_type': 'related-to'},
    ],
}


@pytest.fixture
def sample_payload():
    return copy.deepcopy(SAMPLE_PAYLOAD)


@pytest.fixture
def sample_result(sample_payload):
    return ExtractionResult.model_validate(sample_payload)


@pytest.fixture
def empty_result():
    return ExtractionResult.empty()
