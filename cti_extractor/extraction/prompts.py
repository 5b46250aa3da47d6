"""Instructions and response schema sent with every extraction request."""

SYSTEM_INSTRUCTION = """You are an elite Cyber Threat Intelligence (CTI) Analyst.
Your task is to ingest unstructured text and extract high-fidelity structured intelligence in STIX 2.1 format.

Analyze the text and identify:
1. Threat Actors: Groups, individuals, aliases.
2. Victims: Targeted industries, organizations, or regions.
3. Malware: Names, families, variants.
4. TTPs: MITRE ATT&CK techniques used (e.g., T1566, T1059).
5. Indicators of Compromise (IoCs): IPs, Domains, File Hashes, URLs, Emails.
6. Relationships: Link actors to malware, malware to indicators, actors to targets.

Extraction Rules:
- Only extract verifiable technical indicators.
- Deduplicate all entities.
- If an entity name is ambiguous, use the most common industry-standard version.
- Use STIX 2.1 naming conventions.
- Map TTPs to specific MITRE ATT&CK technique IDs where possible.
- Use these indicator types: ipv4-addr, domain-name, file-hash-md5, file-hash-sha1, file-hash-sha256, url, email-addr.
- Return ONLY valid JSON.
- DO NOT include conversational filler."""

PROMPT_PREFIX = "EXTRACT CTI DATA FROM THIS REPORT:\n\n"


def _string():
    return {'type': 'STRING'}


def _array_of(properties, required):
    return {
        'type': 'ARRAY',
        'items': {
            'type': 'OBJECT',
            'properties': {name: _string() for name in properties},
            'required': list(required),
        },
    }


RESPONSE_SCHEMA = {
    'type': 'OBJECT',
    'properties': {
        'threat_actors': _array_of(('id', 'type', 'name', 'description'), ('id', 'type', 'name')),
        'victims': _array_of(('id', 'type', 'name'), ('id', 'type', 'name')),
        'malware': _array_of(('id', 'type', 'name', 'description'), ('id', 'type', 'name')),
        'ttps': _array_of(('technique_id', 'technique_name', 'description'),
                          ('technique_id', 'technique_name')),
        'indicators': _array_of(('type', 'value', 'description'), ('type', 'value')),
        'relationships': _array_of(('source', 'target', 'relationship_type'),
                                   ('source', 'target', 'relationship_type')),
    },
    'required': ['threat_actors', 'victims', 'malware', 'indicators', 'relationships', 'ttps'],
}


def build_prompt(text: str) -> str:
    return f"{PROMPT_PREFIX}{text}"
