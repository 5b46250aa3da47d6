"""Data contract of one extraction result."""

import json
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from cti_extractor.indicators import IndicatorKind, defang


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Entity(_Record):
    """Threat actor, victim or malware entry."""

    id: str
    kind: str = Field(alias='type')
    name: Optional[str] = None
    description: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.id


class Technique(_Record):
    """ATT&CK-style technique reference. The identifier is not checked locally."""

    technique_id: str
    technique_name: str
    description: Optional[str] = None


class Indicator(_Record):
    """An IoC as extracted. ``value`` is the raw, possibly live, string."""

    kind: str = Field(alias='type')
    value: str
    description: Optional[str] = None

    @property
    def indicator_kind(self) -> Optional[IndicatorKind]:
        return IndicatorKind.from_tag(self.kind)

    @property
    def display_value(self) -> str:
        return defang(self.value)


class Relationship(_Record):
    source: str
    target: str
    relationship_type: str


class ExtractionResult(_Record):
    """
    Structured intelligence produced by one extraction request.

    All six sequences are required but may be empty. Relationship endpoints
    are expected to name entities elsewhere in the result; this is not
    enforced, so consumers must tolerate dangling references.
    """

    threat_actors: Tuple[Entity, ...]
    victims: Tuple[Entity, ...]
    malware: Tuple[Entity, ...]
    ttps: Tuple[Technique, ...]
    indicators: Tuple[Indicator, ...]
    relationships: Tuple[Relationship, ...]

    @classmethod
    def empty(cls) -> 'ExtractionResult':
        return cls(threat_actors=(), victims=(), malware=(), ttps=(),
                   indicators=(), relationships=())

    @classmethod
    def from_json(cls, text: str) -> 'ExtractionResult':
        return cls.model_validate_json(text)

    def to_dict(self) -> dict:
        return self.model_dump(mode='json', by_alias=True, exclude_none=True)

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def defanged(self) -> 'ExtractionResult':
        """Return a copy whose indicator values are defanged."""
        indicators = tuple(
            indicator.model_copy(update={'value': defang(indicator.value)})
            for indicator in self.indicators
        )
        return self.model_copy(update={'indicators': indicators})

    def entity_label(self, ref: str) -> str:
        """
        Resolve a relationship endpoint to a display label.

        Matches entity ids and names, technique ids and names, and indicator
        values. Unresolved references are returned unchanged.
        """
        for entity in self.threat_actors + self.victims + self.malware:
            if ref in (entity.id, entity.name):
                return entity.label
        for technique in self.ttps:
            if ref in (technique.technique_id, technique.technique_name):
                return f"{technique.technique_id} {technique.technique_name}"
        for indicator in self.indicators:
            if ref == indicator.value:
                return indicator.value
        return ref

    def counts(self) -> dict:
        return {
            'threat_actors': len(self.threat_actors),
            'victims': len(self.victims),
            'malware': len(self.malware),
            'ttps': len(self.ttps),
            'indicators': len(self.indicators),
            'relationships': len(self.relationships),
        }
