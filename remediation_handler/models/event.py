# remediation_handler/models/event.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, Optional


class ObjectMeta(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    name: str = Field(..., description="Name of the check or entity")
    namespace: str = Field("default", description="Sensu namespace")
    annotations: Dict[str, str] = Field(default_factory=dict)

    @field_validator('annotations', mode='before')
    @classmethod
    def null_annotations(cls, v):
        # Sensu serialises an empty map as null
        return v if v is not None else {}


class Check(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    metadata: ObjectMeta
    status: int = Field(0, description="Severity code: 0 OK, 1 warning, 2 critical, >2 unknown")
    occurrences: int = Field(0, description="Consecutive results with the current status")


class Entity(BaseModel):
    model_config = ConfigDict(frozen=True, extra='ignore')

    metadata: ObjectMeta


class Event(BaseModel):
    """
    A Sensu event as delivered to handlers. Only the fields the remediation
    decision needs are modelled; everything else in the document is ignored.
    """
    model_config = ConfigDict(frozen=True, extra='ignore')

    check: Check
    entity: Entity

    @property
    def check_name(self) -> str:
        return self.check.metadata.name

    @property
    def annotations(self) -> Dict[str, str]:
        return self.check.metadata.annotations

    @property
    def entity_name(self) -> str:
        return self.entity.metadata.name

    @property
    def namespace(self) -> str:
        return self.entity.metadata.namespace

    def annotation(self, key: str) -> Optional[str]:
        return self.annotations.get(key)
