# remediation_handler/models/remediation.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Literal


class RemediationPolicyEntry(BaseModel):
    """One entry of the remediation actions annotation."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    request: str = Field(..., description="Name of the check to execute")
    occurrences: List[int] = Field(default_factory=list)
    severities: List[int] = Field(default_factory=list)
    subscriptions: List[str] = Field(default_factory=list)

    @field_validator('occurrences', 'severities', 'subscriptions', mode='before')
    @classmethod
    def null_as_empty(cls, v):
        # "subscriptions": null still falls back to the entity subscription
        return v if v is not None else []


class MatchResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry: RemediationPolicyEntry
    subscriptions: List[str]  # resolved: explicit list, or the entity subscription

    @property
    def action(self) -> str:
        return self.entry.request


class ExecutionRequest(BaseModel):
    """Body of POST /api/core/v2/namespaces/:namespace/checks/:check/execute"""
    check: str
    subscriptions: List[str]


class AccessToken(BaseModel):
    """Body returned by GET /auth"""
    model_config = ConfigDict(extra='ignore')

    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None


class DispatchResult(BaseModel):
    action: str
    namespace: str
    subscriptions: List[str]
    url: str
    status_code: int
    body: str


class RemediationOutcome(BaseModel):
    check_name: str
    entity_name: str
    namespace: str
    status: Literal["no_policy", "no_match", "dispatched"]
    dispatch: Optional[DispatchResult] = None
