"""
Credential sum type.

A credential is either present (carries a bearer token) or absent. Callers
branch on the type, never on the truthiness of a token string.
"""

from typing import Dict, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class PresentCredential(BaseModel):
    """A usable bearer token"""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., min_length=1, repr=False)

    def auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


class AbsentCredential(BaseModel):
    """No credential is configured for the invoking context"""

    model_config = ConfigDict(frozen=True)

    def auth_headers(self) -> Dict[str, str]:
        return {}


Credential = Union[PresentCredential, AbsentCredential]


def credential_from_token(token: Optional[str]) -> Credential:
    """Build a credential from a stored token; empty or missing means absent."""
    if token:
        return PresentCredential(token=token)
    return AbsentCredential()
