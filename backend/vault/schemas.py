# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the vault endpoints."""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field


# -- Requests --------------------------------------------------------------
# Strength and breach annotations are always derived server-side from the
# password; they are never accepted from the client.


class CredentialCreate(BaseModel):
    name: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
    url: Optional[str] = None
    notes: Optional[str] = None
    category: str = "other"


class CredentialUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    username: Optional[str] = Field(default=None, min_length=1)
    password: Optional[str] = Field(default=None, min_length=1)  # triggers re-scoring
    url: Optional[str] = None
    notes: Optional[str] = None
    category: Optional[str] = None


# -- Responses -------------------------------------------------------------
# The password itself is only returned by GET /vault/items/{id}/reveal.


class CredentialResponse(BaseModel):
    id: str
    name: str
    username: str
    url: Optional[str]
    notes: Optional[str]
    category: str
    strength: Optional[int]
    strength_label: Optional[str]
    is_compromised: bool
    breach_count: Optional[int]
    breach_status: str
    last_checked: Optional[datetime]
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CredentialListResponse(BaseModel):
    items: List[CredentialResponse]


class RevealResponse(BaseModel):
    password: str


class RecheckResponse(BaseModel):
    total: int
    clean: int
    compromised: int
    unknown: int


class ImportResponse(BaseModel):
    imported: int
    skipped_invalid: int
