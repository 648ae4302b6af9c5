# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""Pydantic request / response models for the risk endpoints."""

from typing import List

from pydantic import BaseModel


class StrengthRequest(BaseModel):
    password: str


class StrengthResponse(BaseModel):
    score: int
    label: str
    suggestions: List[str]


class GeneratedPasswordResponse(BaseModel):
    password: str
    strength: StrengthResponse


class SecurityScoreResponse(BaseModel):
    overall: int
    grade: str
    total: int
    strong: int
    weak: int
    compromised: int
    duplicate: int
    reused: int
    old: int


# -- Duplicates ------------------------------------------------------------
# Groups are reported by member only; the shared password is never echoed.


class DuplicateMember(BaseModel):
    id: str
    name: str
    username: str

    model_config = {"from_attributes": True}


class DuplicateGroup(BaseModel):
    size: int
    items: List[DuplicateMember]


class DuplicateGroupsResponse(BaseModel):
    groups: List[DuplicateGroup]
