"""
Tri-state credential values used for duplicate checks and partial updates.

Every optional field of a candidate is one of:
  UNSET  - the caller said nothing about the field,
  None   - the field is explicitly absent (stored as NULL),
  str    - the field holds exactly this value.
"""
from dataclasses import dataclass, fields, replace
from typing import Union

from .credential import (
    CONTENT_FIELDS,
    DEFAULT_ACCOUNT_TYPE,
    DEFAULT_STATUS,
    OPTIONAL_FIELDS,
    Credential,
)


class _Unset:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNSET"


UNSET = _Unset()

OptionalValue = Union[str, None, _Unset]


@dataclass(frozen=True)
class CredentialCandidate:
    platform: str
    username: str
    password: str
    account_identity: str
    account_type: str = DEFAULT_ACCOUNT_TYPE
    status: str = DEFAULT_STATUS
    account_name: OptionalValue = UNSET
    url: OptionalValue = UNSET
    special_pin: OptionalValue = UNSET
    recovery_number: OptionalValue = UNSET
    recovery_email: OptionalValue = UNSET

    @classmethod
    def from_mapping(cls, data: dict) -> "CredentialCandidate":
        """Builds a candidate from model-named keys; absent optional keys stay UNSET."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_credential(cls, credential: Credential) -> "CredentialCandidate":
        return cls(**credential.content())

    def overlay(self, changes: dict) -> "CredentialCandidate":
        """Post-update view: keys present in `changes` win, everything else is kept."""
        applicable = {key: value for key, value in changes.items() if key in CONTENT_FIELDS}
        return replace(self, **applicable)

    def resolved(self) -> "CredentialCandidate":
        """Full record view where an unset optional field means NULL."""
        unset = {name: None for name in OPTIONAL_FIELDS if getattr(self, name) is UNSET}
        return replace(self, **unset) if unset else self

    def criteria(self) -> dict:
        """Field constraints for an exact-match lookup; UNSET fields impose none."""
        return {
            name: getattr(self, name)
            for name in CONTENT_FIELDS
            if getattr(self, name) is not UNSET
        }

    def as_dict(self) -> dict:
        return {name: getattr(self, name) for name in CONTENT_FIELDS}


def blank_optionals_to_none(data: dict) -> dict:
    """Form and CSV inputs carry absence as an empty string; store it as NULL."""
    cleaned = dict(data)
    for name in OPTIONAL_FIELDS:
        if name in cleaned and cleaned[name] == "":
            cleaned[name] = None
    return cleaned
