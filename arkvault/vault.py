"""Vault settings and configuration as stored in a manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

from arkvault.keys import KeyKind, PublicKey, SecretKey
from arkvault.objects import ObjectType


class _Unset(Enum):
    UNSET = "unset"


_UNSET = _Unset.UNSET


@dataclass(frozen=True)
class VaultModification:
    """Changes to apply to a vault; fields left unset are kept as they are."""

    active: Union[bool, _Unset] = _UNSET
    bridge: Union[Optional[PublicKey], _Unset] = _UNSET
    name: Union[str, _Unset] = _UNSET
    description: Union[Optional[str], _Unset] = _UNSET

    def is_empty(self) -> bool:
        """True when the request changes nothing."""
        return (
            self.active is _UNSET
            and self.bridge is _UNSET
            and self.name is _UNSET
            and self.description is _UNSET
        )


def _new_vault_key() -> SecretKey:
    return SecretKey.random(KeyKind.VAULT)


@dataclass(kw_only=True)
class VaultCreationSettings:
    """What is needed to create a new vault; a fresh vault key is made for it."""

    name: str
    object_type: ObjectType
    description: Optional[str] = None
    bridge: Optional[PublicKey] = None
    active: bool = True
    vault_key: SecretKey = field(default_factory=_new_vault_key, repr=False)

    def __post_init__(self) -> None:
        self.name = str(self.name)
        if self.vault_key.kind is not KeyKind.VAULT:
            raise ValueError("vault_key must be a vault key")


@dataclass
class VaultConfig:
    """A vault as recorded in an ark's manifest."""

    address: PublicKey
    created: datetime
    last_modified: datetime
    name: str
    description: Optional[str]
    active: bool
    bridge: Optional[PublicKey]
    object_type: ObjectType

    @classmethod
    def from_settings(cls, settings: VaultCreationSettings) -> VaultConfig:
        """Build the configuration of a newly created vault."""
        now = datetime.now(timezone.utc)
        return cls(
            address=settings.vault_key.public_key,
            created=now,
            last_modified=now,
            name=settings.name,
            description=settings.description,
            active=settings.active,
            bridge=settings.bridge,
            object_type=settings.object_type,
        )

    def apply(self, request: VaultModification) -> None:
        """Apply the fields set in ``request``."""
        if request.name is not _UNSET:
            self.name = request.name
        if request.description is not _UNSET:
            self.description = request.description
        if request.active is not _UNSET:
            self.active = request.active
        if request.bridge is not _UNSET:
            self.bridge = request.bridge