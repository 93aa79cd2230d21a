"""Local view of an ark, kept in step with its manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from arkvault.diffing import Comparison, diff_maps
from arkvault.keys import PublicKey
from arkvault.manifest import Manifest
from arkvault.vault import VaultConfig


@dataclass
class Vault:
    """The tracked state of one vault."""

    id: PublicKey
    name: str
    description: Optional[str]
    created: datetime
    last_modified: datetime
    active: bool

    @classmethod
    def from_config(cls, config: VaultConfig) -> Vault:
        """Build the tracked state of a vault from its manifest entry."""
        return cls(
            id=config.address,
            name=config.name,
            description=config.description,
            created=config.created,
            last_modified=config.last_modified,
            active=config.active,
        )

    def _differs(self, config: VaultConfig) -> bool:
        return (
            self.name != config.name
            or self.description != config.description
            or self.created != config.created
            or self.last_modified != config.last_modified
            or self.active != config.active
        )

    def apply_config(self, config: VaultConfig) -> int:
        """Take over the values of ``config``; returns how many fields changed."""
        changes = 0
        for attribute in ("name", "description", "created", "last_modified", "active"):
            value = getattr(config, attribute)
            if getattr(self, attribute) != value:
                setattr(self, attribute, value)
                changes += 1
        return changes


@dataclass
class Ark:
    """The tracked state of an ark and its vaults, keyed by vault address."""

    address: PublicKey
    created: datetime
    last_modified: datetime
    name: str
    description: Optional[str]
    vaults: dict[PublicKey, Vault] = field(default_factory=dict)

    @classmethod
    def from_manifest(cls, manifest: Manifest) -> Ark:
        """Build the tracked state of an ark from its manifest."""
        return cls(
            address=manifest.ark_address,
            created=manifest.created,
            last_modified=manifest.last_modified,
            name=manifest.name,
            description=manifest.description,
            vaults={c.address: Vault.from_config(c) for c in manifest.vaults},
        )

    def apply_manifest(self, manifest: Manifest) -> int:
        """Bring the ark in line with ``manifest``; returns the number of changes.

        Each changed ark field and each added, removed or modified vault
        counts as one change.
        """
        changes = 0
        for attribute in ("name", "description", "created", "last_modified"):
            value = getattr(manifest, attribute)
            if getattr(self, attribute) != value:
                setattr(self, attribute, value)
                changes += 1

        in_manifest = {c.address: c for c in manifest.vaults}
        diff = diff_maps(
            self.vaults,
            in_manifest,
            lambda vault, config: Comparison.MODIFIED
            if vault._differs(config)
            else Comparison.EQUIVALENT,
        )

        for vault_id in diff.added:
            self.vaults[vault_id] = Vault.from_config(in_manifest[vault_id])
            changes += 1
        for vault_id in diff.removed:
            del self.vaults[vault_id]
            changes += 1
        for vault_id in diff.modified:
            self.vaults[vault_id].apply_config(in_manifest[vault_id])
            changes += 1
        return changes