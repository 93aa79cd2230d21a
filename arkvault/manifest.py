"""The manifest: the description of an ark and the vaults it holds."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from arkvault.keys import PublicKey, RetiredKey
from arkvault.vault import VaultConfig


@dataclass
class Manifest:
    """Everything an ark records about itself, its worker and its vaults."""

    ark_address: PublicKey
    created: datetime
    last_modified: datetime
    name: str
    description: Optional[str]
    authorized_worker: PublicKey
    retired_workers: set[RetiredKey] = field(default_factory=set)
    vaults: list[VaultConfig] = field(default_factory=list)

    def vault(self, address: PublicKey) -> Optional[VaultConfig]:
        """Return the vault configured under ``address``, or None.

        The returned configuration is the one held by the manifest, so
        changes made to it are changes to the manifest.
        """
        return next((v for v in self.vaults if v.address == address), None)

    def update_worker(self, new_worker: PublicKey) -> None:
        """Authorize ``new_worker``, retiring the previous worker key if it differs."""
        previous = self.authorized_worker
        self.authorized_worker = new_worker
        if previous == new_worker:
            return
        self.retired_workers.add(RetiredKey(previous, datetime.now(timezone.utc)))