from datetime import datetime, timezone

import pytest

from arkvault.keys import KeyKind, RetiredKey, SecretKey
from arkvault.manifest import Manifest
from arkvault.objects import FileSystem, ObjectType
from arkvault.vault import VaultConfig

MOMENT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _public(kind, scalar):
    return SecretKey(kind, scalar).public_key


@pytest.fixture(scope="module")
def worker_a():
    return _public(KeyKind.WORKER, 11)


@pytest.fixture(scope="module")
def worker_b():
    return _public(KeyKind.WORKER, 12)


@pytest.fixture(scope="module")
def vault_address():
    return _public(KeyKind.VAULT, 21)


@pytest.fixture(scope="module")
def other_vault_address():
    return _public(KeyKind.VAULT, 22)


def _vault(address, name="docs"):
    return VaultConfig(
        address=address,
        created=MOMENT,
        last_modified=MOMENT,
        name=name,
        description=None,
        active=True,
        bridge=None,
        object_type=ObjectType(FileSystem.POSIX),
    )


@pytest.fixture
def manifest(worker_a, vault_address):
    return Manifest(
        ark_address=_public(KeyKind.ARK, 5),
        created=MOMENT,
        last_modified=MOMENT,
        name="home",
        description=None,
        authorized_worker=worker_a,
        vaults=[_vault(vault_address)],
    )


def test_vault_found_by_address(manifest, vault_address):
    found = manifest.vault(vault_address)
    assert found is manifest.vaults[0]
    assert found.name == "docs"


def test_vault_missing_returns_none(manifest, other_vault_address):
    assert manifest.vault(other_vault_address) is None


def test_vault_changes_are_kept(manifest, vault_address):
    manifest.vault(vault_address).active = False
    assert manifest.vaults[0].active is False


def test_update_worker_same_key_retires_nothing(manifest, worker_a):
    manifest.update_worker(worker_a)
    assert manifest.authorized_worker == worker_a
    assert manifest.retired_workers == set()


def test_update_worker_retires_previous(manifest, worker_a, worker_b):
    before = datetime.now(timezone.utc)
    manifest.update_worker(worker_b)
    after = datetime.now(timezone.utc)
    assert manifest.authorized_worker == worker_b
    assert len(manifest.retired_workers) == 1
    (retired,) = manifest.retired_workers
    assert retired.key == worker_a
    assert before <= retired.retired_at <= after


def test_update_worker_twice_orders_retirements(manifest, worker_a, worker_b):
    manifest.update_worker(worker_b)
    manifest.update_worker(worker_a)
    assert manifest.authorized_worker == worker_a
    ordered = sorted(manifest.retired_workers)
    assert [r.key for r in ordered] == [worker_a, worker_b]
    assert all(isinstance(r, RetiredKey) for r in ordered)