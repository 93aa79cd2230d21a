from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from arkvault.engine import Ark, Vault
from arkvault.keys import KeyKind, SecretKey
from arkvault.manifest import Manifest
from arkvault.objects import FileSystem, ObjectType
from arkvault.vault import VaultConfig

MOMENT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
LATER = MOMENT + timedelta(hours=1)


@pytest.fixture(scope="module")
def keys():
    return {
        "ark": SecretKey(KeyKind.ARK, 5).public_key,
        "worker": SecretKey(KeyKind.WORKER, 7).public_key,
        "v1": SecretKey(KeyKind.VAULT, 31).public_key,
        "v2": SecretKey(KeyKind.VAULT, 32).public_key,
    }


def _config(address, name="docs", active=True, description=None):
    return VaultConfig(
        address=address,
        created=MOMENT,
        last_modified=MOMENT,
        name=name,
        description=description,
        active=active,
        bridge=None,
        object_type=ObjectType(FileSystem.POSIX),
    )


def _manifest(keys, vaults, name="home", description=None):
    return Manifest(
        ark_address=keys["ark"],
        created=MOMENT,
        last_modified=MOMENT,
        name=name,
        description=description,
        authorized_worker=keys["worker"],
        vaults=list(vaults),
    )


def test_vault_from_config(keys):
    vault = Vault.from_config(_config(keys["v1"], name="mail"))
    assert vault.id == keys["v1"]
    assert vault.name == "mail"
    assert vault.active is True
    assert vault.created == MOMENT


def test_vault_apply_identical_config_changes_nothing(keys):
    config = _config(keys["v1"])
    vault = Vault.from_config(config)
    assert vault.apply_config(config) == 0
    assert vault == Vault.from_config(config)


def test_vault_apply_config_counts_fields(keys):
    vault = Vault.from_config(_config(keys["v1"]))
    changed = replace(
        _config(keys["v1"], name="mail", active=False), last_modified=LATER
    )
    assert vault.apply_config(changed) == 3
    assert vault == Vault.from_config(changed)


def test_ark_from_manifest(keys):
    ark = Ark.from_manifest(_manifest(keys, [_config(keys["v1"])]))
    assert ark.address == keys["ark"]
    assert ark.name == "home"
    assert set(ark.vaults) == {keys["v1"]}


def test_apply_same_manifest_is_no_change(keys):
    manifest = _manifest(keys, [_config(keys["v1"])])
    ark = Ark.from_manifest(manifest)
    assert ark.apply_manifest(_manifest(keys, [_config(keys["v1"])])) == 0


def test_apply_manifest_field_changes(keys):
    ark = Ark.from_manifest(_manifest(keys, []))
    assert ark.apply_manifest(_manifest(keys, [], name="work", description="notes")) == 2
    assert ark.name == "work"
    assert ark.description == "notes"


def test_apply_manifest_adds_vault(keys):
    ark = Ark.from_manifest(_manifest(keys, [_config(keys["v1"])]))
    changes = ark.apply_manifest(
        _manifest(keys, [_config(keys["v1"]), _config(keys["v2"], name="mail")])
    )
    assert changes == 1
    assert ark.vaults[keys["v2"]].name == "mail"


def test_apply_manifest_removes_vault(keys):
    ark = Ark.from_manifest(
        _manifest(keys, [_config(keys["v1"]), _config(keys["v2"])])
    )
    assert ark.apply_manifest(_manifest(keys, [_config(keys["v2"])])) == 1
    assert set(ark.vaults) == {keys["v2"]}


def test_modified_vault_counts_once(keys):
    ark = Ark.from_manifest(_manifest(keys, [_config(keys["v1"])]))
    changed = _config(keys["v1"], name="archive", active=False, description="old")
    assert ark.apply_manifest(_manifest(keys, [changed])) == 1
    assert ark.vaults[keys["v1"]] == Vault.from_config(changed)


def test_apply_manifest_twice_is_idempotent(keys):
    ark = Ark.from_manifest(_manifest(keys, [_config(keys["v1"])]))
    target = _manifest(keys, [_config(keys["v2"])], name="work")
    first = ark.apply_manifest(target)
    assert first == 3
    assert ark.apply_manifest(target) == 0
    assert ark == Ark.from_manifest(target)