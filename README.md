# arkvault

`arkvault` holds the data model behind a backup *ark*: an owner's collection
of vaults, described by a manifest and guarded by a family of typed keys. It
is pure Python with no runtime dependencies beyond the standard library.

## What is in the package

- **`arkvault.keys`** — BLS12-381 keys tagged with a `KeyKind`
  (`ARK`, `VAULT`, `WORKER`, `BRIDGE`, `HELM`, `DATA`).
  - `bech32m_encode(hrp, data)` and `bech32m_decode(text)`; decoding accepts
    both bech32 and bech32m checksums and raises `Bech32Error` on bad input.
  - `PublicKey` holds a 48-byte compressed G1 point. `PublicKey.parse(kind, text)`
    reads the kind's bech32 form and checks that the point is on the curve and
    in the prime-order subgroup; `str()` gives the bech32 form (or hex for kinds
    with no public prefix).
  - `SecretKey` holds a scalar. `SecretKey.parse(kind, text)` reads it,
    `SecretKey.random(kind)` works only for kinds that allow random keys
    (`VAULT`, `WORKER`), `public_key` computes the matching `PublicKey`, and
    `repr()` never shows the key — `danger_to_string()` must be called to get
    its bech32 form.
  - `RetiredKey` pairs a public key with the moment it was retired and is
    ordered by that moment.
- **`arkvault.objects`** — `ObjectType`, what a vault stores: `FileSystem`,
  `Email` or `ObjectStorage`. `ObjectType.parse` matches keywords leniently
  (`"posix"`, `"win"`, `"imap"`, `"gmail"`, `"s3"`); `str()` gives a readable
  name such as `Email (IMAP)`.
- **`arkvault.vault`** — `VaultCreationSettings` (a fresh vault key is made
  for each), `VaultConfig.from_settings`, and `VaultModification` requests
  applied with `VaultConfig.apply`; fields left unset are kept.
- **`arkvault.manifest`** — `Manifest`, with `vault(address)` lookup and
  `update_worker(new_worker)`, which retires the previous worker key into
  `retired_workers` when it changes.
- **`arkvault.client_config`** — `ClientConfig`, which round-trips through an
  `autonomi:config:<network>` URL for the `mainnet`, `alphanet`, `testnet` and
  `local` networks, with bootstrap URLs (`BootstrapUrls`) or multiaddresses
  (`BootstrapMultiaddrs`), network id, `ignore_cache` and a bootstrap cache
  directory. A local network needs a `LocalNetworkConfig` (`rpc_url`,
  `payment_token_addr`, `data_payments_addr`). Errors raise `ConfigError`.
- **`arkvault.progress`** — `Progress.create(total, label)` returns an
  observer and its root `Task`. Tasks make children, change status
  (`start`, `stop`, `complete`, `failure`) and count work (`add` or `+=`).
  `Progress.latest()` returns a `Report` snapshot whose `total()`,
  `completed()` and `percent_completed()` sum over subtasks;
  `Progress.wait(timeout)` blocks until something changes. It is thread-safe.
- **`arkvault.receipt`** — `Receipt` of `LineItem` costs in atto tokens;
  `with_receipt(func)` runs `func(receipt)` and returns `(result, receipt)`, or
  raises `CostlyError` carrying the receipt so far. `ConfidentialString` hides
  its text until `reveal()`. Helpers for magic-number headers
  (`serialize_with_header`, `deserialize_with_header`), timestamps
  (`timestamp_to_parts`, `timestamp_from_parts`) and UUID halves
  (`uuid_to_pair`, `uuid_from_pair`).
- **`arkvault.diffing`** — `diff_maps(old_map, new_map, compare_values)`
  sorts keys into a `MapDiff` of added, removed, modified and unchanged.
- **`arkvault.engine`** — `Ark.from_manifest` and `Vault.from_config` build a
  local view; `Ark.apply_manifest` and `Vault.apply_config` absorb newer data
  and return how many things changed.

## Installation

```
pip install arkvault
```

## Examples

Client configuration:

```python
from arkvault.client_config import ClientConfig

config = ClientConfig.parse("autonomi:config:mainnet")
print(config.friendly())   # MainNet
print(config)              # autonomi:config:mainnet
```

Object types:

```python
from arkvault.objects import ObjectType

print(ObjectType.parse("IMAP"))   # Email (IMAP)
```

Keys:

```python
from arkvault.keys import KeyKind, PublicKey, SecretKey

worker = SecretKey.random(KeyKind.WORKER)
address = str(worker.public_key)            # starts with "arkworkerpub1"
assert PublicKey.parse(KeyKind.WORKER, address) == worker.public_key
```

Progress:

```python
from arkvault.progress import Progress

progress, task = Progress.create(1, "Backup")
upload = task.child(2, "Upload")
upload += 1
report = progress.latest()
print(report.total(), report.completed())   # 3 1
```

Receipts:

```python
from arkvault.receipt import with_receipt

def work(receipt):
    receipt.add(5)
    return "done"

result, receipt = with_receipt(work)
print(result, receipt.total_cost())   # done 5
```

Map differences:

```python
from arkvault.diffing import Comparison, diff_maps

diff = diff_maps(
    {"a": 1, "b": 2},
    {"b": 3, "c": 4},
    lambda old, new: Comparison.EQUIVALENT if old == new else Comparison.MODIFIED,
)
print(diff.added, diff.removed, diff.modified)   # {'c'} {'a'} {'b'}
```

## What the package does not do

It is a data model only. It does not connect to any network, store or fetch
manifests, registers or scratchpads, encrypt or decrypt manifests or keyrings,
derive child keys, or turn a mnemonic into keys. `ClientConfig` describes a
connection but does not open one. There is no command-line program.

## Running the tests

```
pip install -e ".[test]"
pytest
```