"""Typed BLS12-381 keys with bech32m text encoding."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import cached_property

PUBLIC_KEY_LENGTH = 48
SECRET_KEY_LENGTH = 32

# --- bech32 / bech32m -------------------------------------------------------

_CHARSET = "qpzry9x8gf2tvdw0s3jn54khce6mua7l"
_CHARSET_INDEX = {c: i for i, c in enumerate(_CHARSET)}
_BECH32_CONST = 1
_BECH32M_CONST = 0x2BC830A3
_POLYMOD_GENERATORS = (0x3B6A57B2, 0x26508E6D, 0x1EA119FA, 0x3D4233DD, 0x2A1462B3)
_CHECKSUM_LENGTH = 6


class Bech32Error(ValueError):
    """Raised for malformed bech32 text or unencodable input."""


def _polymod(values: list[int]) -> int:
    chk = 1
    for value in values:
        top = chk >> 25
        chk = (chk & 0x1FFFFFF) << 5 ^ value
        for i, generator in enumerate(_POLYMOD_GENERATORS):
            if (top >> i) & 1:
                chk ^= generator
    return chk


def _hrp_expand(hrp: str) -> list[int]:
    return [ord(c) >> 5 for c in hrp] + [0] + [ord(c) & 31 for c in hrp]


def _convert_bits(data, from_bits: int, to_bits: int, pad: bool) -> list[int]:
    acc = 0
    bits = 0
    out = []
    max_value = (1 << to_bits) - 1
    max_acc = (1 << (from_bits + to_bits - 1)) - 1
    for value in data:
        acc = ((acc << from_bits) | value) & max_acc
        bits += from_bits
        while bits >= to_bits:
            bits -= to_bits
            out.append((acc >> bits) & max_value)
    if pad:
        if bits:
            out.append((acc << (to_bits - bits)) & max_value)
    elif bits >= from_bits or (acc << (to_bits - bits)) & max_value:
        raise Bech32Error("invalid padding")
    return out


def _check_hrp(hrp: str) -> None:
    if not 1 <= len(hrp) <= 83:
        raise Bech32Error(f"invalid human-readable part length: {len(hrp)}")
    if any(not 33 <= ord(c) <= 126 for c in hrp):
        raise Bech32Error("invalid character in human-readable part")


def _is_mixed_case(text: str) -> bool:
    return text.lower() != text and text.upper() != text


def bech32m_encode(hrp: str, data: bytes) -> str:
    """Encode bytes under a human-readable prefix with a bech32m checksum."""
    _check_hrp(hrp)
    if _is_mixed_case(hrp):
        raise Bech32Error("mixed case in human-readable part")
    hrp = hrp.lower()
    values = _convert_bits(data, 8, 5, True)
    polymod = _polymod(_hrp_expand(hrp) + values + [0] * _CHECKSUM_LENGTH) ^ _BECH32M_CONST
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(_CHECKSUM_LENGTH)]
    return hrp + "1" + "".join(_CHARSET[v] for v in values + checksum)


def bech32m_decode(text: str) -> tuple[str, bytes]:
    """Decode bech32 text into its lower-case prefix and payload bytes.

    Both the bech32 and the bech32m checksum are accepted.
    """
    if any(not 33 <= ord(c) <= 126 for c in text):
        raise Bech32Error("invalid character in bech32 string")
    if _is_mixed_case(text):
        raise Bech32Error("mixed case in bech32 string")
    text = text.lower()
    separator = text.rfind("1")
    if separator < 1:
        raise Bech32Error("missing human-readable part or separator")
    if len(text) - separator - 1 < _CHECKSUM_LENGTH:
        raise Bech32Error("checksum too short")
    hrp = text[:separator]
    _check_hrp(hrp)
    try:
        values = [_CHARSET_INDEX[c] for c in text[separator + 1 :]]
    except KeyError as exc:
        raise Bech32Error(f"invalid data character {exc.args[0]!r}") from None
    if _polymod(_hrp_expand(hrp) + values) not in (_BECH32_CONST, _BECH32M_CONST):
        raise Bech32Error("invalid checksum")
    return hrp, bytes(_convert_bits(values[:-_CHECKSUM_LENGTH], 5, 8, False))


# --- BLS12-381 G1 -----------------------------------------------------------

_P = 0x1A0111EA397FE69A4B1BA7B6434BACD764774B84F38512BF6730D2A0F6B0F6241EABFFFEB153FFFFB9FEFFFFFFFFAAAB
_R = 0x73EDA753299D7D483339D80809A1D80553BDA402FFFE5BFEFFFFFFFF00000001
_GENERATOR = (
    0x17F1D3A73197D7942695638C4FA9AC0FC3688C4F9774B905A14E3A3F171BAC586C55E83FF97A1AEFFB3AF00ADB22C6BB,
    0x08B3F481E3AAA0F1A09E30ED741D8AE4FCF5E095D5D00AF600DB18CB2C04B3EDD03CC744A2888AE40CAA232946C5E7E1,
    1,
)
_INFINITY = (1, 1, 0)
_HALF_P = (_P - 1) // 2


def _double(point):
    x, y, z = point
    if z == 0 or y == 0:
        return _INFINITY
    a = x * x % _P
    b = y * y % _P
    c = b * b % _P
    d = 2 * ((x + b) ** 2 - a - c) % _P
    e = 3 * a % _P
    f = e * e % _P
    x3 = (f - 2 * d) % _P
    y3 = (e * (d - x3) - 8 * c) % _P
    z3 = 2 * y * z % _P
    return (x3, y3, z3)


def _add(first, second):
    x1, y1, z1 = first
    x2, y2, z2 = second
    if z1 == 0:
        return second
    if z2 == 0:
        return first
    z1z1 = z1 * z1 % _P
    z2z2 = z2 * z2 % _P
    u1 = x1 * z2z2 % _P
    u2 = x2 * z1z1 % _P
    s1 = y1 * z2 * z2z2 % _P
    s2 = y2 * z1 * z1z1 % _P
    if u1 == u2:
        return _double(first) if s1 == s2 else _INFINITY
    h = (u2 - u1) % _P
    r = (s2 - s1) % _P
    hh = h * h % _P
    hhh = h * hh % _P
    v = u1 * hh % _P
    x3 = (r * r - hhh - 2 * v) % _P
    y3 = (r * (v - x3) - s1 * hhh) % _P
    z3 = h * z1 * z2 % _P
    return (x3, y3, z3)


def _multiply(point, scalar: int):
    result = _INFINITY
    for bit in bin(scalar)[2:]:
        result = _double(result)
        if bit == "1":
            result = _add(result, point)
    return result


def _compress(point) -> bytes:
    x, y, z = point
    if z == 0:
        return bytes([0xC0]) + bytes(PUBLIC_KEY_LENGTH - 1)
    z_inv = pow(z, -1, _P)
    z_inv2 = z_inv * z_inv % _P
    ax = x * z_inv2 % _P
    ay = y * z_inv2 * z_inv % _P
    encoded = bytearray(ax.to_bytes(PUBLIC_KEY_LENGTH, "big"))
    encoded[0] |= 0x80
    if ay > _HALF_P:
        encoded[0] |= 0x20
    return bytes(encoded)


def _decompress(data: bytes):
    if len(data) != PUBLIC_KEY_LENGTH:
        raise ValueError(f"invalid key len: [{len(data)}] != [{PUBLIC_KEY_LENGTH}]")
    flags = data[0]
    if not flags & 0x80:
        raise ValueError("public key must be in compressed form")
    sign = bool(flags & 0x20)
    x = int.from_bytes(bytes([flags & 0x1F]) + data[1:], "big")
    if flags & 0x40:
        if sign or x:
            raise ValueError("invalid encoding of the point at infinity")
        return _INFINITY
    if x >= _P:
        raise ValueError("public key coordinate out of range")
    y_squared = (x * x * x + 4) % _P
    y = pow(y_squared, (_P + 1) // 4, _P)
    if y * y % _P != y_squared:
        raise ValueError("public key is not on the curve")
    if (y > _HALF_P) != sign:
        y = _P - y
    point = (x, y, 1)
    if _multiply(point, _R)[2] != 0:
        raise ValueError("public key is not in the prime-order subgroup")
    return point


# --- typed keys ---------------------------------------------------------------


class KeyKind(Enum):
    """What a key is for, with its bech32 prefixes and whether it may be random."""

    ARK = ("arkaddr", None, False)
    VAULT = ("arkvaultaddr", None, True)
    WORKER = ("arkworkerpub", "arkworkersec", True)
    BRIDGE = ("arkbridgepub", "arkbridgesec", False)
    HELM = (None, "arkhelmsec", False)
    DATA = (None, "arkdatasec", False)

    def __init__(self, public_hrp, secret_hrp, allows_random):
        self.public_hrp = public_hrp
        self.secret_hrp = secret_hrp
        self.allows_random = allows_random


def _check_hrp_matches(found: str, expected: str) -> None:
    if found != expected:
        raise ValueError(f"hrp [{found}] != [{expected}]")


@dataclass(frozen=True)
class PublicKey:
    """A compressed G1 public key of a given kind."""

    kind: KeyKind
    data: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "data", bytes(self.data))
        if len(self.data) != PUBLIC_KEY_LENGTH:
            raise ValueError(f"invalid key len: [{len(self.data)}] != [{PUBLIC_KEY_LENGTH}]")

    @classmethod
    def from_bytes(cls, kind: KeyKind, data: bytes) -> PublicKey:
        """Validate compressed point bytes and wrap them."""
        _decompress(bytes(data))
        return cls(kind, data)

    @classmethod
    def parse(cls, kind: KeyKind, text: str) -> PublicKey:
        """Parse the bech32 form of a public key of ``kind``."""
        if kind.public_hrp is None:
            raise ValueError(f"{kind.name} public keys have no text form")
        hrp, data = bech32m_decode(text)
        _check_hrp_matches(hrp, kind.public_hrp)
        if len(data) != PUBLIC_KEY_LENGTH:
            raise ValueError(f"invalid key len: [{len(data)}] != [{PUBLIC_KEY_LENGTH}]")
        return cls.from_bytes(kind, data)

    def __str__(self) -> str:
        if self.kind.public_hrp is None:
            return self.data.hex()
        return bech32m_encode(self.kind.public_hrp, self.data)


@dataclass(frozen=True, repr=False)
class SecretKey:
    """A BLS12-381 secret scalar of a given kind."""

    kind: KeyKind
    scalar: int

    def __post_init__(self) -> None:
        if not 0 <= self.scalar < _R:
            raise ValueError("secret key out of range")

    @classmethod
    def from_bytes(cls, kind: KeyKind, data: bytes) -> SecretKey:
        """Build a key from 32 big-endian bytes."""
        if len(data) != SECRET_KEY_LENGTH:
            raise ValueError(f"invalid key len: [{len(data)}] != [{SECRET_KEY_LENGTH}]")
        return cls(kind, int.from_bytes(data, "big"))

    @classmethod
    def random(cls, kind: KeyKind) -> SecretKey:
        """Generate a fresh key; only kinds that allow random keys are accepted."""
        if not kind.allows_random:
            raise ValueError(f"{kind.name} keys cannot be generated randomly")
        return cls(kind, secrets.randbelow(_R - 1) + 1)

    @classmethod
    def parse(cls, kind: KeyKind, text: str) -> SecretKey:
        """Parse the bech32 form of a secret key of ``kind``."""
        if kind.secret_hrp is None:
            raise ValueError(f"{kind.name} secret keys have no text form")
        hrp, data = bech32m_decode(text)
        _check_hrp_matches(hrp, kind.secret_hrp)
        return cls.from_bytes(kind, data)

    def to_bytes(self) -> bytes:
        return self.scalar.to_bytes(SECRET_KEY_LENGTH, "big")

    @cached_property
    def public_key(self) -> PublicKey:
        return PublicKey(self.kind, _compress(_multiply(_GENERATOR, self.scalar)))

    def danger_to_string(self) -> str:
        """Reveal the key in its bech32 form."""
        if self.kind.secret_hrp is None:
            raise ValueError(f"{self.kind.name} secret keys have no text form")
        return bech32m_encode(self.kind.secret_hrp, self.to_bytes())

    def __repr__(self) -> str:
        return f"SecretKey(kind=KeyKind.{self.kind.name}, <redacted>)"


@dataclass(frozen=True, eq=False)
class RetiredKey:
    """A public key taken out of service; ordered by retirement time."""

    key: PublicKey
    retired_at: datetime

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RetiredKey):
            return NotImplemented
        return self.key == other.key and self.retired_at == other.retired_at

    def __hash__(self) -> int:
        return hash((self.key, self.retired_at))

    def __lt__(self, other: RetiredKey) -> bool:
        if not isinstance(other, RetiredKey):
            return NotImplemented
        return self.retired_at < other.retired_at

    def __le__(self, other: RetiredKey) -> bool:
        if not isinstance(other, RetiredKey):
            return NotImplemented
        return self.retired_at <= other.retired_at

    def __gt__(self, other: RetiredKey) -> bool:
        if not isinstance(other, RetiredKey):
            return NotImplemented
        return self.retired_at > other.retired_at

    def __ge__(self, other: RetiredKey) -> bool:
        if not isinstance(other, RetiredKey):
            return NotImplemented
        return self.retired_at >= other.retired_at