"""Network client configuration expressed as an ``autonomi:config:...`` URL."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union
from urllib.parse import parse_qsl, urlsplit

SCHEME = "autonomi"
PREFIX = "config"
RPC_URL_PARAM = "rpc_url"
PAYMENT_TOKEN_PARAM = "payment_token_addr"
DATA_PAYMENTS_PARAM = "data_payments_addr"
BOOTSTRAP_PEER_PARAM = "peer"
BOOTSTRAP_URL_PARAM = "bootstrap_url"
BOOTSTRAP_IGNORE_CACHE = "ignore_cache"
BOOTSTRAP_CACHE_PARAM = "bootstrap_cache_dir"
NETWORK_ID_PARAM = "network_id"


class ConfigError(ValueError):
    """Raised for an invalid client configuration or configuration URL."""


class Network(Enum):
    """The network a client connects to."""

    MAINNET = "mainnet"
    ALPHANET = "alphanet"
    TESTNET = "testnet"
    LOCAL = "local"


# --- URL helpers --------------------------------------------------------------

_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}
_FORM_SAFE = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789*-._")


def _split_scheme(text: str) -> tuple[str, str]:
    text = text.strip()
    scheme, sep, rest = text.partition(":")
    if not sep or not _SCHEME_RE.fullmatch(scheme):
        raise ConfigError(f"invalid url [{text}]: relative URL without a base")
    return scheme.lower(), rest


def _normalize_url(text: str) -> str:
    """Validate an absolute URL and bring it into canonical form."""
    scheme, rest = _split_scheme(text)
    if scheme not in _DEFAULT_PORTS:
        return f"{scheme}:{rest}"
    parts = urlsplit(f"{scheme}:{rest}")
    host = parts.hostname
    if not host:
        raise ConfigError(f"invalid url [{text}]: empty host")
    try:
        port = parts.port
    except ValueError:
        raise ConfigError(f"invalid url [{text}]: invalid port number") from None
    if ":" in host:
        host = f"[{host}]"
    userinfo = parts.netloc.rpartition("@")[0] if "@" in parts.netloc else ""
    netloc = f"{userinfo}@{host}" if userinfo else host
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    url = f"{scheme}://{netloc}{parts.path or '/'}"
    if parts.query:
        url += f"?{parts.query}"
    if parts.fragment:
        url += f"#{parts.fragment}"
    return url


def _form_encode(text: str) -> str:
    out = []
    for byte in text.encode("utf-8"):
        if byte in _FORM_SAFE:
            out.append(chr(byte))
        elif byte == 0x20:
            out.append("+")
        else:
            out.append(f"%{byte:02X}")
    return "".join(out)


# --- multiaddresses -----------------------------------------------------------

_VALUELESS = frozenset(
    {
        "quic", "quic-v1", "ws", "wss", "tls", "noise", "webtransport",
        "p2p-circuit", "webrtc", "webrtc-direct", "http", "https", "udt", "utp",
    }
)
_VALUED = frozenset({"dns", "dns4", "dns6", "dnsaddr", "p2p", "certhash", "sni", "ip6zone"})


def _normalize_multiaddr(text: str) -> str:
    """Validate a multiaddress and return its canonical text form."""
    if not text.startswith("/"):
        raise ConfigError(f"invalid multiaddr [{text}]: must begin with '/'")
    parts = text.split("/")[1:]
    if parts and parts[-1] == "":
        parts.pop()
    if not parts:
        raise ConfigError(f"invalid multiaddr [{text}]: empty")
    out: list[str] = []
    items = iter(parts)
    for proto in items:
        if proto == "ipfs":
            proto = "p2p"
        if proto in _VALUELESS:
            out.append(proto)
            continue
        value = next(items, None)
        if value is None or value == "":
            raise ConfigError(f"invalid multiaddr [{text}]: missing value for {proto}")
        if proto in ("ip4", "ip6"):
            try:
                address = ipaddress.ip_address(value)
            except ValueError:
                raise ConfigError(f"invalid multiaddr [{text}]: invalid {proto} address") from None
            if address.version != int(proto[-1]):
                raise ConfigError(f"invalid multiaddr [{text}]: invalid {proto} address")
            value = str(address)
        elif proto in ("tcp", "udp", "sctp", "dccp"):
            if not value.isdigit() or int(value) > 65535:
                raise ConfigError(f"invalid multiaddr [{text}]: invalid port [{value}]")
            value = str(int(value))
        elif proto not in _VALUED:
            raise ConfigError(f"invalid multiaddr [{text}]: unknown protocol [{proto}]")
        out.append(f"{proto}/{value}")
    return "/" + "/".join(out)


# --- configuration ------------------------------------------------------------


@dataclass(frozen=True)
class LocalNetworkConfig:
    """Connection details of a local development network."""

    rpc_url: str
    payment_token_addr: str
    data_payments_addr: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "rpc_url", _normalize_url(self.rpc_url))
        object.__setattr__(self, "payment_token_addr", str(self.payment_token_addr))
        object.__setattr__(self, "data_payments_addr", str(self.data_payments_addr))


@dataclass(frozen=True)
class BootstrapUrls:
    """Bootstrap peers are fetched from these URLs."""

    urls: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "urls", tuple(_normalize_url(u) for u in self.urls))


@dataclass(frozen=True)
class BootstrapMultiaddrs:
    """Bootstrap peers given directly as multiaddresses."""

    addresses: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "addresses", tuple(_normalize_multiaddr(a) for a in self.addresses)
        )


BootstrapPeers = Union[BootstrapUrls, BootstrapMultiaddrs]


def _parse_network_id(value: str) -> int:
    if not re.fullmatch(r"\+?[0-9]+", value) or int(value) > 255:
        raise ConfigError(f"invalid {NETWORK_ID_PARAM}: [{value}]")
    return int(value)


@dataclass(frozen=True)
class ClientConfig:
    """Which network to join and how to find its first peers."""

    network: Network
    local: Optional[LocalNetworkConfig] = None
    network_id: Optional[int] = None
    bootstrap_peers: Optional[BootstrapPeers] = None
    bootstrap_cache: Optional[Path] = field(default=None)
    ignore_cache: Optional[bool] = None

    def __post_init__(self) -> None:
        if self.network is Network.LOCAL and self.local is None:
            raise ConfigError("a local network needs a local network configuration")
        if self.network is not Network.LOCAL and self.local is not None:
            raise ConfigError("only a local network takes a local network configuration")
        if self.network_id is not None and not 0 <= self.network_id <= 255:
            raise ConfigError(f"invalid {NETWORK_ID_PARAM}: [{self.network_id}]")
        if self.bootstrap_cache is not None:
            object.__setattr__(self, "bootstrap_cache", Path(self.bootstrap_cache))

    @classmethod
    def parse(cls, text: str) -> ClientConfig:
        """Parse an ``autonomi:config:<network>?...`` URL."""
        scheme, rest = _split_scheme(text)
        if scheme != SCHEME:
            raise ConfigError(f"url scheme [{scheme}] != [{SCHEME}]")
        rest = rest.partition("#")[0]
        path, _, query = rest.partition("?")
        prefix = f"{PREFIX}:"
        if not path.startswith(prefix):
            raise ConfigError(f"path does not start with '{prefix}'")
        network_name = path[len(prefix):].strip().lower()

        rpc_url = payment_token_addr = data_payments_addr = None
        network_id = ignore_cache = bootstrap_cache = None
        bootstrap_peers: Optional[BootstrapPeers] = None

        for key, value in parse_qsl(query, keep_blank_values=True):
            if key == RPC_URL_PARAM:
                rpc_url = _normalize_url(value)
            elif key == PAYMENT_TOKEN_PARAM:
                payment_token_addr = value
            elif key == DATA_PAYMENTS_PARAM:
                data_payments_addr = value
            elif key == NETWORK_ID_PARAM:
                network_id = _parse_network_id(value)
            elif key == BOOTSTRAP_IGNORE_CACHE:
                ignore_cache = True
            elif key == BOOTSTRAP_CACHE_PARAM:
                bootstrap_cache = Path(value)
            elif key == BOOTSTRAP_URL_PARAM:
                url = _normalize_url(value)
                if bootstrap_peers is None:
                    bootstrap_peers = BootstrapUrls()
                if not isinstance(bootstrap_peers, BootstrapUrls):
                    raise ConfigError("cannot mix bootstrap peers and urls")
                bootstrap_peers = BootstrapUrls(bootstrap_peers.urls + (url,))
            elif key == BOOTSTRAP_PEER_PARAM:
                address = _normalize_multiaddr(value)
                if bootstrap_peers is None:
                    bootstrap_peers = BootstrapMultiaddrs()
                if not isinstance(bootstrap_peers, BootstrapMultiaddrs):
                    raise ConfigError("cannot mix bootstrap peers and urls")
                bootstrap_peers = BootstrapMultiaddrs(bootstrap_peers.addresses + (address,))

        try:
            network = Network(network_name)
        except ValueError:
            raise ConfigError(f"invalid network: [{path}]") from None

        local = None
        if network is Network.LOCAL:
            if rpc_url is None:
                raise ConfigError(f"{RPC_URL_PARAM} is missing")
            if payment_token_addr is None:
                raise ConfigError(f"{PAYMENT_TOKEN_PARAM} is missing")
            if data_payments_addr is None:
                raise ConfigError(f"{DATA_PAYMENTS_PARAM} is missing")
            local = LocalNetworkConfig(rpc_url, payment_token_addr, data_payments_addr)

        return cls(
            network=network,
            local=local,
            network_id=network_id,
            bootstrap_peers=bootstrap_peers,
            bootstrap_cache=bootstrap_cache,
            ignore_cache=ignore_cache,
        )

    def to_url(self) -> str:
        """Render the configuration as an ``autonomi:config:...`` URL."""
        pairs: list[tuple[str, Optional[str]]] = []
        if self.local is not None:
            pairs.append((RPC_URL_PARAM, self.local.rpc_url))
            pairs.append((PAYMENT_TOKEN_PARAM, self.local.payment_token_addr))
            pairs.append((DATA_PAYMENTS_PARAM, self.local.data_payments_addr))
        if isinstance(self.bootstrap_peers, BootstrapUrls):
            pairs.extend((BOOTSTRAP_URL_PARAM, u) for u in self.bootstrap_peers.urls)
        elif isinstance(self.bootstrap_peers, BootstrapMultiaddrs):
            pairs.extend((BOOTSTRAP_PEER_PARAM, a) for a in self.bootstrap_peers.addresses)
        if self.network_id is not None:
            pairs.append((NETWORK_ID_PARAM, str(self.network_id)))
        if self.ignore_cache is True:
            pairs.append((BOOTSTRAP_IGNORE_CACHE, None))
        if self.bootstrap_cache is not None:
            pairs.append((BOOTSTRAP_CACHE_PARAM, str(self.bootstrap_cache)))

        url = f"{SCHEME}:{PREFIX}:{self.network.value}"
        if pairs:
            url += "?" + "&".join(
                _form_encode(key) if value is None else f"{_form_encode(key)}={_form_encode(value)}"
                for key, value in pairs
            )
        return url

    def friendly(self) -> str:
        """A short human-readable name of the network."""
        if self.network is Network.MAINNET:
            return "MainNet"
        if self.network is Network.ALPHANET:
            return "AlphaNet"
        if self.network is Network.TESTNET:
            return "TestNet"
        parts = urlsplit(self.local.rpc_url)
        host = parts.hostname or "unknown"
        if ":" in host:
            host = f"[{host}]"
        try:
            port = parts.port
        except ValueError:
            port = None
        return f"Local ({host}{f':{port}' if port is not None else ''})"

    def __str__(self) -> str:
        return self.to_url()