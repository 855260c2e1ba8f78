"""Parse raw list bodies into canonical network prefixes."""

from __future__ import annotations

import ipaddress
import re
from dataclasses import dataclass
from typing import Iterator, Union

import structlog

IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

# Address characters plus an optional decimal prefix length. Anything else
# (zone ids, netmask notation, trailing words) is not a CIDR literal.
_CIDR_PATTERN = re.compile(r"^[0-9A-Fa-f:.]+(?:/[0-9]{1,3})?$")


@dataclass(frozen=True, order=True, slots=True)
class NetworkPrefix:
    """Canonical CIDR entry: host bits are always zero.

    Ordering follows the field order, so IPv4 sorts before IPv6, then by the
    packed address and finally by prefix length.
    """

    family: int
    address: bytes
    prefixlen: int

    @classmethod
    def from_network(cls, network: IPNetwork) -> "NetworkPrefix":
        return cls(network.version, network.network_address.packed, network.prefixlen)

    @property
    def network(self) -> IPNetwork:
        if self.family == 4:
            return ipaddress.IPv4Network((self.address, self.prefixlen))
        return ipaddress.IPv6Network((self.address, self.prefixlen))

    def __str__(self) -> str:
        return self.network.with_prefixlen


def parse_prefix(token: str) -> NetworkPrefix:
    """Parse a single CIDR literal, masking away host bits.

    A bare address is a host route (/32 or /128). Raises ``ValueError`` for
    anything that is not a strict CIDR literal.
    """

    text = token.strip()
    if not _CIDR_PATTERN.match(text):
        raise ValueError(f"not a CIDR literal: {token!r}")
    network = ipaddress.ip_network(text, strict=False)
    return NetworkPrefix.from_network(network)


def parse_prefixes(
    text: str, logger: structlog.BoundLogger | None = None
) -> Iterator[NetworkPrefix]:
    """Lazily yield one prefix per valid non-blank line of ``text``.

    Malformed lines are logged at debug level and skipped.
    """

    for lineno, line in enumerate(text.splitlines(), start=1):
        candidate = line.strip()
        if not candidate:
            continue
        try:
            yield parse_prefix(candidate)
        except ValueError as exc:
            if logger is not None:
                logger.debug("skipped_line", lineno=lineno, line=candidate[:80], error=str(exc))


__all__ = ["IPNetwork", "NetworkPrefix", "parse_prefix", "parse_prefixes"]
