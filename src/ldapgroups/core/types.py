"""
ldapgroups Core Types

Value types shared by the resolver, the filter builder and the search
executor.

Design Principles:
- Immutable: all types use frozen attrs
- Per call: nothing here is cached or shared between lookups
- Directory order: components and values keep the order the directory
  returned them in
"""

from __future__ import annotations

from string import hexdigits
from typing import Any, Iterator, List, Mapping, Optional, Tuple

import attrs
from attrs import field, validators
from ldap3.core.exceptions import LDAPInvalidDnError
from ldap3.utils.dn import parse_dn


# Membership attribute of RFC 2307 posixGroup entries. Its values are bare
# user identifiers, not DNs.
MEMBER_UID = "memberUid"


# =============================================================================
# DISTINGUISHED NAMES
# =============================================================================


def unescape_dn_value(value: str) -> str:
    """
    Decode RFC 4514 escapes in an attribute value.

    Handles ``\\XX`` hex pairs (UTF-8 byte sequences) and ``\\c`` escaped
    characters. Values in ``#`` BER hex form are returned unchanged.
    """
    if "\\" not in value:
        return value

    decoded = bytearray()
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\" and i + 1 < len(value):
            pair = value[i + 1 : i + 3]
            if len(pair) == 2 and all(c in hexdigits for c in pair):
                decoded.append(int(pair, 16))
                i += 3
                continue
            decoded.extend(value[i + 1].encode("utf-8"))
            i += 2
            continue
        decoded.extend(char.encode("utf-8"))
        i += 1
    return decoded.decode("utf-8", errors="replace")


@attrs.define(frozen=True, slots=True)
class RelativeName:
    """
    One component (RDN) of a distinguished name.

    Multi-valued RDNs such as ``uid=42+cn=alice`` keep all their
    attribute/value pairs in the order written. ``attribute`` and ``value``
    refer to the pair that sorts first by attribute type (case-insensitive),
    then by value, so ``uid=42+cn=alice`` and ``cn=alice+uid=42`` both
    yield ``alice``. Values are kept in their DN string form, escapes
    included.

    INVARIANT: at least one attribute/value pair
    """

    pairs: Tuple[Tuple[str, str], ...] = field(
        converter=tuple, validator=validators.min_len(1)
    )

    @classmethod
    def of(cls, attribute: str, value: str) -> RelativeName:
        """Create a single-valued RDN."""
        return cls(pairs=((attribute, value),))

    @property
    def primary(self) -> Tuple[str, str]:
        if len(self.pairs) == 1:
            return self.pairs[0]
        return min(
            self.pairs,
            key=lambda pair: (pair[0].upper(), unescape_dn_value(pair[1]).lower()),
        )

    @property
    def attribute(self) -> str:
        return self.primary[0]

    @property
    def value(self) -> str:
        return self.primary[1]

    @property
    def unescaped_value(self) -> str:
        """The value with DN escapes decoded."""
        return unescape_dn_value(self.value)

    def __str__(self) -> str:
        return "+".join(f"{attribute}={value}" for attribute, value in self.pairs)


@attrs.define(frozen=True, slots=True)
class DistinguishedName:
    """
    A resolved identity's location in the directory tree.

    Components are ordered most-specific first, the way a DN string reads:
    ``cn=alice,ou=users,dc=example,dc=com`` has ``cn=alice`` at index 0.
    """

    rdns: Tuple[RelativeName, ...] = field(converter=tuple)

    @classmethod
    def parse(cls, dn: str) -> DistinguishedName:
        """
        Parse a DN string.

        Raises:
            ValueError: if the string is not a valid DN
        """
        try:
            parsed = parse_dn(dn, escape=False, strip=True)
        except LDAPInvalidDnError as e:
            raise ValueError(f"Invalid distinguished name {dn!r}: {e}") from e

        rdns: List[RelativeName] = []
        pairs: List[Tuple[str, str]] = []
        for attribute, value, separator in parsed:
            pairs.append((attribute, value))
            # '+' joins attribute/value pairs of a multi-valued RDN
            if separator != "+":
                rdns.append(RelativeName(pairs=pairs))
                pairs = []
        if pairs:
            rdns.append(RelativeName(pairs=pairs))

        return cls(rdns=rdns)

    @property
    def leaf(self) -> RelativeName:
        """The most-specific component."""
        if not self.rdns:
            raise ValueError("Empty distinguished name has no leaf component")
        return self.rdns[0]

    @property
    def leaf_value(self) -> str:
        """Bare value of the most-specific component, e.g. ``alice``."""
        return self.leaf.unescaped_value

    def __len__(self) -> int:
        return len(self.rdns)

    def __iter__(self) -> Iterator[RelativeName]:
        return iter(self.rdns)

    def __str__(self) -> str:
        return ",".join(str(rdn) for rdn in self.rdns)


# =============================================================================
# SEARCH RESULTS
# =============================================================================


@attrs.define(frozen=True, slots=True)
class SearchEntry:
    """
    One entry returned by a directory search.

    Attributes:
        dn: Entry DN as returned by the directory
        attributes: Attribute bag; None when the directory returned none.
            Values may be scalars or sequences.
    """

    dn: str
    attributes: Optional[Mapping[str, Any]] = None

    def values(self, name: str) -> Optional[List[str]]:
        """
        Return every value of an attribute as strings.

        Attribute names are matched case-insensitively. Returns None when
        the entry has no such attribute.
        """
        if not self.attributes:
            return None

        raw = self.attributes.get(name)
        if raw is None:
            lowered = name.lower()
            for key, value in self.attributes.items():
                if key.lower() == lowered:
                    raw = value
                    break
            else:
                return None

        if isinstance(raw, (list, tuple)):
            return [_to_str(value) for value in raw]
        return [_to_str(raw)]


def _to_str(value: Any) -> str:
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)
