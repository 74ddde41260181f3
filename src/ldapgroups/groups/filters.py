"""
ldapgroups Group Filter Builder

Builds the search filter that selects the groups a user belongs to.

Membership conventions:
1. memberUid (posixGroup): members are listed by bare user id, so the
   filter value is the value of the user's most-specific RDN
2. Anything else (member, uniqueMember, ...): members are listed by DN, so
   the filter value is the user's DN, escaped component by component

Escaping:
    The escaping applied to DN components is narrower than RFC 4515. It
    neutralises the characters that can break out of a filter assertion
    ("(", ")", NUL, backslash) and turns an escaped wildcard "\\*" into
    "\\2a". A bare "*", "/" and surrounding whitespace pass through
    unchanged so configured names can still carry wildcards.
"""

from __future__ import annotations

from typing import Optional

import structlog

from ldapgroups.core.config import LdapConfig
from ldapgroups.core.exceptions import ConfigurationError
from ldapgroups.core.types import DistinguishedName

logger = structlog.get_logger()


_FILTER_ESCAPES = {
    "\\": "\\5c",
    "(": "\\28",
    ")": "\\29",
    "\x00": "\\00",
}


def escape_for_filter(value: str) -> str:
    """
    Escape filter metacharacters in a DN component.

    "\\*" (an escaped wildcard) becomes "\\2a"; any other backslash,
    including a trailing one, becomes "\\5c".
    """
    escaped = []
    i = 0
    while i < len(value):
        char = value[i]
        if char == "\\" and value[i + 1 : i + 2] == "*":
            escaped.append("\\2a")
            i += 2
            continue
        escaped.append(_FILTER_ESCAPES.get(char, char))
        i += 1
    return "".join(escaped)


def escape_dn_for_filter(dn: DistinguishedName) -> str:
    """
    Reassemble a DN with every component escaped for use in a filter.

    Components are escaped one at a time, then joined most-specific first.
    """
    escaped = ",".join(escape_for_filter(str(rdn)) for rdn in dn)
    logger.debug("escaped_dn_for_filter", escaped_dn=escaped)
    return escaped


def require_membership_attribute(configuration: LdapConfig) -> str:
    """
    Return the configured membership attribute.

    Raises:
        ConfigurationError: if it is unset or empty
    """
    membership_attribute: Optional[str] = configuration.membership_attribute
    if not membership_attribute:
        raise ConfigurationError("Membership attribute is not set in configurations.")
    return membership_attribute


def membership_value(dn: DistinguishedName, configuration: LdapConfig) -> str:
    """Value the membership attribute of a group holds for this user."""
    if configuration.uses_member_uid:
        # posixGroup members are user ids, not DNs
        return dn.leaf_value
    return escape_dn_for_filter(dn)


def build_membership_filter(dn: DistinguishedName, configuration: LdapConfig) -> str:
    """
    Compose the group search filter for a resolved user.

    Returns:
        "(&" + group_name_list_filter + "(" + attribute + "=" + value + "))"

    Raises:
        ConfigurationError: if the membership attribute is unset or empty
    """
    membership_attribute = require_membership_attribute(configuration)
    value = membership_value(dn, configuration)
    return f"(&{configuration.group_name_list_filter}({membership_attribute}={value}))"
