"""
ldapgroups Group Search

Resolves a username to the names of the groups it belongs to.

Flow:
1. Check the membership attribute is configured (fails fast)
2. Resolve the username to a DN; an unknown user yields no groups
3. Build the membership filter
4. Search every group search base in order and collect every value of
   the group name attribute

Ordering:
    Names are returned in search-base order, then entry order, then value
    order as the directory returned them. Nothing is sorted or
    deduplicated.

Failures:
    A failure on any search base aborts the whole lookup; no partial list
    is returned. Each search cursor is closed before an error propagates.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import structlog

from ldapgroups.core.config import LdapConfig
from ldapgroups.core.types import DistinguishedName
from ldapgroups.directory.resolver import NameResolver, SearchNameResolver
from ldapgroups.directory.session import DirectorySession, close_cursor
from ldapgroups.groups.filters import build_membership_filter, require_membership_attribute

logger = structlog.get_logger()


def collect_attribute_values(
    session: DirectorySession,
    search_bases: Sequence[str],
    search_filter: str,
    attribute: str,
) -> List[str]:
    """
    Search every base and collect all values of one attribute.

    Entries without attributes, or without the requested attribute, are
    skipped.

    Args:
        session: Directory session
        search_bases: Ordered search roots
        search_filter: Complete search filter
        attribute: Attribute to request and collect

    Returns:
        Values in base, entry, value order
    """
    logger.debug(
        "collect_attribute_values",
        search_bases=list(search_bases),
        search_filter=search_filter,
        attribute=attribute,
    )

    names: List[str] = []
    for search_base in search_bases:
        cursor = session.search(search_base, search_filter, (attribute,))
        try:
            for entry in cursor:
                values = entry.values(attribute)
                if values is None:
                    continue
                for name in values:
                    names.append(name)
                    logger.debug("group_found", group=name, search_base=search_base)
        finally:
            close_cursor(cursor)

    return names


def find_groups_for_dn(
    dn: DistinguishedName,
    configuration: LdapConfig,
    session: DirectorySession,
) -> List[str]:
    """
    Find the names of the groups a resolved user belongs to.

    Raises:
        ConfigurationError: if the membership attribute is unset or empty
        DirectoryOperationError: if any search fails
    """
    search_filter = build_membership_filter(dn, configuration)
    logger.debug(
        "reading_groups",
        membership_attribute=configuration.membership_attribute,
    )
    return collect_attribute_values(
        session,
        configuration.group_search_base,
        search_filter,
        configuration.group_name_attribute,
    )


def resolve_groups(
    username: str,
    configuration: LdapConfig,
    session: DirectorySession,
    resolver: Optional[NameResolver] = None,
) -> List[str]:
    """
    Return the names of the groups a user belongs to.

    Both "user not found" and "user in no groups" return an empty list. Use
    the resolver directly to tell them apart.

    Args:
        username: Username to look up
        configuration: Directory configuration
        session: Caller-owned, already bound directory session
        resolver: Username resolver (default: SearchNameResolver)

    Returns:
        Group names, possibly empty

    Raises:
        ConfigurationError: if the membership attribute is unset or empty
        DirectoryOperationError: if resolution or any search fails
    """
    require_membership_attribute(configuration)

    resolver = resolver or SearchNameResolver()
    dn = resolver.resolve(username, configuration, session)
    if dn is None:
        logger.debug("no_identity_for_user", username=username)
        return []

    return find_groups_for_dn(dn, configuration, session)
