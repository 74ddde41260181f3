"""
ldapgroups Distinguished-Name Resolver

Translates a username into the DN of the matching user entry.

An unknown user is a normal outcome: resolvers return None and the group
lookup treats it as "no groups". Directory faults propagate.
"""

from __future__ import annotations

from typing import Optional, Protocol

import attrs
import structlog
from ldap3.utils.conv import escape_filter_chars

from ldapgroups.core.config import LdapConfig
from ldapgroups.core.exceptions import DirectoryOperationError
from ldapgroups.core.types import DistinguishedName
from ldapgroups.directory.session import DirectorySession, close_cursor

logger = structlog.get_logger()

# Placeholder for the username in user search filters
USERNAME_PLACEHOLDER = "?"


class NameResolver(Protocol):
    """Resolves a username to a DistinguishedName, or None if unknown."""

    def resolve(
        self,
        username: str,
        configuration: LdapConfig,
        session: DirectorySession,
    ) -> Optional[DistinguishedName]:
        ...


def build_user_filter(username: str, configuration: LdapConfig) -> str:
    """
    Substitute the escaped username into the configured user filter.

    Example:
        "(&(objectClass=person)(uid=?))" with "a*b" ->
        "(&(objectClass=person)(uid=a\\2ab))"
    """
    return configuration.user_name_search_filter.replace(
        USERNAME_PLACEHOLDER, escape_filter_chars(username)
    )


@attrs.define(frozen=True)
class SearchNameResolver:
    """
    Search-based resolver.

    Searches each user search base in order with the configured user
    filter. The first entry found wins.
    """

    def resolve(
        self,
        username: str,
        configuration: LdapConfig,
        session: DirectorySession,
    ) -> Optional[DistinguishedName]:
        if not username:
            return None

        search_filter = build_user_filter(username, configuration)

        for search_base in configuration.user_search_base:
            cursor = session.search(search_base, search_filter, ())
            try:
                entry = next(iter(cursor), None)
            finally:
                close_cursor(cursor)

            if entry is None:
                continue

            try:
                dn = DistinguishedName.parse(entry.dn)
            except ValueError as e:
                raise DirectoryOperationError(
                    f"Directory returned an invalid DN for '{username}': {entry.dn!r}"
                ) from e
            if not dn.rdns:
                raise DirectoryOperationError(
                    f"Directory returned an empty DN for '{username}'"
                )

            logger.debug("user_resolved", username=username, dn=str(dn))
            return dn

        logger.debug(
            "user_not_found",
            username=username,
            search_bases=configuration.user_search_base,
        )
        return None
