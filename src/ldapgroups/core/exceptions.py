"""
ldapgroups Exception Types

Custom exceptions for group lookup errors.

A user that cannot be found is not an error: resolvers return None and
lookups return an empty result.
"""

from typing import Optional


class LdapGroupsError(Exception):
    """Base exception for all ldapgroups errors."""

    def __init__(self, message: str, code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ConfigurationError(LdapGroupsError):
    """
    Directory configuration is unusable.

    Raised before any search is issued, e.g. when the membership
    attribute is missing. Never retried.
    """

    pass


class DirectoryOperationError(LdapGroupsError):
    """
    Directory operation failed.

    Wraps any failure surfaced by the directory session while resolving
    a name or searching for groups: connectivity, timeouts, protocol
    errors, or a filter rejected by the server.

    When the failure carries an LDAP result code (RFC 4511), it is kept
    in ``code``.
    """

    pass
