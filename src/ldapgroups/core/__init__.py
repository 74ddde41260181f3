"""
ldapgroups Core Module

Provides foundational types used by the resolver and the group search.

Components:
- types: DistinguishedName, RelativeName, SearchEntry
- config: Directory configuration
- exceptions: Custom exception types
"""

from ldapgroups.core.types import (
    MEMBER_UID,
    DistinguishedName,
    RelativeName,
    SearchEntry,
)
from ldapgroups.core.config import LdapConfig
from ldapgroups.core.exceptions import (
    LdapGroupsError,
    ConfigurationError,
    DirectoryOperationError,
)

__all__ = [
    # Types
    "MEMBER_UID",
    "DistinguishedName",
    "RelativeName",
    "SearchEntry",
    # Configuration
    "LdapConfig",
    # Exceptions
    "LdapGroupsError",
    "ConfigurationError",
    "DirectoryOperationError",
]
