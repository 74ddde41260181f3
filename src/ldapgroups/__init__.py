"""
ldapgroups - Group Membership Lookup for LDAP Directories

Resolves the names of the groups a directory user belongs to, given a
username, the directory layout and an already-bound session.

Supported membership conventions:
- DN-based (member, uniqueMember): groups list member DNs
- posixGroup (memberUid): groups list bare user ids

Example Usage:
    from ldap3 import Server, Connection
    from ldapgroups import LdapConfig, Ldap3Session, LdapConnection, get_groups

    config = LdapConfig(
        group_search_base=["ou=groups,dc=example,dc=com"],
        group_name_list_filter="(objectClass=groupOfNames)",
        group_name_attribute="cn",
        membership_attribute="member",
        user_search_base=["ou=users,dc=example,dc=com"],
    )
    conn = Connection(Server("ldap.example.com"), "cn=reader,dc=example,dc=com",
                      "secret", auto_bind=True)

    result = get_groups(LdapConnection(Ldap3Session(conn), config, "portal"), "alice")
    if isinstance(result, Success):
        print(f"Groups: {result.unwrap()}")
"""

from ldapgroups.core.config import LdapConfig
from ldapgroups.core.exceptions import (
    LdapGroupsError,
    ConfigurationError,
    DirectoryOperationError,
)
from ldapgroups.core.types import DistinguishedName, SearchEntry
from ldapgroups.directory.session import DirectorySession, Ldap3Session
from ldapgroups.directory.resolver import SearchNameResolver
from ldapgroups.groups.search import resolve_groups
from ldapgroups.groups.lookup import LdapConnection, get_groups

__version__ = "0.1.0"

__all__ = [
    # Main API
    "get_groups",
    "resolve_groups",
    "LdapConnection",
    "LdapConfig",
    # Directory
    "DirectorySession",
    "Ldap3Session",
    "SearchNameResolver",
    # Types
    "DistinguishedName",
    "SearchEntry",
    # Exceptions
    "LdapGroupsError",
    "ConfigurationError",
    "DirectoryOperationError",
    # Metadata
    "__version__",
]
