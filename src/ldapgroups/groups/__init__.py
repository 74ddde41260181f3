"""
ldapgroups Groups Module

Group membership lookup.

Components:
- filters: membership filter building and escaping
- search: multi-base group search
- lookup: Result-returning call boundary

Supports:
- DN-based membership (member, uniqueMember, ...)
- posixGroup membership (memberUid)
"""

from ldapgroups.groups.filters import (
    build_membership_filter,
    escape_dn_for_filter,
    escape_for_filter,
)
from ldapgroups.groups.search import resolve_groups
from ldapgroups.groups.lookup import LdapConnection, get_groups

__all__ = [
    "build_membership_filter",
    "escape_dn_for_filter",
    "escape_for_filter",
    "resolve_groups",
    "LdapConnection",
    "get_groups",
]
