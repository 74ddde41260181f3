"""
ldapgroups Directory Module

Boundary to the directory itself.

Components:
- session: DirectorySession interface and ldap3 adapter
- resolver: username to DN resolution
"""

from ldapgroups.directory.session import DirectorySession, Ldap3Session
from ldapgroups.directory.resolver import NameResolver, SearchNameResolver

__all__ = [
    "DirectorySession",
    "Ldap3Session",
    "NameResolver",
    "SearchNameResolver",
]
