#!/usr/bin/env python3
"""
Group Lookup Example

Demonstrates how to use ldapgroups to find the groups a user belongs to.

Features:
1. DN-based membership (groupOfNames / member)
2. POSIX membership (posixGroup / memberUid)
3. Unknown users and configuration errors as Results

Runs against ldap3's in-memory MOCK_SYNC directory, so no server is needed.
Replace the mock connection with a bound ldap3 Connection for a real
directory.
"""

from ldap3 import MOCK_SYNC, Connection, Server
from returns.result import Failure, Success

from ldapgroups import LdapConfig, Ldap3Session, LdapConnection, get_groups


def build_directory() -> Connection:
    """Create an in-memory directory with one user and a few groups."""
    conn = Connection(
        Server("mock_server"),
        user="cn=reader,dc=example,dc=com",
        password="secret",
        client_strategy=MOCK_SYNC,
    )
    entries = {
        "cn=reader,dc=example,dc=com": {
            "objectClass": ["person"], "cn": "reader", "sn": "reader", "userPassword": "secret",
        },
        "ou=people,dc=example,dc=com": {"objectClass": ["organizationalUnit"], "ou": "people"},
        "ou=groups,dc=example,dc=com": {"objectClass": ["organizationalUnit"], "ou": "groups"},
        "uid=jdoe,ou=people,dc=example,dc=com": {
            "objectClass": ["person", "posixAccount"], "uid": "jdoe", "cn": "John Doe", "sn": "Doe",
        },
        "cn=developers,ou=groups,dc=example,dc=com": {
            "objectClass": ["groupOfNames"],
            "cn": ["developers", "devs"],
            "member": ["uid=jdoe,ou=people,dc=example,dc=com"],
        },
        "cn=staff,ou=groups,dc=example,dc=com": {
            "objectClass": ["posixGroup"],
            "cn": "staff",
            "memberUid": ["jdoe"],
        },
    }
    for dn, attributes in entries.items():
        conn.strategy.add_entry(dn, attributes)
    conn.bind()
    return conn


def show(title: str, result) -> None:
    print(title)
    print("-" * 40)
    if isinstance(result, Success):
        groups = result.unwrap()
        print(f"   Groups: {', '.join(groups) if groups else '(none)'}")
    else:
        error = result.failure()
        print(f"   Error ({type(error).__name__}): {error.message}")
    print()


def main():
    """Demonstrate group lookups."""

    print("=" * 70)
    print("ldapgroups - Group Lookup")
    print("=" * 70)
    print()

    session = Ldap3Session(build_directory())

    # ==========================================================================
    # EXAMPLE 1: DN-based membership
    # ==========================================================================
    member_config = LdapConfig(
        group_search_base=["ou=groups,dc=example,dc=com"],
        group_name_list_filter="(objectClass=groupOfNames)",
        group_name_attribute="cn",
        membership_attribute="member",
        user_search_base=["ou=people,dc=example,dc=com"],
        user_name_search_filter="(&(objectClass=posixAccount)(uid=?))",
    )
    connection = LdapConnection(session, member_config, "example")
    show("1. DN-based membership (member)", get_groups(connection, "jdoe"))

    # ==========================================================================
    # EXAMPLE 2: POSIX membership
    # ==========================================================================
    posix_config = LdapConfig.from_mapping({
        "groupSearchBase": "ou=groups,dc=example,dc=com",
        "groupNameListFilter": "(objectClass=posixGroup)",
        "groupNameAttribute": "cn",
        "membershipAttribute": "memberUid",
        "userSearchBase": "ou=people,dc=example,dc=com",
        "userNameSearchFilter": "(&(objectClass=posixAccount)(uid=?))",
    })
    connection = LdapConnection(session, posix_config, "example")
    show("2. POSIX membership (memberUid)", get_groups(connection, "jdoe"))

    # ==========================================================================
    # EXAMPLE 3: Unknown user
    # ==========================================================================
    show("3. Unknown user", get_groups(connection, "nobody"))

    # ==========================================================================
    # EXAMPLE 4: Missing membership attribute
    # ==========================================================================
    broken = LdapConnection(session, LdapConfig(membership_attribute=""), "example")
    result = get_groups(broken, "jdoe")
    show("4. Missing membership attribute", result)
    assert isinstance(result, Failure)


if __name__ == "__main__":
    main()
