"""
Pytest configuration and shared fixtures for ldapgroups tests.
"""

from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import attrs
import pytest

from ldapgroups.core.config import LdapConfig
from ldapgroups.core.types import DistinguishedName, SearchEntry
from ldapgroups.groups.lookup import LdapConnection


USERS_BASE = "ou=users,dc=example,dc=com"
GROUPS_BASE = "ou=groups,dc=example,dc=com"
ALICE_DN = "cn=alice,ou=users,dc=example,dc=com"


# =============================================================================
# FAKE DIRECTORY SESSION
# =============================================================================


@attrs.define(frozen=True)
class SearchCall:
    """One search issued against a FakeSession."""

    search_base: str
    search_filter: str
    attributes: Tuple[str, ...]


@attrs.define
class FakeSession:
    """
    In-memory DirectorySession.

    Entries are returned per search base regardless of the filter.
    A failure registered for a base is raised after that base's entries
    have been yielded. Every cursor records its base in ``closed`` when it
    is released.
    """

    results: Dict[str, List[SearchEntry]] = attrs.Factory(dict)
    failures: Dict[str, Exception] = attrs.Factory(dict)
    searches: List[SearchCall] = attrs.Factory(list)
    closed: List[str] = attrs.Factory(list)

    def search(
        self,
        search_base: str,
        search_filter: str,
        attributes: Sequence[str] = (),
    ) -> Iterator[SearchEntry]:
        self.searches.append(SearchCall(search_base, search_filter, tuple(attributes)))
        return self._cursor(search_base)

    def _cursor(self, search_base: str) -> Iterator[SearchEntry]:
        try:
            for entry in self.results.get(search_base, []):
                yield entry
            failure = self.failures.get(search_base)
            if failure is not None:
                raise failure
        finally:
            self.closed.append(search_base)

    def searches_for(self, search_base: str) -> List[SearchCall]:
        return [call for call in self.searches if call.search_base == search_base]


@attrs.define(frozen=True)
class StaticResolver:
    """Resolver that always returns the same DN."""

    dn: Optional[DistinguishedName]
    calls: List[str] = attrs.Factory(list)

    def resolve(self, username, configuration, session):
        self.calls.append(username)
        return self.dn


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================


@pytest.fixture
def member_config() -> LdapConfig:
    """DN-based membership (groupOfNames / member)."""
    return LdapConfig(
        group_search_base=[GROUPS_BASE],
        group_name_list_filter="(objectClass=groupOfNames)",
        group_name_attribute="cn",
        membership_attribute="member",
        user_search_base=[USERS_BASE],
        user_name_search_filter="(&(objectClass=person)(uid=?))",
    )


@pytest.fixture
def posix_config() -> LdapConfig:
    """POSIX membership (posixGroup / memberUid)."""
    return LdapConfig(
        group_search_base=[GROUPS_BASE],
        group_name_list_filter="(objectClass=posixGroup)",
        group_name_attribute="cn",
        membership_attribute="memberUid",
        user_search_base=[USERS_BASE],
    )


# =============================================================================
# DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def alice_dn() -> DistinguishedName:
    return DistinguishedName.parse(ALICE_DN)


@pytest.fixture
def session() -> FakeSession:
    """Directory holding alice, a member of two groups."""
    return FakeSession(
        results={
            USERS_BASE: [SearchEntry(dn=ALICE_DN)],
            GROUPS_BASE: [
                SearchEntry(dn=f"cn=admins,{GROUPS_BASE}", attributes={"cn": ["admins"]}),
                SearchEntry(dn=f"cn=devs,{GROUPS_BASE}", attributes={"cn": ["devs"]}),
            ],
        }
    )


@pytest.fixture
def empty_session() -> FakeSession:
    """Directory with no users and no groups."""
    return FakeSession()


@pytest.fixture
def ldap_connection(session: FakeSession, member_config: LdapConfig) -> LdapConnection:
    return LdapConnection(
        session=session,
        configuration=member_config,
        endpoint_id="portal",
    )


# =============================================================================
# PYTEST MARKERS
# =============================================================================


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests requiring a real directory server"
    )
