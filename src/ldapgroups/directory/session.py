"""
ldapgroups Directory Session

The session is the only place the package talks to a directory. It is
owned by the caller: already opened and bound, never pooled, rebound or
closed here.

Components:
- DirectorySession: structural interface used by the resolver and search
- Ldap3Session: adapter for a caller-owned ldap3.Connection
"""

from __future__ import annotations

from typing import Any, Iterator, List, Optional, Protocol, Sequence, Tuple

import attrs
import structlog
from ldap3 import NO_ATTRIBUTES, SUBTREE, Connection
from ldap3.core.exceptions import LDAPException, LDAPOperationResult
from ldap3.core.results import RESULT_SUCCESS

from ldapgroups.core.exceptions import DirectoryOperationError
from ldapgroups.core.types import SearchEntry

logger = structlog.get_logger()

# Simple Paged Results control (RFC 2696)
PAGED_RESULTS_CONTROL = "1.2.840.113556.1.4.319"


class DirectorySession(Protocol):
    """
    Already-authenticated directory session.

    ``search`` runs a subtree search and returns a lazy iterator of
    entries. Callers must exhaust it or close it; generators satisfy both.
    An empty ``attributes`` sequence requests no attributes.

    Failures, including timeouts, are raised as DirectoryOperationError.
    """

    def search(
        self,
        search_base: str,
        search_filter: str,
        attributes: Sequence[str] = (),
    ) -> Iterator[SearchEntry]:
        ...


def close_cursor(cursor: Any) -> None:
    """Release a search cursor if it supports closing."""
    close = getattr(cursor, "close", None)
    if close is not None:
        close()


@attrs.define
class Ldap3Session:
    """
    DirectorySession backed by an ldap3 Connection.

    Searches use the Simple Paged Results control (RFC 2696), so servers
    that cap result sets per request (Active Directory's MaxPageSize) still
    return every entry. Pages are fetched as the cursor advances and
    entries keep the order the server sent them in.

    Works with connections created with or without ``raise_exceptions``
    and with synchronous or asynchronous client strategies. Search
    references are dropped; only entries are yielded.

    Example:
        server = Server("ldap.example.com")
        conn = Connection(server, "cn=reader,dc=example,dc=com", "secret", auto_bind=True)
        session = Ldap3Session(conn, page_size=500)
        groups = resolve_groups("alice", config, session)

    Attributes:
        connection: Bound ldap3 connection, owned by the caller
        page_size: Entries requested per page (0 disables paging)
        size_limit: Server-side size limit per search (0 = none)
        time_limit: Server-side time limit per search in seconds (0 = none)
    """

    connection: Connection
    page_size: int = 500
    size_limit: int = 0
    time_limit: int = 0

    def search(
        self,
        search_base: str,
        search_filter: str,
        attributes: Sequence[str] = (),
    ) -> Iterator[SearchEntry]:
        requested = list(attributes) if attributes else [NO_ATTRIBUTES]
        return self._entries(search_base, search_filter, requested)

    def _entries(
        self,
        search_base: str,
        search_filter: str,
        attributes: Any,
    ) -> Iterator[SearchEntry]:
        logger.debug(
            "ldap_search",
            search_base=search_base,
            search_filter=search_filter,
            attributes=attributes,
            page_size=self.page_size,
        )

        cookie = None
        while True:
            response, result = self._fetch_page(
                search_base, search_filter, attributes, cookie
            )

            code = _result_code(result)
            if code != RESULT_SUCCESS:
                description = (result or {}).get("description", "unknown error")
                raise DirectoryOperationError(
                    f"Search under '{search_base}' failed: {description}", code=code
                )

            for item in response:
                if item.get("type") != "searchResEntry":
                    continue
                yield SearchEntry(dn=item.get("dn", ""), attributes=item.get("attributes"))

            cookie = _paging_cookie(result)
            if not cookie:
                return
            logger.debug("ldap_search_next_page", search_base=search_base)

    def _fetch_page(
        self,
        search_base: str,
        search_filter: str,
        attributes: Any,
        cookie: Optional[bytes],
    ) -> Tuple[List[dict], Optional[dict]]:
        try:
            status = self.connection.search(
                search_base=search_base,
                search_filter=search_filter,
                search_scope=SUBTREE,
                attributes=attributes,
                size_limit=self.size_limit,
                time_limit=self.time_limit,
                paged_size=self.page_size or None,
                paged_cookie=cookie,
            )
            if isinstance(status, bool):
                response = self.connection.response
                result = self.connection.result
            else:
                response, result = self.connection.get_response(status)
        except LDAPOperationResult as e:
            raise DirectoryOperationError(
                f"Search under '{search_base}' failed: {e}", code=e.result
            ) from e
        except LDAPException as e:
            raise DirectoryOperationError(
                f"Search under '{search_base}' failed: {e}"
            ) from e

        # the connection reuses its response slot for the next page
        return list(response or []), result


def _result_code(result: Optional[dict]) -> int:
    if not result:
        return RESULT_SUCCESS
    return result.get("result", RESULT_SUCCESS)


def _paging_cookie(result: Optional[dict]) -> Optional[bytes]:
    """Cookie of the paged results control; empty when the last page was sent."""
    controls = (result or {}).get("controls") or {}
    control = controls.get(PAGED_RESULTS_CONTROL) or {}
    return (control.get("value") or {}).get("cookie")
