"""
ldapgroups Group Lookup

Call boundary for group lookups.

Converts errors into ``returns`` Results so callers branch on the error
type instead of catching exceptions, and binds the service identifier to
the structlog context for the duration of the call.

Result convention:
- Success(tuple_of_names): the user belongs to at least one group
- Success(None): no groups found, or the user is unknown
- Failure(ConfigurationError | DirectoryOperationError)
"""

from __future__ import annotations

from typing import Optional, Tuple

import attrs
import structlog
from structlog.contextvars import bound_contextvars
from returns.result import Failure, Result, Success

from ldapgroups.core.config import LdapConfig
from ldapgroups.core.exceptions import LdapGroupsError
from ldapgroups.directory.resolver import NameResolver, SearchNameResolver
from ldapgroups.directory.session import DirectorySession
from ldapgroups.groups.search import resolve_groups

logger = structlog.get_logger()


@attrs.define(frozen=True)
class LdapConnection:
    """
    Everything a lookup needs, passed explicitly.

    Attributes:
        session: Bound directory session, owned by the caller
        configuration: Directory configuration
        endpoint_id: Identifier of the calling service, bound to log events
    """

    session: DirectorySession
    configuration: LdapConfig = attrs.field(validator=attrs.validators.instance_of(LdapConfig))
    endpoint_id: str = ""


def get_groups(
    connection: LdapConnection,
    username: str,
    resolver: Optional[NameResolver] = None,
) -> Result[Optional[Tuple[str, ...]], LdapGroupsError]:
    """
    Look up the groups of a user.

    Args:
        connection: Session, configuration and service identifier
        username: Username to look up
        resolver: Username resolver (default: SearchNameResolver)

    Returns:
        Success(names) or Success(None) when there are none,
        Failure(error) on configuration or directory errors

    Example:
        result = get_groups(connection, "alice")
        if isinstance(result, Failure):
            error = result.failure()
        else:
            names = result.unwrap() or ()
    """
    with bound_contextvars(service=connection.endpoint_id):
        try:
            names = resolve_groups(
                username,
                connection.configuration,
                connection.session,
                resolver=resolver or SearchNameResolver(),
            )
        except LdapGroupsError as e:
            logger.warning(
                "get_groups_failed",
                username=username,
                error_type=type(e).__name__,
                error=e.message,
                code=e.code,
            )
            return Failure(e)

        logger.info("get_groups_complete", username=username, group_count=len(names))

        if not names:
            return Success(None)
        return Success(tuple(names))
