"""
ldapgroups Directory Configuration

Read-only description of where groups and users live in the directory
and how group membership is modelled.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional, Union

import attrs
from attrs import field, validators

from ldapgroups.core.types import MEMBER_UID


def _as_search_bases(value: Union[str, Iterable[str], None]) -> List[str]:
    """Accept a single search base or an ordered collection of them."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


_str_list = validators.deep_iterable(
    member_validator=validators.instance_of(str),
    iterable_validator=validators.instance_of(list),
)

# camelCase configuration keys, mapped to field names.
_CAMEL_CASE_KEYS = {
    "groupSearchBase": "group_search_base",
    "groupNameListFilter": "group_name_list_filter",
    "groupNameAttribute": "group_name_attribute",
    "membershipAttribute": "membership_attribute",
    "userSearchBase": "user_search_base",
    "userNameSearchFilter": "user_name_search_filter",
}


@attrs.define(frozen=True)
class LdapConfig:
    """
    Directory configuration.

    Attributes:
        group_search_base: Ordered roots searched for groups
        group_name_list_filter: Base group filter, e.g. "(objectClass=groupOfNames)"
        group_name_attribute: Attribute holding the group name (e.g. "cn")
        membership_attribute: Attribute tested for membership. "memberUid"
            selects the POSIX convention (bare user id); anything else is
            compared against the user's full DN.
        user_search_base: Ordered roots searched when resolving a username
        user_name_search_filter: User filter; each "?" is replaced by the
            escaped username

    The membership attribute is allowed to be empty here so a config can be
    used for user lookups alone. Group lookups reject it.
    """

    group_search_base: List[str] = field(
        factory=list, converter=_as_search_bases, validator=_str_list
    )
    group_name_list_filter: str = field(
        default="(objectClass=groupOfNames)", validator=validators.instance_of(str)
    )
    group_name_attribute: str = field(default="cn", validator=validators.instance_of(str))
    membership_attribute: Optional[str] = field(
        default="member", validator=validators.optional(validators.instance_of(str))
    )
    user_search_base: List[str] = field(
        factory=list, converter=_as_search_bases, validator=_str_list
    )
    user_name_search_filter: str = field(
        default="(&(objectClass=person)(uid=?))", validator=validators.instance_of(str)
    )

    @property
    def uses_member_uid(self) -> bool:
        """True when groups list members by bare user id (posixGroup)."""
        return self.membership_attribute == MEMBER_UID

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> LdapConfig:
        """
        Create config from a mapping.

        Accepts snake_case field names as well as camelCase keys
        (groupSearchBase, membershipAttribute, ...). Unknown keys are ignored;
        missing keys keep their defaults.

        Example:
            config = LdapConfig.from_mapping({
                "groupSearchBase": ["ou=groups,dc=example,dc=com"],
                "membershipAttribute": "memberUid",
            })
        """
        known = {f.name for f in attrs.fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)
