"""
Unit tests for ldapgroups.core.config module.
"""

import pytest

from ldapgroups.core.config import LdapConfig


class TestLdapConfig:
    """Tests for LdapConfig construction."""

    def test_defaults(self):
        config = LdapConfig()
        assert config.group_search_base == []
        assert config.group_name_attribute == "cn"
        assert config.membership_attribute == "member"
        assert config.user_name_search_filter == "(&(objectClass=person)(uid=?))"

    def test_single_search_base_string(self):
        """Test a single string base becomes a one-element list."""
        config = LdapConfig(group_search_base="ou=groups,dc=example,dc=com")
        assert config.group_search_base == ["ou=groups,dc=example,dc=com"]

    def test_search_base_order_preserved(self):
        config = LdapConfig(group_search_base=("ou=b", "ou=a"))
        assert config.group_search_base == ["ou=b", "ou=a"]

    def test_rejects_non_string_base(self):
        with pytest.raises(TypeError):
            LdapConfig(group_search_base=[1])

    def test_empty_membership_attribute_allowed(self):
        """Test membership is only checked when groups are looked up."""
        assert LdapConfig(membership_attribute="").membership_attribute == ""
        assert LdapConfig(membership_attribute=None).membership_attribute is None

    def test_uses_member_uid(self):
        assert LdapConfig(membership_attribute="memberUid").uses_member_uid
        assert not LdapConfig(membership_attribute="member").uses_member_uid
        assert not LdapConfig(membership_attribute="memberuid").uses_member_uid

    def test_frozen(self):
        config = LdapConfig()
        with pytest.raises(AttributeError):
            config.membership_attribute = "memberUid"


class TestLdapConfigFromMapping:
    """Tests for LdapConfig.from_mapping."""

    def test_camel_case_keys(self):
        config = LdapConfig.from_mapping({
            "groupSearchBase": ["ou=groups,dc=example,dc=com"],
            "groupNameListFilter": "(objectClass=posixGroup)",
            "groupNameAttribute": "cn",
            "membershipAttribute": "memberUid",
            "userSearchBase": "ou=people,dc=example,dc=com",
            "userNameSearchFilter": "(&(objectClass=posixAccount)(uid=?))",
        })
        assert config.group_search_base == ["ou=groups,dc=example,dc=com"]
        assert config.group_name_list_filter == "(objectClass=posixGroup)"
        assert config.membership_attribute == "memberUid"
        assert config.user_search_base == ["ou=people,dc=example,dc=com"]
        assert config.user_name_search_filter == "(&(objectClass=posixAccount)(uid=?))"

    def test_snake_case_keys(self):
        config = LdapConfig.from_mapping({
            "group_search_base": ["ou=groups,dc=example,dc=com"],
            "membership_attribute": "uniqueMember",
        })
        assert config.group_search_base == ["ou=groups,dc=example,dc=com"]
        assert config.membership_attribute == "uniqueMember"

    def test_unknown_keys_ignored(self):
        config = LdapConfig.from_mapping({
            "connectionUrl": "ldap://localhost:389",
            "groupNameAttribute": "displayName",
        })
        assert config.group_name_attribute == "displayName"
