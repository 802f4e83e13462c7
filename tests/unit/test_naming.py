"""Tests for identifier sanitization."""

import pytest

from dbtogo.codegen.core.naming import (
    CollisionPolicy,
    NameCollisionError,
    capitalize,
    nounderscore,
)
from dbtogo.codegen.languages.go.naming import (
    create_go_sanitizer,
    go_quote,
    is_go_identifier,
    validate_go_package_name,
)


class TestCapitalize:
    """Test the capitalize and nounderscore helpers."""

    def test_upper_cases_first_character_only(self):
        assert capitalize("userID") == "UserID"
        assert capitalize("user_name") == "User_name"

    def test_empty_string(self):
        assert capitalize("") == ""

    def test_unicode_first_character(self):
        assert capitalize("élan") == "Élan"

    def test_multi_rune_upper_case_is_left_alone(self):
        assert capitalize("ßeta") == "ßeta"

    def test_nounderscore(self):
        assert nounderscore("a_b__c_") == "abc"


class TestSanitizer:
    """Test Go name sanitization."""

    @pytest.fixture
    def sanitizer(self):
        return create_go_sanitizer()

    def test_capitalizes_and_keeps_rest(self, sanitizer):
        assert sanitizer.sanitize("created_at") == "Created_at"
        assert sanitizer.sanitize("userId") == "UserId"

    def test_strip_underscores(self):
        sanitizer = create_go_sanitizer(strip_underscores=True)
        assert sanitizer.sanitize("created_at") == "Createdat"

    def test_invalid_characters_are_replaced(self, sanitizer):
        assert sanitizer.sanitize("first-name") == "First_name"

    def test_invalid_characters_are_dropped_when_stripping(self):
        sanitizer = create_go_sanitizer(strip_underscores=True)
        assert sanitizer.sanitize("first-name") == "Firstname"

    def test_leading_digit(self, sanitizer):
        assert sanitizer.sanitize("1st") == "X1st"

    def test_empty_name(self, sanitizer):
        assert sanitizer.sanitize("") == "Field"

    @pytest.mark.parametrize("raw", ["_", "__"])
    def test_underscore_only_name(self, sanitizer, raw):
        assert sanitizer.sanitize(raw) == "Field"

    def test_keywords_become_exported_names(self, sanitizer):
        assert sanitizer.sanitize("type") == "Type"
        assert sanitizer.sanitize("range") == "Range"

    @pytest.mark.parametrize(
        "raw", ["id", "user_name", "first-name", "1st", "Élan", "ßeta", "x y z", ""]
    )
    def test_idempotent(self, sanitizer, raw):
        once = sanitizer.sanitize(raw)
        assert sanitizer.sanitize(once) == once
        assert is_go_identifier(once)


class TestCollisions:
    """Test collision detection within a naming scope."""

    def test_error_policy_names_both_raw_identifiers(self):
        sanitizer = create_go_sanitizer()
        used = {}
        assert sanitizer.resolve("name", used, scope="table 'users'") == "Name"

        with pytest.raises(NameCollisionError) as exc_info:
            sanitizer.resolve("Name", used, scope="table 'users'")

        assert str(exc_info.value) == (
            "Names 'name' and 'Name' in table 'users' both map to 'Name'"
        )
        assert exc_info.value.first == "name"
        assert exc_info.value.second == "Name"

    def test_suffix_policy(self):
        sanitizer = create_go_sanitizer(
            strip_underscores=True, collision_policy=CollisionPolicy.SUFFIX
        )
        used = {}
        names = [sanitizer.resolve(raw, used) for raw in ["user_id", "userid", "userId_"]]
        assert names == ["Userid", "Userid2", "UserId"]

        assert sanitizer.resolve("u_serid", used) == "Userid3"

    def test_same_raw_name_is_not_a_collision(self):
        sanitizer = create_go_sanitizer()
        used = {}
        assert sanitizer.resolve("id", used) == "Id"
        assert sanitizer.resolve("id", used) == "Id"


class TestGoHelpers:
    """Test Go literal quoting and package name validation."""

    def test_quote_plain(self):
        assert go_quote("users") == '"users"'

    def test_quote_escapes(self):
        assert go_quote('a"b\\c\n') == '"a\\"b\\\\c\\n"'

    def test_quote_control_characters(self):
        assert go_quote("\x01") == '"\\x01"'

    def test_valid_package_name(self):
        assert validate_go_package_name("model") == []

    def test_invalid_package_names(self):
        assert validate_go_package_name("") == ["Package name cannot be empty"]
        assert validate_go_package_name("Model") == ["Package names should be lowercase"]
        assert validate_go_package_name("type") == ["'type' is a Go reserved word"]
        assert validate_go_package_name("my-pkg") == [
            "'my-pkg' is not a valid Go identifier"
        ]
