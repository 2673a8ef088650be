import pytest

from schema_scope.wildcard import literal_length, match_simple


@pytest.mark.parametrize(
    "pattern,name,expected",
    [
        ("user_*", "user_secret", True),
        ("user_*", "user_", True),
        ("user_*", "users", False),
        ("*_logs", "legacy_logs", True),
        ("a*b*c", "axxbyyc", True),
        ("a*b*c", "axxbyy", False),
        ("*", "anything", True),
        ("*", "", True),
        ("", "", True),
        ("", "users", False),
        ("user.*", "userxposts", False),
        ("public.users", "public.users", True),
        ("Users", "users", False),
        ("users?", "users?", True),
        ("users?", "users1", False),
    ],
)
def test_match_simple(pattern, name, expected):
    assert match_simple(pattern, name) is expected


def test_literal_length():
    assert literal_length("user_*") == 5
    assert literal_length("user_secret") == 11
    assert literal_length("*") == 0
    assert literal_length("*ser_secre*") == 9
