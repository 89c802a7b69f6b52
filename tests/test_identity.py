import pytest

from dashboard_view.core.exceptions import AbsentIdentity
from dashboard_view.core.identity import IdentityResolver, resolve_identity


@pytest.mark.parametrize(
    "context",
    [
        "https://dash.example/?userId=123",
        "?userId=123",
        "userId=123&year=2024",
        {"userId": "123"},
        {"userId": ["123", "456"]},
    ],
)
def test_resolves_identifier_from_any_context(context):
    assert resolve_identity(context) == "123"


@pytest.mark.parametrize(
    "context",
    [
        "https://dash.example/",
        "?userId=",
        "?userId=null",
        "?userId=undefined",
        {"userId": None},
        {"userId": []},
        {},
    ],
)
def test_missing_or_sentinel_identifier_is_absent(context):
    with pytest.raises(AbsentIdentity) as exc_info:
        resolve_identity(context)
    assert exc_info.value.message == "identifier not found"
    assert exc_info.value.error_code == "ABSENT_IDENTITY"


def test_custom_parameter_name():
    resolver = IdentityResolver("account")
    assert resolver.resolve("?account=acme&userId=123") == "acme"
    with pytest.raises(AbsentIdentity):
        resolver.resolve("?userId=123")
