"""Tests for keygate.auth — ApiKey extraction from the Authorization header."""

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from keygate.auth import (
    AuthErrorKind,
    AuthHeaderError,
    MalformedAuthHeaderError,
    NoAuthHeaderError,
    get_api_key,
)


@pytest.mark.parametrize(
    ("headers", "want_key", "want_error"),
    [
        pytest.param(
            {"Authorization": ["ApiKey my-secret-api-key"]},
            "my-secret-api-key",
            None,
            id="valid-apikey-header",
        ),
        pytest.param({}, None, NoAuthHeaderError, id="no-authorization-header"),
        pytest.param(
            {"Authorization": ["Bearer my-secret-api-key"]},
            None,
            MalformedAuthHeaderError,
            id="wrong-prefix",
        ),
        pytest.param(
            {"Authorization": ["ApiKeymy-secret-api-key"]},
            None,
            MalformedAuthHeaderError,
            id="no-space",
        ),
        pytest.param(
            {"Authorization": ["ApiKey"]},
            None,
            MalformedAuthHeaderError,
            id="only-one-part",
        ),
        pytest.param({"Authorization": [""]}, None, NoAuthHeaderError, id="empty-value"),
    ],
)
def test_get_api_key(headers, want_key, want_error) -> None:
    if want_error is None:
        assert get_api_key(headers) == want_key
    else:
        with pytest.raises(want_error):
            get_api_key(headers)


class TestGetApiKey:
    def test_plain_string_value(self) -> None:
        assert get_api_key({"Authorization": "ApiKey sk-abc123"}) == "sk-abc123"

    def test_header_name_case_insensitive(self) -> None:
        assert get_api_key({"authorization": ["ApiKey sk-abc123"]}) == "sk-abc123"
        assert get_api_key({"AUTHORIZATION": "ApiKey sk-abc123"}) == "sk-abc123"

    def test_split_on_first_space_only(self) -> None:
        assert get_api_key({"Authorization": "ApiKey X Y"}) == "X Y"

    def test_first_value_wins(self) -> None:
        headers = {"Authorization": ["ApiKey first", "ApiKey second"]}
        assert get_api_key(headers) == "first"

    def test_cimultidict_input(self) -> None:
        headers = CIMultiDict()
        headers.add("authorization", "ApiKey sk-multi")
        headers.add("Authorization", "Bearer ignored")
        assert get_api_key(headers) == "sk-multi"
        assert get_api_key(CIMultiDictProxy(headers)) == "sk-multi"

    def test_scheme_is_case_sensitive(self) -> None:
        with pytest.raises(MalformedAuthHeaderError):
            get_api_key({"Authorization": "apikey sk-abc123"})

    def test_empty_remainder(self) -> None:
        with pytest.raises(MalformedAuthHeaderError):
            get_api_key({"Authorization": "ApiKey "})

    def test_leading_space(self) -> None:
        with pytest.raises(MalformedAuthHeaderError):
            get_api_key({"Authorization": " sk-abc123"})

    def test_other_headers_ignored(self) -> None:
        with pytest.raises(NoAuthHeaderError):
            get_api_key({"x-api-key": "sk-abc123"})

    def test_does_not_mutate_input(self) -> None:
        headers = {"Authorization": ["ApiKey sk-abc123"]}
        get_api_key(headers)
        assert headers == {"Authorization": ["ApiKey sk-abc123"]}


class TestErrors:
    def test_kinds(self) -> None:
        assert NoAuthHeaderError().kind is AuthErrorKind.NO_AUTH_HEADER
        assert MalformedAuthHeaderError().kind is AuthErrorKind.MALFORMED_HEADER

    def test_common_base(self) -> None:
        with pytest.raises(AuthHeaderError) as excinfo:
            get_api_key({})
        assert excinfo.value.kind is AuthErrorKind.NO_AUTH_HEADER

    def test_wrong_scheme_detail(self) -> None:
        with pytest.raises(MalformedAuthHeaderError) as excinfo:
            get_api_key({"Authorization": "Bearer sk-secret"})
        assert excinfo.value.kind is AuthErrorKind.MALFORMED_HEADER
        assert "Bearer" in str(excinfo.value)
        assert "sk-secret" not in str(excinfo.value)

    def test_no_auth_header_message(self) -> None:
        assert str(NoAuthHeaderError()) == "no authorization header included"
        assert NoAuthHeaderError().detail is None
