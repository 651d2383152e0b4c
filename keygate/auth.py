"""API key extraction from the Authorization header.

Accepted form (scheme is matched case-sensitively):
    Authorization: ApiKey <key>

Anything else is either a missing header or a malformed one; see
AuthErrorKind.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence

from aiohttp import hdrs
from multidict import CIMultiDict, CIMultiDictProxy

API_KEY_SCHEME = "ApiKey"

Headers = CIMultiDict[str] | CIMultiDictProxy[str] | Mapping[str, str | Sequence[str]]


class AuthErrorKind(enum.Enum):
    NO_AUTH_HEADER = "no_auth_header"
    MALFORMED_HEADER = "malformed_header"


class AuthHeaderError(Exception):
    """Base class for Authorization header failures. Branch on ``kind``."""

    kind: AuthErrorKind

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.detail = detail


class NoAuthHeaderError(AuthHeaderError):
    kind = AuthErrorKind.NO_AUTH_HEADER

    def __init__(self) -> None:
        super().__init__("no authorization header included")


class MalformedAuthHeaderError(AuthHeaderError):
    kind = AuthErrorKind.MALFORMED_HEADER

    def __init__(self, detail: str | None = None) -> None:
        message = "malformed authorization header"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message, detail)


def _as_multidict(headers: Headers) -> CIMultiDict[str] | CIMultiDictProxy[str]:
    """Normalize plain mappings into a case-insensitive multidict."""
    if isinstance(headers, (CIMultiDict, CIMultiDictProxy)):
        return headers
    result: CIMultiDict[str] = CIMultiDict()
    for name, value in headers.items():
        if isinstance(value, str):
            result.add(name, value)
        else:
            for item in value:
                result.add(name, item)
    return result


def get_api_key(headers: Headers) -> str:
    """Return the key from an ``Authorization: ApiKey <key>`` header.

    Only the first Authorization value is considered. The header is split
    on its first space, so everything after it, spaces included, is the key.

    Raises NoAuthHeaderError when the header is absent or empty, and
    MalformedAuthHeaderError for any other shape or scheme.
    """
    auth = _as_multidict(headers).get(hdrs.AUTHORIZATION, "")
    if not auth:
        raise NoAuthHeaderError()

    scheme, sep, key = auth.partition(" ")
    if not sep or not scheme or not key:
        raise MalformedAuthHeaderError()
    if scheme != API_KEY_SCHEME:
        raise MalformedAuthHeaderError(f"unsupported scheme {scheme!r}")
    return key
