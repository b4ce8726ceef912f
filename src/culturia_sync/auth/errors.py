from __future__ import annotations


class AuthError(Exception):
    """Base auth error. Any AuthError ends a sync run."""


class Unauthenticated(AuthError):
    """No stored credential; the operator has to connect an account."""


class AuthRefreshFailed(AuthError):
    """The refresh token was rejected or revoked; reconnect required."""


class AuthFailed(AuthError):
    """Unexpected failure while exchanging an authorization code."""
