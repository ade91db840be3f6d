import pytest
from firebase_admin import auth

from valdicass.server.errors import Forbidden, TokenVerificationError, Unauthenticated
from valdicass.services.identity import Caller, FirebaseTokenVerifier, authenticate, parse_bearer


def test_parse_bearer_requires_exact_prefix():
    assert parse_bearer("Bearer abc.def") == "abc.def"
    for header in (None, "", "bearer abc", "Token abc", "Bearerabc"):
        with pytest.raises(Unauthenticated):
            parse_bearer(header)


def test_authenticate_returns_caller(verifier):
    caller = authenticate("Bearer token-u1", verifier)
    assert isinstance(caller, Caller)
    assert caller.uid == "U1"
    assert caller.email == "U1@valdicass.com"
    assert verifier.seen == ["token-u1"]


def test_invalid_token_is_forbidden_not_unauthenticated(verifier):
    with pytest.raises(Forbidden) as exc:
        authenticate("Bearer garbage", verifier)
    assert exc.value.status_code == 403


def test_empty_token_goes_to_the_verifier(verifier):
    with pytest.raises(Forbidden):
        authenticate("Bearer ", verifier)
    assert verifier.seen == [""]


def test_token_without_uid_is_forbidden():
    class NoUid:
        def verify(self, token):
            return {"email": "x@y.z"}

    with pytest.raises(Forbidden):
        authenticate("Bearer t", NoUid())


def _raise(exc):
    def fake_verify(token, app=None):
        raise exc
    return fake_verify


@pytest.mark.parametrize(
    "exc",
    [
        auth.InvalidIdTokenError("Token expired", None),
        ValueError("Illegal ID token provided."),
    ],
)
def test_firebase_verifier_wraps_provider_errors(monkeypatch, exc):
    monkeypatch.setattr(auth, "verify_id_token", _raise(exc))
    verifier = FirebaseTokenVerifier()

    with pytest.raises(TokenVerificationError):
        verifier.verify("abc")
    with pytest.raises(Forbidden):
        authenticate("Bearer abc", verifier)


def test_firebase_verifier_returns_decoded_token(monkeypatch):
    monkeypatch.setattr(auth, "verify_id_token", lambda token, app=None: {"uid": "U9"})
    assert authenticate("Bearer abc", FirebaseTokenVerifier()).uid == "U9"
