import jwt
import pytest

from fleetgate.web.auth.tokens import decode_session_token
from tests.helpers import SESSION_SECRET, TENANT_A, make_token


@pytest.mark.unit
class TestDecodeSessionToken:
    def test_valid_token(self) -> None:
        claims = decode_session_token(make_token(role="MANAGER", sub="u-9"), SESSION_SECRET)
        assert claims.sub == "u-9"
        assert claims.tenant_id == TENANT_A
        assert claims.role == "MANAGER"
        assert claims.email == "u-9@example.com"
        assert claims.tenant_slug is None

    def test_missing_tenant_and_role_are_none(self) -> None:
        claims = decode_session_token(make_token(tenant_id=None, role=None), SESSION_SECRET)
        assert claims.tenant_id is None
        assert claims.role is None

    def test_wrong_secret_rejected(self) -> None:
        token = make_token(secret="another-secret-that-is-long-enough-xx")
        with pytest.raises(jwt.InvalidSignatureError):
            decode_session_token(token, SESSION_SECRET)

    def test_missing_sub_rejected(self) -> None:
        token = jwt.encode({"tenant_id": TENANT_A}, SESSION_SECRET, algorithm="HS256")
        with pytest.raises(jwt.MissingRequiredClaimError):
            decode_session_token(token, SESSION_SECRET)

    def test_garbage_rejected(self) -> None:
        with pytest.raises(jwt.PyJWTError):
            decode_session_token("not-a-jwt", SESSION_SECRET)
