"""Bearer access tokens.

A token carries a single claim, ``user_id``, signed with HS256 under the
configured secret. Tokens are minted by ``shelfbase issue-token``; there is
no sign-in endpoint and no refresh token.
"""

from datetime import datetime, timedelta, timezone

import jwt

from shelfbase.core.config import get_settings


class TokenError(Exception):
    pass


class TokenExpiredError(TokenError):
    pass


class InvalidTokenError(TokenError):
    pass


class JWTService:
    ALGORITHM = "HS256"
    ISSUER = "shelfbase"

    def __init__(self, secret_key: str | None = None) -> None:
        # None reads the secret from settings on every call
        self._secret_key = secret_key

    @property
    def secret_key(self) -> str:
        return self._secret_key or get_settings().secret_key

    def create_access_token(self, user_id: str, expires_delta: timedelta | None = None) -> str:
        """Sign a token naming ``user_id``.

        The lifetime defaults to ``access_token_expire_minutes``.
        """
        if expires_delta is None:
            expires_delta = timedelta(minutes=get_settings().access_token_expire_minutes)
        issued_at = datetime.now(timezone.utc)
        claims = {
            "iss": self.ISSUER,
            "iat": issued_at,
            "exp": issued_at + expires_delta,
            "user_id": user_id,
        }
        return jwt.encode(claims, self.secret_key, algorithm=self.ALGORITHM)

    def user_id_from(self, token: str) -> str:
        """Return the user ID a valid token names.

        Raises:
            TokenExpiredError: The token is past its ``exp``.
            InvalidTokenError: Bad signature, wrong issuer or no ``user_id``.
        """
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={"require": ["exp", "iss"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(str(e)) from e

        user_id = claims.get("user_id")
        if not isinstance(user_id, str) or not user_id:
            raise InvalidTokenError("Token names no user")
        return user_id


jwt_service = JWTService()
