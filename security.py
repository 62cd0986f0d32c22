from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from config import BCRYPT_ROUNDS, JWT_ALGORITHM, JWT_PREVIOUS_SECRETS, TOKEN_TTL, logger, signing_secret
from errors import AccessDenied, InvalidToken
from schemas import Role

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        return False
    try:
        return pwd_context.verify(password, password_hash)
    except ValueError:
        # Stored value is not a recognizable hash.
        return False


class Identity(BaseModel):
    email: str
    role: Role


class TokenCodec:
    """
    Signs and verifies session tokens carrying (email, role).

    Tokens are signed with `secret`. Any of `previous_secrets` is still
    accepted when verifying, so a secret can be rotated without logging
    everybody out before their tokens expire.
    """

    def __init__(
        self,
        secret: str,
        previous_secrets: Iterable[str] = (),
        algorithm: str = "HS256",
        ttl: timedelta = timedelta(hours=1),
    ):
        if not secret:
            raise ValueError("A signing secret is required")
        self.secret = secret
        self.previous_secrets = [s for s in previous_secrets if s and s != secret]
        self.algorithm = algorithm
        self.ttl = ttl

    def issue(self, email: str, role, now: Optional[datetime] = None) -> str:
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "email": email,
            "role": Role(role).value,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify(self, token: Optional[str]) -> Identity:
        if not token or not isinstance(token, str):
            raise InvalidToken()
        for secret in [self.secret, *self.previous_secrets]:
            try:
                payload = jwt.decode(token, secret, algorithms=[self.algorithm])
            except JWTError:
                continue
            return self._identity(payload)
        raise InvalidToken()

    @staticmethod
    def _identity(payload: dict) -> Identity:
        email = payload.get("email")
        role = payload.get("role")
        if not isinstance(email, str) or not email or role not in {r.value for r in Role}:
            raise InvalidToken()
        return Identity(email=email, role=role)


class AccessGuard:
    """Verifies the bearer token of a request and applies role gates."""

    def __init__(self, codec: TokenCodec):
        self.codec = codec

    def authenticate(self, token: Optional[str]) -> Identity:
        try:
            return self.codec.verify(token)
        except InvalidToken:
            logger.warning("Rejected invalid token")
            raise

    def require_role(self, token: Optional[str], role: Role) -> Identity:
        identity = self.authenticate(token)
        if identity.role != role:
            logger.warning("Denied %s to %s (role %s)", role.value, identity.email, identity.role.value)
            raise AccessDenied()
        return identity


def build_codec() -> TokenCodec:
    return TokenCodec(
        signing_secret(),
        previous_secrets=JWT_PREVIOUS_SECRETS,
        algorithm=JWT_ALGORITHM,
        ttl=TOKEN_TTL,
    )
