"""
Identity verification for bearer credentials.

Tokens are issued by an external identity service; this module only
validates them and extracts the caller's subject identifier.
"""

from typing import Optional, Dict, Any, List
from jose import JWTError, jwt
from backend.app.core.config import settings
from backend.app.core.exceptions import Unauthenticated


class IdentityVerifier:
    """
    Validates bearer tokens and returns their claims.

    Usage:
        verifier = IdentityVerifier.from_settings()
        claims = verifier.verify(token)
        uid = claims["sub"]
    """

    def __init__(
        self,
        key: str,
        algorithms: List[str],
        audience: Optional[str] = None,
        issuer: Optional[str] = None
    ):
        self.key = key
        self.algorithms = algorithms
        self.audience = audience
        self.issuer = issuer

    @classmethod
    def from_settings(cls) -> "IdentityVerifier":
        return cls(
            key=settings.identity_secret_key,
            algorithms=[settings.identity_algorithm],
            audience=settings.identity_audience,
            issuer=settings.identity_issuer,
        )

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate a bearer token.

        Args:
            token: Raw token string (without the "Bearer " prefix)

        Returns:
            Decoded claims with a guaranteed "sub" entry

        Raises:
            Unauthenticated: if the signature, expiry, audience or issuer
                check fails, or the token carries no subject
        """
        try:
            claims = jwt.decode(
                token,
                self.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except JWTError:
            raise Unauthenticated("Invalid or expired credential")

        subject = claims.get("sub") or claims.get("user_id")
        if not subject:
            raise Unauthenticated("Credential carries no subject")

        claims["sub"] = str(subject)
        return claims
