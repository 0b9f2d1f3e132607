"""
Authorization guards.

Each route declares the ordered list of guards it needs:

    @router.patch("/parcels/{parcel_id}/assign")
    async def assign_rider(
        ctx: AuthContext = Depends(require_guards(Guard.CREDENTIAL, Guard.SUBJECT_MATCH, Guard.ADMIN)),
        ...
    ):

Guards run in the declared order and stop at the first failure. Each guard
receives the AuthContext produced by the previous one and returns a new
one, so the verified identity reaches the handler as an explicit value.
Nothing is cached between requests: role guards re-read the user record
every time.
"""

import enum
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from backend.app.core.dependencies import get_identity_verifier
from backend.app.core.exceptions import Unauthenticated, Forbidden
from backend.app.core.identity import IdentityVerifier
from backend.app.db.gateway import Collection, DocumentStore, get_store
from backend.app.models.enums import UserRole
from backend.app.models.user import User

# auto_error=False so a missing header reaches the credential guard
bearer_scheme = HTTPBearer(auto_error=False)


class Guard(str, enum.Enum):
    CREDENTIAL = "credential"
    SUBJECT_MATCH = "subject_match"
    ADMIN = "admin"
    RIDER = "rider"


@dataclass(frozen=True)
class AuthContext:
    """What the guards know about the caller of one request."""
    token: Optional[str] = None
    query_uid: Optional[str] = None
    query_email: Optional[str] = None
    subject_id: Optional[str] = None
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)
    user: Optional[User] = None

    @property
    def caller_email(self) -> Optional[str]:
        """Email used for role lookups: token claim first, then the query string."""
        return self.email or self.query_email


GuardCheck = Callable[[AuthContext, IdentityVerifier, Collection], Awaitable[AuthContext]]


async def check_credential(ctx: AuthContext, verifier: IdentityVerifier, users: Collection) -> AuthContext:
    """Require a valid bearer credential and attach the verified subject."""
    if not ctx.token:
        raise Unauthenticated("Unauthorized access")

    claims = verifier.verify(ctx.token)
    return replace(ctx, subject_id=claims["sub"], email=claims.get("email"), claims=claims)


async def check_subject_match(ctx: AuthContext, verifier: IdentityVerifier, users: Collection) -> AuthContext:
    """Require the uid query parameter to name the verified subject."""
    if ctx.subject_id is None or ctx.query_uid != ctx.subject_id:
        raise Forbidden("Forbidden access")
    return ctx


def role_check(role: UserRole) -> GuardCheck:
    """Build a guard that requires the caller's user record to hold role."""
    async def check_role(ctx: AuthContext, verifier: IdentityVerifier, users: Collection) -> AuthContext:
        email = ctx.caller_email
        user = await users.find_one({"email": email}) if email else None
        if not user or user.role != role:
            raise Forbidden(
                f"Access denied. Required role: {role.value}",
                details={"required_role": role.value}
            )
        return replace(ctx, user=user)

    return check_role


GUARD_CHECKS: Dict[Guard, GuardCheck] = {
    Guard.CREDENTIAL: check_credential,
    Guard.SUBJECT_MATCH: check_subject_match,
    Guard.ADMIN: role_check(UserRole.ADMIN),
    Guard.RIDER: role_check(UserRole.RIDER),
}


async def run_guards(
    guards: Sequence[Guard],
    ctx: AuthContext,
    verifier: IdentityVerifier,
    users: Collection
) -> AuthContext:
    """
    Evaluate guards in order against ctx.

    Returns:
        The context after the last guard

    Raises:
        Unauthenticated / Forbidden from the first failing guard
    """
    for guard in guards:
        ctx = await GUARD_CHECKS[guard](ctx, verifier, users)
    return ctx


def require_guards(*guards: Guard):
    """
    Dependency factory turning a declared guard list into an AuthContext.

    Args:
        guards: Guards to evaluate, in order

    Returns:
        FastAPI dependency yielding the AuthContext for the handler
    """
    async def guard_pipeline(
        request: Request,
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
        store: DocumentStore = Depends(get_store),
        verifier: IdentityVerifier = Depends(get_identity_verifier)
    ) -> AuthContext:
        ctx = AuthContext(
            token=credentials.credentials if credentials else None,
            query_uid=request.query_params.get("uid"),
            query_email=request.query_params.get("email"),
        )
        return await run_guards(guards, ctx, verifier, store.users)

    return guard_pipeline
