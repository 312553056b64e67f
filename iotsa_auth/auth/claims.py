"""Checks on the claims of a verified signed token."""

import math
from datetime import datetime
from typing import Optional

from pytz import UTC

from .. import rights
from ..domain import Claims, Decision, TrustAnchor


def _valid_expiry(expires: object) -> bool:
    if isinstance(expires, bool) or not isinstance(expires, (int, float)):
        return False
    return math.isfinite(expires)


def _audience_matches(audience: object, identity: str) -> bool:
    if isinstance(audience, str):
        return audience == identity
    if isinstance(audience, (list, tuple, set, frozenset)):
        return identity in audience
    return False


def validate(claims: Claims, anchor: TrustAnchor, requested_right: str,
             identity: str, now: Optional[datetime] = None,
             leeway: float = 0, strategy: Optional[str] = None) -> Decision:
    """
    Decide whether verified ``claims`` authorize ``requested_right``.

    Checks are applied in order and the first failure rejects the token:
    issuer, audience (only when the token carries one), expiry (only when
    the token carries ``exp``, which must then be a finite number), and
    finally rights. Nothing here mutates shared state.

    Parameters
    ----------
    claims : :class:`.Claims`
    anchor : :class:`.TrustAnchor`
    requested_right : str
    identity : str
        The canonical name of this server, matched against ``aud``.
    now : :class:`datetime`
        Defaults to the current time.
    leeway : float
        Seconds of clock skew tolerated when checking ``exp``.

    Returns
    -------
    :class:`.Decision`
        Either authorized or rejected; never abstain.

    """
    reasons = Decision.reasons
    if not anchor.trusted_issuer or claims.issuer != anchor.trusted_issuer:
        return Decision.rejected(reasons.ISSUER_MISMATCH, strategy)

    if claims.audience is not None \
            and not _audience_matches(claims.audience, identity):
        return Decision.rejected(reasons.AUDIENCE_MISMATCH, strategy)

    if claims.expires is not None:
        if not _valid_expiry(claims.expires):
            return Decision.rejected(reasons.INVALID_EXPIRY, strategy)
        if now is None:
            now = datetime.now(tz=UTC)
        if claims.expires + leeway <= now.timestamp():
            return Decision.rejected(reasons.EXPIRED, strategy)

    if not rights.satisfies(claims.rights, requested_right):
        return Decision.rejected(reasons.INSUFFICIENT_RIGHTS, strategy)
    return Decision.authorized(strategy)
