"""
Authentication strategies that make up the chain.

Each strategy looks at the bearer credential and returns a
:class:`.Decision`: authorized, rejected, or abstain when the credential is
not one it knows about. Authorized and rejected are final; abstain passes
the credential on to the next strategy.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from .. import rights
from ..domain import AuthRequest, Claims, Decision
from ..exceptions import SignatureInvalid, UnsupportedAlgorithm, \
    VerificationFailed
from ..store import TokenStore, TrustStore
from . import claims, tokens

logger = logging.getLogger(__name__)


def _failure_reason(error: VerificationFailed) -> str:
    if isinstance(error, UnsupportedAlgorithm):
        return Decision.reasons.BAD_ALGORITHM
    if isinstance(error, SignatureInvalid):
        return Decision.reasons.BAD_SIGNATURE
    return Decision.reasons.MALFORMED


class Strategy(object):
    """Base class for a link in the authorization chain."""

    name = 'strategy'

    def try_authorize(self, credential: str, right: str,
                      identity: str) -> Decision:
        """Decide on ``credential`` for ``right``, or abstain."""
        raise NotImplementedError('Implement in subclass')


class StaticTokenStrategy(Strategy):
    """Looks the credential up in the administrator's static token table."""

    name = 'static'

    def __init__(self, store: TokenStore) -> None:
        self.store = store

    def try_authorize(self, credential: str, right: str,
                      identity: str) -> Decision:
        granted = self.store.snapshot().lookup(credential)
        if granted is None:
            return Decision.abstain(Decision.reasons.UNKNOWN_TOKEN,
                                    self.name)
        # A known token with the wrong rights must not fall back to a
        # weaker strategy.
        if rights.satisfies(granted, right):
            return Decision.authorized(self.name)
        return Decision.rejected(Decision.reasons.INSUFFICIENT_RIGHTS,
                                 self.name)


class SignedTokenStrategy(Strategy):
    """Verifies a token signed by the trusted issuer and checks its claims."""

    name = 'signed'

    def __init__(self, trust: TrustStore,
                 algorithms: Optional[Iterable[str]] = None,
                 leeway: float = 0,
                 clock: Optional[Callable[[], datetime]] = None) -> None:
        self.trust = trust
        self.algorithms = tokens.allowed_algorithms(algorithms)
        self.leeway = leeway
        self.clock = clock

    def try_authorize(self, credential: str, right: str,
                      identity: str) -> Decision:
        reasons = Decision.reasons
        anchor = self.trust.get()
        if not anchor.enabled:
            return Decision.abstain(reasons.DISABLED, self.name)
        try:
            payload = tokens.verify(credential, anchor.issuer_key,
                                    self.algorithms)
        except VerificationFailed as e:
            logger.debug('Signed token refused: %s', e)
            return Decision.abstain(_failure_reason(e), self.name)

        now = self.clock() if self.clock is not None else None
        return claims.validate(Claims.from_payload(payload), anchor, right,
                               identity, now=now, leeway=self.leeway,
                               strategy=self.name)


class NextAuthenticator(object):
    """
    The terminal link of the chain.

    Usually username/password authentication. It receives the whole request
    since it may want to look at credentials other than a bearer token.
    """

    name = 'next'

    def authorize(self, request: AuthRequest, right: str) -> Decision:
        raise NotImplementedError('Implement in subclass')


class RejectAll(NextAuthenticator):
    """Rejects every request. The default when nothing else is installed."""

    name = 'reject-all'

    def authorize(self, request: AuthRequest, right: str) -> Decision:
        return Decision.rejected(Decision.reasons.DELEGATE_REJECTED,
                                 self.name)


class CallbackAuthenticator(NextAuthenticator):
    """
    Adapts a ``needs_authentication(right) -> bool`` callable.

    This is the shape of the password module's entry point: it returns
    ``True`` when the request still needs to authenticate, i.e. when it is
    *not* authorized.
    """

    name = 'password'

    def __init__(self, needs_authentication: Callable[[str], bool],
                 name: Optional[str] = None) -> None:
        self.needs_authentication = needs_authentication
        if name:
            self.name = name

    def authorize(self, request: AuthRequest, right: str) -> Decision:
        if self.needs_authentication(right):
            return Decision.rejected(Decision.reasons.DELEGATE_REJECTED,
                                     self.name)
        return Decision.authorized(self.name)
