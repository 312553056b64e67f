"""
The authorization chain.

:class:`AuthChain` extracts the bearer credential from a request once, and
offers it to each strategy in turn. The first strategy that authorizes or
rejects ends the chain. If every strategy abstains, or there is no bearer
credential at all, the decision is delegated to the next authenticator
(usually username/password) and returned as-is.
"""

import logging
from typing import Iterable, Optional

from ..domain import AuthRequest, Decision
from .strategies import NextAuthenticator, RejectAll, Strategy

logger = logging.getLogger(__name__)

BEARER = 'bearer'


def extract_bearer(header: Optional[str]) -> Optional[str]:
    """
    Get the credential from an ``Authorization: Bearer <credential>`` value.

    Returns ``None`` if the header is missing, uses another scheme, or does
    not have exactly two parts.
    """
    if not header:
        return None
    parts = header.split()
    if len(parts) != 2 or parts[0].lower() != BEARER:
        logger.debug('Authorization header is not a bearer credential')
        return None
    return parts[1]


class AuthChain(object):
    """Tries each strategy in order, then the next authenticator."""

    def __init__(self, strategies: Iterable[Strategy],
                 next_authenticator: Optional[NextAuthenticator] = None) \
            -> None:
        self.strategies = tuple(strategies)
        if next_authenticator is None:
            next_authenticator = RejectAll()
        self.next_authenticator = next_authenticator

    def authorize(self, request: AuthRequest, right: str) -> Decision:
        """
        Decide whether ``request`` may exercise ``right``.

        Parameters
        ----------
        request : :class:`.AuthRequest`
        right : str

        Returns
        -------
        :class:`.Decision`
            Authorized or rejected. The reason code is for logging only and
            must not be shown to the client.

        """
        decision = self._decide(request, right)
        logger.info('Request for %r %s by %s (%s)', right, decision.outcome,
                    decision.strategy, decision.reason or 'ok')
        return decision

    def _decide(self, request: AuthRequest, right: str) -> Decision:
        credential = extract_bearer(request.authorization)
        if credential is None:
            logger.debug('No bearer credential, delegating')
            return self._delegate(request, right)

        for strategy in self.strategies:
            decision = strategy.try_authorize(credential, right,
                                              request.identity)
            if not decision.is_abstain:
                return decision
            logger.debug('Strategy %s abstained: %s', strategy.name,
                         decision.reason)
        return self._delegate(request, right)

    def _delegate(self, request: AuthRequest, right: str) -> Decision:
        decision = self.next_authenticator.authorize(request, right)
        if decision.is_abstain:
            # The chain has nowhere left to go.
            return Decision.rejected(decision.reason
                                     or Decision.reasons.NO_CREDENTIAL,
                                     decision.strategy)
        return decision
