"""Tokens, trust settings and decisions used to authorize requests."""

from typing import Any, Iterable, NamedTuple, Optional, Tuple, Union

RightsSpec = Union[str, Iterable[str], None]


class Token(NamedTuple):
    """An administrator-issued static token."""

    token: str
    """The opaque secret presented by the client."""

    rights: str = ''
    """
    Rights granted to holders of this token.

    Either ``*`` or a list of right names such as ``/doorbell/tokens/``. See
    :mod:`iotsa_auth.rights`.
    """


class TokenTable(NamedTuple):
    """An ordered, immutable table of static tokens."""

    tokens: Tuple[Token, ...] = ()

    @property
    def ntoken(self) -> int:
        """Number of tokens in the table."""
        return len(self.tokens)

    def lookup(self, credential: str) -> Optional[str]:
        """Return the rights of the first token matching ``credential``."""
        if not credential:
            return None
        for entry in self.tokens:
            if entry.token == credential:
                return entry.rights
        return None

    def to_list(self) -> list:
        """Serializable representation of the table."""
        return [entry._asdict() for entry in self.tokens]

    @classmethod
    def from_list(cls, data: Optional[Iterable[dict]]) -> 'TokenTable':
        """Build a table from its serialized form."""
        return cls(tuple(
            Token(str(item.get('token') or ''), str(item.get('rights') or ''))
            for item in data or []
        ))


class TrustAnchor(NamedTuple):
    """The single issuer whose signed tokens are trusted."""

    trusted_issuer: str = ''
    """Expected value of the ``iss`` claim."""

    issuer_key: str = ''
    """Shared secret used to verify token signatures."""

    @property
    def enabled(self) -> bool:
        """Signed tokens are only considered when a key is configured."""
        return bool(self.issuer_key)

    def to_dict(self) -> dict:
        """Serializable representation, using the device's key names."""
        return {'trustedIssuer': self.trusted_issuer,
                'issuerKey': self.issuer_key}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'TrustAnchor':
        """Build a trust anchor from its serialized form."""
        data = data or {}
        return cls(str(data.get('trustedIssuer') or ''),
                   str(data.get('issuerKey') or ''))


class Claims(NamedTuple):
    """Claims carried by a verified signed token."""

    issuer: Optional[str] = None
    audience: Union[str, Iterable[str], None] = None
    rights: RightsSpec = None
    expires: Any = None
    """The ``exp`` claim as sent; checked by the claim validator."""

    @classmethod
    def from_payload(cls, payload: dict) -> 'Claims':
        """
        Extract the claims we care about from a decoded token payload.

        Rights are read from the ``right`` claim, falling back to ``rights``.
        A malformed ``exp`` is kept as-is so that it can be rejected.
        """
        rights = payload.get('right')
        if rights is None:
            rights = payload.get('rights')
        return cls(issuer=payload.get('iss'),
                   audience=payload.get('aud'),
                   rights=rights,
                   expires=payload.get('exp'))


class AuthRequest(NamedTuple):
    """The parts of an inbound request needed to authorize it."""

    authorization: Optional[str] = None
    """Raw value of the ``Authorization`` header, if any."""

    identity: str = ''
    """Canonical host name or address of this server."""


class Decision(NamedTuple):
    """The outcome of an authorization step."""

    outcome: str
    """One of :class:`Decision.outcomes`."""

    reason: Optional[str] = None
    """Internal reason code. Logged, never sent to the client."""

    strategy: Optional[str] = None
    """Name of the strategy that produced this decision."""

    class outcomes:
        """Possible outcomes."""

        AUTHORIZED = 'authorized'
        REJECTED = 'rejected'
        ABSTAIN = 'abstain'

    class reasons:
        """Reason codes attached to decisions."""

        NO_CREDENTIAL = 'no credential'
        UNKNOWN_TOKEN = 'unknown token'
        DISABLED = 'strategy disabled'
        MALFORMED = 'malformed token'
        BAD_SIGNATURE = 'signature invalid'
        BAD_ALGORITHM = 'unsupported algorithm'
        ISSUER_MISMATCH = 'issuer mismatch'
        AUDIENCE_MISMATCH = 'audience mismatch'
        EXPIRED = 'token expired'
        INVALID_EXPIRY = 'invalid expiry'
        INSUFFICIENT_RIGHTS = 'insufficient rights'
        DELEGATE_REJECTED = 'rejected by next authenticator'

    @classmethod
    def authorized(cls, strategy: Optional[str] = None) -> 'Decision':
        return cls(cls.outcomes.AUTHORIZED, None, strategy)

    @classmethod
    def rejected(cls, reason: str,
                 strategy: Optional[str] = None) -> 'Decision':
        return cls(cls.outcomes.REJECTED, reason, strategy)

    @classmethod
    def abstain(cls, reason: str,
                strategy: Optional[str] = None) -> 'Decision':
        return cls(cls.outcomes.ABSTAIN, reason, strategy)

    @property
    def is_authorized(self) -> bool:
        return self.outcome == self.outcomes.AUTHORIZED

    @property
    def is_rejected(self) -> bool:
        return self.outcome == self.outcomes.REJECTED

    @property
    def is_abstain(self) -> bool:
        return self.outcome == self.outcomes.ABSTAIN
