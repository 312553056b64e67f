"""Verification of signed (JWT) bearer tokens."""

import logging
from typing import Iterable, Optional, Tuple

import jwt

from ..exceptions import MalformedToken, SignatureInvalid, \
    UnsupportedAlgorithm, VerificationFailed

logger = logging.getLogger(__name__)

ALLOWED_ALGORITHMS: Tuple[str, ...] = ('HS256', 'HS384', 'HS512')
"""Keyed-MAC algorithms we are willing to verify. Never ``none``."""

# Only the signature is checked here; claims are checked by
# :mod:`iotsa_auth.auth.claims` so that a bad claim can be told apart
# from a bad token.
_DECODE_OPTIONS = {
    'verify_signature': True,
    'verify_aud': False,
    'verify_iss': False,
    'verify_exp': False,
    'verify_nbf': False,
    'verify_iat': False,
    'verify_sub': False,
    'verify_jti': False,
}


def allowed_algorithms(configured: Optional[Iterable[str]] = None) \
        -> Tuple[str, ...]:
    """
    Narrow :data:`ALLOWED_ALGORITHMS` to those in ``configured``.

    Configuration can restrict the allow-list but never extend it; unknown
    names are ignored.
    """
    if configured is None:
        return ALLOWED_ALGORITHMS
    wanted = {name.strip().upper() for name in configured if name.strip()}
    return tuple(alg for alg in ALLOWED_ALGORITHMS if alg in wanted)


def verify(raw: str, key: str,
           algorithms: Optional[Iterable[str]] = None) -> dict:
    """
    Verify the signature of a compact signed token and return its payload.

    Parameters
    ----------
    raw : str
        The ``header.payload.signature`` token, base64url encoded.
    key : str
        Shared secret of the trusted issuer. Must not be empty.
    algorithms : iterable
        Optional restriction of :data:`ALLOWED_ALGORITHMS`.

    Returns
    -------
    dict
        The decoded claim set.

    Raises
    ------
    :class:`MalformedToken`
        The token could not be split or decoded, or its payload is not a
        JSON object.
    :class:`UnsupportedAlgorithm`
        The header names an algorithm outside the allow-list.
    :class:`SignatureInvalid`
        The signature does not match.

    """
    if not key:
        raise VerificationFailed('No verification key configured')
    allowed = allowed_algorithms(algorithms)
    try:
        header = jwt.get_unverified_header(raw)
    except jwt.exceptions.InvalidTokenError as e:
        raise MalformedToken('Not a valid token') from e

    algorithm = header.get('alg')
    if algorithm not in allowed:
        logger.debug('Refusing token signed with %r', algorithm)
        raise UnsupportedAlgorithm(f'Algorithm not allowed: {algorithm}')

    try:
        payload: dict = jwt.decode(raw, key, algorithms=[algorithm],
                                   options=_DECODE_OPTIONS)
    except jwt.exceptions.InvalidSignatureError as e:
        raise SignatureInvalid('Signature verification failed') from e
    except jwt.exceptions.InvalidAlgorithmError as e:
        raise UnsupportedAlgorithm(f'Algorithm not allowed: {algorithm}') \
            from e
    except jwt.exceptions.InvalidTokenError as e:
        raise MalformedToken('Not a valid token') from e
    except jwt.exceptions.PyJWTError as e:
        raise VerificationFailed(f'Token could not be verified: {e}') from e
    return payload
