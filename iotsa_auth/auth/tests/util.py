"""Helpers for building signed tokens in tests."""

import base64
import json

import jwt

ISSUER = 'https://issuer.example'
KEY = 'k1'


def b64(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode('ascii').rstrip('=')


def signed(claims: dict, key: str = KEY, algorithm: str = 'HS256') -> str:
    """Make a signed token the way the issuer would."""
    return jwt.encode(claims, key, algorithm=algorithm)


def unsigned(claims: dict, algorithm: str = 'none') -> str:
    """Make a token with an empty signature and an arbitrary ``alg``."""
    header = b64(json.dumps({'alg': algorithm, 'typ': 'JWT'}).encode())
    payload = b64(json.dumps(claims).encode())
    return f'{header}.{payload}.'


def flipped(token: str, position: int) -> str:
    """Change the base64 character at ``position``."""
    replacement = 'B' if token[position] == 'A' else 'A'
    return token[:position] + replacement + token[position + 1:]


def signed_payload(claims: dict, key: str = KEY) -> str:
    """Sign ``claims`` as-is, without any claim handling by the encoder."""
    return jwt.PyJWS().encode(json.dumps(claims).encode(), key,
                              algorithm='HS256')
