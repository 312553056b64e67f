"""Tests for :mod:`iotsa_auth.auth.tokens`."""

from unittest import TestCase

import jwt

from .. import tokens
from ...exceptions import MalformedToken, SignatureInvalid, \
    UnsupportedAlgorithm, VerificationFailed
from .util import ISSUER, KEY, signed, signed_payload, unsigned


class TestVerify(TestCase):
    """Tests for :func:`.tokens.verify`."""

    def test_valid(self):
        """A token signed with the key yields its payload."""
        claims = {'iss': ISSUER, 'right': 'doorbell'}
        self.assertEqual(tokens.verify(signed(claims), KEY), claims)

    def test_other_algorithms(self):
        claims = {'iss': ISSUER, 'right': 'doorbell'}
        for algorithm in ['HS384', 'HS512']:
            token = signed(claims, algorithm=algorithm)
            self.assertEqual(tokens.verify(token, KEY), claims)

    def test_claims_are_not_checked(self):
        """Expired or audience-scoped tokens still verify."""
        claims = {'iss': ISSUER, 'aud': 'elsewhere', 'exp': 1}
        self.assertEqual(tokens.verify(signed(claims), KEY), claims)

    def test_registered_claims_are_not_checked(self):
        """Odd ``sub`` or ``jti`` values do not make a token malformed."""
        for claims in [{'iss': ISSUER, 'sub': 42},
                       {'iss': ISSUER, 'jti': ['a']},
                       {'iss': ISSUER, 'exp': '1'}]:
            self.assertEqual(tokens.verify(signed_payload(claims), KEY),
                             claims)

    def test_wrong_key(self):
        token = signed({'iss': ISSUER}, key='nottherightsecret')
        with self.assertRaises(SignatureInvalid):
            tokens.verify(token, KEY)

    def test_none_algorithm(self):
        """Unsigned tokens are refused outright."""
        with self.assertRaises(UnsupportedAlgorithm):
            tokens.verify(unsigned({'iss': ISSUER}), KEY)
        with self.assertRaises(UnsupportedAlgorithm):
            tokens.verify(unsigned({'iss': ISSUER}, 'None'), KEY)

    def test_asymmetric_algorithm(self):
        with self.assertRaises(UnsupportedAlgorithm):
            tokens.verify(unsigned({'iss': ISSUER}, 'RS256'), KEY)

    def test_restricted_algorithms(self):
        """Configuration may narrow the allow-list."""
        token = signed({'iss': ISSUER}, algorithm='HS256')
        with self.assertRaises(UnsupportedAlgorithm):
            tokens.verify(token, KEY, algorithms=['HS512'])

    def test_not_a_token(self):
        for raw in ['definitelynotatoken', 'a.b', 'a.b.c', '...', '']:
            with self.assertRaises(MalformedToken):
                tokens.verify(raw, KEY)

    def test_payload_not_an_object(self):
        """A correctly signed payload must still be a claim set."""
        raw = jwt.PyJWS().encode(b'[1, 2, 3]', KEY, algorithm='HS256')
        with self.assertRaises(MalformedToken):
            tokens.verify(raw, KEY)

    def test_empty_key(self):
        """Verification is never attempted without a key."""
        with self.assertRaises(VerificationFailed):
            tokens.verify(signed({'iss': ISSUER}, key='x'), '')

    def test_failures_share_a_base(self):
        for exc in [MalformedToken, SignatureInvalid, UnsupportedAlgorithm]:
            self.assertTrue(issubclass(exc, VerificationFailed))


class TestAllowedAlgorithms(TestCase):
    """Tests for :func:`.tokens.allowed_algorithms`."""

    def test_default(self):
        self.assertEqual(tokens.allowed_algorithms(),
                         ('HS256', 'HS384', 'HS512'))

    def test_narrowed(self):
        self.assertEqual(tokens.allowed_algorithms(['hs512', ' HS256 ']),
                         ('HS256', 'HS512'))

    def test_cannot_widen(self):
        self.assertEqual(tokens.allowed_algorithms(['none', 'RS256']), ())
