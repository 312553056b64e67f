"""Fixtures shared by the tests of this package."""

import pytest

from iotsa_auth import factory
from iotsa_auth.services.config_store import MemoryConfigStore

ADMIN_TOKEN = 'admintoken'
DOORBELL_TOKEN = 'doorbelltoken'
ISSUER = 'https://issuer.example'
KEY = 'k1'


@pytest.fixture()
def store():
    return MemoryConfigStore(
        statictokens=[
            {'token': ADMIN_TOKEN, 'rights': '/tokens/'},
            {'token': DOORBELL_TOKEN, 'rights': '/doorbell/'},
        ],
        jwtkeys={'trustedIssuer': ISSUER, 'issuerKey': KEY},
    )


@pytest.fixture()
def app(store):
    app = factory.create_web_app(store=store, SERVER_IDENTITY='doorbell.local')
    app.config['TESTING'] = True
    return app


@pytest.fixture()
def client(app):
    return app.test_client()
