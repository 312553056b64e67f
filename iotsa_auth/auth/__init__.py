"""Provides the Flask integration for bearer token authorization."""

import logging
from typing import Optional

from flask import Flask, current_app, request

from ..domain import AuthRequest, Decision
from ..exceptions import ConfigurationError
from ..services import config_store
from ..store import TokenStore, TrustStore
from .chain import AuthChain
from .strategies import NextAuthenticator, SignedTokenStrategy, \
    StaticTokenStrategy

logger = logging.getLogger(__name__)

EXTENSION = 'iotsa_auth'


class Auth(object):
    """
    Loads the token table and trust anchor and builds the chain.

    Intended for use in a Flask application factory, for example:

    .. code-block:: python

       from flask import Flask
       from iotsa_auth.auth import Auth
       from iotsa_auth.auth.decorators import scoped


       def create_web_app() -> Flask:
           app = Flask('doorbell')
           app.config.from_pyfile('config.py')
           Auth(app, next_authenticator=PasswordAuthenticator())
           return app


       @blueprint.route('/ring', methods=['POST'])
       @scoped('doorbell')
       def ring():
           ...

    """

    def __init__(self, app: Optional[Flask] = None,
                 next_authenticator: Optional[NextAuthenticator] = None,
                 store: Optional[config_store.ConfigStore] = None) -> None:
        """
        Initialize ``app`` with `Auth`.

        Parameters
        ----------
        app : :class:`Flask`
        next_authenticator : :class:`.NextAuthenticator`
            Consulted when no strategy recognizes the credential. Defaults
            to rejecting the request.
        store : :class:`.ConfigStore`
            Where the token table and trust anchor are persisted. Defaults
            to the backend named by ``AUTH_CONFIG_BACKEND``.

        """
        self.next_authenticator = next_authenticator
        self.store = store
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        """Load persisted state and attach the chain to ``app``."""
        self.app = app
        app.config.setdefault('AUTH_CONFIG_BACKEND', 'file')
        app.config.setdefault('AUTH_CONFIG_DIR', 'config')
        app.config.setdefault('JWT_ALGORITHMS', 'HS256 HS384 HS512')
        app.config.setdefault('JWT_LEEWAY', 0)
        app.config.setdefault('SERVER_IDENTITY', None)

        if self.store is None:
            self.store = config_store.from_config(app.config)
        self.tokens = TokenStore()
        self.trust = TrustStore()
        self.tokens.load(self.store)
        self.trust.load(self.store)

        algorithms = app.config['JWT_ALGORITHMS']
        if isinstance(algorithms, str):
            algorithms = algorithms.replace(',', ' ').split()
        self.chain = AuthChain(
            [
                StaticTokenStrategy(self.tokens),
                SignedTokenStrategy(self.trust, algorithms,
                                    leeway=float(app.config['JWT_LEEWAY'])),
            ],
            self.next_authenticator
        )
        app.extensions[EXTENSION] = self

    def current_request(self) -> AuthRequest:
        """Describe the Flask request being handled."""
        identity = self.app.config.get('SERVER_IDENTITY') or request.host
        return AuthRequest(request.headers.get('Authorization'), identity)

    def authorize(self, right: str) -> Decision:
        """Authorize the current Flask request for ``right``."""
        return self.chain.authorize(self.current_request(), right)

    def save(self) -> None:
        """Persist the token table and trust anchor."""
        self.tokens.save(self.store)
        self.trust.save(self.store)


def get_auth() -> Auth:
    """Get the :class:`Auth` instance of the current application."""
    try:
        return current_app.extensions[EXTENSION]
    except KeyError as e:
        raise ConfigurationError('Auth is not initialized on this app') \
            from e


def get_chain() -> AuthChain:
    """Get the authorization chain of the current application."""
    return get_auth().chain
