"""Application factory for the iotsa authorization service."""

import logging
from typing import Optional

from flask import Flask, jsonify
from werkzeug.exceptions import BadRequest, HTTPException, NotFound, \
    Unauthorized

from . import routes
from .app_logging import setup_logger
from .auth import Auth
from .auth.strategies import NextAuthenticator
from .exceptions import ConfigStoreUnavailable
from .services.config_store import ConfigStore

logger = logging.getLogger(__name__)


def jsonify_exception(error: HTTPException):
    exc_resp = error.get_response()
    response = jsonify(reason=error.description)
    response.status_code = exc_resp.status_code
    if 'WWW-Authenticate' in exc_resp.headers:
        response.headers['WWW-Authenticate'] = \
            exc_resp.headers['WWW-Authenticate']
    return response


def config_store_unavailable(error: ConfigStoreUnavailable):
    logger.error('Could not persist settings: %s', error)
    response = jsonify(reason='Settings could not be saved')
    response.status_code = 503
    return response


def create_web_app(next_authenticator: Optional[NextAuthenticator] = None,
                   store: Optional[ConfigStore] = None,
                   **config) -> Flask:
    """Initialize an instance of the authorization service."""
    app = Flask('iotsa_auth')
    app.config.from_pyfile('config.py')
    app.config.update(config)

    if app.config['LOG_JSON']:
        setup_logger(app.config['LOG_LEVEL'])

    Auth(app, next_authenticator=next_authenticator, store=store)

    app.register_blueprint(routes.blueprint)
    app.errorhandler(NotFound)(jsonify_exception)
    app.errorhandler(BadRequest)(jsonify_exception)
    app.errorhandler(Unauthorized)(jsonify_exception)
    app.errorhandler(ConfigStoreUnavailable)(config_store_unavailable)
    return app
