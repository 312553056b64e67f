"""Flask configuration for the iotsa authorization service."""

import os

AUTH_CONFIG_BACKEND = os.environ.get('AUTH_CONFIG_BACKEND', 'file')
"""Where tokens and the trust anchor are kept: ``file`` or ``redis``."""

AUTH_CONFIG_DIR = os.environ.get('AUTH_CONFIG_DIR', 'config')
AUTH_CONFIG_NAMESPACE = os.environ.get('AUTH_CONFIG_NAMESPACE', 'iotsa')

REDIS_HOST = os.environ.get('REDIS_HOST', 'localhost')
REDIS_PORT = os.environ.get('REDIS_PORT', '6379')
REDIS_DATABASE = os.environ.get('REDIS_DATABASE', '0')

SERVER_IDENTITY = os.environ.get('SERVER_IDENTITY')
"""Our canonical host name, matched against ``aud``. Defaults to Host."""

JWT_ALGORITHMS = os.environ.get('JWT_ALGORITHMS', 'HS256 HS384 HS512')
JWT_LEEWAY = float(os.environ.get('JWT_LEEWAY', '0'))

LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
LOG_JSON = os.environ.get('LOG_JSON', '0') == '1'
