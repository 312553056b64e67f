"""
Persistence for authorization configuration.

The static token table and the trust anchor are saved as whole values under
a key each; there are no incremental updates. Two backends are provided:
:class:`FileConfigStore`, one JSON file per key (the device keeps
``/config/statictokens.cfg`` and friends), and :class:`RedisConfigStore`,
for deployments that share configuration between processes.
"""

import json
import logging
import os
import tempfile
from typing import Any, Optional

import redis

from ..exceptions import ConfigStoreUnavailable, ConfigurationError

logger = logging.getLogger(__name__)


class ConfigStore(object):
    """Interface for loading and saving configuration values by key."""

    def load(self, key: str, default: Any = None) -> Any:
        """Load the value stored under ``key``, or ``default``."""
        raise NotImplementedError('Implement in subclass')

    def save(self, key: str, value: Any) -> None:
        """Replace the value stored under ``key``."""
        raise NotImplementedError('Implement in subclass')


class FileConfigStore(ConfigStore):
    """Stores each key as a JSON document in a directory."""

    def __init__(self, directory: str) -> None:
        if not directory:
            raise ConfigurationError('Missing config directory')
        self.directory = directory

    def _path(self, key: str) -> str:
        if not key or os.sep in key or key.startswith('.'):
            raise ValueError(f'Invalid config key: {key!r}')
        return os.path.join(self.directory, f'{key}.cfg')

    def load(self, key: str, default: Any = None) -> Any:
        path = self._path(key)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError:
            logger.debug('No config file at %s', path)
            return default
        except json.decoder.JSONDecodeError as e:
            raise ConfigStoreUnavailable(f'Corrupted config file: {path}') \
                from e
        except OSError as e:
            raise ConfigStoreUnavailable(f'Cannot read {path}: {e}') from e

    def save(self, key: str, value: Any) -> None:
        path = self._path(key)
        try:
            os.makedirs(self.directory, exist_ok=True)
            # Write to a sibling file and rename, so that readers never see
            # a partially written table.
            fd, tmp = tempfile.mkstemp(dir=self.directory, suffix='.tmp')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(value, f)
                os.replace(tmp, path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as e:
            raise ConfigStoreUnavailable(f'Cannot write {path}: {e}') from e
        logger.debug('Saved %s to %s', key, path)


class RedisConfigStore(ConfigStore):
    """
    Stores each key as a JSON value in Redis.

    The StrictRedis instance is thread safe and connections are attached at
    the time a command is executed, so one store can be shared.
    """

    def __init__(self, host: str, port: int, db: int = 0,
                 namespace: Optional[str] = None) -> None:
        logger.debug('New Redis connection at %s, port %s', host, port)
        self.r = redis.StrictRedis(host=host, port=int(port), db=int(db))
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f'{self.namespace}:{key}' if self.namespace else key

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self.r.get(self._key(key))
        except redis.exceptions.ConnectionError as e:
            raise ConfigStoreUnavailable(f'Connection failed: {e}') from e
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except json.decoder.JSONDecodeError as e:
            raise ConfigStoreUnavailable(f'Corrupted value for {key}') from e

    def save(self, key: str, value: Any) -> None:
        try:
            self.r.set(self._key(key), json.dumps(value))
        except redis.exceptions.ConnectionError as e:
            raise ConfigStoreUnavailable(f'Connection failed: {e}') from e


class MemoryConfigStore(ConfigStore):
    """Keeps values in a dict. Useful for tests and ephemeral setups."""

    def __init__(self, **initial: Any) -> None:
        self._data = {key: json.loads(json.dumps(value))
                      for key, value in initial.items()}

    def load(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(json.dumps(self._data[key]))

    def save(self, key: str, value: Any) -> None:
        self._data[key] = json.loads(json.dumps(value))


def from_config(config: dict) -> ConfigStore:
    """Build the configuration backend named by ``AUTH_CONFIG_BACKEND``."""
    backend = config.get('AUTH_CONFIG_BACKEND', 'file')
    if backend == 'file':
        return FileConfigStore(config.get('AUTH_CONFIG_DIR'))
    if backend == 'redis':
        try:
            host = config['REDIS_HOST']
            port = config['REDIS_PORT']
            db = config['REDIS_DATABASE']
        except KeyError as e:
            raise ConfigurationError('Missing required config parameter') \
                from e
        return RedisConfigStore(host, port, db,
                                namespace=config.get('AUTH_CONFIG_NAMESPACE'))
    if backend == 'memory':
        return MemoryConfigStore()
    raise ConfigurationError(f'Unknown config backend: {backend}')
