"""Tests for :mod:`iotsa_auth.services.config_store`."""

import json
import os
import tempfile
from unittest import TestCase, mock

from redis.exceptions import ConnectionError

from .. import config_store
from ...exceptions import ConfigStoreUnavailable, ConfigurationError


class TestFileConfigStore(TestCase):
    """Tests for :class:`.config_store.FileConfigStore`."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.directory = os.path.join(self.tmp.name, 'config')
        self.store = config_store.FileConfigStore(self.directory)

    def tearDown(self):
        self.tmp.cleanup()

    def test_missing_key(self):
        """The default is returned when nothing was saved."""
        self.assertIsNone(self.store.load('statictokens'))
        self.assertEqual(self.store.load('statictokens', []), [])

    def test_save_and_load(self):
        value = [{'token': 'T1', 'rights': '/doorbell/'}]
        self.store.save('statictokens', value)
        self.assertTrue(os.path.exists(
            os.path.join(self.directory, 'statictokens.cfg')
        ))
        self.assertEqual(self.store.load('statictokens'), value)
        self.assertEqual(os.listdir(self.directory), ['statictokens.cfg'],
                         'No temporary files are left behind')

    def test_save_replaces(self):
        self.store.save('jwtkeys', {'issuerKey': 'k1'})
        self.store.save('jwtkeys', {'issuerKey': 'k2'})
        self.assertEqual(self.store.load('jwtkeys'), {'issuerKey': 'k2'})

    def test_corrupted_file(self):
        os.makedirs(self.directory)
        with open(os.path.join(self.directory, 'jwtkeys.cfg'), 'w') as f:
            f.write('{not json')
        with self.assertRaises(ConfigStoreUnavailable):
            self.store.load('jwtkeys')

    def test_bad_key(self):
        """Keys cannot escape the config directory."""
        with self.assertRaises(ValueError):
            self.store.load(os.path.join('..', 'etc'))
        with self.assertRaises(ValueError):
            self.store.save('', {})

    def test_no_directory(self):
        with self.assertRaises(ConfigurationError):
            config_store.FileConfigStore('')


class TestRedisConfigStore(TestCase):
    """Tests for :class:`.config_store.RedisConfigStore`."""

    @mock.patch(f'{config_store.__name__}.redis')
    def test_save(self, mock_redis):
        """Values are saved as JSON under a namespaced key."""
        mock_redis.exceptions.ConnectionError = ConnectionError
        mock_redis_connection = mock.MagicMock()
        mock_redis.StrictRedis.return_value = mock_redis_connection
        store = config_store.RedisConfigStore('localhost', '6379', '0',
                                              namespace='iotsa')
        store.save('jwtkeys', {'issuerKey': 'k1'})
        mock_redis_connection.set.assert_called_once_with(
            'iotsa:jwtkeys', json.dumps({'issuerKey': 'k1'})
        )
        mock_redis.StrictRedis.assert_called_once_with(host='localhost',
                                                       port=6379, db=0)

    @mock.patch(f'{config_store.__name__}.redis')
    def test_load(self, mock_redis):
        mock_redis.exceptions.ConnectionError = ConnectionError
        mock_redis_connection = mock.MagicMock()
        mock_redis_connection.get.return_value = b'[{"token": "T1"}]'
        mock_redis.StrictRedis.return_value = mock_redis_connection
        store = config_store.RedisConfigStore('localhost', 6379)
        self.assertEqual(store.load('statictokens'), [{'token': 'T1'}])
        mock_redis_connection.get.assert_called_once_with('statictokens')

    @mock.patch(f'{config_store.__name__}.redis')
    def test_load_missing(self, mock_redis):
        mock_redis.exceptions.ConnectionError = ConnectionError
        mock_redis_connection = mock.MagicMock()
        mock_redis_connection.get.return_value = None
        mock_redis.StrictRedis.return_value = mock_redis_connection
        store = config_store.RedisConfigStore('localhost', 6379)
        self.assertEqual(store.load('statictokens', []), [])

    @mock.patch(f'{config_store.__name__}.redis')
    def test_connection_failed(self, mock_redis):
        """:class:`.ConfigStoreUnavailable` is raised when Redis is down."""
        mock_redis.exceptions.ConnectionError = ConnectionError
        mock_redis_connection = mock.MagicMock()
        mock_redis_connection.get.side_effect = ConnectionError
        mock_redis_connection.set.side_effect = ConnectionError
        mock_redis.StrictRedis.return_value = mock_redis_connection
        store = config_store.RedisConfigStore('localhost', 6379)
        with self.assertRaises(ConfigStoreUnavailable):
            store.load('statictokens')
        with self.assertRaises(ConfigStoreUnavailable):
            store.save('statictokens', [])


class TestFromConfig(TestCase):
    """Tests for :func:`.config_store.from_config`."""

    def test_file(self):
        store = config_store.from_config({'AUTH_CONFIG_BACKEND': 'file',
                                          'AUTH_CONFIG_DIR': '/tmp/cfg'})
        self.assertIsInstance(store, config_store.FileConfigStore)
        self.assertEqual(store.directory, '/tmp/cfg')

    @mock.patch(f'{config_store.__name__}.redis')
    def test_redis(self, mock_redis):
        store = config_store.from_config({
            'AUTH_CONFIG_BACKEND': 'redis',
            'AUTH_CONFIG_NAMESPACE': 'iotsa',
            'REDIS_HOST': 'redis',
            'REDIS_PORT': '1234',
            'REDIS_DATABASE': 4,
        })
        self.assertIsInstance(store, config_store.RedisConfigStore)
        self.assertEqual(store.namespace, 'iotsa')

    def test_redis_missing_parameter(self):
        with self.assertRaises(ConfigurationError):
            config_store.from_config({'AUTH_CONFIG_BACKEND': 'redis'})

    def test_memory(self):
        store = config_store.from_config({'AUTH_CONFIG_BACKEND': 'memory'})
        store.save('jwtkeys', {'issuerKey': 'k1'})
        self.assertEqual(store.load('jwtkeys'), {'issuerKey': 'k1'})

    def test_unknown(self):
        with self.assertRaises(ConfigurationError):
            config_store.from_config({'AUTH_CONFIG_BACKEND': 'floppy'})
