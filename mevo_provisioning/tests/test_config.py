# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import shutil
import tempfile
import unittest
from pathlib import Path

from mevo_provisioning._config import default_config_paths
from mevo_provisioning._config import read_config
from mevo_provisioning._settings import make_settings


class TestReadConfig(unittest.TestCase):

    def setUp(self):
        self._dir = Path(tempfile.mkdtemp())
        self._defaults = self._dir / 'defaults.ini'
        self._defaults.write_text(
            '[defaults]\n'
            'base_dir = /var/www/mevo\n'
            'node_major = 18\n'
            '\n'
            '[web-*]\n'
            'base_dir = /srv/mevo\n'
            )
        self._local = self._dir / 'local.ini'

    def tearDown(self):
        shutil.rmtree(self._dir)

    def test_defaults(self):
        config = read_config(self._defaults, host='db-01')
        self.assertEqual(config['base_dir'], '/var/www/mevo')

    def test_host_mask(self):
        config = read_config(self._defaults, host='web-01')
        self.assertEqual(config['base_dir'], '/srv/mevo')
        self.assertEqual(config['node_major'], '18')

    def test_later_file_overrides(self):
        self._local.write_text('[defaults]\nnode_major = 20\n')
        config = read_config(self._defaults, self._local, host='db-01')
        self.assertEqual(config['node_major'], '20')

    def test_version_overrides_later_file(self):
        self._defaults.write_text('[defaults]\nnode_major = 18\n\n[*;v2]\nnode_major = 22\n')
        self._local.write_text('[defaults]\nnode_major = 20\n')
        config = read_config(self._defaults, self._local, host='db-01')
        self.assertEqual(config['node_major'], '22')

    def test_missing_file_ignored(self):
        config = read_config(self._defaults, self._dir / 'absent.ini', host='db-01')
        self.assertEqual(config['node_major'], '18')


class TestShippedConfig(unittest.TestCase):

    def test_builds_settings(self):
        [shipped, *_] = default_config_paths()
        config = read_config(shipped, host='any-host')
        settings = make_settings(config, 'example.com', 'ubuntu', Path('/home/ubuntu/src'))
        self.assertEqual(settings.base_dir, Path('/var/www/mevo'))
        self.assertEqual(settings.systemd_dir, Path('/etc/systemd/system'))
        self.assertEqual(settings.nginx_sites_available, Path('/etc/nginx/sites-available'))
        self.assertEqual(settings.nginx_sites_enabled, Path('/etc/nginx/sites-enabled'))
        self.assertEqual(settings.site_name, 'mevo.conf')
        self.assertEqual(settings.node_major, 18)
        self.assertEqual(settings.base_packages, ['curl', 'git', 'rsync', 'nginx', 'ufw', 'build-essential'])
        self.assertEqual(settings.certificate_packages, ['certbot', 'python3-certbot-nginx'])
        self.assertIsNone(settings.certificate_email)


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)7s %(name)s %(message).5000s",
        )
    unittest.main()
