# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import doctest
import logging
import unittest

from mevo_provisioning import _config
from mevo_provisioning import _files
from mevo_provisioning import _provisioner
from mevo_provisioning import _templates


class TestDoctests(unittest.TestCase):

    def test_modules(self):
        for module in _config, _files, _provisioner, _templates:
            with self.subTest(module=module.__name__):
                result = doctest.testmod(module, optionflags=doctest.ELLIPSIS)
                self.assertGreater(result.attempted, 0)
                self.assertEqual(result.failed, 0)


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)7s %(name)s %(message).5000s",
        )
    unittest.main()
