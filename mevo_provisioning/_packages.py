# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import shlex
from typing import Sequence

from mevo_provisioning._core import Command
from mevo_provisioning._core import Run


class AptUpdate(Run):

    def __init__(self):
        super().__init__('apt-get update -y')


class AptInstall(Run):

    def __init__(self, packages: Sequence[str]):
        super().__init__(f'DEBIAN_FRONTEND=noninteractive apt-get install -y {shlex.join(packages)}')


class AddNodeSource(Command):
    """Add the NodeSource apt repository for a Node.js major version.

    The setup script is what "curl -fsSL .../setup_18.x | bash -" runs.
    See: https://github.com/nodesource/distributions
    """

    def __init__(self, node_major: int):
        self._url = f'https://deb.nodesource.com/setup_{node_major}.x'

    def __repr__(self):
        return f'{AddNodeSource.__name__}({self._url!r})'

    def run(self, shell):
        script = shell.download(self._url)
        _logger.debug("%s: %d bytes", self._url, len(script))
        shell.run('bash -', stdin=script)


_logger = logging.getLogger(__name__)
