# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

import requests


class LocalShell:
    """Run commands on this machine.

    Output of commands is not captured: diagnostics of apt, npm, nginx etc.
    reach the operator as is. No timeouts are applied: package installation
    and builds may take arbitrary time.
    """

    def __repr__(self):
        return f'<{self.__class__.__name__}>'

    def run(self, command: str, stdin: Optional[bytes] = None):
        _logger.info("Run: %s", command)
        r = subprocess.run(_build(command), input=stdin)
        r.check_returncode()
        return r

    def probe(self, command: str):
        """Run a read-only command. Never raise on non-zero exit status."""
        _logger.debug("Probe: %s", command)
        return subprocess.run(
            _build(command),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            stdin=subprocess.DEVNULL,
            )

    def download(self, url: str) -> bytes:
        _logger.info("Download: %s", url)
        try:
            response = requests.get(url, timeout=60)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DownloadFailed(url, e)
        return response.content

    def is_privileged(self) -> bool:
        return os.geteuid() == 0

    def exists(self, path: Path) -> bool:
        return path.exists()

    def read_text(self, path: Path) -> str:
        return read_text(path)

    def write_text(self, path: Path, text: str, mode: Optional[int] = None):
        _logger.info("Write: %s", path)
        write_text(path, text, mode)


class DryRunShell(LocalShell):
    """Read the real state of the machine, but change nothing."""

    def run(self, command, stdin=None):
        _logger.info("Would run: %s", command)
        return subprocess.CompletedProcess(_build(command), 0)

    def download(self, url):
        _logger.info("Would download: %s", url)
        return b''

    def is_privileged(self):
        return True

    def write_text(self, path, text, mode=None):
        _logger.info("Would write %s:\n%s", path, text)


def read_text(path: Path) -> str:
    """Read sources and configs as is, whatever bytes they contain.

    Undecodable bytes are kept as surrogates and written back unchanged.
    """
    return path.read_text(encoding=_encoding, errors=_errors)


def write_text(path: Path, text: str, mode: Optional[int] = None):
    """Write file, make dirs. Keep mode of existing file unless mode is given."""
    existed = path.exists()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding=_encoding, errors=_errors)
    if mode is not None:
        path.chmod(mode)
    elif not existed:
        path.chmod(0o644)


_encoding = 'utf-8'
_errors = 'surrogateescape'


def _build(command):
    return ['bash', '-euo', 'pipefail', '-c', command]


class DownloadFailed(Exception):

    def __init__(self, url, cause):
        super().__init__(f"Cannot download {url}: {cause}")


_logger = logging.getLogger(__name__)
