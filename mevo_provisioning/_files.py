# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import re
import shlex
from pathlib import Path

from mevo_provisioning._core import Command
from mevo_provisioning._templates import render_default_env


class InstallText(Command):
    """Write file unconditionally. Make dirs."""

    def __init__(self, path: Path, text: str, mode: int = 0o644):
        self._path = path
        self._text = text
        self._mode = mode

    def __repr__(self):
        return f'{InstallText.__name__}({str(self._path)!r})'

    def run(self, shell):
        shell.write_text(self._path, self._text, self._mode)


# Relative to mevo-api. Kept out of the mirror: it exists only on the host.
API_ENV_FILE = 'src/common/envs/production.env'


class MaterializeEnvFile(Command):
    """Create production.env once. Never touch it afterwards.

    Operators put real secrets there. The file derived from local.env
    or the default one are only a starting point.
    """

    def __init__(self, project_dir: Path, user: str, port: int):
        self._project_dir = project_dir
        self._target = project_dir / API_ENV_FILE
        self._local = self._target.with_name('local.env')
        self._user = user
        self._port = port

    def __repr__(self):
        return f'{MaterializeEnvFile.__name__}({str(self._target)!r})'

    def run(self, shell):
        if shell.exists(self._target):
            _logger.info("%s: exists, keep it as is", self._target)
            return
        if shell.exists(self._local):
            _logger.warning("Create %s from %s; update secrets!", self._target, self._local)
            text = shell.read_text(self._local)
            text = set_env_value(text, 'MODE', 'production')
            text = set_env_value(text, 'PORT', str(self._port))
        else:
            _logger.warning("Create default %s; fill in secrets!", self._target)
            text = render_default_env(self._port)
        new_dirs = self._missing_dirs(shell)
        shell.write_text(self._target, text, 0o600)
        u = shlex.quote(self._user)
        paths = ' '.join(shlex.quote(str(p)) for p in [*new_dirs, self._target])
        shell.run(f'chown {u}:{u} {paths}')

    def _missing_dirs(self, shell):
        missing = []
        for parent in self._target.parents:
            if parent == self._project_dir or shell.exists(parent):
                break
            missing.append(parent)
        return list(reversed(missing))


def set_env_value(text: str, key: str, value: str) -> str:
    """Replace KEY=... line or append one.

    >>> set_env_value('MODE=local\\nPORT=1\\n', 'MODE', 'production')
    'MODE=production\\nPORT=1\\n'
    >>> set_env_value('MODE=local', 'PORT', '3000')
    'MODE=local\\nPORT=3000\\n'
    >>> set_env_value('', 'PORT', '3000')
    'PORT=3000\\n'
    """
    line = f'{key}={value}'
    pattern = re.compile(rf'^{re.escape(key)}=.*$', re.MULTILINE)
    if pattern.search(text):
        return pattern.sub(lambda _match: line, text)
    if text and not text.endswith('\n'):
        text += '\n'
    return text + line + '\n'


class RewriteApiRoot(Command):
    """Make the frontend call /api on the same host instead of localhost.

    Best-effort patch: if the file is missing or already differs,
    do nothing.
    """

    _pattern = re.compile(r'^const API_ROOT = "http://localhost/api";', re.MULTILINE)
    _replacement = 'const API_ROOT = "/api";'

    def __init__(self, path: Path):
        self._path = path

    def __repr__(self):
        return f'{RewriteApiRoot.__name__}({str(self._path)!r})'

    def run(self, shell):
        if not shell.exists(self._path):
            _logger.info("%s: missing, skip", self._path)
            return
        text = shell.read_text(self._path)
        patched = rewrite_api_root(text)
        if patched == text:
            _logger.info("%s: no development API root, skip", self._path)
            return
        shell.write_text(self._path, patched)


def rewrite_api_root(text: str) -> str:
    """Replace the development API root with the relative one.

    >>> rewrite_api_root('const API_ROOT = "http://localhost/api";\\nfoo();\\n')
    'const API_ROOT = "/api";\\nfoo();\\n'
    >>> rewrite_api_root('const API_ROOT = "https://api.example.com";\\n')
    'const API_ROOT = "https://api.example.com";\\n'
    """
    return RewriteApiRoot._pattern.sub(RewriteApiRoot._replacement, text)


_logger = logging.getLogger(__name__)
