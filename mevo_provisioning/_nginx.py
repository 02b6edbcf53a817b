# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import shlex
from pathlib import Path

from mevo_provisioning._core import CompositeCommand
from mevo_provisioning._core import Run
from mevo_provisioning._files import InstallText
from mevo_provisioning._systemd import SystemCtl


class EnableNginxSite(CompositeCommand):
    """Install site, link it and reload Nginx if the config is valid.

    If "nginx -t" fails, reload is not requested,
    and the running Nginx keeps serving the old config.
    """

    def __init__(self, available_dir: Path, enabled_dir: Path, name: str, text: str):
        available = shlex.quote(str(available_dir / name))
        enabled = shlex.quote(str(enabled_dir / name))
        super().__init__([
            InstallText(available_dir / name, text),
            Run(f'ln -s -f {available} {enabled}'),
            Run('nginx -t'),
            SystemCtl('reload', 'nginx'),
            ])
        self._repr = f'{EnableNginxSite.__name__}({name!r})'

    def __repr__(self):
        return self._repr
