# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import shlex
from pathlib import Path
from typing import Mapping

from mevo_provisioning._core import CompositeCommand
from mevo_provisioning._core import Run
from mevo_provisioning._files import InstallText


class SystemCtl(Run):

    def __init__(self, *command: str):
        super().__init__(f'systemctl {shlex.join(command)}')


class LaunchSystemdServices(CompositeCommand):
    """Install units and (re)start services even if nothing changed.

    Restart is how new code and config are picked up.
    """

    def __init__(self, units_dir: Path, units: Mapping[str, str]):
        super().__init__([
            *[InstallText(units_dir / name, text) for name, text in units.items()],
            SystemCtl('daemon-reload'),
            *[SystemCtl('enable', name) for name in units],
            *[SystemCtl('restart', name) for name in units],
            ])
        self._repr = f'{LaunchSystemdServices.__name__}({str(units_dir)!r}, {list(units)!r})'

    def __repr__(self):
        return self._repr
