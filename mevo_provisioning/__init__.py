# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
"""Deploy the Mevo stack on a single host without containers.

Installs Node.js and Nginx, builds mevo-api (NestJS), mevo-v2 (Vite static)
and mevobot_v2 (Nuxt 3 SSR), runs the servers as systemd services
and puts Nginx in front of them:

    /          -> mevo-v2/dist, unknown paths fall back to /index.html
    /api/      -> 127.0.0.1:3000, mevo-api
    /widget/   -> 127.0.0.1:3002, mevobot_v2

Every action is formulated in terms of a command.
It is desirable that commands be written in the most raw form,
so that it is clear what is being run and it is easy to copy.

Commands must be idempotent.
The second run must not "accumulate" changes.
Running it multiple times must be safe.
The only file which is never overwritten is production.env of mevo-api:
it holds secrets filled in by the operator.

Commands are grouped in steps. A failure of a step stops the run,
except for optional steps (database, certificate) whose failures are
only reported. There is no rollback: fix the problem and run again.
"""
from mevo_provisioning._core import BestEffortStep
from mevo_provisioning._core import Command
from mevo_provisioning._core import CompositeCommand
from mevo_provisioning._core import Failed
from mevo_provisioning._core import Run
from mevo_provisioning._core import Step
from mevo_provisioning._core import Succeeded
from mevo_provisioning._core import Tolerated
from mevo_provisioning._provisioner import PreconditionFailed
from mevo_provisioning._provisioner import ProvisionResult
from mevo_provisioning._provisioner import provision
from mevo_provisioning._settings import Settings
from mevo_provisioning._settings import make_settings
from mevo_provisioning._shell import DryRunShell
from mevo_provisioning._shell import LocalShell

__all__ = [
    'BestEffortStep',
    'Command',
    'CompositeCommand',
    'DryRunShell',
    'Failed',
    'LocalShell',
    'PreconditionFailed',
    'ProvisionResult',
    'Run',
    'Settings',
    'Step',
    'Succeeded',
    'Tolerated',
    'make_settings',
    'provision',
    ]
