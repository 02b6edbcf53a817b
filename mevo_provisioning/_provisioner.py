# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import shlex
from typing import List
from typing import Optional
from typing import Sequence

from mevo_provisioning._core import BestEffortStep
from mevo_provisioning._core import Failed
from mevo_provisioning._core import Outcome
from mevo_provisioning._core import Run
from mevo_provisioning._core import SkippedStep
from mevo_provisioning._core import Step
from mevo_provisioning._core import Tolerated
from mevo_provisioning._files import API_ENV_FILE
from mevo_provisioning._files import MaterializeEnvFile
from mevo_provisioning._files import RewriteApiRoot
from mevo_provisioning._nginx import EnableNginxSite
from mevo_provisioning._packages import AddNodeSource
from mevo_provisioning._packages import AptInstall
from mevo_provisioning._packages import AptUpdate
from mevo_provisioning._settings import API
from mevo_provisioning._settings import API_PORT
from mevo_provisioning._settings import FRONTEND
from mevo_provisioning._settings import PROJECTS
from mevo_provisioning._settings import Project
from mevo_provisioning._settings import Settings
from mevo_provisioning._settings import WIDGET
from mevo_provisioning._systemd import LaunchSystemdServices
from mevo_provisioning._systemd import SystemCtl
from mevo_provisioning._templates import API_UNIT
from mevo_provisioning._templates import WIDGET_UNIT
from mevo_provisioning._templates import render_api_unit
from mevo_provisioning._templates import render_site
from mevo_provisioning._templates import render_widget_unit


class PreconditionFailed(Exception):
    pass


class ProvisionResult:

    def __init__(self, outcomes: Sequence[Outcome]):
        self.outcomes = outcomes

    def __repr__(self):
        return f'{ProvisionResult.__name__}({list(self.outcomes)!r})'

    def failure(self) -> Optional[Failed]:
        for outcome in self.outcomes:
            if isinstance(outcome, Failed):
                return outcome
        return None

    def tolerated(self) -> List[Tolerated]:
        return [o for o in self.outcomes if isinstance(o, Tolerated)]

    def exit_code(self) -> int:
        failure = self.failure()
        if failure is None:
            return 0
        return failure.returncode


def check_preconditions(settings: Settings, shell):
    """Fail before anything is changed on the machine."""
    if not shell.is_privileged():
        raise PreconditionFailed("Please run as root (use sudo).")
    for project in PROJECTS:
        path = settings.source_project_dir(project)
        if not path.is_dir():
            raise PreconditionFailed(f"Missing directory: {path}")
    r = shell.probe(f'id -u {shlex.quote(settings.deploy_user)}')
    if r.returncode != 0:
        raise PreconditionFailed(f"User does not exist: {settings.deploy_user}")


def plan_steps(settings: Settings) -> List[Step]:
    u = shlex.quote(settings.deploy_user)
    base_dir = shlex.quote(str(settings.base_dir))
    steps = [
        Step("Install base packages", [
            AptUpdate(),
            AptInstall(settings.base_packages),
            ]),
        ]
    if settings.install_database:
        # The API may use an external database, so this is optional.
        service = settings.database_service
        steps.append(BestEffortStep(f"Install {settings.database_package}", [
            AptInstall([settings.database_package]),
            SystemCtl('enable', service),
            SystemCtl('start', service),
            ]))
    steps += [
        Step(f"Install Node.js {settings.node_major}", [
            AddNodeSource(settings.node_major),
            AptInstall(['nodejs']),
            Run('node -v'),
            Run('npm -v'),
            ]),
        Step("Prepare target directory", [
            Run(f'mkdir -p {base_dir}'),
            Run(f'chown -R {u}:{u} {base_dir}'),
            ]),
        Step(f"Sync projects to {settings.base_dir}", [
            *[_mirror(settings, project) for project in PROJECTS],
            Run(f'chown -R {u}:{u} {base_dir}'),
            ]),
        _build(settings, API),
        Step(f"Create {API.name} production.env if missing", [
            MaterializeEnvFile(settings.project_dir(API), settings.deploy_user, API_PORT),
            ]),
        Step(f"Point {FRONTEND.name} to /api", [
            RewriteApiRoot(settings.project_dir(FRONTEND) / 'src/utils/http/request.ts'),
            ]),
        _build(settings, FRONTEND),
        _build(settings, WIDGET),
        Step("Create systemd services", [
            LaunchSystemdServices(settings.systemd_dir, {
                API_UNIT: render_api_unit(settings),
                WIDGET_UNIT: render_widget_unit(settings),
                }),
            ]),
        Step(f"Configure Nginx for {settings.domain}", [
            EnableNginxSite(
                settings.nginx_sites_available,
                settings.nginx_sites_enabled,
                settings.site_name,
                render_site(settings),
                ),
            ]),
        ]
    if settings.issue_certificate:
        title = f"Issue certificate for {settings.domain}"
        if not settings.certificate_email:
            steps.append(SkippedStep(title, "--email is missing"))
        else:
            # Deployment already works over plain HTTP if this fails.
            certbot = shlex.join([
                'certbot', '--nginx',
                '-d', settings.domain,
                '-m', settings.certificate_email,
                '--agree-tos', '-n',
                ])
            steps.append(BestEffortStep(title, [
                AptInstall(settings.certificate_packages),
                Run(certbot),
                ]))
    return steps


def _mirror(settings: Settings, project: Project):
    # Trailing slashes: sync contents, not the directory itself.
    source = shlex.quote(f'{settings.source_project_dir(project)}/')
    target = shlex.quote(f'{settings.project_dir(project)}/')
    options = ['-a', '--delete']
    if project == API:
        # Excluded files survive --delete. Operator secrets live there.
        options += ['--exclude', '/' + API_ENV_FILE]
    return Run(f'rsync {shlex.join(options)} {source} {target}')


def _build(settings: Settings, project: Project) -> Step:
    u = shlex.quote(settings.deploy_user)
    project_dir = shlex.quote(str(settings.project_dir(project)))
    return Step(f"Build {project.name}", [
        Run(f'cd {project_dir} && sudo -Hu {u} npm ci'),
        Run(f'cd {project_dir} && sudo -Hu {u} npm run build'),
        ])


def provision(settings: Settings, shell) -> ProvisionResult:
    """Bring the machine to the deployed state. Safe to re-run.

    Steps run one by one. The first fatal failure stops the run;
    whatever was done before stays in place.
    """
    check_preconditions(settings, shell)
    outcomes = []
    for step in plan_steps(settings):
        outcome = step.run(shell)
        outcomes.append(outcome)
        if isinstance(outcome, Failed):
            _logger.error("Stop: %s failed; fix the problem and run again", step.title)
            break
    return ProvisionResult(outcomes)


def endpoint_urls(domain: str):
    """List URLs served after deployment.

    >>> endpoint_urls('example.com')  # doctest: +NORMALIZE_WHITESPACE
    [('Frontend', 'http://example.com/'),
     ('API', 'http://example.com/api/'),
     ('Widget', 'http://example.com/widget/')]
    """
    return [
        ('Frontend', f'http://{domain}/'),
        ('API', f'http://{domain}/api/'),
        ('Widget', f'http://{domain}/widget/'),
        ]


_logger = logging.getLogger(__name__)
