# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
from pathlib import Path
from typing import Mapping
from typing import NamedTuple
from typing import Optional
from typing import Sequence

# Unit environment and Nginx upstreams must agree on these.
API_PORT = 3000
WIDGET_PORT = 3002


class Project(NamedTuple):
    name: str
    description: str


API = Project('mevo-api', 'Mevo API (NestJS)')
FRONTEND = Project('mevo-v2', 'Mevo frontend (Vite static)')
WIDGET = Project('mevobot_v2', 'Mevobot V2 (Nuxt 3)')
PROJECTS = (API, FRONTEND, WIDGET)


class Settings(NamedTuple):
    domain: str
    deploy_user: str
    source_dir: Path
    base_dir: Path
    install_database: bool
    issue_certificate: bool
    certificate_email: Optional[str]
    systemd_dir: Path
    nginx_sites_available: Path
    nginx_sites_enabled: Path
    site_name: str
    node_major: int
    base_packages: Sequence[str]
    database_package: str
    database_service: str
    certificate_packages: Sequence[str]

    def project_dir(self, project: Project) -> Path:
        return self.base_dir / project.name

    def source_project_dir(self, project: Project) -> Path:
        return self.source_dir / project.name

    def summary(self) -> str:
        return '\n'.join([
            f"Domain:           {self.domain}",
            f"Deploy user:      {self.deploy_user}",
            f"Source dir:       {self.source_dir}",
            f"Base dir:         {self.base_dir}",
            f"Install database: {'yes' if self.install_database else 'no'}",
            f"Issue cert:       {'yes' if self.issue_certificate else 'no'}",
            ])


def make_settings(
        config: Mapping[str, str],
        domain: str,
        deploy_user: str,
        source_dir: Path,
        install_database: bool = False,
        issue_certificate: bool = False,
        certificate_email: Optional[str] = None,
        ) -> Settings:
    return Settings(
        domain=domain,
        deploy_user=deploy_user,
        source_dir=Path(source_dir).absolute(),
        base_dir=Path(config['base_dir']),
        install_database=install_database,
        issue_certificate=issue_certificate,
        certificate_email=certificate_email or None,
        systemd_dir=Path(config['systemd_dir']),
        nginx_sites_available=Path(config['nginx_sites_available']),
        nginx_sites_enabled=Path(config['nginx_sites_enabled']),
        site_name=config['site_name'],
        node_major=int(config['node_major']),
        base_packages=config['base_packages'].split(),
        database_package=config['database_package'],
        database_service=config['database_service'],
        certificate_packages=config['certificate_packages'].split(),
        )
