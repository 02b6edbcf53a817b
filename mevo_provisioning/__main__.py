# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import argparse
import os
import sys
from typing import Sequence

from mevo_provisioning._config import global_config
from mevo_provisioning._logging import init_logging
from mevo_provisioning._provisioner import PreconditionFailed
from mevo_provisioning._provisioner import endpoint_urls
from mevo_provisioning._provisioner import provision
from mevo_provisioning._settings import make_settings
from mevo_provisioning._shell import DryRunShell
from mevo_provisioning._shell import LocalShell


def main(args: Sequence[str], shell=None, config=None) -> int:
    parser = _make_parser()
    try:
        parsed_args = parser.parse_args(args)
    except _BadArguments as e:
        print(e, file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    if shell is None:
        shell = DryRunShell() if parsed_args.dry_run else LocalShell()
    if config is None:
        config = global_config()
    if not shell.is_privileged():
        print("Please run as root (use sudo).", file=sys.stderr)
        return 1
    if not parsed_args.domain:
        print("--domain is required", file=sys.stderr)
        parser.print_usage(sys.stderr)
        return 1
    settings = make_settings(
        config,
        domain=parsed_args.domain,
        deploy_user=parsed_args.user,
        source_dir=parsed_args.src,
        install_database=parsed_args.install_database,
        issue_certificate=parsed_args.run_certificate_issuance,
        certificate_email=parsed_args.email,
        )
    print("==> Settings")
    print(settings.summary())
    try:
        result = provision(settings, shell)
    except PreconditionFailed as e:
        print(e, file=sys.stderr)
        return 1
    failure = result.failure()
    if failure is not None:
        print(f"Failed: {failure.title}: {failure.reason}", file=sys.stderr)
        return result.exit_code()
    for outcome in result.tolerated():
        print(f"Warning: {outcome.title}: {outcome.reason}", file=sys.stderr)
    print("==> Done")
    for name, url in endpoint_urls(settings.domain):
        print(f"{name + ':':<10} {url}")
    return 0


class _BadArguments(Exception):
    pass


class _ArgumentParser(argparse.ArgumentParser):
    """Report bad arguments with exit status 1 instead of 2."""

    def error(self, message):
        raise _BadArguments(f"{self.prog}: error: {message}")


def _make_parser():
    default_user = os.getenv('SUDO_USER') or os.getenv('USER') or 'root'
    parser = _ArgumentParser(
        prog='mevo-provision',
        allow_abbrev=False,
        description=(
            "Install Node.js and Nginx, build mevo-api, mevo-v2 and mevobot_v2, "
            "run them as systemd services behind Nginx."),
        )
    parser.add_argument(
        '--domain',
        help="Required. Public domain for Nginx server_name.",
        )
    parser.add_argument(
        '--user',
        default=default_user,
        help="System user that will own files and run the services, default: %(default)s",
        )
    parser.add_argument(
        '--src',
        default=os.getcwd(),
        help="Path containing mevo-api, mevo-v2, mevobot_v2, default: current dir",
        )
    parser.add_argument(
        '--install-database', '--install-mongodb',
        action='store_true',
        help="Install MongoDB from apt; failures are tolerated.",
        )
    parser.add_argument(
        '--run-certificate-issuance', '--run-certbot',
        action='store_true',
        help="Obtain Let's Encrypt certificate via certbot; requires --email.",
        )
    parser.add_argument(
        '--email',
        help="Email for certbot, used only with --run-certificate-issuance.",
        )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help="Log commands and files instead of running and writing them.",
        )
    return parser


def cli():
    init_logging(global_config()['log_dir'])
    sys.exit(main(sys.argv[1:]))


if __name__ == '__main__':
    cli()
