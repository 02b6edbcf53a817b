# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
"""Render configuration files. Templates are kept in the templates dir.

Placeholders look like @{name}. The usual $name syntax is not used because
Nginx configs are full of $uri, $host and such.
"""
import string
from pathlib import Path

from mevo_provisioning._settings import API
from mevo_provisioning._settings import API_PORT
from mevo_provisioning._settings import FRONTEND
from mevo_provisioning._settings import Settings
from mevo_provisioning._settings import WIDGET
from mevo_provisioning._settings import WIDGET_PORT

API_UNIT = 'mevo-api.service'
WIDGET_UNIT = 'mevobot-v2.service'


class _Template(string.Template):
    delimiter = '@'


def _render(template_name: str, **values) -> str:
    """Substitute all placeholders. Missing values are errors.

    >>> _render('production.env', port=1234).splitlines()[-1]
    'PORT=1234'
    >>> _render('production.env')
    Traceback (most recent call last):
    ...
    KeyError: 'port'
    """
    text = _templates_dir.joinpath(template_name).read_text()
    return _Template(text).substitute(values)


def render_api_unit(settings: Settings) -> str:
    return _render(
        'node.service',
        description=API.description,
        user=settings.deploy_user,
        working_dir=settings.project_dir(API),
        port=API_PORT,
        exec_start='/usr/bin/npm run start:prod --silent',
        )


def render_widget_unit(settings: Settings) -> str:
    return _render(
        'node.service',
        description=WIDGET.description,
        user=settings.deploy_user,
        working_dir=settings.project_dir(WIDGET),
        port=WIDGET_PORT,
        exec_start='/usr/bin/node .output/server/index.mjs',
        )


def render_site(settings: Settings) -> str:
    return _render(
        'site.nginx.conf',
        domain=settings.domain,
        document_root=settings.project_dir(FRONTEND) / 'dist',
        api_port=API_PORT,
        widget_port=WIDGET_PORT,
        )


def render_default_env(port: int) -> str:
    return _render('production.env', port=port)


_templates_dir = Path(__file__).with_name('templates')
