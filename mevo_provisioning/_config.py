# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import fnmatch
import logging
import socket
from configparser import ConfigParser
from pathlib import Path
from typing import Mapping
from typing import Optional

_logger = logging.getLogger(__name__)


def read_config(*paths: Path, host: Optional[str] = None) -> Mapping[str, str]:
    """Read and resolve overrides according to host masks and versions.

    Sections are host masks: "[defaults]", "[web-*]", "[web-01.example.com]".
    Optionally add ";v123" to sections like "[web-??;v2]".
    If not specified, "v0" is assumed.
    Higher versions override lower versions.
    Within the same version, later files override earlier files.

    Missing files are silently ignored, so per-host files are optional.
    """
    if host is None:
        host = socket.gethostname()
    config_parts = []
    for path_i, path in enumerate(paths):
        config_parser = ConfigParser(interpolation=None)
        config_parser.read(path)
        sections = config_parser.sections()
        for section_i, section in enumerate(sections):
            mask, version = _parse_section_header(section)
            if fnmatch.fnmatch(host, mask):
                _logger.debug("Config %s: section %s: read", path, section)
                items = config_parser.items(section)
                config_parts.append((version, path_i, section_i, items))
            else:
                _logger.debug("Config %s: section %s: skip", path, section)
    config_parts.sort()
    config = {}
    for _version, _path_i, _section_i, items in config_parts:
        config.update(items)
    return config


def _parse_section_header(section):
    """Split section into host mask and version.

    >>> _parse_section_header('defaults')
    ('*', 0)
    >>> _parse_section_header('web-*;v3')
    ('web-*', 3)
    >>> _parse_section_header('web-*;x3')
    Traceback (most recent call last):
    ...
    ValueError: Unknown x3 in web-*;x3
    """
    if section == 'defaults':
        return '*', 0
    else:
        mask, semicolon, extra = section.partition(';')
        if not extra:
            return mask, 0
        elif extra.startswith('v'):
            try:
                return mask, int(extra[1:])
            except ValueError:
                raise ValueError(f"Cannot parse {extra} in {section}")
        else:
            raise ValueError(f"Unknown {extra} in {section}")


def default_config_paths():
    return [
        Path(__file__).with_name('config.ini'),
        Path('/etc/mevo_provisioning.ini'),
        Path('~/.config/mevo_provisioning.ini').expanduser(),
        ]


def global_config() -> Mapping[str, str]:
    return read_config(*default_config_paths())


if __name__ == '__main__':
    for k, v in global_config().items():
        print(k + '=' + v)
