# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import subprocess
from abc import ABCMeta
from abc import abstractmethod
from typing import Sequence

from mevo_provisioning._shell import DownloadFailed

_step_errors = (subprocess.CalledProcessError, DownloadFailed, OSError)


class Command(metaclass=ABCMeta):

    @abstractmethod
    def run(self, shell):
        pass


class Run(Command):

    def __init__(self, command: str):
        self._command = command

    def __repr__(self):
        return f'{Run.__name__}({self._command!r})'

    def run(self, shell):
        shell.run(self._command)


class CompositeCommand(Command):

    def __init__(self, commands: Sequence[Command]):
        self._commands: Sequence[Command] = commands

    def __repr__(self):
        return f'<{self.__class__.__name__} with {len(self._commands)} commands>'

    def run(self, shell):
        for command in self._commands:
            command.run(shell)


class Outcome:

    def __init__(self, title: str, reason: str = ''):
        self.title = title
        self.reason = reason

    def __repr__(self):
        if not self.reason:
            return f'{self.__class__.__name__}({self.title!r})'
        return f'{self.__class__.__name__}({self.title!r}, {self.reason!r})'


class Succeeded(Outcome):
    pass


class Tolerated(Outcome):
    pass


class Failed(Outcome):

    def __init__(self, title: str, reason: str, returncode: int = 1):
        super().__init__(title, reason)
        self.returncode = returncode


class Step:
    """Named group of commands. The first failure fails the whole run."""

    def __init__(self, title: str, commands: Sequence[Command]):
        self.title = title
        self._commands = commands

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.title!r} with {len(self._commands)} commands>'

    def run(self, shell) -> Outcome:
        _logger.info("==> %s", self.title)
        for command in self._commands:
            try:
                command.run(shell)
            except _step_errors as e:
                _logger.error("%s: %r: %s", self.title, command, e)
                return Failed(self.title, str(e), _returncode(e))
        return Succeeded(self.title)


class BestEffortStep(Step):
    """Every command is attempted. Failures do not stop the run."""

    def run(self, shell):
        _logger.info("==> %s", self.title)
        failures = []
        for command in self._commands:
            try:
                command.run(shell)
            except _step_errors as e:
                _logger.warning("%s: %r: %s; continue", self.title, command, e)
                failures.append(str(e))
        if failures:
            return Tolerated(self.title, '; '.join(failures))
        return Succeeded(self.title)


class SkippedStep(Step):

    def __init__(self, title: str, reason: str):
        super().__init__(title, [])
        self._reason = reason

    def run(self, shell):
        _logger.warning("%s: skipped: %s", self.title, self._reason)
        return Tolerated(self.title, self._reason)


def _returncode(error) -> int:
    if isinstance(error, subprocess.CalledProcessError) and error.returncode > 0:
        return error.returncode
    return 1


_logger = logging.getLogger(__name__)
