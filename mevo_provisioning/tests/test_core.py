# Copyright 2018-present Network Optix, Inc. Licensed under MPL 2.0: www.mozilla.org/MPL/2.0/
import logging
import unittest
from pathlib import Path

from mevo_provisioning._core import BestEffortStep
from mevo_provisioning._core import Failed
from mevo_provisioning._core import Run
from mevo_provisioning._core import SkippedStep
from mevo_provisioning._core import Step
from mevo_provisioning._core import Succeeded
from mevo_provisioning._core import Tolerated
from mevo_provisioning._files import InstallText
from mevo_provisioning._packages import AddNodeSource
from mevo_provisioning._shell import DownloadFailed
from mevo_provisioning.tests._fake_shell import FakeShell


class _FailingDownloadShell(FakeShell):

    def download(self, url):
        raise DownloadFailed(url, "Connection refused")


class _ReadOnlyShell(FakeShell):

    def write_text(self, path, text, mode=None):
        raise PermissionError(13, "Permission denied", str(path))


class TestSteps(unittest.TestCase):

    def test_step_succeeded(self):
        shell = FakeShell()
        outcome = Step("Two", [Run('echo 1'), Run('echo 2')]).run(shell)
        self.assertIsInstance(outcome, Succeeded)
        self.assertEqual(shell.commands, ['echo 1', 'echo 2'])

    def test_step_stops_at_first_failure(self):
        shell = FakeShell(failing=['echo 2'])
        outcome = Step("Three", [Run('echo 1'), Run('echo 2'), Run('echo 3')]).run(shell)
        self.assertIsInstance(outcome, Failed)
        self.assertEqual(outcome.returncode, 100)
        self.assertEqual(shell.commands, ['echo 1', 'echo 2'])

    def test_best_effort_attempts_everything(self):
        shell = FakeShell(failing=['echo 1', 'echo 2'])
        outcome = BestEffortStep("Three", [Run('echo 1'), Run('echo 2'), Run('echo 3')]).run(shell)
        self.assertIsInstance(outcome, Tolerated)
        self.assertEqual(shell.commands, ['echo 1', 'echo 2', 'echo 3'])
        self.assertIn('echo 1', outcome.reason)
        self.assertIn('echo 2', outcome.reason)

    def test_best_effort_without_failures(self):
        outcome = BestEffortStep("One", [Run('echo 1')]).run(FakeShell())
        self.assertIsInstance(outcome, Succeeded)

    def test_skipped(self):
        shell = FakeShell()
        outcome = SkippedStep("Certificate", "--email is missing").run(shell)
        self.assertIsInstance(outcome, Tolerated)
        self.assertEqual(outcome.reason, "--email is missing")
        self.assertFalse(shell.mutated())

    def test_download_failure_is_step_failure(self):
        shell = _FailingDownloadShell()
        outcome = Step("Node.js", [AddNodeSource(18), Run('apt-get install -y nodejs')]).run(shell)
        self.assertIsInstance(outcome, Failed)
        self.assertEqual(outcome.returncode, 1)
        self.assertIn('setup_18.x', outcome.reason)
        self.assertEqual(shell.commands, [])

    def test_write_failure_is_step_failure(self):
        shell = _ReadOnlyShell()
        outcome = Step("Unit", [InstallText(Path('/etc/x.service'), '[Unit]\n'), Run('echo 1')]).run(shell)
        self.assertIsInstance(outcome, Failed)
        self.assertIn('Permission denied', outcome.reason)
        self.assertEqual(shell.commands, [])

    def test_node_source_script_piped_to_bash(self):
        shell = FakeShell()
        AddNodeSource(20).run(shell)
        self.assertEqual(shell.downloads, ['https://deb.nodesource.com/setup_20.x'])
        self.assertEqual(shell.commands, ['bash -'])


if __name__ == '__main__':
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(asctime)s %(levelname)7s %(name)s %(message).5000s",
        )
    unittest.main()
