"""
Test fixtures for the database transfer tasks.

Nothing here talks to a real host: FakeConnection records every command and
file transfer and answers with canned results, so a test can make any single
step fail and check what ran before and after it.
"""

import time

import pytest

from common.Hosts import HostConfig, TransferConfig

NOW = time.strptime("2026-10-18 09:30", "%Y-%m-%d %H:%M")
BACKUP_FILE = "db_backup-2026-10-18_09-30.sql"


class FakeResult:
  def __init__(self, stdout="", failed=False):
    self.stdout = stdout
    self.failed = failed
    self.ok = not failed


class FakeConnection:
  """Stands in for fabric.Connection (run, local, put, get)."""

  def __init__(self):
    self.commands = []
    self.transfers = []
    self.failures = []
    self.outputs = {"wc -c": "2048\n"}
    self.transfer_error = None

  def fail_on(self, needle, side=None):
    self.failures.append((side, needle))

  def _result(self, side, command):
    self.commands.append((side, command))
    for fail_side, needle in self.failures:
      if fail_side in (None, side) and needle in command:
        return FakeResult(failed=True)
    for needle, stdout in self.outputs.items():
      if needle in command:
        return FakeResult(stdout)
    return FakeResult()

  def run(self, command, **kwargs):
    return self._result("remote", command)

  def local(self, command, **kwargs):
    return self._result("local", command)

  def put(self, local, remote):
    self.transfers.append(("put", local, remote))
    if self.transfer_error is not None:
      raise self.transfer_error

  def get(self, remote, local):
    self.transfers.append(("get", remote, local))
    if self.transfer_error is not None:
      raise self.transfer_error

  def ran(self, needle, side=None):
    return [command for cmd_side, command in self.commands if needle in command and side in (None, cmd_side)]

  def index_of(self, needle):
    for position, (side, command) in enumerate(self.commands):
      if needle in command:
        return position
    raise AssertionError("%s was never run" % needle)


@pytest.fixture
def conn():
  return FakeConnection()


@pytest.fixture
def local_host():
  return HostConfig(
    name="local",
    path="/home/dev/sites/example",
    wp_cli="wp",
    public_url="http://example.test",
    dump_path="/home/dev/dbbackups",
  )


@pytest.fixture
def remote_host():
  return HostConfig(
    name="remote",
    path="/var/www/live.example.prod",
    wp_cli="wp --allow-root",
    public_url="https://www.example.com",
    dump_path="/home/jenkins/dbbackups",
  )


@pytest.fixture
def transfer_config(local_host, remote_host):
  return TransferConfig(local=local_host, remote=remote_host, host="web1.example.com", user="jenkins")


@pytest.fixture
def write_config(tmp_path):
  """Write an INI file into tmp_path and return its path."""

  def _write(text, name="dbsync.ini"):
    path = tmp_path / name
    path.write_text(text)
    return path

  return _write
