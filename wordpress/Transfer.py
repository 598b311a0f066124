"""Move a WordPress database between the local machine and the remote host.

A push dumps the local database, uploads the dump and imports it remotely.
A pull does the same the other way round. Each run goes through

  INIT -> EXPORTED -> DIR_READY -> TRANSFERRED -> IMPORTED -> CLEANED_UP

and stops at the first failing step. Nothing is retried or rolled back, so a
dump that was exported before a failed transfer stays on the source host.
"""
from dataclasses import dataclass, field
from enum import Enum
import os
import posixpath
from paramiko.ssh_exception import SSHException
# Custom Code Enigma modules
import common.Utils
from common.Errors import CleanupFailed, ConfigInvalid, DirectoryCreateFailed, PipelineError, TransferFailed
from common.Hosts import ArtifactHandle, TransferDirection
from wordpress import WordPress


class Stage(Enum):
  INIT = "init"
  EXPORTED = "exported"
  DIR_READY = "dir-ready"
  TRANSFERRED = "transferred"
  IMPORTED = "imported"
  CLEANED_UP = "cleaned-up"


@dataclass
class TransferResult:
  direction: TransferDirection
  stage: Stage = Stage.INIT
  source_artifact: ArtifactHandle = None
  destination_artifact: ArtifactHandle = None
  warnings: list = field(default_factory=list)

  @property
  def succeeded(self):
    return self.stage is Stage.CLEANED_UP


def prepare_backup_dir(c, host, direction=None):
  if not common.Utils.ensure_directory(c, host, host.dump_path):
    raise DirectoryCreateFailed("Could not create directory %s on the %s host! Aborting early" % (host.dump_path, host.name), direction)


def export_artifact(c, host, direction=None, now=None):
  artifact = ArtifactHandle(common.Utils.backup_filename(now), host)
  prepare_backup_dir(c, host, direction)
  return WordPress.export_db(c, artifact, direction)


# SFTP does not expand ~, remote paths are relative to the login directory anyway
def _sftp_path(artifact):
  if artifact.owner.is_local:
    return os.path.expanduser(artifact.path)
  if artifact.path.startswith("~/"):
    return artifact.path[2:]
  return artifact.path


# Copy the dump to the other host and check every byte arrived
def transfer_artifact(c, artifact, destination, direction):
  target = artifact.moved_to(destination)
  print("===> Copying %s from the %s host to %s on the %s host" % (artifact.filename, artifact.owner.name, target.path, destination.name))
  try:
    if direction is TransferDirection.PUSH:
      c.put(_sftp_path(artifact), _sftp_path(target))
    else:
      c.get(_sftp_path(artifact), _sftp_path(target))
  except (OSError, SSHException) as e:
    raise TransferFailed("Could not copy %s to the %s host: %s. The dump remains at %s on the %s host" % (artifact.filename, destination.name, e, artifact.path, artifact.owner.name), direction) from e

  print("===> Check the database dump has actually been copied")
  expected = WordPress.backup_size(c, artifact)
  actual = WordPress.backup_size(c, target)
  if expected is None or actual != expected:
    raise TransferFailed("%s on the %s host is %s bytes but %s bytes were expected. Refusing to import a partial dump" % (target.path, destination.name, actual, expected), direction)
  return target


def _cleanup(c, artifact, result):
  try:
    WordPress.remove_backup(c, artifact, result.direction)
  except CleanupFailed as e:
    print("######### WARNING: %s" % e.reason)
    result.warnings.append(e)


# Export on the source host and land the dump in the destination's backup directory
def backup(c, direction, config, now=None, result=None):
  source = direction.source(config)
  destination = direction.destination(config)
  if result is None:
    result = TransferResult(direction)

  result.source_artifact = export_artifact(c, source, direction, now)
  result.stage = Stage.EXPORTED
  prepare_backup_dir(c, destination, direction)
  result.stage = Stage.DIR_READY
  result.destination_artifact = transfer_artifact(c, result.source_artifact, destination, direction)
  result.stage = Stage.TRANSFERRED
  return result


# Import a dump on the destination host, rewrite the source URL to the
# destination URL, then delete the dump it consumed
def restore(c, direction, config, artifact=None, result=None):
  source = direction.source(config)
  destination = direction.destination(config)
  if result is None:
    result = TransferResult(direction)
  if artifact is None:
    artifact = WordPress.find_latest_backup(c, destination, direction)
  result.destination_artifact = artifact

  WordPress.import_db(c, artifact, direction)
  WordPress.search_replace(c, destination, source.public_url, destination.public_url, direction)
  result.stage = Stage.IMPORTED
  _cleanup(c, artifact, result)
  return result


def run_backup_transfer(c, direction, config, now=None):
  source = direction.source(config)
  destination = direction.destination(config)
  print("===> Starting database %s from the %s host to the %s host" % (direction, source.name, destination.name))
  result = TransferResult(direction)
  try:
    backup(c, direction, config, now, result)
    restore(c, direction, config, result.destination_artifact, result)
  except PipelineError:
    print("######### Database %s stopped after stage '%s'. Nothing was rolled back" % (direction, result.stage.value))
    raise

  if config.keep_source_backup:
    print("===> Keeping %s on the %s host as a backup" % (result.source_artifact.path, source.name))
  else:
    _cleanup(c, result.source_artifact, result)
  result.stage = Stage.CLEANED_UP

  if result.warnings:
    print("===> Database %s complete, with %s cleanup warning(s)" % (direction, len(result.warnings)))
  else:
    print("===> Database %s complete" % direction)
  return result


def backup_remote(c, config, now=None):
  return backup(c, TransferDirection.PULL, config, now)


def backup_local(c, config, now=None):
  return backup(c, TransferDirection.PUSH, config, now)


def _given_artifact(dump_file, host, direction):
  if dump_file is None:
    return None
  if common.Utils.detect_malicious_strings(common.Utils.SHELL_CONTROL_STRINGS, dump_file):
    raise ConfigInvalid("Refusing to import %s, it contains shell control characters" % dump_file, direction)
  return ArtifactHandle(posixpath.basename(dump_file), host)


def import_remote(c, config, dump_file=None):
  result = restore(c, TransferDirection.PUSH, config, _given_artifact(dump_file, config.remote, TransferDirection.PUSH))
  result.stage = Stage.CLEANED_UP
  return result


def import_local(c, config, dump_file=None):
  result = restore(c, TransferDirection.PULL, config, _given_artifact(dump_file, config.local, TransferDirection.PULL))
  result.stage = Stage.CLEANED_UP
  return result


def push(c, config, now=None):
  return run_backup_transfer(c, TransferDirection.PUSH, config, now)


def pull(c, config, now=None):
  return run_backup_transfer(c, TransferDirection.PULL, config, now)
