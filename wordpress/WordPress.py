import posixpath
# Custom Code Enigma modules
import common.Utils
from common.Errors import CleanupFailed, ExportFailed, ImportFailed, RewriteFailed
from common.Hosts import ArtifactHandle
from common.Utils import shell_quote as quote


# Dump the database of the host's WordPress install into its backup directory.
# --add-drop-table makes the later import a clean replace, not a merge.
def export_db(c, artifact, direction=None):
  host = artifact.owner
  print("===> Taking a database backup of the %s host into %s..." % (host.name, artifact.path))
  if common.Utils.host_run(c, host, "cd %s && %s db export %s --add-drop-table" % (quote(host.path), host.wp_cli, quote(artifact.path))).failed:
    raise ExportFailed("Could not export the database on the %s host to %s! Aborting early" % (host.name, artifact.path), direction)
  return artifact


# Load a dump into the host that owns it. This replaces the existing database.
def import_db(c, artifact, direction=None):
  host = artifact.owner
  print("===> Importing %s into the %s database" % (artifact.path, host.name))
  if common.Utils.host_run(c, host, "cd %s && %s db import %s" % (quote(host.path), host.wp_cli, quote(artifact.path))).failed:
    raise ImportFailed("Could not import %s on the %s host! The database may be in an inconsistent state" % (artifact.path, host.name), direction)


# Point every URL in the freshly imported data at this host
def search_replace(c, host, search, replacement, direction=None):
  if search == replacement:
    print("===> Public URL is %s on both hosts, nothing to replace" % search)
    return
  print("===> Replacing %s with %s in the %s database" % (search, replacement, host.name))
  if common.Utils.host_run(c, host, "cd %s && %s search-replace %s %s" % (quote(host.path), host.wp_cli, quote(search), quote(replacement))).failed:
    raise RewriteFailed("Imported the database on the %s host but could not replace %s with %s!" % (host.name, search, replacement), direction)


# Most recent db_backup-*.sql in the host's backup directory
def find_latest_backup(c, host, direction=None):
  # The glob has to stay outside the quotes
  pattern = posixpath.join(quote(host.dump_path), "%s*%s" % (common.Utils.BACKUP_PREFIX, common.Utils.BACKUP_SUFFIX))
  result = common.Utils.host_run(c, host, "ls -1t %s 2>/dev/null | head -1" % pattern, hide=True)
  filename = posixpath.basename(result.stdout.strip()) if not result.failed else ""
  if not filename:
    raise ImportFailed("No database backup found in %s on the %s host. Run a backup first" % (host.dump_path, host.name), direction)
  print("===> Latest database backup on the %s host is %s" % (host.name, filename))
  return ArtifactHandle(filename, host)


# Byte count of a dump, or None if it isn't there
def backup_size(c, artifact):
  result = common.Utils.host_run(c, artifact.owner, "wc -c < %s" % quote(artifact.path), hide=True)
  if result.failed:
    return None
  try:
    return int(result.stdout.strip())
  except ValueError:
    return None


def remove_backup(c, artifact, direction=None):
  print("===> Removing %s from the %s host" % (artifact.path, artifact.owner.name))
  if common.Utils.host_run(c, artifact.owner, "rm -f %s" % quote(artifact.path)).failed:
    raise CleanupFailed("Could not remove %s from the %s host. It'll need manual removal" % (artifact.path, artifact.owner.name), direction)
