from fabric import Connection
import shlex
import time

SHELL_CONTROL_STRINGS = [';', '&&', '&', '||', '|', '`', '$(', '>', '<', '\n']

BACKUP_PREFIX = "db_backup-"
BACKUP_SUFFIX = ".sql"


# Quote a path or URL for the shell. A leading ~ stays outside the quotes so
# the shell still expands it to the home directory.
def shell_quote(value):
  if value == "~":
    return value
  if value.startswith("~/"):
    return "~/" + shlex.quote(value[2:])
  return shlex.quote(value)


# Check a string for disallowed substrings before it goes anywhere near a shell.
# Returns True if any of them were found.
def detect_malicious_strings(disallowed_strings, string_to_check):
  if not string_to_check:
    return False
  for disallowed in disallowed_strings:
    if disallowed in string_to_check:
      print("===> Found %s in %s, refusing to use it" % (disallowed.strip() or repr(disallowed), string_to_check))
      return True
  return False


# Name of a database dump taken NOW, to the minute. Two dumps taken in the
# same minute on the same host get the same name.
def backup_filename(now=None):
  if now is None:
    now = time.localtime()
  return "%s%s%s" % (BACKUP_PREFIX, time.strftime("%Y-%m-%d_%H-%M", now), BACKUP_SUFFIX)


# Run a command on whichever side the host lives. Never raises on a non-zero
# exit, callers check .failed themselves.
def host_run(c, host, command, hide=False):
  print("===> [%s] %s" % (host.name, command))
  if host.is_local:
    return c.local(command, warn=True, hide=hide)
  return c.run(command, warn=True, hide=hide)


# mkdir -p, so calling it on a directory that already exists is fine
def ensure_directory(c, host, path):
  print("===> Ensuring backup directory %s exists on the %s host" % (path, host.name))
  return not host_run(c, host, "mkdir -p %s" % shell_quote(path)).failed


# Tasks run without -H get a plain Invoke context, so build the SSH
# connection from the [Remote] section instead
def remote_connection(c, transfer_config):
  if isinstance(c, Connection):
    return c
  if transfer_config.host is None:
    return None
  print("===> Host is %s" % transfer_config.host)
  return Connection(
    transfer_config.host,
    user=transfer_config.user,
    port=transfer_config.port,
    connect_timeout=transfer_config.connect_timeout,
  )
