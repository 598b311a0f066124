from dataclasses import dataclass, replace
from enum import Enum
import posixpath
# Custom Code Enigma modules
import common.ConfigFile
import common.Utils
from common.Errors import ConfigInvalid, ConfigMissing

LOCAL = "local"
REMOTE = "remote"

# Section names in the config file, per host scope
SECTIONS = {LOCAL: "Local", REMOTE: "Remote"}


@dataclass(frozen=True)
class HostConfig:
  name: str
  path: str
  wp_cli: str
  public_url: str
  dump_path: str

  @property
  def is_local(self):
    return self.name == LOCAL


@dataclass(frozen=True)
class TransferConfig:
  local: HostConfig
  remote: HostConfig
  host: str = None
  user: str = None
  port: int = None
  connect_timeout: int = None
  keep_source_backup: bool = False


@dataclass(frozen=True)
class ArtifactHandle:
  filename: str
  owner: HostConfig

  @property
  def path(self):
    return posixpath.join(self.owner.dump_path, self.filename)

  # The same dump, once it has landed on another host
  def moved_to(self, host):
    return replace(self, owner=host)


class TransferDirection(Enum):
  PUSH = "push"
  PULL = "pull"

  def __str__(self):
    return self.value

  def source(self, config):
    return config.local if self is TransferDirection.PUSH else config.remote

  def destination(self, config):
    return config.remote if self is TransferDirection.PUSH else config.local


# Look an item up in the host's own section first, then in [Global]
def _host_item(config, scope, item, default_value=None):
  value = common.ConfigFile.return_config_item(config, "Global", item, "string", default_value, notify=False)
  return common.ConfigFile.return_config_item(config, SECTIONS[scope], item, "string", value)


def _build_host(config, scope, direction=None):
  values = {}
  defaults = {"path": ".", "wp_cli": "wp"} if scope == LOCAL else {"wp_cli": "wp"}
  for item in ("path", "wp_cli", "public_url", "dump_path"):
    value = _host_item(config, scope, item, defaults.get(item))
    if value is None or value.strip() == "":
      raise ConfigMissing("%s is not set for the %s host. Add it to [%s] or [Global]" % (item, scope, SECTIONS[scope]), direction)
    if common.Utils.detect_malicious_strings(common.Utils.SHELL_CONTROL_STRINGS, value):
      raise ConfigInvalid("%s for the %s host contains shell control characters: %s" % (item, scope, value), direction)
    values[item] = value.strip()
  # wp-cli runs from path, everything else from the login directory, so a
  # relative dump_path would point at two different places
  if not values["dump_path"].startswith(("/", "~")):
    raise ConfigInvalid("dump_path for the %s host must be absolute or start with ~, not %s" % (scope, values["dump_path"]), direction)
  # No trailing slashes, the backup file name gets appended to dump_path
  values["dump_path"] = values["dump_path"].rstrip("/") or "/"
  return HostConfig(name=scope, **values)


def _typed_item(config, section, item, var_type, default_value=None, direction=None):
  try:
    return common.ConfigFile.return_config_item(config, section, item, var_type, default_value)
  except ValueError:
    raise ConfigInvalid("%s in [%s] must be %s %s, not %s" % (item, section, "an" if var_type == "int" else "a", var_type, config.get(section, item)), direction) from None


# Resolve every value a transfer needs, once, before any step runs
def load_transfer_config(config, direction=None):
  if config is None:
    raise ConfigMissing("No config file was loaded, cannot resolve the local and remote hosts", direction)

  return TransferConfig(
    local=_build_host(config, LOCAL, direction),
    remote=_build_host(config, REMOTE, direction),
    host=common.ConfigFile.return_config_item(config, "Remote", "host"),
    user=common.ConfigFile.return_config_item(config, "Remote", "user"),
    port=_typed_item(config, "Remote", "port", "int", direction=direction),
    connect_timeout=_typed_item(config, "Remote", "connect_timeout", "int", direction=direction),
    keep_source_backup=_typed_item(config, "Global", "keep_source_backup", "boolean", False, direction),
  )
