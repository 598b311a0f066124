import configparser
import os
# Custom Code Enigma modules
from common.Errors import ConfigMissing


# Read an INI file from the current directory (or a full path) into a
# case-sensitive RawConfigParser. Returns None when the file is missing
# and abort_if_missing is False.
def read_config_file(config_filename='dbsync.ini', abort_if_missing=True, fullpath=False):
  config_file = configparser.RawConfigParser()
  # Force case-sensitivity
  config_file.optionxform = str

  if fullpath is False:
    path_to_config_file = os.path.join(os.getcwd(), config_filename)
  else:
    path_to_config_file = config_filename

  print("===> Trying to read LOCAL file %s if it is present" % path_to_config_file)
  if os.path.isfile(path_to_config_file):
    config_file.read(path_to_config_file)
    return config_file

  # Otherwise, abort the run / report missing file.
  if abort_if_missing is True:
    raise ConfigMissing("We didn't find %s, aborting" % path_to_config_file)
  print("===> No config file found, but we will carry on regardless")
  return None


def return_config_item(config, section, item, var_type="string", default_value=None, notify=True, deprecate=False, replacement_section=None):
  if config is None or not config.has_option(section, item):
    # Either the default value remains unchanged, or we've modified it
    return default_value

  # deprecate is a flag to say if this config option is obsolete and soon to be removed
  if deprecate:
    if replacement_section:
      print("############### Fetching %s from [%s] in the config file - DEPRECATED! Please use [%s] instead" % (item, section, replacement_section))
    else:
      print("############### Fetching %s from [%s] in the config file - DEPRECATED! This option is being removed!" % (item, section))

  if var_type == "string":
    value = config.get(section, item)
  elif var_type == "boolean":
    value = config.getboolean(section, item)
  elif var_type == "int":
    value = config.getint(section, item)
  else:
    print("===> tried to look up %s %s in [%s] but type not found" % (var_type, item, section))
    return default_value

  if notify:
    print("===> %s in [%s] being set to %s" % (item, section, value))
  return value
