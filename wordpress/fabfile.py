from contextlib import contextmanager
from fabric import task
from invoke import Collection
# Custom Code Enigma modules
import common.ConfigFile
import common.Hosts
import common.Utils
from common.Errors import ConfigMissing
from common.Hosts import TransferDirection
from wordpress import Transfer

CONFIG_HELP = {"config-file": "INI file with [Global], [Local] and [Remote] sections (default dbsync.ini)"}
IMPORT_HELP = dict(CONFIG_HELP, **{"dump-file": "Backup file to import (default: the latest db_backup-*.sql)"})


# Read the config file and get hold of the remote host, either the one fab
# was given with -H or the one in [Remote]
@contextmanager
def transfer_session(c, config_file, direction=None):
  config = common.ConfigFile.read_config_file(config_file, False)
  transfer_config = common.Hosts.load_transfer_config(config, direction)
  conn = common.Utils.remote_connection(c, transfer_config)
  if conn is None:
    raise ConfigMissing("You wanted to transfer a database but there is no remote host. Pass one with -H or set host in [Remote]", direction)
  try:
    yield conn, transfer_config
  finally:
    if conn is not c:
      conn.close()


@task(help=dict(CONFIG_HELP))
def remote_backup(c, config_file="dbsync.ini"):
  """Backup remote database and download"""
  with transfer_session(c, config_file, TransferDirection.PULL) as (conn, transfer_config):
    result = Transfer.backup_remote(conn, transfer_config)
  print("===> Remote database downloaded to %s" % result.destination_artifact.path)
  return result


@task(help=dict(CONFIG_HELP))
def local_backup(c, config_file="dbsync.ini"):
  """Backup local database and upload"""
  with transfer_session(c, config_file, TransferDirection.PUSH) as (conn, transfer_config):
    result = Transfer.backup_local(conn, transfer_config)
  print("===> Local database uploaded to %s" % result.destination_artifact.path)
  return result


@task(help=dict(IMPORT_HELP))
def remote_import(c, config_file="dbsync.ini", dump_file=None):
  """Imports Database on remote host"""
  with transfer_session(c, config_file, TransferDirection.PUSH) as (conn, transfer_config):
    return Transfer.import_remote(conn, transfer_config, dump_file)


@task(help=dict(IMPORT_HELP))
def local_import(c, config_file="dbsync.ini", dump_file=None):
  """Imports Database on local host"""
  with transfer_session(c, config_file, TransferDirection.PULL) as (conn, transfer_config):
    return Transfer.import_local(conn, transfer_config, dump_file)


@task(help=dict(CONFIG_HELP))
def push(c, config_file="dbsync.ini"):
  """Pushes local database to remote host"""
  with transfer_session(c, config_file, TransferDirection.PUSH) as (conn, transfer_config):
    return Transfer.push(conn, transfer_config)


@task(help=dict(CONFIG_HELP))
def pull(c, config_file="dbsync.ini"):
  """Pulls remote database to localhost"""
  with transfer_session(c, config_file, TransferDirection.PULL) as (conn, transfer_config):
    return Transfer.pull(conn, transfer_config)


# fab db.remote.backup, db.local.import, db.push, ...
remote = Collection("remote")
remote.add_task(remote_backup, name="backup")
remote.add_task(remote_import, name="import")

local = Collection("local")
local.add_task(local_backup, name="backup")
local.add_task(local_import, name="import")

db = Collection("db")
db.add_task(push)
db.add_task(pull)
db.add_collection(remote)
db.add_collection(local)

ns = Collection()
ns.add_collection(db)
