#!/usr/bin/env python
# encoding: utf-8

"""Plugin settings, read from a project's `.pigProperties` file."""

from collections import namedtuple
from .util import PigError, read_properties
import logging as lg
import os.path as osp


_logger = lg.getLogger(__name__)

#: Name of the properties file, looked up in the project's root directory.
PROPERTIES_FILENAME = '.pigProperties'

# properties file key -> settings field
_KEYS = {
  'pigCacheDir': 'cache_dir',
  'pigCommand': 'pig_command',
  'pigOptions': 'pig_options',
  'remoteHostName': 'remote_host',
  'remoteShellCmd': 'remote_shell_cmd',
  'remoteCacheDir': 'remote_cache_dir',
  'dependencyConf': 'dependency_conf',
  'generateTasks': 'generate_tasks',
}


class PigSettings(namedtuple('PigSettings', [
  'cache_dir',
  'pig_command',
  'pig_options',
  'remote_host',
  'remote_shell_cmd',
  'remote_cache_dir',
  'dependency_conf',
  'generate_tasks',
])):

  """Resolved plugin settings.

  :param cache_dir: Local directory where each project's scripts and jars are
    staged (in a subdirectory named after the project).
  :param pig_command: Command used to invoke Pig.
  :param pig_options: Extra options passed to Pig, inserted verbatim.
  :param remote_host: Host to run Pig on. If unset, Pig runs locally.
  :param remote_shell_cmd: Remote shell command (e.g. `ssh`). Required when
    `remote_host` is set.
  :param remote_cache_dir: Directory on the remote host where the cache is
    synced. Required when `remote_host` is set.
  :param dependency_conf: Name of the project dependency configuration whose
    jars are staged alongside the scripts.
  :param generate_tasks: Register tasks at all.

  Instances are immutable; use :meth:`load` or :meth:`from_properties` rather
  than the constructor to get defaults filled in.

  """

  __slots__ = ()

  @property
  def is_remote(self):
    """Whether Pig runs on a remote host."""
    return bool(self.remote_host)

  def validate(self):
    """Check that the settings are complete, raising an error otherwise.

    Returns the settings themselves to allow chaining.

    """
    if self.remote_host:
      missing = [
        key
        for key, field in sorted(_KEYS.items())
        if field in ('remote_shell_cmd', 'remote_cache_dir')
        and not getattr(self, field)
      ]
      if missing:
        raise PigError(
          'Remote host %r configured without %s.\n'
          'Add the missing keys to the `%s` file.',
          self.remote_host, ' and '.join(missing), PROPERTIES_FILENAME
        )
    if not self.pig_command:
      raise PigError('Empty `pigCommand` setting.')
    return self

  @classmethod
  def from_properties(cls, properties, root):
    """Build settings from a dictionary of properties.

    :param properties: Dictionary keyed by properties file key. Blank values
      are treated as missing.
    :param root: Project root directory, used for the default cache
      directory and to resolve relative cache directories.

    """
    values = {
      'cache_dir': osp.join(root, 'build', 'pigCache'),
      'pig_command': 'pig',
      'pig_options': None,
      'remote_host': None,
      'remote_shell_cmd': None,
      'remote_cache_dir': None,
      'dependency_conf': 'pig',
      'generate_tasks': True,
    }
    for key, value in properties.items():
      if not key in _KEYS:
        _logger.warning('Ignoring unknown property %r.', key)
        continue
      value = value.strip()
      if value:
        values[_KEYS[key]] = value
    generate_tasks = values['generate_tasks']
    if not isinstance(generate_tasks, bool):
      if generate_tasks.lower() in ('true', 'false'):
        values['generate_tasks'] = generate_tasks.lower() == 'true'
      else:
        raise PigError(
          'Invalid `generateTasks` value: %r (expected true or false).',
          generate_tasks
        )
    values['cache_dir'] = osp.abspath(osp.join(root, values['cache_dir']))
    return cls(**values).validate()

  @classmethod
  def load(cls, root):
    """Load settings for a project.

    :param root: Project root directory. If it contains a `.pigProperties`
      file, its properties override the defaults.

    """
    path = osp.join(root, PROPERTIES_FILENAME)
    if osp.exists(path):
      _logger.debug('Reading settings from %r.', path)
      properties = read_properties(path)
    else:
      _logger.debug('No settings file at %r, using defaults.', path)
      properties = {}
    return cls.from_properties(properties, root)
