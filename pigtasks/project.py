#!/usr/bin/env python
# encoding: utf-8

"""Project definition module."""

from weakref import WeakValueDictionary
from .util import PigError, Adapter
import logging as lg
import os
import os.path as osp
import sys


_logger = lg.getLogger(__name__)


class _JobDict(dict):

  """Simple dictionary subclass for jobs.

  It disables the default `__setitem__` method and implements a custom
  `KeyError` exception. Note that this isn't completely fool-proof but enough
  for our purpose.

  """

  def __getitem__(self, key):
    try:
      return super(_JobDict, self).__getitem__(key)
    except KeyError:
      raise PigError('Job %r not found.', key)

  def __setitem__(self, key, value):
    raise PigError('Cannot insert job. Use `Project.add_job` instead.')


class Project(object):

  """Pig project.

  :param name: Name of the project. It is also the name of the project's
    directory inside the cache.
  :param root: Path to a root file or directory (typically used with
    `root=__file__`). Pig scripts are discovered under its `src/` directory
    and relative paths (dependencies, job scripts) are resolved against it.
    Defaults to the current working directory.
  :param register: Add project to registry. Setting this to `False` will make
    it invisible to the CLI.

  To avoid undefined behavior, both the `name` and `root` attributes should not
  be altered after instantiation.

  """

  _registry = WeakValueDictionary()

  def __init__(self, name, root=None, register=True):
    self.name = name
    root = root or os.getcwd()
    self.root = osp.abspath(root if osp.isdir(root) else osp.dirname(root))
    if register:
      self._registry[name] = self
    self._jobs = {}
    self._configurations = {}
    self._logger = Adapter(repr(self), _logger)
    self._logger.debug('Instantiated.')

  def __repr__(self):
    return '<%s(name=%r, root=%r)>' % (
      self.__class__.__name__, self.name, self.root
    )

  def __str__(self):
    return self.name

  @property
  def jobs(self):
    """Returns a dictionary of all jobs in the project, keyed by name.

    .. note::

      This property should not be used to add jobs. Use :meth:`add_job`
      instead.

    """
    return _JobDict(self._jobs)

  @property
  def pig_scripts(self):
    """Sorted list of absolute paths to the pig scripts under `src/`.

    Hidden files and directories are included.

    """
    paths = []
    for dirpath, _, filenames in os.walk(osp.join(self.root, 'src')):
      paths.extend(
        osp.join(dirpath, filename)
        for filename in filenames
        if filename.endswith('.pig')
      )
    return sorted(paths)

  def add_job(self, name, job, **kwargs):
    """Include a job in the project.

    :param name: Name assigned to job (must be unique).
    :param job: :class:`~pigtasks.job.Job` instance.
    :param kwargs: Keyword arguments that will be forwarded to the
      :meth:`~pigtasks.job.Job.on_add` handler.

    This method triggers the :meth:`~pigtasks.job.Job.on_add` method on the
    added job (passing the project and name as arguments, along with any
    `kwargs`). The handler will be called right after the job is added.

    """
    if not job is self._jobs.get(name, job):
      raise PigError('Inconsistent duplicate job: %r.' % (name, ))
    job.on_add(self, name, **kwargs)
    self._jobs[name] = job
    self._logger.info('Added job %r.', name)

  def add_dependency(self, path, configuration='pig'):
    """Declare a file (typically a jar) the project's scripts depend on.

    :param path: Path to file. Relative paths are joined with the project's
      root.
    :param configuration: Name of the dependency configuration the file
      belongs to. Only files of the configuration selected by the
      `dependencyConf` setting are staged in the cache.

    """
    if not osp.isabs(path):
      path = osp.join(self.root, path)
    path = osp.realpath(path)
    if not osp.exists(path):
      raise PigError('File not found: %r.' % (path, ))
    paths = self._configurations.setdefault(configuration, [])
    if not path in paths:
      paths.append(path)
      self._logger.info('Added dependency %r to %r.', path, configuration)

  def get_dependencies(self, configuration):
    """List of absolute paths of a configuration's files.

    :param configuration: Configuration name. Unknown configurations are
      empty.

    """
    return list(self._configurations.get(configuration, []))

  @classmethod
  def load(cls, path, new=False):
    """Load projects from script.

    :param path: Path to python module.
    :param new: If set to `True`, only projects loaded as a consequence of
      calling this method will be returned.

    Returns a dictionary of :class:`~pigtasks.project.Project`'s keyed by
    project name. Only registered projects (i.e. instantiated with
    `register=True`) can be discovered via this method.

    """
    if not path:
      raise ImportError('Invalid project module path: %r' % (path, ))
    path = osp.abspath(path)
    _logger.debug('Attempting to load projects from: %r', path)
    head, tail = osp.split(path.rstrip(os.sep))
    sys.path.insert(0, head)
    # reset the registry to let us find out exactly how many projects are
    # loaded, even if there are name clashes
    _registry = cls._registry
    cls._registry = {}
    try:
      __import__(osp.splitext(tail)[0])
      _logger.debug(
        'Found %s projects from loading %s: %s',
        len(cls._registry), path, ', '.join(cls._registry),
      )
      collisions = set(cls._registry) & set(_registry)
      if collisions:
        _logger.warning(
          '%s project name collisions detected by loading %s: %s',
          len(collisions), path, ', '.join(collisions)
        )
      registry = cls._registry.copy()
    finally:
      # restore registry, keeping the latest definition of each project if a
      # newer project had the same name
      for name, project in _registry.items():
        cls._registry.setdefault(name, project)
      sys.path.remove(head)
    if new:
      _logger.info(
        '%s new projects were loaded from %s: %s',
        len(registry), path, ', '.join(registry)
      )
      return registry
    else:
      _logger.info(
        '%s total projects are now registered after loading %s: %s',
        len(cls._registry), path, ', '.join(cls._registry)
      )
      return dict(cls._registry)
