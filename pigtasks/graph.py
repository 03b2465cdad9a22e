#!/usr/bin/env python
# encoding: utf-8

"""Task graph module.

Tasks are named units of work with dependencies on other tasks. A
:class:`TaskGraph` holds all tasks of a run and executes requested tasks after
their dependencies, each at most once per run.

"""

from .util import PigError, Adapter
import logging as lg
import os.path as osp
import subprocess


_logger = lg.getLogger(__name__)


def build_unique_task_name(file_name, task_names):
  """Build a task name from a file name, avoiding existing names.

  :param file_name: File name, a trailing `.pig` extension is dropped.
  :param task_names: Set of names already taken. It isn't modified: callers
    should add the returned name themselves.

  Collisions are resolved by appending `_2`, `_3`, etc.

  """
  base, ext = osp.splitext(file_name)
  name = base if ext == '.pig' else file_name
  if not name in task_names:
    return name
  index = 2
  while '%s_%s' % (name, index) in task_names:
    index += 1
  return '%s_%s' % (name, index)


class _TaskDict(dict):

  """Read-only dictionary of tasks, with a helpful error on missing keys."""

  def __getitem__(self, key):
    try:
      return super(_TaskDict, self).__getitem__(key)
    except KeyError:
      raise PigError(
        'Task %r not found. Available tasks: %s',
        key, ', '.join(sorted(self))
      )

  def __setitem__(self, key, value):
    raise PigError('Cannot insert task. Use `TaskGraph.add_task` instead.')


class Task(object):

  """Unit of work.

  :param name: Task name, unique within a graph.
  :param action: Function called with the task and the run's properties when
    the task is executed.
  :param dependencies: Names of tasks which must run before this one.
  :param description: Human readable description.
  :param group: Group name, used when listing tasks.

  """

  def __init__(self, name, action=None, dependencies=None, description=None,
    group=None):
    self.name = name
    self.action = action
    self.dependencies = list(dependencies or [])
    self.description = description or ''
    self.group = group
    self._logger = Adapter(repr(self), _logger)

  def __repr__(self):
    return '<%s(name=%r)>' % (self.__class__.__name__, self.name)

  def __str__(self):
    return self.name

  def execute(self, properties):
    """Run the task.

    :param properties: Dictionary of run properties (e.g. a job name).

    """
    if self.action:
      self.action(self, properties)


class ExecTask(Task):

  """Task running an external command, waiting for it to finish.

  :param name: Task name.
  :param command_line: List of arguments of the command.
  :param before: Function called with the task and the run's properties right
    before the command is run. It can generate files the command needs or set
    the command line itself.
  :param kwargs: Keyword arguments forwarded to :class:`Task`.

  A non-zero exit status fails the task.

  """

  def __init__(self, name, command_line=None, before=None, **kwargs):
    super(ExecTask, self).__init__(name, **kwargs)
    self.command_line = command_line
    self.before = before

  def execute(self, properties):
    """Run the `before` hook, then the command."""
    if self.before:
      self.before(self, properties)
    if not self.command_line:
      raise PigError('No command line set for task %r.', self.name)
    self._logger.info('Running %r.', ' '.join(self.command_line))
    returncode = subprocess.call(self.command_line)
    if returncode:
      raise PigError(
        'Task %s failed: command %r exited with status %s.',
        self.name, ' '.join(self.command_line), returncode
      )
    self._logger.info('Command finished.')


class TaskGraph(object):

  """Collection of tasks and their dependencies."""

  def __init__(self):
    self._tasks = {}

  @property
  def tasks(self):
    """Dictionary of tasks keyed by name, in registration order.

    .. note::

      This property should not be used to add tasks. Use :meth:`add_task`
      instead.

    """
    return _TaskDict(self._tasks)

  def add_task(self, task):
    """Register a task.

    :param task: :class:`Task` instance. Its name must not be taken.

    Dependencies are only checked when the task is run, so tasks can be added
    in any order. Returns the task.

    """
    if task.name in self._tasks:
      raise PigError('Duplicate task: %r.', task.name)
    self._tasks[task.name] = task
    _logger.debug('Added task %r.', task.name)
    return task

  def resolve(self, names):
    """List of tasks to run, dependencies first.

    :param names: Names of requested tasks.

    Each task appears once, even if required by several others. Unknown tasks
    and dependency cycles raise an error.

    """
    tasks = self.tasks
    ordered = []
    done = set()

    def visit(name, path):
      """Depth-first traversal, `path` holds the current chain of tasks."""
      if name in done:
        return
      if name in path:
        raise PigError(
          'Circular task dependency: %s.',
          ' -> '.join(path[path.index(name):] + [name])
        )
      task = tasks[name]
      for dependency in task.dependencies:
        visit(dependency, path + [name])
      done.add(name)
      ordered.append(task)

    for name in names:
      visit(name, [])
    return ordered

  def run(self, names, properties=None):
    """Run tasks and their dependencies.

    :param names: Names of tasks to run.
    :param properties: Dictionary of run properties, passed to each task.

    Execution stops at the first failure.

    """
    properties = properties or {}
    tasks = self.resolve(names)
    _logger.info('Running tasks: %s.', ', '.join(t.name for t in tasks))
    for task in tasks:
      _logger.info('Executing task %r.', task.name)
      task.execute(properties)
    return tasks
