#!/usr/bin/env python
# encoding: utf-8

"""Registration of the pig tasks of a project."""

from .cache import sync_directory
from .graph import ExecTask, Task, build_unique_task_name
from .job import find_pig_jobs
from .script import get_relative_path, write_pig_script
from .util import PigError, Adapter
import logging as lg
import os
import os.path as osp
import sys


_logger = lg.getLogger(__name__)

#: Group of all tasks registered by the plugin.
GROUP = 'Pig'

#: Name of the task staging scripts and jars in the cache directory.
BUILD_CACHE_TASK = 'buildPigCache'


class PigPlugin(object):

  """Pig tasks for a project.

  :param project: :class:`~pigtasks.project.Project`.
  :param settings: :class:`~pigtasks.settings.PigSettings`, already
    validated.

  Calling :meth:`apply` registers the following tasks:

  + `buildPigCache`, staging the project's scripts and dependencies into the
    cache directory.
  + `run_<name>` for each pig script under `src/`, where `<name>` is the
    script's file name without extension (suffixed with `_2`, `_3`, etc. if
    several scripts share a name).
  + `showPigJobs`, listing the pig jobs defined in the project.
  + `runPigJob`, running the job named by the `job` run property with its
    parameters.

  """

  def __init__(self, project, settings):
    self.project = project
    self.settings = settings
    self._logger = Adapter(repr(project), _logger)

  @property
  def project_dir(self):
    """Project directory inside the cache."""
    return osp.join(self.settings.cache_dir, self.project.name)

  def apply(self, graph):
    """Register all tasks.

    :param graph: :class:`~pigtasks.graph.TaskGraph`.

    Does nothing if the `generateTasks` setting is false.

    """
    if not self.settings.generate_tasks:
      self._logger.info('Task generation disabled.')
      return
    self.add_build_cache_task(graph)
    self.add_pig_script_tasks(graph)
    self.add_show_pig_jobs_task(graph)
    self.add_run_pig_job_task(graph)

  def get_cache_files(self):
    """Files staged in the cache, as `(path, relative path)` tuples.

    Scripts keep their path relative to the project root, dependencies are
    placed at the top of the project's cache directory.

    """
    root = self.project.root
    files = [
      (path, osp.relpath(path, root))
      for path in self.project.pig_scripts
    ]
    files.extend(
      (path, osp.basename(path))
      for path in self.project.get_dependencies(self.settings.dependency_conf)
    )
    return files

  def add_build_cache_task(self, graph):
    """Register the task building the cache directory."""

    def build_cache(task, properties):
      sync_directory(self.get_cache_files(), self.project_dir)

    return graph.add_task(Task(
      BUILD_CACHE_TASK,
      action=build_cache,
      description='Build the cache directory used to run pig scripts.',
      group=GROUP,
    ))

  def add_pig_script_tasks(self, graph):
    """Register a task for each pig script, without parameters."""
    task_names = set()
    tasks = []
    for path in self.project.pig_scripts:
      task_name = build_unique_task_name(osp.basename(path), task_names)
      task_names.add(task_name)
      tasks.append(self.add_pig_script_task(graph, path, task_name))
    return tasks

  def add_pig_script_task(self, graph, path, task_name, parameters=None):
    """Register a task running a pig script.

    :param graph: :class:`~pigtasks.graph.TaskGraph`.
    :param path: Absolute path to the script.
    :param task_name: Name used for the task (prefixed with `run_`) and the
      generated shell script.
    :param parameters: Optional dictionary of pig parameters.

    """
    script_path = osp.join(self.project_dir, 'run_%s.sh' % (task_name, ))

    def before(task, properties):
      write_pig_script(
        path, task_name, self.project, self.settings, parameters
      )

    return graph.add_task(ExecTask(
      'run_%s' % (task_name, ),
      command_line=['sh', script_path],
      before=before,
      dependencies=[BUILD_CACHE_TASK],
      description='Run the pig script %s.' % (
        get_relative_path(path, self.project.root),
      ),
      group=GROUP,
    ))

  def add_show_pig_jobs_task(self, graph):
    """Register the task listing the project's pig jobs."""

    def show_pig_jobs(task, properties):
      jobs = find_pig_jobs(self.project)
      self._logger.info('Found %s pig jobs.', len(jobs))
      sys.stdout.write(
        'The following pig jobs can be run with '
        '`pigtasks run runPigJob -j <job name>`:\n'
      )
      for name, job in sorted(jobs.items()):
        sys.stdout.write('%s : %s\n' % (name, job.script or ''))

    return graph.add_task(Task(
      'showPigJobs',
      action=show_pig_jobs,
      description='List the pig jobs which can be run with runPigJob.',
      group=GROUP,
    ))

  def add_run_pig_job_task(self, graph):
    """Register the task running a pig job by name."""

    def before(task, properties):
      name = properties.get('job')
      if not name:
        raise PigError(
          'No job name specified.\n'
          'Use `-j <job name>` (or `-P job=<job name>`) to choose the pig job '
          'to run.'
        )
      if os.sep in name:
        raise PigError(
          'Invalid job name %r: it cannot contain %r.', name, os.sep
        )
      jobs = find_pig_jobs(self.project)
      if not name in jobs:
        raise PigError('Could not find pig job with name %r.', name)
      job = jobs[name]
      if job.script is None:
        raise PigError('Pig job with name %r does not have a script set.', name)
      path = job.script
      if not osp.isabs(path):
        path = osp.join(self.project.root, path)
      if not osp.exists(path):
        raise PigError(
          'Script %s for pig job with name %r does not exist.', job.script, name
        )
      script_path = write_pig_script(
        osp.abspath(path), name, self.project, self.settings, job.parameters
      )
      task.command_line = ['sh', script_path]

    return graph.add_task(ExecTask(
      'runPigJob',
      before=before,
      dependencies=[BUILD_CACHE_TASK],
      description='Run a pig job configured in the project (`-j <job name>`).',
      group=GROUP,
    ))
