#!/usr/bin/env python
# encoding: utf-8

"""Generation of the shell scripts which run pig.

Values are interpolated as is, without any shell quoting: paths or parameters
containing spaces or shell metacharacters will break the generated script.

"""

import logging as lg
import os.path as osp


_logger = lg.getLogger(__name__)


def build_pig_parameters(parameters):
  """Format parameters as pig command line arguments.

  :param parameters: Dictionary of parameters (or `None`). Iteration order is
    kept.

  Each parameter is rendered as `' -param key=value'`.

  """
  return ''.join(
    ' -param %s=%s' % (key, value)
    for key, value in (parameters or {}).items()
  )

def get_relative_path(path, root):
  """Path of a script relative to the project root.

  :param path: Absolute path.
  :param root: Project root directory.

  Paths outside of the root are returned unchanged.

  """
  prefix = '%s/' % (root.rstrip('/'), )
  return path[len(prefix):] if path.startswith(prefix) else path

def get_script_path(task_name, project, settings):
  """Path of the shell script generated for a task."""
  return osp.join(settings.cache_dir, project.name, 'run_%s.sh' % (task_name, ))

def render_pig_script(path, task_name, project, settings, parameters=None):
  """Generate the contents of a shell script running a pig script.

  :param path: Absolute path to the pig script.
  :param task_name: Name of the task, used to name the shell script.
  :param project: :class:`~pigtasks.project.Project` the script belongs to.
  :param settings: :class:`~pigtasks.settings.PigSettings`.
  :param parameters: Optional dictionary of pig parameters.

  When a remote host is configured, the script first syncs the project's
  cache directory to the host then runs pig there through the remote shell.

  """
  relative_path = get_relative_path(path, project.root)
  project_dir = '%s/%s' % (settings.cache_dir, project.name)
  pig_command = settings.pig_command
  pig_options = settings.pig_options or ''
  pig_params = build_pig_parameters(parameters)
  lines = [
    '#!/bin/sh',
    'echo ====================',
    'echo Running the script %s' % (get_script_path(task_name, project, settings), ),
  ]
  if settings.is_remote:
    host = settings.remote_host
    shell = settings.remote_shell_cmd
    remote_cache_dir = settings.remote_cache_dir
    remote_project_dir = '%s/%s' % (remote_cache_dir, project.name)
    lines.extend([
      'echo Creating directory %s on host %s' % (remote_cache_dir, host),
      '%s %s mkdir -p %s' % (shell, host, remote_cache_dir),
      'echo Syncing local directory %s to %s:%s'
      % (project_dir, host, remote_cache_dir),
      'rsync -av %s -e "%s" %s:%s' % (project_dir, shell, host, remote_cache_dir),
      'echo Executing %s on host %s' % (pig_command, host),
      '%s %s %s -Dpig.additional.jars=%s/*.jar %s -f %s/%s %s' % (
        shell, host, pig_command, remote_project_dir, pig_options,
        remote_project_dir, relative_path, pig_params,
      ),
    ])
  else:
    lines.extend([
      'echo Executing %s on the local host' % (pig_command, ),
      '%s -Dpig.additional.jars=%s/*.jar %s -f %s/%s %s' % (
        pig_command, project_dir, pig_options, project_dir, relative_path,
        pig_params,
      ),
    ])
  return ''.join('%s\n' % (line, ) for line in lines)

def write_pig_script(path, task_name, project, settings, parameters=None):
  """Write the shell script running a pig script.

  :param path: Absolute path to the pig script.
  :param task_name: Name of the task.
  :param project: :class:`~pigtasks.project.Project`.
  :param settings: :class:`~pigtasks.settings.PigSettings`.
  :param parameters: Optional dictionary of pig parameters.

  Any existing file is overwritten. Returns the path of the shell script.

  """
  script_path = get_script_path(task_name, project, settings)
  contents = render_pig_script(path, task_name, project, settings, parameters)
  with open(script_path, 'w') as writer:
    writer.write(contents)
  _logger.info('Wrote %r for %r.', script_path, path)
  return script_path
