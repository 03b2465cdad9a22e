#!/usr/bin/env python
# encoding: utf-8

"""Pig tasks: run a project's pig scripts locally or on a remote host.

Usage:
  pigtasks tasks [-p PROJECT]
  pigtasks run [-p PROJECT] [-j JOB] [-P PROPERTY ...] TASK ...
  pigtasks -h | --help | -l | --log | -v | --version

Commands:
  tasks                         List available tasks.
  run                           Run tasks, after the tasks they depend on.

Arguments:
  TASK                          Task name, e.g. `run_my_script` for script
                                `src/my_script.pig` or `showPigJobs`.

Options:
  -h --help                     Show this message and exit.
  -j JOB --job=JOB              Name of the job run by the `runPigJob` task.
                                Shortcut for `--property=job=JOB`. Defaults to
                                the `PIGTASKS_JOB` environment variable.
  -l --log                      Show path to current log file and exit.
  -p PROJECT --project=PROJECT  Path to a python module/package defining a
                                `pigtasks.Project` instance (and its jobs). If
                                multiple projects are registered, you can
                                disambiguate as follows:
                                `--project=module:project_name`. Without this
                                option, the module configured in `~/.pigtasksrc`
                                (`jobs` by default) is used if it exists, else
                                a project named after the current directory.
  -P PROPERTY --property=PROPERTY
                                Run property formatted as `key=value`.
  -v --version                  Show version and exit.

Settings are read from the `.pigProperties` file in the project's root
directory, if any.

Pig tasks returns with exit code 1 if an error occurred and 0 otherwise.

"""

from docopt import docopt
from pigtasks import __version__
from pigtasks.graph import TaskGraph
from pigtasks.plugin import PigPlugin
from pigtasks.project import Project
from pigtasks.settings import PigSettings
from pigtasks.util import PigError, Config, catch
from traceback import format_exc
import logging as lg
import os
import os.path as osp
import sys


_logger = lg.getLogger(__name__)


def _load_project(_project):
  """Resolve project from CLI argument.

  :param _project: `--project` argument.

  Without argument, the default project module is used if it exists. If it
  doesn't, the current directory is treated as an (implicit) project.

  """
  default_path = Config().get_option('pigtasks', 'default.project', 'jobs')
  if _project and ':' in _project:
    path, name = _project.rsplit(':', 1)
    path = path or default_path
  else:
    path = _project or default_path
    name = None
  if not _project and not (osp.exists(path) or osp.exists('%s.py' % (path, ))):
    root = os.getcwd()
    _logger.debug('No project module found, using %r.', root)
    return Project(osp.basename(root), root=root, register=False)
  try:
    projects = Project.load(path, new=True)
  except ImportError:
    raise PigError(
      'Unable to load project module %r.\n\n%s', path, format_exc()
    )
  if name:
    if not name in projects:
      raise PigError(
        'Project %r not found. Available projects: %s',
        name, ', '.join(sorted(projects))
      )
    return projects[name]
  if not projects:
    raise PigError('No registered project found in %r.', path)
  if len(projects) > 1:
    raise PigError(
      'Multiple registered projects found: %s\n'
      'You can use the `--project` option to disambiguate.',
      ', '.join(sorted(projects))
    )
  return projects.popitem()[1]

def _parse_properties(_property, _job):
  """Parse `--property` and `--job` arguments into a dictionary.

  :param _property: List of `key=value` strings.
  :param _job: Job name (has precedence over any `job` property).

  """
  try:
    properties = dict(s.split('=', 1) for s in _property)
  except ValueError:
    raise PigError('Invalid `--property` flag.')
  if _job:
    properties['job'] = _job
  elif not 'job' in properties and os.environ.get('PIGTASKS_JOB'):
    properties['job'] = os.environ['PIGTASKS_JOB']
  return properties

def build_graph(project):
  """Build the task graph of a project."""
  settings = PigSettings.load(project.root)
  graph = TaskGraph()
  PigPlugin(project, settings).apply(graph)
  return graph

def list_tasks(project):
  """List registered tasks."""
  tasks = build_graph(project).tasks
  if not tasks:
    sys.stdout.write('No tasks registered for project %s.\n' % (project, ))
  for name, task in tasks.items():
    sys.stdout.write('%s\t%s\n' % (name, task.description))

def run_tasks(project, _task, _property, _job):
  """Run tasks."""
  graph = build_graph(project)
  properties = _parse_properties(_property, _job)
  tasks = graph.run(_task, properties)
  _logger.info('Ran %s tasks successfully.', len(tasks))

@catch(PigError)
def main(argv=None):
  """Entry point."""
  # enable general logging
  logger = lg.getLogger()
  logger.setLevel(lg.DEBUG)
  handler = Config().get_file_handler('pigtasks')
  if handler:
    logger.addHandler(handler)
  # parse arguments
  argv = argv if argv is not None else sys.argv[1:]
  _logger.debug('Running command %r from %r.', ' '.join(argv), os.getcwd())
  args = docopt(__doc__, argv=argv, version=__version__)
  # do things
  if args['--log']:
    if handler:
      sys.stdout.write('%s\n' % (handler.baseFilename, ))
    else:
      raise PigError('No log file active.')
  elif args['tasks']:
    list_tasks(_load_project(args['--project']))
  elif args['run']:
    run_tasks(
      _load_project(args['--project']),
      _task=args['TASK'],
      _property=args['--property'],
      _job=args['--job'],
    )

if __name__ == '__main__':
  main()
