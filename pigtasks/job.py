#!/usr/bin/env python
# encoding: utf-8

"""Job definition module."""

from .util import flatten


class Job(object):

  """Base job.

  :param options: tuple of dictionaries. The final job options are built from
    this tuple by keeping the latest definition of each option. Furthermore, by
    default, any nested dictionary will be flattened (combining keys with
    `'.'`).

  To enable more functionality, subclass and override the :meth:`on_add`
  method.

  """

  def __init__(self, *options):
    self.options = {}
    for option in options:
      self.options.update(flatten(option))

  def on_add(self, project, name, **kwargs):
    """Handler called when the job is added to a project.

    :param project: :class:`~pigtasks.project.Project` instance
    :param name: name corresponding to this job in the project.
    :param kwargs: Keyword arguments forwarded by
      :meth:`~pigtasks.project.Project.add_job`.

    The default implementation does nothing.

    """
    pass


class PigJob(Job):

  """Job running a pig script.

  :param options: Tuple of options (cf. :class:`~pigtasks.job.Job`). The
    `'pig.script'` option holds the path to the script (relative paths are
    resolved against the project's root when the job is run). Options under
    `'param'` are passed to the script as pig parameters.

  For example, `PigJob({'pig.script': 'src/count.pig', 'param': {'day':
  '2014-01-01'}})` will run `src/count.pig` with `-param day=2014-01-01`.
  Parameters keep the order in which they were first defined.

  A job without a script is allowed here; trying to run it will fail.

  """

  def __init__(self, *options):
    super(PigJob, self).__init__({'type': 'pig'}, *options)

  @property
  def script(self):
    """Path to the pig script, `None` if unset."""
    return self.options.get('pig.script') or None

  @property
  def parameters(self):
    """Dictionary of pig parameters (values converted to strings)."""
    return dict(
      (key[len('param.'):], str(value))
      for key, value in self.options.items()
      if key.startswith('param.')
    )


def find_pig_jobs(project):
  """Find all pig jobs configured in a project.

  :param project: :class:`~pigtasks.project.Project` instance.

  Returns a dictionary of :class:`PigJob` keyed by job name, empty if the
  project doesn't define any.

  Only :class:`PigJob` instances are included: a plain :class:`Job` isn't,
  even with a `type` option of `pig`, since it has no script or parameters.

  """
  return dict(
    (name, job)
    for name, job in project.jobs.items()
    if isinstance(job, PigJob)
  )
