#!/usr/bin/env python
# encoding: utf-8

"""Sample project configuration script.

Scripts under `src/` can all be run without parameters (`run_<name>` tasks).
The jobs below bind scripts to parameters, they are run with `runPigJob`.

"""

from pigtasks import PigJob, Project


project = Project('sample', root=__file__)

# options shared by all jobs
defaults = {
  'param': {
    'input_root': 'data/',
  },
}

project.add_job(
  'wordcount_daily',
  PigJob(defaults, {'pig.script': 'src/wordcount.pig', 'param.period': 'day'})
)

project.add_job(
  'wordcount_weekly',
  PigJob(defaults, {'pig.script': 'src/wordcount.pig', 'param.period': 'week'})
)

project.add_job(
  'top_words',
  PigJob(defaults, {'pig.script': 'src/reports/top_words.pig'})
)
