#!/usr/bin/env python
# encoding: utf-8

"""Test job module."""

from pigtasks.job import *
from pigtasks.project import Project


class TestJob(object):

  def test_options(self):
    job = Job({'a': 1, 'b': {'c': 2, 'd': 3}})
    assert job.options == {'a': 1, 'b.c': 2, 'b.d': 3}

  def test_options_with_defaults(self):
    defaults = {'b': {'d': 4}, 'e': 5}
    job = Job(defaults, {'a': 1, 'b': {'c': 2, 'd': 3}})
    assert job.options == {'a': 1, 'b.c': 2, 'b.d': 3, 'e': 5}


class TestPigJob(object):

  def test_type(self):
    assert PigJob().options == {'type': 'pig'}

  def test_override_type(self):
    assert PigJob({'type': 'pigLi'}).options['type'] == 'pigLi'

  def test_script(self):
    job = PigJob({'pig.script': 'src/foo.pig'})
    assert job.script == 'src/foo.pig'

  def test_missing_script(self):
    assert PigJob({'param.a': 1}).script is None

  def test_empty_script(self):
    assert PigJob({'pig.script': ''}).script is None

  def test_parameters(self):
    job = PigJob({'pig.script': 'a.pig', 'param': {'b': 2, 'a': 'x'}})
    assert job.parameters == {'b': '2', 'a': 'x'}
    assert list(job.parameters) == ['b', 'a']

  def test_parameters_with_defaults(self):
    defaults = {'param': {'a': '1', 'b': '2'}}
    job = PigJob(defaults, {'param.b': '3', 'param.c': '4'})
    assert list(job.parameters.items()) == [('a', '1'), ('b', '3'), ('c', '4')]

  def test_no_parameters(self):
    assert PigJob({'pig.script': 'a.pig', 'parameter': 1}).parameters == {}


class TestFindPigJobs(object):

  def test_empty(self):
    assert find_pig_jobs(Project('pj', register=False)) == {}

  def test_only_pig_jobs(self):
    project = Project('pj', register=False)
    foo = PigJob({'pig.script': 'foo.pig'})
    bar = PigJob()
    project.add_job('foo', foo)
    project.add_job('noop', Job({'type': 'noop'}))
    project.add_job('bar', bar)
    jobs = find_pig_jobs(project)
    assert jobs == {'foo': foo, 'bar': bar}
    assert jobs['bar'].script is None

  def test_plain_job_with_pig_type(self):
    project = Project('pj', register=False)
    project.add_job('plain', Job({'type': 'pig', 'pig.script': 'a.pig'}))
    assert find_pig_jobs(project) == {}
