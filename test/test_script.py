#!/usr/bin/env python
# encoding: utf-8

"""Test shell script generation."""

from pigtasks.project import Project
from pigtasks.script import *
from pigtasks.settings import PigSettings
from shutil import rmtree
from tempfile import mkdtemp
import os
import os.path as osp
import pytest


def _settings(**kwargs):
  properties = {'pigCacheDir': '/cache'}
  properties.update(kwargs)
  return PigSettings.from_properties(properties, '/work/proj')

_REMOTE = {
  'remoteHostName': 'gateway',
  'remoteShellCmd': 'ssh',
  'remoteCacheDir': '/home/me/cache',
}


class TestBuildPigParameters(object):

  def test_none(self):
    assert build_pig_parameters(None) == ''

  def test_empty(self):
    assert build_pig_parameters({}) == ''

  def test_order(self):
    params = build_pig_parameters({'a': '1', 'b': '2'})
    assert params == ' -param a=1 -param b=2'

  def test_insertion_order_kept(self):
    params = build_pig_parameters({'b': '2', 'a': '1'})
    assert params.index('-param b=2') < params.index('-param a=1')


class TestGetRelativePath(object):

  def test_inside_root(self):
    assert get_relative_path('/work/proj/src/a.pig', '/work/proj') == 'src/a.pig'

  def test_trailing_separator(self):
    assert get_relative_path('/work/proj/src/a.pig', '/work/proj/') == 'src/a.pig'

  def test_outside_root(self):
    assert get_relative_path('/other/a.pig', '/work/proj') == '/other/a.pig'

  def test_sibling_prefix(self):
    assert get_relative_path('/work/project/a.pig', '/work/proj') == (
      '/work/project/a.pig'
    )


class TestRenderPigScript(object):

  def setup_method(self, method):
    self.project = Project('proj', root='/work/proj/jobs.py', register=False)

  def _lines(self, settings, parameters=None, task_name='a'):
    return render_pig_script(
      '/work/proj/src/a.pig', task_name, self.project, settings, parameters
    ).split('\n')

  def test_local(self):
    assert self._lines(_settings()) == [
      '#!/bin/sh',
      'echo ====================',
      'echo Running the script /cache/proj/run_a.sh',
      'echo Executing pig on the local host',
      'pig -Dpig.additional.jars=/cache/proj/*.jar  -f /cache/proj/src/a.pig ',
      '',
    ]

  def test_local_with_options_and_parameters(self):
    lines = self._lines(
      _settings(pigOptions='-x local'),
      {'a': '1', 'b': '2'},
    )
    assert lines[4] == (
      'pig -Dpig.additional.jars=/cache/proj/*.jar -x local '
      '-f /cache/proj/src/a.pig  -param a=1 -param b=2'
    )

  def test_local_has_no_remote_commands(self):
    contents = '\n'.join(self._lines(_settings(), {'a': '1'}))
    assert not 'rsync' in contents
    assert not 'mkdir' in contents
    assert not 'ssh' in contents

  def test_remote(self):
    assert self._lines(_settings(**_REMOTE), {'d': 'x'}) == [
      '#!/bin/sh',
      'echo ====================',
      'echo Running the script /cache/proj/run_a.sh',
      'echo Creating directory /home/me/cache on host gateway',
      'ssh gateway mkdir -p /home/me/cache',
      'echo Syncing local directory /cache/proj to gateway:/home/me/cache',
      'rsync -av /cache/proj -e "ssh" gateway:/home/me/cache',
      'echo Executing pig on host gateway',
      'ssh gateway pig -Dpig.additional.jars=/home/me/cache/proj/*.jar  '
      '-f /home/me/cache/proj/src/a.pig  -param d=x',
      '',
    ]

  def test_remote_commands_once(self):
    lines = self._lines(_settings(**_REMOTE))
    commands = [line for line in lines if line and not line[0] in '#e']
    assert len([c for c in commands if 'mkdir -p' in c]) == 1
    assert len([c for c in commands if c.startswith('rsync ')]) == 1
    assert commands[-1].startswith('ssh gateway pig ')

  def test_deterministic(self):
    settings = _settings(**_REMOTE)
    params = {'a': '1', 'b': '2'}
    assert self._lines(settings, params) == self._lines(settings, dict(params))


class TestWritePigScript(object):

  def setup_method(self, method):
    self.dpath = osp.realpath(mkdtemp())
    self.project = Project('proj', root=self.dpath, register=False)
    self.settings = PigSettings.from_properties(
      {'pigCacheDir': osp.join(self.dpath, 'cache')}, self.dpath
    )

  def teardown_method(self, method):
    rmtree(self.dpath)

  def test_write(self):
    os.makedirs(osp.join(self.dpath, 'cache', 'proj'))
    script = osp.join(self.dpath, 'src', 'a.pig')
    path = write_pig_script(script, 'a', self.project, self.settings)
    assert path == osp.join(self.dpath, 'cache', 'proj', 'run_a.sh')
    with open(path) as reader:
      assert reader.read() == render_pig_script(
        script, 'a', self.project, self.settings
      )

  def test_overwrite(self):
    os.makedirs(osp.join(self.dpath, 'cache', 'proj'))
    script = osp.join(self.dpath, 'src', 'a.pig')
    path = get_script_path('a', self.project, self.settings)
    with open(path, 'w') as writer:
      writer.write('old contents\n' * 100)
    write_pig_script(script, 'a', self.project, self.settings, {'x': 'y'})
    with open(path) as reader:
      contents = reader.read()
    assert not 'old contents' in contents
    assert contents.endswith(' -param x=y\n')

  def test_missing_directory(self):
    script = osp.join(self.dpath, 'src', 'a.pig')
    with pytest.raises(IOError):
      write_pig_script(script, 'a', self.project, self.settings)
