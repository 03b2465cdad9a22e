#!/usr/bin/env python
# encoding: utf-8

"""Cache directory module."""

from shutil import copy2
import logging as lg
import os
import os.path as osp


_logger = lg.getLogger(__name__)


def sync_directory(files, path):
  """Make a directory mirror a set of files.

  :param files: Iterable of tuples `(source, relative_path)`: the first
    element is the absolute path of a file to include, the second its path
    inside the directory.
  :param path: Destination directory, created if it doesn't exist.

  All files are copied (overwriting existing ones), files which aren't part of
  `files` are removed and empty directories are pruned. Running it twice with
  the same arguments leaves the directory unchanged.

  Returns the list of relative paths present after syncing.

  """
  files = dict(
    (osp.normpath(relative_path), source)
    for source, relative_path in files
  )
  if not osp.isdir(path):
    os.makedirs(path)
  for relative_path, source in sorted(files.items()):
    destination = osp.join(path, relative_path)
    dirname = osp.dirname(destination)
    if not osp.isdir(dirname):
      os.makedirs(dirname)
    copy2(source, destination)
    _logger.debug('Copied %r to %r.', source, destination)
  for dirpath, dirnames, filenames in os.walk(path, topdown=False):
    for filename in filenames:
      fpath = osp.join(dirpath, filename)
      if not osp.relpath(fpath, path) in files:
        os.remove(fpath)
        _logger.debug('Removed stale file %r.', fpath)
    for dirname in dirnames:
      dpath = osp.join(dirpath, dirname)
      if osp.isdir(dpath) and not os.listdir(dpath):
        os.rmdir(dpath)
        _logger.debug('Removed empty directory %r.', dpath)
  _logger.info('Synced %s files into %r.', len(files), path)
  return sorted(files)
