#!/usr/bin/env python
# encoding: utf-8

"""Utility module."""

from configparser import (NoOptionError, NoSectionError, ParsingError,
  RawConfigParser)
from contextlib import contextmanager
from functools import wraps
from logging.handlers import TimedRotatingFileHandler
from os import close, remove
from os.path import exists, expanduser
from tempfile import gettempdir, mkstemp
from traceback import print_exc
import logging as lg
import os.path as osp
import re
import sys
import warnings as wr


_logger = lg.getLogger(__name__)


class PigError(Exception):

  """Base error class."""

  def __init__(self, message, *args):
    message = message % args if args else message
    super(PigError, self).__init__(message)
    self.message = message


class Adapter(lg.LoggerAdapter):

  """Logger adapter that includes a prefix to all messages.

  :param prefix: Prefix string.
  :param logger: Logger instance where messages will be logged.
  :param extra: Dictionary of contextual information, passed to the formatter.

  """

  def __init__(self, prefix, logger, extra=None):
    super(Adapter, self).__init__(logger, extra)
    self.prefix = prefix

  def process(self, msg, kwargs):
    """Adds a prefix to each message.

    :param msg: Original message.
    :param kwargs: Keyword arguments that will be forwarded to the formatter.

    """
    return '%s :: %s' % (self.prefix, msg), kwargs


class Config(object):

  """Configuration class.

  :param path: path to configuration file. If no file exists at that location,
    the configuration parser will be empty. Defaults to `~/.pigtasksrc`.

  """

  def __init__(self, path=None):
    self.parser = RawConfigParser()
    self.path = path or expanduser('~/.pigtasksrc')
    if exists(self.path):
      try:
        self.parser.read(self.path)
      except ParsingError:
        raise PigError('Invalid configuration file %r.', self.path)

  def get_option(self, command, name, default=None):
    """Get option value for a command.

    :param command: Command the option should be looked up for.
    :param name: Name of the option.
    :param default: Default value to be returned if not found in the
      configuration file. If not provided, will raise
      :class:`~pigtasks.util.PigError`.

    """
    try:
      return self.parser.get(command, name)
    except (NoOptionError, NoSectionError):
      if default is not None:
        return default
      else:
        raise PigError(
          'No %(name)s found in %(path)r for %(command)s.\n'
          'You can specify one by adding a `%(name)s` option in the '
          '`%(command)s` section.'
          % {'command': command, 'name': name, 'path': self.path}
        )

  def get_file_handler(self, command):
    """Add and configure file handler.

    :param command: Command the options should be looked up for.

    The default path can be configured via the `default.log` option in the
    command's corresponding section.

    """
    handler_path = osp.join(gettempdir(), '%s.log' % (command, ))
    try:
      handler = TimedRotatingFileHandler(
        self.get_option(command, 'default.log', handler_path),
        when='midnight', # daily backups
        backupCount=1,
        encoding='utf-8',
      )
    except IOError:
      wr.warn('Unable to write to log file at %s.' % (handler_path, ))
    else:
      handler_format = '[%(levelname)s] %(asctime)s :: %(name)s :: %(message)s'
      handler.setFormatter(lg.Formatter(handler_format))
      return handler


@contextmanager
def temppath():
  """Create a temporary filepath.

  Usage::

    with temppath() as path:
      # do stuff

  Any file corresponding to the path will be automatically deleted afterwards.

  """
  (desc, path) = mkstemp()
  close(desc)
  remove(path)
  try:
    yield path
  finally:
    if exists(path):
      remove(path)

def catch(*error_classes):
  """Returns a decorator that catches errors and prints messages to stderr.

  :param error_classes: Error classes.

  Also exits with status 1 if any errors are caught.

  """
  def decorator(func):
    """Decorator."""
    @wraps(func)
    def wrapper(*args, **kwargs):
      """Wrapper. Finally."""
      try:
        return func(*args, **kwargs)
      except error_classes as err:
        _logger.error(err)
        sys.stderr.write('%s\n' % (err, ))
        sys.exit(1)
      except Exception: # catch all
        _logger.exception('Unexpected exception.')
        print_exc()
        sys.exit(1)
    return wrapper
  return decorator

def flatten(dct, sep='.'):
  """Flatten a nested dictionary.

  :param dct: Dictionary to flatten.
  :param sep: Separator used when concatenating keys.

  Key order is preserved (nested keys take the position of their parent).

  """
  def _flatten(dct, prefix=''):
    """Inner recursive function."""
    items = []
    for key, value in dct.items():
      new_prefix = '%s%s%s' % (prefix, sep, key) if prefix else key
      if isinstance(value, dict):
        items.extend(_flatten(value, new_prefix).items())
      else:
        items.append((new_prefix, value))
    return dict(items)
  return _flatten(dct)

def read_properties(*paths):
  """Read options from a properties file and return them as a dictionary.

  :param \\*paths: Paths to properties file. In the case of multiple
    definitions of the same option, the latest takes precedence.

  Note that not all features of `.properties` files are guaranteed to be
  supported.

  """
  comment_p = re.compile(r'\s*(?:#|!)')
  continuation_whitespace_p = re.compile(r'\\\n\s*')
  separator_p = re.compile(r'(?<!\\)\s*(?::|=|\s)\s*')
  separator_replacement_p = re.compile(r'\\(:|=|\s)')
  opts = {}
  for path in paths:
    if not osp.exists(path):
      raise PigError('No properties file found at %s.', path)
    try:
      with open(path) as reader:
        contents = continuation_whitespace_p.sub('', reader.read())
        lines = (
          tuple(s.strip() for s in separator_p.split(line.strip(), 1))
          for line in contents.split('\n')
          if line.strip() and not comment_p.match(line)
        )
        opts.update(dict(
          (
            separator_replacement_p.sub(lambda m: m.group(1), t[0]),
            t[1] if len(t) == 2 else ''
          )
          for t in lines
        ))
    except UnicodeDecodeError:
      raise PigError('Unsupported properties file: %r', path)
  return opts
