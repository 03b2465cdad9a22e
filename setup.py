#!/usr/bin/env python

"""Pig tasks: run a project's pig scripts locally or on a remote host."""

from pigtasks import __version__
from setuptools import find_packages, setup


def _get_long_description():
  """Get README contents."""
  with open('README.md') as reader:
    return reader.read()

setup(
  name='pigtasks',
  version=__version__,
  description=__doc__,
  long_description=_get_long_description(),
  long_description_content_type='text/markdown',
  license='MIT',
  packages=find_packages(exclude=['test', 'examples']),
  classifiers=[
    'Development Status :: 4 - Beta',
    'Intended Audience :: Developers',
    'License :: OSI Approved :: MIT License',
    'Programming Language :: Python',
    'Programming Language :: Python :: 3',
  ],
  python_requires='>=3.6',
  install_requires=[
    'docopt',
  ],
  extras_require={
    'test': ['pytest'],
  },
  entry_points={'console_scripts': [
    'pigtasks = pigtasks.__main__:main',
  ]},
)
