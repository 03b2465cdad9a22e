#!/usr/bin/env python
# encoding: utf-8

"""Pig tasks: run a project's pig scripts locally or on a remote host."""

__all__ = ['Project', 'Job', 'PigJob']
__version__ = '0.1.0'

from .job import Job, PigJob
from .project import Project

import logging as lg


lg.getLogger(__name__).addHandler(lg.NullHandler())
