#
# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

class DaliteScbError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class UnknownCommandError(DaliteScbError):
  """A command name or wire token did not resolve to a known command."""
  pass

class MalformedLineError(DaliteScbError):
  """A response line had fewer than 5 space-separated fields, or was empty."""
  pass

class AccessViolationError(DaliteScbError):
  """A get or set was requested on a command whose access mode forbids it."""
  pass

class ScbTransportError(DaliteScbError):
  """The connection to the screen control board failed or was closed."""
  pass
