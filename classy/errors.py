# classy/errors.py

"""Exceptions raised by the classy preprocessor."""


class ClassyError(Exception):
    """Base class for errors raised by classy."""


class RequestError(ClassyError):
    """The JSON request mdBook sent on stdin could not be understood."""


class EventStreamError(ClassyError):
    """An event stream could not be turned back into a document tree."""
