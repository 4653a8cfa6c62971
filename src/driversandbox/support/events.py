"""
Publishes driver results to interested listeners, in place of the host's result reporting.
"""
from driversandbox.support.mixins import CommonEqualityMixin, StringerMixin


class EventSource(object):
    """ A list of handlers that are each called with the arguments of fire(). """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        if handler not in self._handlers:
            self._handlers.append(handler)
        return self

    def remove(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def handlers(self):
        return tuple(self._handlers)

    def fire(self, *args, **kwargs):
        for handler in self.handlers():
            handler(*args, **kwargs)


class ResultEvent(CommonEqualityMixin, StringerMixin):
    """ The outcome of a driver execution. """
    success = False


class SuccessEvent(ResultEvent):
    """
    A driver completed successfully.
    :param results: the reported values - lists of variables, a table result or a backup payload.
    """
    success = True

    def __init__(self, results):
        self.results = tuple(results)


class FailureEvent(ResultEvent):
    """ A driver reported a failure of the given error type. """

    def __init__(self, error_type):
        self.error_type = error_type
