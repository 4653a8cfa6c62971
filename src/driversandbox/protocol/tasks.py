"""
Combinators that compose callback-style tasks into a single unit of work.

A task is a callable that receives a completion callback (and, for sequences, the result of the
previous task) and calls the callback exactly once with its result, possibly later and from
another thread.

execute_all() and execute_seq() have no error channel: an exception raised by a task propagates
to the caller, and a task that never calls back stalls the whole unit forever. all_of() and
seq_of() return a future instead, which fails with the first error and stops starting tasks
once it has failed.
"""
import logging
import threading
from concurrent.futures import Future

logger = logging.getLogger(__name__)


class FutureValue(Future):
    """ describes a value that may have not yet been computed. Callers can check if the value has arrived, or chose to
        wait until the value has arrived.
        If an exception is encountered computing the value, it is set."""

    def __init__(self):
        super().__init__()
        self._settle_lock = threading.RLock()

    def set_result_or_exception(self, value):
        """sets the result, or the exception when the value is an exception instance."""
        if isinstance(value, BaseException):
            self.set_exception(value)
        else:
            self.set_result(value)

    def settle(self, value) -> bool:
        """
        Completes the future with the value, unless it is already complete or cancelled.
        :return: True if this call completed the future.
        """
        with self._settle_lock:
            if self.done():
                return False
            self.set_result_or_exception(value)
            return True

    def value(self, timeout=None):
        """ blocks until the value is available, raising the exception if the computation failed. """
        return self.result(timeout)


class _Batch:
    """ collects the results of tasks started together into slots matching their position. """

    def __init__(self, count, on_done):
        self.results = [None] * count
        self.pending = set(range(count))
        self.on_done = on_done
        self.lock = threading.Lock()

    def callback_for(self, index):
        def callback(result=None):
            self.complete(index, result)
        return callback

    def complete(self, index, result):
        with self.lock:
            if index not in self.pending:
                logger.warning("task %d called back more than once, ignoring result %r", index, result)
                return
            self.results[index] = result
            self.pending.discard(index)
            finished = not self.pending
        if finished:
            self.on_done(self.results)


def execute_all(tasks, on_done):
    """
    Starts every task immediately, without waiting for the previous ones, and calls on_done once
    all of them have called back.

    :param tasks: callables of the form task(callback)
    :param on_done: called with the list of results, ordered as the tasks were given regardless of
        the order they completed in.
    """
    tasks = list(tasks)
    if not tasks:
        on_done([])
        return
    batch = _Batch(len(tasks), on_done)
    for index, task in enumerate(tasks):
        logger.debug("starting task %d of %d", index + 1, len(tasks))
        task(batch.callback_for(index))


class _Sequence:
    """
    Runs tasks one after the other, passing each the result of its predecessor.

    Tasks that call back before returning are run in a loop rather than by recursion, so long
    chains of synchronous tasks do not exhaust the stack.
    """

    def __init__(self, tasks, on_done):
        self.tasks = tasks
        self.on_done = on_done
        self.index = 0
        self.result = None
        self.running = False
        self.advanced = False
        self.lock = threading.Lock()

    def callback_for(self, index):
        def callback(result=None):
            self.advance(index, result)
        return callback

    def advance(self, index, result):
        with self.lock:
            if index != self.index:
                logger.warning("task %d called back more than once, ignoring result %r", index, result)
                return
            self.result = result
            self.index += 1
            if self.running:
                self.advanced = True
                return
            self.running = True
        self.run()

    def start(self):
        with self.lock:
            self.running = True
        self.run()

    def run(self):
        while True:
            with self.lock:
                if self.index == len(self.tasks):
                    self.running = False
                    result = self.result
                    break
                self.advanced = False
                index, previous = self.index, self.result
            logger.debug("running task %d of %d", index + 1, len(self.tasks))
            try:
                self.tasks[index](previous, self.callback_for(index))
            except Exception:
                with self.lock:
                    resume = self.advanced
                    if not resume:
                        self.running = False
                # a task that called back before raising still completes the chain
                if resume:
                    self.run()
                raise
            with self.lock:
                if not self.advanced:
                    # resumed by the task's callback
                    self.running = False
                    return
        self.on_done(result)


def execute_seq(tasks, on_done):
    """
    Runs the tasks in order. Each task starts only after the previous one has called back.

    :param tasks: callables of the form task(previous_result, callback). The first task receives None.
    :param on_done: called with the result of the last task, or None when there are no tasks.
    """
    _Sequence(list(tasks), on_done).start()


def _guarded(future: FutureValue, task):
    """
    Wraps a task so that it is not started once the future is complete, and so that a failure,
    raised or passed to the callback, completes the future with that exception.
    """
    def run(*args):
        callback = args[-1]
        if future.done():
            logger.debug("not starting %r, the result is already settled", task)
            return

        def complete(result=None):
            if isinstance(result, BaseException):
                future.settle(result)
            else:
                callback(result)

        try:
            task(*(args[:-1] + (complete,)))
        except Exception as e:
            logger.exception(e)
            future.settle(e)
    return run


def all_of(tasks) -> FutureValue:
    """
    Starts every task and returns a future for the ordered list of results.
    The future fails with the first error raised by, or passed back from, a task.
    """
    future = FutureValue()
    execute_all([_guarded(future, task) for task in tasks], future.settle)
    return future


def seq_of(tasks) -> FutureValue:
    """
    Runs the tasks in sequence and returns a future for the result of the last task.
    The first failure completes the future and no further tasks are started.
    """
    future = FutureValue()
    execute_seq([_guarded(future, task) for task in tasks], future.settle)
    return future
