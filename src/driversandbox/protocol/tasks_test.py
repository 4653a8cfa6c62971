import threading
import unittest
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from itertools import permutations
from unittest.mock import Mock

import timeout_decorator
from hamcrest import assert_that, calling, equal_to, is_, raises, empty

from driversandbox.protocol.tasks import FutureValue, all_of, execute_all, execute_seq, seq_of


class NastyException(Exception):
    """ really nasty """


class DeferredTask:
    """ A task that records its callback so the test decides when it completes. """

    def __init__(self, result):
        self.result = result
        self.callback = None
        self.previous = None

    def __call__(self, *args):
        self.previous = args[0] if len(args) > 1 else None
        self.callback = args[-1]

    @property
    def started(self):
        return self.callback is not None

    def complete(self):
        self.callback(self.result)


def immediate(result):
    return lambda callback: callback(result)


class FutureValueTest(unittest.TestCase):

    def test_set_result_or_exception_with_non_exception_sets_result(self):
        sut = FutureValue()
        sut.set_result_or_exception(1)
        assert_that(sut.value(), is_(1))

    def test_set_result_or_exception_with_exception_raises_exception(self):
        sut = FutureValue()
        sut.set_result_or_exception(NastyException())
        assert_that(calling(sut.value), raises(NastyException))

    def test_settle_only_completes_once(self):
        sut = FutureValue()
        assert_that(sut.settle(1), is_(True))
        assert_that(sut.settle(NastyException()), is_(False))
        assert_that(sut.value(), is_(1))

    def test_settle_after_cancel_is_ignored(self):
        sut = FutureValue()
        sut.cancel()
        assert_that(sut.settle(1), is_(False))


class ExecuteAllTest(unittest.TestCase):

    def test_empty_tasks_completes_synchronously(self):
        on_done = Mock()
        execute_all([], on_done)
        on_done.assert_called_once_with([])

    def test_all_tasks_start_before_any_complete(self):
        tasks = [DeferredTask('a'), DeferredTask('b'), DeferredTask('c')]
        on_done = Mock()
        execute_all(tasks, on_done)
        assert_that([t.started for t in tasks], is_([True, True, True]))
        on_done.assert_not_called()

    def test_results_follow_task_order(self):
        tasks = [DeferredTask('A'), DeferredTask('B'), DeferredTask('C')]
        on_done = Mock()
        execute_all(tasks, on_done)
        tasks[1].complete()
        tasks[2].complete()
        on_done.assert_not_called()
        tasks[0].complete()
        on_done.assert_called_once_with(['A', 'B', 'C'])

    def test_results_follow_task_order_for_every_completion_order(self):
        for order in permutations(range(4)):
            tasks = [DeferredTask(i * 10) for i in range(4)]
            on_done = Mock()
            execute_all(tasks, on_done)
            for i in order:
                tasks[i].complete()
            on_done.assert_called_once_with([0, 10, 20, 30])

    def test_synchronous_tasks(self):
        on_done = Mock()
        execute_all([immediate(1), immediate(2)], on_done)
        on_done.assert_called_once_with([1, 2])

    def test_a_task_that_never_calls_back_stalls(self):
        on_done = Mock()
        execute_all([immediate(1), lambda callback: None], on_done)
        on_done.assert_not_called()

    def test_a_task_that_raises_propagates(self):
        def nasty(callback):
            raise NastyException()
        assert_that(calling(execute_all).with_args([immediate(1), nasty], Mock()), raises(NastyException))

    def test_a_second_callback_does_not_complete_the_batch(self):
        tasks = [DeferredTask('A'), DeferredTask('B')]
        on_done = Mock()
        execute_all(tasks, on_done)
        tasks[0].complete()
        tasks[0].complete()
        on_done.assert_not_called()
        tasks[1].complete()
        on_done.assert_called_once_with(['A', 'B'])

    @timeout_decorator.timeout(5)
    def test_callbacks_from_other_threads(self):
        done = threading.Event()
        results = []

        def on_done(r):
            results.extend(r)
            done.set()

        with ThreadPoolExecutor(max_workers=4) as executor:
            def task(i):
                return lambda callback: executor.submit(callback, i)
            execute_all([task(i) for i in range(20)], on_done)
            done.wait()
        assert_that(results, is_(list(range(20))))


class ExecuteSeqTest(unittest.TestCase):

    def test_empty_tasks_calls_back_with_none(self):
        on_done = Mock()
        execute_seq([], on_done)
        on_done.assert_called_once_with(None)

    def test_results_are_threaded_through(self):
        received = []

        def task(i):
            def run(previous, callback):
                received.append(previous)
                callback(i * 10)
            return run

        on_done = Mock()
        execute_seq([task(1), task(2), task(3)], on_done)
        assert_that(received, is_([None, 10, 20]))
        on_done.assert_called_once_with(30)

    def test_next_task_waits_for_the_callback(self):
        tasks = [DeferredTask(10), DeferredTask(20), DeferredTask(30)]
        on_done = Mock()
        execute_seq(tasks, on_done)
        assert_that([t.started for t in tasks], is_([True, False, False]))
        tasks[0].complete()
        assert_that([t.started for t in tasks], is_([True, True, False]))
        assert_that(tasks[1].previous, is_(10))
        tasks[1].complete()
        assert_that(tasks[2].previous, is_(20))
        on_done.assert_not_called()
        tasks[2].complete()
        on_done.assert_called_once_with(30)

    def test_long_synchronous_chain(self):
        def increment(previous, callback):
            callback((previous or 0) + 1)

        on_done = Mock()
        execute_seq([increment] * 5000, on_done)
        on_done.assert_called_once_with(5000)

    def test_a_stalled_task_stalls_the_chain(self):
        last = Mock()
        on_done = Mock()
        execute_seq([lambda previous, callback: None, last], on_done)
        last.assert_not_called()
        on_done.assert_not_called()

    def test_a_task_that_raises_propagates(self):
        def nasty(previous, callback):
            raise NastyException()
        assert_that(calling(execute_seq).with_args([nasty], Mock()), raises(NastyException))

    def test_a_task_that_calls_back_then_raises_completes_the_chain(self):
        def first(previous, callback):
            callback(1)
            raise NastyException()

        second = Mock(side_effect=lambda previous, callback: callback(previous + 1))
        on_done = Mock()
        assert_that(calling(execute_seq).with_args([first, second], on_done), raises(NastyException))
        assert_that(second.call_count, is_(1))
        assert_that(second.call_args[0][0], is_(1))
        on_done.assert_called_once_with(2)

    def test_a_later_callback_resumes_after_a_task_raised(self):
        first = DeferredTask(1)

        def raising(previous, callback):
            first(previous, callback)
            raise NastyException()

        second = DeferredTask(2)
        on_done = Mock()
        assert_that(calling(execute_seq).with_args([raising, second], on_done), raises(NastyException))
        assert_that(second.started, is_(False))
        first.complete()
        assert_that(second.previous, is_(1))
        second.complete()
        on_done.assert_called_once_with(2)

    def test_a_repeated_callback_is_ignored(self):
        tasks = [DeferredTask(1), DeferredTask(2)]
        on_done = Mock()
        execute_seq(tasks, on_done)
        tasks[0].complete()
        tasks[0].complete()
        assert_that(tasks[1].previous, is_(1))
        tasks[1].complete()
        on_done.assert_called_once_with(2)

    @timeout_decorator.timeout(5)
    def test_callbacks_from_other_threads(self):
        done = threading.Event()
        final = []

        def on_done(result):
            final.append(result)
            done.set()

        with ThreadPoolExecutor(max_workers=2) as executor:
            def append(i):
                return lambda previous, callback: executor.submit(callback, (previous or []) + [i])
            execute_seq([append(i) for i in range(10)], on_done)
            done.wait()
        assert_that(final, is_([list(range(10))]))


class AllOfTest(unittest.TestCase):

    def test_empty(self):
        assert_that(all_of([]).value(0), is_(empty()))

    def test_ordered_results(self):
        tasks = [DeferredTask('A'), DeferredTask('B'), DeferredTask('C')]
        sut = all_of(tasks)
        for i in (1, 2, 0):
            assert_that(sut.done(), is_(False))
            tasks[i].complete()
        assert_that(sut.value(0), equal_to(['A', 'B', 'C']))

    def test_raised_exception_fails_and_stops_starting_tasks(self):
        def nasty(callback):
            raise NastyException()
        last = Mock()
        sut = all_of([immediate(1), nasty, last])
        assert_that(calling(sut.value).with_args(0), raises(NastyException))
        last.assert_not_called()

    def test_exception_passed_to_callback_fails_the_future(self):
        first = DeferredTask(NastyException())
        second = DeferredTask(2)
        sut = all_of([first, second])
        first.complete()
        second.complete()
        assert_that(calling(sut.value).with_args(0), raises(NastyException))

    def test_first_failure_wins(self):
        first = DeferredTask(NastyException('first'))
        second = DeferredTask(ValueError('second'))
        sut = all_of([first, second])
        second.complete()
        first.complete()
        assert_that(calling(sut.value).with_args(0), raises(ValueError, 'second'))

    def test_timeout(self):
        sut = all_of([lambda callback: None])
        assert_that(calling(sut.value).with_args(0.01), raises(FutureTimeoutError))


class SeqOfTest(unittest.TestCase):

    def test_empty(self):
        assert_that(seq_of([]).value(0), is_(None))

    def test_last_result(self):
        sut = seq_of([lambda previous, callback: callback(1),
                      lambda previous, callback: callback(previous + 1)])
        assert_that(sut.value(0), is_(2))

    def test_failure_stops_the_chain(self):
        last = Mock()
        sut = seq_of([lambda previous, callback: callback(NastyException()), last])
        assert_that(calling(sut.value).with_args(0), raises(NastyException))
        last.assert_not_called()

    def test_raised_exception_fails_the_future(self):
        def nasty(previous, callback):
            raise NastyException()
        sut = seq_of([nasty])
        assert_that(calling(sut.value).with_args(0), raises(NastyException))


if __name__ == '__main__':  # pragma no cover
    unittest.main()
