"""
The sandbox stand-in for the host platform object (`D`) that driver scripts call into.

Drivers build their results through the sandbox so they are validated against the host's limits,
coordinate transport calls with the task combinators, and finish by reporting success or failure.
Reports are logged in the same plain-text layout the host console uses, and published to the
listeners registered on `results`.
"""
import logging
import math

from driversandbox.config.config import SandboxSettings
from driversandbox.device import DeviceInfo, device_from_environ, external_device
from driversandbox.errors import DriverFailure, ErrorType, to_error_type
from driversandbox.protocol import tasks
from driversandbox.results.backup import ValidatedBackup, create_backup
from driversandbox.results.table import DriverTable
from driversandbox.results.variable import Variable, create_variable
from driversandbox.support.clone import clone
from driversandbox.support.events import EventSource, FailureEvent, SuccessEvent

logger = logging.getLogger(__name__)


def _parse_int(value):
    return value if isinstance(value, int) else int(float(value))


def percent(actual, maximum):
    """
    Percentage of actual in maximum, rounded to two decimal places.
    A zero maximum gives an infinite percentage, or nan when actual is zero too.
    >>> percent(7, 10)
    70.0
    >>> percent('1', '3')
    33.33
    >>> percent(5, 0)
    inf
    """
    actual, maximum = _parse_int(actual), _parse_int(maximum)
    if maximum == 0:
        return math.nan if actual == 0 else math.copysign(math.inf, actual)
    return math.floor(10000.0 * actual / maximum + 0.5) / 100


def _fit(value, width):
    text = '' if value is None else str(value)
    return text.ljust(width)[:width]


def render_table(result):
    """
    Lays out a table result as text, one line per row, columns separated by '|'.
    """
    labels = [header['label'] for header in result['columnHeaders']]
    widths = [len(label) for label in labels]
    for row in result['rows']:
        for i, cell in enumerate(row[:len(widths)]):
            if cell is not None:
                widths[i] = max(widths[i], len(str(cell)))
    header = '|'.join(_fit(label, widths[i]) for i, label in enumerate(labels))
    lines = [result['label'], header, '-' * len(header)]
    lines.extend('|'.join(_fit(cell, widths[i]) for i, cell in enumerate(row[:len(widths)]))
                 for row in result['rows'])
    return '\n'.join(lines)


def render_variables(variables):
    """
    Lays out variables as 'label (unit) = value' lines with the labels aligned.
    """
    labels = [v['label'] + (' (' + v['unit'] + ')' if v.get('unit') else '') for v in variables]
    width = max([len(label) for label in labels] or [0])
    return '\n'.join('%s = %s' % (label.ljust(width), v['value']) for label, v in zip(labels, variables))


def _payload(result):
    if isinstance(result, DriverTable):
        return result.get_result()
    if isinstance(result, ValidatedBackup):
        return result.as_dict()
    return [v.as_dict() if isinstance(v, Variable) else v for v in result]


def _render(payload):
    if isinstance(payload, dict) and payload.get('type') == 'backup':
        return 'backup %s: running %d characters, startup %s' % (
            payload['label'], len(payload['running']),
            'none' if payload['startup'] is None else '%d characters' % len(payload['startup']))
    if isinstance(payload, dict):
        return render_table(payload)
    return render_variables(payload)


class Sandbox:
    """
    Emulates the host platform object.
    :param settings: the result limits, see driversandbox.config.config.load_settings
    :param device: the device the driver runs against. Read from the environment when not given.
    """
    error_type = ErrorType

    def __init__(self, settings: SandboxSettings=None, device: DeviceInfo=None):
        self.settings = settings or SandboxSettings()
        self.device = device if device is not None else device_from_environ()
        self.results = EventSource()

    # configuration

    @staticmethod
    def clone(overrides, base):
        return clone(overrides, base)

    # task orchestration

    @staticmethod
    def execute_all(task_list, on_done):
        tasks.execute_all(task_list, on_done)

    @staticmethod
    def execute_seq(task_list, on_done):
        tasks.execute_seq(task_list, on_done)

    @staticmethod
    def all_of(task_list):
        return tasks.all_of(task_list)

    @staticmethod
    def seq_of(task_list):
        return tasks.seq_of(task_list)

    # results

    @staticmethod
    def percent(actual, maximum):
        return percent(actual, maximum)

    def create_backup(self, configuration_backup) -> ValidatedBackup:
        limits = self.settings.backup
        return create_backup(configuration_backup, limits.max_size, limits.default_label)

    def create_variable(self, uid, label, value, unit=None, value_type=None) -> Variable:
        limits = self.settings.variable
        return create_variable(uid, label, value, unit, value_type, limits.max_uid_len, limits.max_unit_len)

    def create_table(self, label, column_headers) -> DriverTable:
        limits = self.settings.table
        return DriverTable(label, column_headers, limits.max_label_len, limits.max_column_header_len,
                           limits.max_column_unit_len, limits.max_record_id_len)

    @staticmethod
    def create_external_device(host, credentials=None) -> DeviceInfo:
        return external_device(host, credentials)

    def success(self, *results):
        """
        Reports a successful execution. At most two results are reported: a list of variables
        and/or a table, or a configuration backup. Missing (None) results are skipped.
        """
        payloads = [_payload(result) for result in results[:2] if result is not None]
        for payload in payloads:
            logger.info("\n%s", _render(payload))
        self.results.fire(SuccessEvent(payloads))

    def failure(self, error_type=ErrorType.GENERIC_ERROR):
        """
        Reports a failed execution.
        :param error_type: an ErrorType, its name or its description. Anything else, such as an
            exception or a response body, is logged and reported as a GENERIC_ERROR.
        :raises DriverFailure: when the settings ask for the run to be aborted
        """
        reported = to_error_type(error_type)
        if reported is not error_type:
            logger.error("driver failed: %s (%r)", reported.value, error_type)
        else:
            logger.error("driver failed: %s", reported.value)
        self.results.fire(FailureEvent(reported))
        if self.settings.abort_on_failure:
            raise DriverFailure(reported)
