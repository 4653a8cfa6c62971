import logging
from collections.abc import Mapping

from driversandbox.errors import InvalidArgumentError, SizeExceededError
from driversandbox.support.mixins import CommonEqualityMixin, StringerMixin

logger = logging.getLogger(__name__)

# The largest running or startup configuration the host stores, in characters
MAX_BACKUP_SIZE = 1048576

DEFAULT_BACKUP_LABEL = "Custom Driver Configuration Backup"

BACKUP_TYPE = "backup"


class ValidatedBackup(CommonEqualityMixin, StringerMixin):
    """
    A configuration backup ready to be reported to the host.
    :param label: the display name of the backup
    :param running: the active configuration
    :param startup: the configuration used at boot, or None when the device has none.
    """

    def __init__(self, label, running, startup=None):
        self.label = label
        self.running = running
        self.startup = startup
        self.type = BACKUP_TYPE

    def as_dict(self):
        return {'label': self.label, 'running': self.running, 'startup': self.startup, 'type': self.type}


def _check_size(name, content, max_size):
    if len(content) > max_size:
        raise SizeExceededError("Maximum %s configuration backup size exceeded: allowed %d bytes, provided %d"
                                % (name, max_size, len(content)))


def create_backup(configuration_backup: Mapping, max_size=MAX_BACKUP_SIZE,
                  default_label=DEFAULT_BACKUP_LABEL) -> ValidatedBackup:
    """
    Validates a backup supplied by a driver.

    :param configuration_backup: a mapping with a required `running` string, and optional `label`
        and `startup` strings.
    :param max_size: the maximum length of the running and startup configurations
    :param default_label: the label used when the backup has none
    :raises InvalidArgumentError: the backup is missing, or running/startup is not a string
    :raises SizeExceededError: running or startup is longer than max_size
    """
    if not isinstance(configuration_backup, Mapping):
        raise InvalidArgumentError("Invalid configuration backup object - it must be a mapping and not %s"
                                   % type(configuration_backup).__name__)
    label = configuration_backup.get('label')
    if not isinstance(label, str) or not label:
        label = default_label

    running = configuration_backup.get('running')
    if not isinstance(running, str):
        raise InvalidArgumentError("Invalid running configuration backup content - it must be string and not %s"
                                   % type(running).__name__)
    _check_size('running', running, max_size)

    startup = configuration_backup.get('startup')
    if startup is not None:
        if not isinstance(startup, str):
            raise InvalidArgumentError("Invalid startup configuration backup content - "
                                       "it must be string or None and not %s" % type(startup).__name__)
        _check_size('startup', startup, max_size)

    logger.debug("validated backup '%s' (running %d, startup %s)", label, len(running),
                 len(startup) if startup is not None else None)
    return ValidatedBackup(label, running, startup)
