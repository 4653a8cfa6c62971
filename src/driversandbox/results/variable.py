import re

from driversandbox.errors import InvalidArgumentError, ValueType
from driversandbox.support.mixins import CommonEqualityMixin, StringerMixin

MAX_UID_LEN = 50
MAX_UNIT_LEN = 10

# uids may not contain these words as a whole path segment
RESERVED_UID = re.compile(r'(^|/)(table|column|history)(/|$)')


class Variable(CommonEqualityMixin, StringerMixin):
    """ A single value reported by a driver. """

    def __init__(self, uid, label, value, unit=None, value_type=None):
        self.uid = uid
        self.label = label
        self.value = value
        self.unit = unit
        self.value_type = value_type

    def as_dict(self):
        return {
            'uid': self.uid,
            'unit': self.unit,
            'valueType': self.value_type.value if self.value_type else None,
            'value': self.value,
            'label': self.label
        }


def create_variable(uid, label, value, unit=None, value_type=None,
                    max_uid_len=MAX_UID_LEN, max_unit_len=MAX_UNIT_LEN) -> Variable:
    """
    Validates and builds a variable.
    :param uid: unique identifier, at most max_uid_len characters. Integers are converted to strings.
    :param label: the display name
    :param value: the value, reported as a string
    :param unit: the unit of measurement, truncated to max_unit_len characters
    :param value_type: a ValueType, or its name
    """
    if isinstance(uid, int) and not isinstance(uid, bool):
        uid = str(uid)
    if not isinstance(uid, str) or not 1 <= len(uid) <= max_uid_len:
        raise InvalidArgumentError("Invalid variable uid: %s" % (uid,))
    if RESERVED_UID.search(uid):
        raise InvalidArgumentError("uid '%s' is a reserved word" % uid)
    unit = unit[:max_unit_len] if unit else None
    if value_type is not None and not isinstance(value_type, ValueType):
        if value_type not in ValueType.__members__:
            raise InvalidArgumentError("Invalid variable value type: %s" % (value_type,))
        value_type = ValueType[value_type]
    value = str(value) if value is not None else None
    return Variable(uid, label, value, unit, value_type)
