import copy
import logging

from driversandbox.errors import InvalidArgumentError

logger = logging.getLogger(__name__)

MAX_RECORD_ID_LEN = 50
MAX_TABLE_LABEL_LEN = 50
MAX_COLUMN_HEADER_LEN = 30
MAX_COLUMN_UNIT_LEN = 10

# the first column of every table holds the record id
RESERVED_COLUMN_LABEL = "Id"

TABLE_TYPE = "table"


def is_not_empty_string(val, max_len):
    """
    >>> is_not_empty_string('abc', 3)
    True
    >>> is_not_empty_string('', 3)
    False
    >>> is_not_empty_string(123, 3)
    False
    """
    return isinstance(val, str) and 0 < len(val) <= max_len


class DriverTable:
    """
    A table of records reported by a driver. Each record is identified by a unique id, which the host
    shows in an additional first column labelled "Id".

    :param label: the table label
    :param column_headers: a list of mappings, each with a `label` and an optional `unit`
    """
    is_table = True
    type = TABLE_TYPE

    def __init__(self, label, column_headers, max_label_len=MAX_TABLE_LABEL_LEN,
                 max_column_header_len=MAX_COLUMN_HEADER_LEN, max_column_unit_len=MAX_COLUMN_UNIT_LEN,
                 max_record_id_len=MAX_RECORD_ID_LEN):
        if not is_not_empty_string(label, max_label_len):
            raise InvalidArgumentError("Invalid table Label: %s" % (label,))
        self._validate_column_headers(column_headers, max_column_header_len, max_column_unit_len)
        self.label = label
        self.column_headers = [dict(header) for header in column_headers]
        self.max_record_id_len = max_record_id_len
        self._rows = []
        self._record_ids = []

    @staticmethod
    def _validate_column_headers(column_headers, max_header_len, max_unit_len):
        if not column_headers:
            raise InvalidArgumentError("Column Headers must be defined")
        for header in column_headers:
            header_label = header.get('label')
            if not is_not_empty_string(header_label, max_header_len):
                raise InvalidArgumentError("Defined column header label must be a string with max length: %d"
                                           % max_header_len)
            if header_label == RESERVED_COLUMN_LABEL:
                raise InvalidArgumentError("Defined column header label %s is reserved" % RESERVED_COLUMN_LABEL)
            unit = header.get('unit')
            if unit and not is_not_empty_string(unit, max_unit_len):
                raise InvalidArgumentError("Defined column header unit must be a string with max length: %d"
                                           % max_unit_len)

    def _validate_record(self, record_id, values):
        if not is_not_empty_string(record_id, self.max_record_id_len):
            raise InvalidArgumentError("Defined record id must be a string with max length: %d"
                                       % self.max_record_id_len)
        if len(self.column_headers) != len(values):
            raise InvalidArgumentError("Defined column header size is different than inserted values size: %d != %d"
                                       % (len(self.column_headers), len(values)))

    def insert_record(self, record_id, values):
        """
        Adds a record to the table.
        :raises InvalidArgumentError: the id is invalid or already present, or there is not one value per column.
        """
        logger.debug("Adding record %s to table %s with values %s", record_id, self.label, values)
        self._validate_record(record_id, values)
        if record_id in self._record_ids:
            raise InvalidArgumentError("Duplicate record id. Cannot insert record: %s" % record_id)
        self._record_ids.append(record_id)
        self._rows.append([record_id] + list(values))

    def upsert_record(self, record_id, values):
        """ Adds a record to the table, replacing any existing record with the same id. """
        logger.debug("Adding record %s to table %s with values %s", record_id, self.label, values)
        self._validate_record(record_id, values)
        row = [record_id] + list(values)
        if record_id in self._record_ids:
            logger.warning("A Record with this id exists %s --> Updating", record_id)
            self._rows[self._record_ids.index(record_id)] = row
        else:
            self._record_ids.append(record_id)
            self._rows.append(row)

    def get_result(self):
        return {
            'label': self.label,
            'columnHeaders': [{'label': RESERVED_COLUMN_LABEL}] + copy.deepcopy(self.column_headers),
            'rows': copy.deepcopy(self._rows)
        }
