def quote(val):
    return "'" + str(val) + "'" if val is not None else "None"


class StringerMixin:
    """
    Renders the class name followed by the instance attributes in key sorted order.
    """

    def __str__(self):
        return type(self).__name__ + ':' + self._sorted_items_string()

    def _sorted_items_string(self):
        return "{" + ", ".join(["'" + str(key) + "': " + quote(val)
                                for key, val in sorted(vars(self).items())]) + "}"


class CommonEqualityMixin(object):
    """ attribute-wise equality for value objects. """

    def __eq__(self, other):
        return isinstance(other, self.__class__) and vars(self) == vars(other)

    def __ne__(self, other):
        return not self.__eq__(other)

    __hash__ = None
