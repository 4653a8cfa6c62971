"""
Produces per-call transport configurations from a shared template without mutating the template.
"""
import json
import logging

logger = logging.getLogger(__name__)


def clone(overrides: dict, base: dict) -> dict:
    """
    Returns a deep copy of `base` with the top level keys of `overrides` assigned onto it.

    The copy is made through a JSON round trip, so `base` must be JSON serializable. Override
    values are assigned by reference and are not copied or merged into the base value.

    >>> clone({'a': 1}, {'a': 0, 'b': 2}) == {'a': 1, 'b': 2}
    True

    :param overrides: values taking precedence over the base
    :param base: the configuration to copy. It is never modified.
    :return: the merged copy
    """
    result = json.loads(json.dumps(base))
    for key in overrides:
        result[key] = overrides[key]
    return result


class ConfigTemplate:
    """
    A transport configuration shared between calls. Configurations are only ever produced
    from the template with derive(), so one call's parameters cannot leak into another's.
    """

    def __init__(self, base: dict):
        self._base = clone({}, base)

    def derive(self, overrides: dict=None, **kwargs) -> dict:
        """
        Builds a fresh configuration for a single call.
        :param overrides: a mapping of values taking precedence over the template
        :param kwargs: further overrides, applied after `overrides`
        """
        merged = dict(overrides or {})
        merged.update(kwargs)
        logger.debug("deriving configuration with overrides %s", sorted(merged))
        return clone(merged, self._base)

    def __repr__(self):
        return 'ConfigTemplate(%r)' % (self._base,)
