"""
A small rule checker. Records submit their fields to it (see Base.valid) and
it accumulates one message per failed check, e.g.:

    v = Validator()
    v.check(hit.hit_type_id, 'Please enter a valid hitTypeId') \
        .not_null().is_alphanumeric()
    v.error('lifeTimeInSeconds should be >= 30')
    v.errors  # ['Please enter a valid hitTypeId', ...]
"""

import re

_alphanumeric_re = re.compile(r'^[a-zA-Z0-9]+\Z')
_int_re = re.compile(r'^-?(?:0|[1-9][0-9]*)\Z')


def to_int(value):
    """
    Parses a value as an integer the way MTurk will.

    :param value: An int, or a string of digits.
    :return: The integer, or None if value is not one.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _int_re.match(value.strip()):
        return int(value)
    return None


class _Check(object):
    """
    The chain returned by Validator.check. Once a rule fails, the message is
    recorded and the remaining rules of the chain are skipped.
    """
    def __init__(self, validator, value, message):
        self._validator = validator
        self._value = value
        self._message = message
        self._failed = False

    def _rule(self, passed):
        if not self._failed and not passed:
            self._failed = True
            self._validator.error(self._message)
        return self

    def not_null(self):
        return self._rule(self._value is not None and self._value != '')

    def is_alphanumeric(self):
        return self._rule(self._value is not None and
                          _alphanumeric_re.match(str(self._value)) is not None)

    def is_int(self):
        return self._rule(to_int(self._value) is not None)

    def len(self, min_len=0, max_len=None):
        length = len(self._value) if self._value is not None else 0
        return self._rule(length >= min_len and
                          (max_len is None or length <= max_len))


class Validator(object):
    """
    Accumulates validation messages.
    """
    def __init__(self):
        self.errors = []

    def check(self, value, message):
        """
        Starts a chain of rules for a single value.

        :param value: The value to check.
        :param message: The message recorded if any rule in the chain fails.
        :return: A chainable check object.
        """
        return _Check(self, value, message)

    def error(self, message):
        self.errors.append(message)
