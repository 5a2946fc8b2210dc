"""
Exports Base, the behaviour shared by every entity that is read off an MTurk
response (HITs, assignments): validation, mapping response nodes onto
attributes and checking that response nodes exist.
"""

import re

from mturk_hits.conf import *
from mturk_hits.validator import Validator
from mturk_hits import logger

_log = logger.setup_logger(__name__)


_first_cap_re = re.compile('(.)([A-Z][a-z]+)')
_all_cap_re = re.compile('([a-z0-9])([A-Z])')


def convert(name):
    """
    Converts a CamelCase response key to a camel_case attribute name.

    NOTES:
        source: http://stackoverflow.com/questions/1175208/
        elegant-python-function-to-convert-camelcase-to-camel-case

    :param name: A string, e.g. 'RequesterAnnotation' or 'HITTypeId'.
    :return: name, only with CamelCase replaced with camel_case.
    """
    s1 = _first_cap_re.sub(r'\1_\2', name)
    return _all_cap_re.sub(r'\1_\2', s1).lower()


def as_list(node):
    """
    MTurk drops the list wrapper when a list-shaped field (HIT, Assignment)
    has a single entry. This puts it back.

    :param node: None, a single response subtree, or a list of them.
    :return: A list.
    """
    if node is None:
        return []
    if isinstance(node, list):
        return node
    return [node]


class Base(object):
    """
    Mixin for the entities. Subclasses override validate() and call
    populate_from_response() with their own field map.
    """
    errors = None

    def validate(self, v):
        """
        Registers the entity's rules with a validator. The default has none.

        :param v: A Validator instance.
        :return: None
        """
        pass

    def valid(self):
        """
        Runs validate() and stores the messages in self.errors.

        :return: True if there were no violations.
        """
        v = Validator()
        self.validate(v)
        self.errors = v.errors
        return not self.errors

    def populate_from_response(self, response, field_map=None):
        """
        Copies the fields of a response subtree onto this object. Fields
        named in field_map go to the mapped attribute, every other field to
        its camel_case name. Fields that are absent are left alone.

        :param response: A response subtree (a dict) as produced by the
                         requester.
        :param field_map: Remote field name -> attribute name.
        :return: None
        """
        if not response:
            return
        field_map = field_map or {}
        for key, value in response.items():
            if key == 'Request':
                # the validity marker MTurk puts in every result
                continue
            setattr(self, field_map.get(key, convert(key)), value)

    @staticmethod
    def node_exists(path, tree):
        """
        Walks a path into a response tree.

        :param path: A list of node names, or a dotted string. Empty
                     segments are ignored.
        :param tree: The response tree.
        :return: True if every node along the path exists.
        """
        if isinstance(path, str):
            path = path.split('.')
        node = tree
        for segment in path:
            if not segment:
                continue
            if not isinstance(node, dict) or segment not in node:
                return False
            node = node[segment]
        return node is not None

    @staticmethod
    def object_key_to_response_key(key):
        """
        Translates a local sort property name ('creation_time') into the
        field name MTurk expects ('CreationTime'). Unknown names are returned
        unchanged.
        """
        return SORT_PROPERTIES.get(key, key)
