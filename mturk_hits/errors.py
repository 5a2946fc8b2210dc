"""
Exceptions delivered to operation callbacks.

Every callback receives either None or a list of one or more of these as its
first argument; none of them is raised out of an operation.
"""


class MTurkError(Exception):
    """
    Base class for everything this client reports.
    """
    pass


class ValidationError(MTurkError):
    """
    A HIT failed local validation; no request was made.
    """
    pass


class MissingNodeError(MTurkError):
    """
    A node that should be on an MTurk response was not there.
    """
    def __init__(self, operation, node):
        """
        :param operation: The MTurk operation, e.g. 'SearchHITs'.
        :param node: The name of the missing node, e.g. 'NumResults'.
        """
        self.operation = operation
        self.node = node
        super(MissingNodeError, self).__init__(
            'No "%sResult > %s" node on the response' % (operation, node))


class RequestError(MTurkError):
    """
    The request to MTurk failed, either in transport or because MTurk
    rejected it.
    """
    def __init__(self, message, code=None, status=None):
        """
        :param message: A description of the failure.
        :param code: The MTurk error code, if MTurk gave one (e.g.
                     'AWS.MechanicalTurk.HITDoesNotExist').
        :param status: The HTTP status, if a response was received.
        """
        self.message = message
        self.code = code
        self.status = status
        if code:
            message = '%s: %s' % (code, message)
        super(RequestError, self).__init__(message)
