"""
Assignments: one worker's go at a HIT. They are read off GetAssignmentsForHIT
(see hit.get_assignments) and can be approved or rejected here.
"""

from xml.etree import ElementTree

from mturk_hits.conf import *
from mturk_hits.base import Base, as_list
from mturk_hits.errors import ValidationError
from mturk_hits.requester import xml_to_tree
from mturk_hits import logger

_log = logger.setup_logger(__name__)

# the answer nodes of a QuestionFormAnswers document, in order of preference
_ANSWER_NODES = ('FreeText', 'SelectionIdentifier', 'OtherSelectionText',
                 'UploadedFileKey')


def parse_answers(answer_xml):
    """
    Parses the QuestionFormAnswers document MTurk returns as an assignment's
    Answer.

    :param answer_xml: The document, as a string.
    :return: A dict of question identifier -> answer. Multiple selections
             come back as a list. Raises ElementTree.ParseError if the
             document is not XML.
    """
    tree = xml_to_tree(ElementTree.fromstring(answer_xml))
    answers = dict()
    if not isinstance(tree, dict):
        return answers
    for answer in as_list(tree.get('Answer')):
        if not isinstance(answer, dict):
            continue
        for node in _ANSWER_NODES:
            if node in answer:
                answers[answer.get('QuestionIdentifier')] = answer[node]
                break
    return answers


class AssignmentOptions(object):
    """
    Filtering, sorting and paging for hit.get_assignments. Anything left as
    None is not sent, and MTurk's default applies.
    """
    def __init__(self, assignment_status=None, sort_property=None,
                 sort_direction=None, page_size=None, page_number=None):
        """
        :param assignment_status: Submitted | Approved | Rejected. Default:
                                  all of them.
        :param sort_property: accept_time | submit_time | assignment_status.
                              Default: SubmitTime.
        :param sort_direction: Ascending | Descending. Default: Ascending.
        :param page_size: The number of assignments in a page (int). Default:
                          10.
        :param page_number: The page of results to return (int). Default: 1.
        """
        self.assignment_status = assignment_status
        self.sort_property = sort_property
        self.sort_direction = sort_direction
        self.page_size = page_size
        self.page_number = page_number

    def to_params(self):
        params = dict()
        if self.assignment_status:
            params['AssignmentStatus'] = self.assignment_status
        if self.sort_property:
            params['SortProperty'] = \
                Base.object_key_to_response_key(self.sort_property)
        if self.sort_direction:
            params['SortDirection'] = self.sort_direction
        if self.page_size:
            params['PageSize'] = self.page_size
        if self.page_number:
            params['PageNumber'] = self.page_number
        return params


class Assignment(Base):
    """
    A worker's assignment. Everything on the response is copied onto it
    (WorkerId -> worker_id, AssignmentStatus -> assignment_status, ...);
    the answer document is additionally parsed into self.answers.
    """
    field_map = {
        'AssignmentId': 'id',
        'HITId': 'hit_id',
    }
    id = None
    hit_id = None
    worker_id = None
    assignment_status = None
    answer = None
    answers = None

    def __init__(self, requester=None):
        self.errors = []
        self.requester = requester

    def __repr__(self):
        return '<Assignment %s (%s)>' % (self.id, self.assignment_status)

    def populate_from_response(self, response, field_map=None):
        super(Assignment, self).populate_from_response(
            response, field_map or self.field_map)
        if response and response.get('Answer'):
            try:
                self.answers = parse_answers(self.answer)
            except ElementTree.ParseError as e:
                _log.warning('Error parsing answer of assignment %s: %s' %
                             (self.id, e))
                self.answers = None

    def approve(self, feedback=None, callback=None):
        return approve(self.requester, self.id, feedback, callback)

    def reject(self, feedback=None, callback=None):
        return reject(self.requester, self.id, feedback, callback)


def _review(requester, operation, assignment_id, feedback, callback):
    if feedback is not None and len(feedback) > MAX_REQUESTER_FEEDBACK_LENGTH:
        message = 'RequesterFeedback should be at most %i characters' % \
            MAX_REQUESTER_FEEDBACK_LENGTH
        callback([ValidationError(message)], None)
        return
    params = {'AssignmentId': assignment_id, 'RequesterFeedback': feedback}

    def on_response(err, response):
        if err:
            callback([err], response)
            return
        _log.debug('%s %s' % (operation, assignment_id))
        callback(None, response)

    requester.call(SERVICE_NAME, operation, 'GET', params,
                   callback=on_response)


def approve(requester, assignment_id, feedback=None, callback=None):
    """
    Approves a submitted assignment, paying the worker.

    :param requester: The Requester to call MTurk with.
    :param assignment_id: The ID of the assignment, as provided by MTurk.
    :param feedback: A message for the worker (string, max 1024 chars).
                     Optional.
    :param callback: function with signature (list errors || None, dict
                     response)
    :return: None
    """
    _review(requester, APPROVE_ASSIGNMENT, assignment_id, feedback, callback)


def reject(requester, assignment_id, feedback=None, callback=None):
    """
    Rejects a submitted assignment. The worker is not paid.

    :param requester: The Requester to call MTurk with.
    :param assignment_id: The ID of the assignment, as provided by MTurk.
    :param feedback: Why it was rejected (string, max 1024 chars). Optional.
    :param callback: function with signature (list errors || None, dict
                     response)
    :return: None
    """
    _review(requester, REJECT_ASSIGNMENT, assignment_id, feedback, callback)
