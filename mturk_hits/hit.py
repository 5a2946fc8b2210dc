"""
Exports HIT, and the functions that create, look up and retire HITs on MTurk:

    create          post a new HIT to a HIT type
    expire          stop a HIT from accepting new assignments
    dispose         delete a HIT (all its assignments must be reviewed)
    disable         remove a HIT, approving whatever is submitted
    extend          give a HIT more assignments and / or more time
    get             fetch a single HIT
    search          page through all of your HITs
    get_reviewable  page through HITs awaiting review
    get_assignments page through the assignments of a HIT

    NOTES
        Every function takes the requester (see requester.py) first and a
        callback last. The callback is called once, and its first argument is
        None or a list of errors (see errors.py); nothing is raised for a
        failed call. Functions that page through results always report the
        pagination nodes as ints.

        No function here checks the state of a HIT before acting on it; the
        rules about what can be expired, disposed, etc are MTurk's.
"""

import json

from mturk_hits.conf import *
from mturk_hits.assignment import Assignment, AssignmentOptions
from mturk_hits.base import Base, as_list
from mturk_hits.errors import MissingNodeError, MTurkError, ValidationError
from mturk_hits.question import question_as_xml
from mturk_hits.validator import to_int
from mturk_hits import logger

_log = logger.setup_logger(__name__)


class CreateOptions(object):
    """
    The optional parts of a new HIT.
    """
    def __init__(self, max_assignments=None, requester_annotation=None):
        """
        :param max_assignments: The maximum number of assignments (int).
                                MTurk defaults this to 1.
        :param requester_annotation: Annotations only viewable by the
                                     requester (you). A string of at most 255
                                     chars, or anything json serializable
                                     that fits in that.
        """
        self.max_assignments = max_assignments
        self.requester_annotation = requester_annotation


class SearchOptions(object):
    """
    Sorting and paging for search. Anything left as None is not sent.
    """
    def __init__(self, sort_property=None, sort_direction=None,
                 page_size=None, page_number=None):
        """
        :param sort_property: title | reward | expiration | creation_time |
                              enumeration. Defaults to expiration.
        :param sort_direction: Ascending | Descending. Defaults to Ascending.
        :param page_size: The number of HITs in a page (int). Defaults to
                          10, maximum is 100.
        :param page_number: The page of results to return (int). Defaults
                            to 1.
        """
        self.sort_property = sort_property
        self.sort_direction = sort_direction
        self.page_size = page_size
        self.page_number = page_number

    def to_params(self):
        params = dict()
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


class ReviewableOptions(SearchOptions):
    """
    Filtering, sorting and paging for get_reviewable.
    """
    def __init__(self, hit_type_id=None, status=None, sort_property=None,
                 sort_direction=None, page_size=None, page_number=None):
        """
        :param hit_type_id: Only return HITs of this HIT type. Default: all.
        :param status: Reviewable | Reviewing. Default: Reviewable.

        The remaining parameters are as for SearchOptions.
        """
        super(ReviewableOptions, self).__init__(sort_property, sort_direction,
                                                page_size, page_number)
        self.hit_type_id = hit_type_id
        self.status = status

    def to_params(self):
        params = super(ReviewableOptions, self).to_params()
        if self.hit_type_id:
            params['HITTypeId'] = self.hit_type_id
        if self.status:
            params['Status'] = self.status
        return params


class ExtendOptions(object):
    """
    What to add to a HIT with extend. At least one should be set.
    """
    def __init__(self, max_assignments_increment=None,
                 expiration_increment_in_seconds=None):
        """
        :param max_assignments_increment: The number of assignments to add.
        :param expiration_increment_in_seconds: The time to add, in seconds
                                                (60 to 31536000).
        """
        self.max_assignments_increment = max_assignments_increment
        self.expiration_increment_in_seconds = expiration_increment_in_seconds

    def to_params(self):
        params = dict()
        if self.max_assignments_increment:
            params['MaxAssignmentsIncrement'] = self.max_assignments_increment
        if self.expiration_increment_in_seconds:
            params['ExpirationIncrementInSeconds'] = \
                self.expiration_increment_in_seconds
        return params


class HIT(Base):
    """
    A HIT. Constructed by you to be created, or read off a response.

    The server-assigned attributes (id, hit_status, hit_review_status) are
    None until the HIT has been populated from a response. Anything else on
    the response is copied over under its camel_case name (Title -> title,
    CreationTime -> creation_time, ...).
    """
    field_map = {
        'HITId': 'id',
        'HITTypeId': 'hit_type_id',
        'HITStatus': 'hit_status',
        'HITReviewStatus': 'hit_review_status',
    }
    id = None
    hit_type_id = None
    question = None
    lifetime_in_seconds = None
    max_assignments = None
    requester_annotation = None
    hit_status = None
    hit_review_status = None

    def __init__(self, hit_type_id=None, question=None,
                 lifetime_in_seconds=None, max_assignments=None,
                 requester_annotation=None, requester=None):
        """
        :param hit_type_id: The HIT type ID, as a string.
        :param question: The question, as an XML string or a question object
                         (see question.py).
        :param lifetime_in_seconds: How long the HIT is available for, in
                                    seconds (30 to 31536000).
        :param max_assignments: The maximum number of assignments. Optional.
        :param requester_annotation: See CreateOptions. Optional.
        :param requester: The Requester this HIT talks to MTurk with.
        :return: A HIT instance.
        """
        self.errors = []
        self.requester = requester
        if hit_type_id:
            self.hit_type_id = hit_type_id
        if question:
            self.question = question
        if lifetime_in_seconds:
            self.lifetime_in_seconds = lifetime_in_seconds
        if max_assignments:
            self.max_assignments = max_assignments
        if requester_annotation:
            self.requester_annotation = requester_annotation

    def __repr__(self):
        return '<HIT %s (%s)>' % (self.id, self.hit_status)

    def _annotation_as_string(self):
        if self.requester_annotation is None or \
                isinstance(self.requester_annotation, str):
            return self.requester_annotation
        return json.dumps(self.requester_annotation)

    def validate(self, v):
        v.check(self.hit_type_id, 'Please enter a valid hitTypeId') \
            .not_null().is_alphanumeric()
        v.check(self.lifetime_in_seconds, 'Please enter a lifeTimeInSeconds') \
            .not_null()
        v.check(self.lifetime_in_seconds,
                'Please enter a valid lifeTimeInSeconds').is_int()
        v.check(self.question, 'Please provide a question').not_null()
        lifetime = to_int(self.lifetime_in_seconds)
        if lifetime is not None and lifetime < MIN_LIFETIME_IN_SECONDS:
            v.error('lifeTimeInSeconds should be >= %i' %
                    MIN_LIFETIME_IN_SECONDS)
        if lifetime is not None and lifetime > MAX_LIFETIME_IN_SECONDS:
            v.error('lifeTimeInSeconds should be <= %i' %
                    MAX_LIFETIME_IN_SECONDS)
        if self.max_assignments:
            v.check(self.max_assignments,
                    'maxAssignments should be an integer').is_int()
        if self.requester_annotation:
            v.check(self._annotation_as_string(),
                    'Please enter a valid requesterAnnotation') \
                .len(0, MAX_REQUESTER_ANNOTATION_LENGTH)

    def populate_from_response(self, response, field_map=None):
        """
        Copies a HIT response subtree onto this HIT. The requester
        annotation that comes back is json-decoded; if that fails, it is
        dropped with a warning.

        :param response: The HIT subtree of a response.
        :param field_map: Overrides HIT.field_map.
        :return: None
        """
        super(HIT, self).populate_from_response(response,
                                                field_map or self.field_map)
        if response and response.get('RequesterAnnotation'):
            try:
                self.requester_annotation = \
                    json.loads(self.requester_annotation)
            except (TypeError, ValueError) as e:
                _log.warning('Error parsing requesterAnnotation of HIT %s: %s'
                             % (self.id, e))
                self.requester_annotation = None

    def create(self, callback):
        """
        Creates this HIT on MTurk and populates it from the response.

        :param callback: function with signature (list errors || None, dict
                         response). If the HIT is not valid, errors are
                         ValidationErrors and MTurk is never called.
                         Neither is it called when the HIT has no
                         requester.
        :return: None
        """
        if not self.valid():
            callback([ValidationError(msg) for msg in self.errors], None)
            return
        if self.requester is None:
            callback([MTurkError('HIT has no requester to create it with')],
                     None)
            return
        params = {
            'HITTypeId': self.hit_type_id,
            'Question': question_as_xml(self.question),
            'LifetimeInSeconds': self.lifetime_in_seconds,
            'MaxAssignments': self.max_assignments,
            'RequesterAnnotation': self._annotation_as_string(),
        }

        def on_response(err, response):
            if err:
                callback([err], response)
                return
            self.populate_from_response(response['Result'])
            _log.info('Created HIT %s of type %s' %
                      (self.id, self.hit_type_id))
            callback(None, response)

        self.requester.call(SERVICE_NAME, CREATE_HIT, 'POST', params,
                            root_key='HIT', callback=on_response)

    def get_assignments(self, options=None, callback=None):
        """
        Gets the assignments for this HIT. See get_assignments.
        """
        return get_assignments(self.requester, self.id, options, callback)


def _read_pagination(operation, result, nodes):
    """
    Reads the pagination nodes off a result. All of them are checked for
    before any is parsed.

    :param operation: The MTurk operation, for error messages.
    :param result: The result subtree.
    :param nodes: The node names, in the order the values are wanted.
    :return: (list of ints, None) or (None, error).
    """
    for node in nodes:
        if not Base.node_exists([node], result):
            return None, MissingNodeError(operation, node)
    values = []
    for node in nodes:
        value = to_int(result[node])
        if value is None:
            return None, MTurkError('The "%sResult > %s" node is not an '
                                    'integer: %r' %
                                    (operation, node, result[node]))
        values.append(value)
    return values, None


def _hits_from_result(requester, result):
    hits = []
    for response_hit in as_list(result.get('HIT')):
        hit = HIT(requester=requester)
        hit.populate_from_response(response_hit)
        hits.append(hit)
    return hits


def _list_hits(requester, operation, params, callback):
    """
    Shared by search and get_reviewable, which return the same shape.
    """
    def on_response(err, response):
        if err:
            callback([err], None, None, None, None, response)
            return
        result = response['Result']
        values, error = _read_pagination(
            operation, result, [NUM_RESULTS, TOTAL_NUM_RESULTS, PAGE_NUMBER])
        if error is not None:
            _log.warning(str(error))
            callback([error], None, None, None, None, response)
            return
        num_results, total_num_results, page_number = values
        hits = _hits_from_result(requester, result)
        _log.debug('%s: page %i, %i of %i HITs' %
                   (operation, page_number, num_results, total_num_results))
        callback(None, num_results, total_num_results, page_number, hits,
                 response)

    requester.call(SERVICE_NAME, operation, 'GET', params,
                   callback=on_response)


def _acknowledge(requester, operation, hit_id, params, callback):
    def on_response(err, response):
        if err:
            callback([err], response)
            return
        _log.debug('%s %s' % (operation, hit_id))
        callback(None, response)

    params['HITId'] = hit_id
    requester.call(SERVICE_NAME, operation, 'GET', params,
                   callback=on_response)


def create(requester, hit_type_id, question, lifetime_in_seconds,
           options=None, callback=None):
    """
    Creates a HIT.

    :param requester: The Requester to call MTurk with.
    :param hit_type_id: The HIT type id (string).
    :param question: The question (XML string, or see question.py).
    :param lifetime_in_seconds: The lifetime, in seconds (int).
    :param options: A CreateOptions. Optional.
    :param callback: function with signature (list errors || None, HIT hit)
    :return: None
    """
    options = options or CreateOptions()
    hit = HIT(hit_type_id, question, lifetime_in_seconds,
              options.max_assignments, options.requester_annotation,
              requester=requester)

    def on_create(errors, response):
        if errors:
            callback(errors, None)
            return
        callback(None, hit)

    hit.create(on_create)


def expire(requester, hit_id, callback):
    """
    Force-expires a HIT. Workers who already accepted it can still submit.

    :param requester: The Requester to call MTurk with.
    :param hit_id: The ID of the HIT to expire.
    :param callback: function with signature (list errors || None, dict
                     response)
    :return: None
    """
    _acknowledge(requester, FORCE_EXPIRE_HIT, hit_id, dict(), callback)


def dispose(requester, hit_id, callback):
    """
    Disposes of a HIT. Its assignments must all have been approved or
    rejected.

    :param requester: The Requester to call MTurk with.
    :param hit_id: The ID of the HIT to dispose of.
    :param callback: function with signature (list errors || None, dict
                     response)
    :return: None
    """
    _acknowledge(requester, DISPOSE_HIT, hit_id, dict(), callback)


def disable(requester, hit_id, callback):
    """
    Disables a HIT. Submitted assignments are approved automatically.

    :param requester: The Requester to call MTurk with.
    :param hit_id: The ID of the HIT to disable.
    :param callback: function with signature (list errors || None, dict
                     response)
    :return: None
    """
    _acknowledge(requester, DISABLE_HIT, hit_id, dict(), callback)


def extend(requester, hit_id, options, callback):
    """
    Extends a HIT.

    :param requester: The Requester to call MTurk with.
    :param hit_id: The ID of the HIT to extend.
    :param options: An ExtendOptions.
    :param callback: function with signature (list errors || None, dict
                     response)
    :return: None
    """
    _log.info('Extending hit %s' % hit_id)
    _acknowledge(requester, EXTEND_HIT, hit_id, options.to_params(), callback)


def get(requester, hit_id, callback):
    """
    Retrieves the details of a HIT.

    :param requester: The Requester to call MTurk with.
    :param hit_id: The ID of the HIT to retrieve (string).
    :param callback: function with signature (list errors || None, HIT hit
                     || None, dict response)
    :return: None
    """
    def on_response(err, response):
        if err:
            callback([err], None, response)
            return
        if not Base.node_exists(['Result'], response):
            callback([MissingNodeError(GET_HIT, 'HIT')], None, response)
            return
        hit = HIT(requester=requester)
        hit.populate_from_response(response['Result'])
        callback(None, hit, response)

    requester.call(SERVICE_NAME, GET_HIT, 'GET', {'HITId': hit_id},
                   root_key='HIT', callback=on_response)


def search(requester, options=None, callback=None):
    """
    Retrieves a page of all your HITs.

    :param requester: The Requester to call MTurk with.
    :param options: A SearchOptions. Optional.
    :param callback: function with signature (list errors || None, int
                     num_results, int total_num_results, int page_number,
                     list hits, dict response)
    :return: None
    """
    options = options or SearchOptions()
    _list_hits(requester, SEARCH_HITS, options.to_params(), callback)


def get_reviewable(requester, options=None, callback=None):
    """
    Retrieves a page of the HITs that are reviewable (or being reviewed).

    :param requester: The Requester to call MTurk with.
    :param options: A ReviewableOptions. Optional.
    :param callback: function with signature (list errors || None, int
                     num_results, int total_num_results, int page_number,
                     list hits, dict response)
    :return: None
    """
    options = options or ReviewableOptions()
    _list_hits(requester, GET_REVIEWABLE_HITS, options.to_params(), callback)


def get_assignments(requester, hit_id, options=None, callback=None):
    """
    Gets a page of the assignments for a HIT.

    NOTE:
        The pagination values come in a different order than for search.

    :param requester: The Requester to call MTurk with.
    :param hit_id: The ID of the HIT.
    :param options: An AssignmentOptions. Optional.
    :param callback: function with signature (list errors || None, int
                     num_results, int page_number, int total_num_results,
                     list assignments, dict response)
    :return: None
    """
    options = options or AssignmentOptions()
    params = options.to_params()
    params['HITId'] = hit_id

    def on_response(err, response):
        if err:
            callback([err], None, None, None, None, response)
            return
        result = response['Result']
        values, error = _read_pagination(
            GET_ASSIGNMENTS_FOR_HIT, result,
            [NUM_RESULTS, PAGE_NUMBER, TOTAL_NUM_RESULTS])
        if error is not None:
            _log.warning(str(error))
            callback([error], None, None, None, None, response)
            return
        num_results, page_number, total_num_results = values
        assignments = []
        for result_assignment in as_list(result.get('Assignment')):
            assignment = Assignment(requester=requester)
            assignment.populate_from_response(result_assignment)
            assignments.append(assignment)
        callback(None, num_results, page_number, total_num_results,
                 assignments, response)

    requester.call(SERVICE_NAME, GET_ASSIGNMENTS_FOR_HIT, 'GET', params,
                   callback=on_response)
