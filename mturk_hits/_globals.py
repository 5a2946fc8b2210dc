"""
This file contains globals that are not meant to be readily edited. Anything
that depends on the environment (hosts, credentials, timeouts) belongs in
conf.py instead.
"""

"""
MTURK SERVICE
"""
# the service every HIT / assignment operation is addressed to
SERVICE_NAME = 'AWSMechanicalTurkRequester'
# the (legacy) REST API version the XML response shapes correspond to
API_VERSION = '2014-08-15'
# the host for the mturk sandbox
MTURK_SANDBOX_HOST = 'mechanicalturk.sandbox.amazonaws.com'
# the host for the vanilla, paid-for marketplace
MTURK_REGULAR_HOST = 'mechanicalturk.amazonaws.com'
# format of the Timestamp parameter that is signed along with every request
TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'

"""
OPERATIONS
"""
CREATE_HIT = 'CreateHIT'
FORCE_EXPIRE_HIT = 'ForceExpireHIT'
DISPOSE_HIT = 'DisposeHIT'
DISABLE_HIT = 'DisableHIT'
EXTEND_HIT = 'ExtendHIT'
GET_HIT = 'GetHIT'
SEARCH_HITS = 'SearchHITs'
GET_REVIEWABLE_HITS = 'GetReviewableHITs'
GET_ASSIGNMENTS_FOR_HIT = 'GetAssignmentsForHIT'
APPROVE_ASSIGNMENT = 'ApproveAssignment'
REJECT_ASSIGNMENT = 'RejectAssignment'

"""
HIT CONSTRAINTS
"""
MIN_LIFETIME_IN_SECONDS = 30
MAX_LIFETIME_IN_SECONDS = 31536000  # one year
MAX_REQUESTER_ANNOTATION_LENGTH = 255
MAX_REQUESTER_FEEDBACK_LENGTH = 1024

"""
SORTING
"""
# local sort property names and the field names MTurk expects for them. Both
# the python and the camelCase spellings are accepted.
SORT_PROPERTIES = {
    'title': 'Title',
    'reward': 'Reward',
    'expiration': 'Expiration',
    'creation_time': 'CreationTime',
    'creationTime': 'CreationTime',
    'enumeration': 'Enumeration',
    'accept_time': 'AcceptTime',
    'acceptTime': 'AcceptTime',
    'submit_time': 'SubmitTime',
    'submitTime': 'SubmitTime',
    'assignment_status': 'AssignmentStatus',
    'assignmentStatus': 'AssignmentStatus',
}

"""
PAGINATION
"""
# the nodes every paginated result carries
NUM_RESULTS = 'NumResults'
TOTAL_NUM_RESULTS = 'TotalNumResults'
PAGE_NUMBER = 'PageNumber'

"""
QUESTIONS
"""
EXTERNAL_QUESTION_SCHEMA = \
    'http://mechanicalturk.amazonaws.com/AWSMechanicalTurkDataSchemas/' \
    '2006-07-14/ExternalQuestion.xsd'
HTML_QUESTION_SCHEMA = \
    'http://mechanicalturk.amazonaws.com/AWSMechanicalTurkDataSchemas/' \
    '2011-11-11/HTMLQuestion.xsd'
DEFAULT_FRAME_HEIGHT = 700
