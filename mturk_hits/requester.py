"""
Exports Requester, the gateway every HIT / assignment operation goes through.
It signs a call to the MTurk REST API, sends it with botocore's HTTP session
and turns the XML that comes back into a tree of dicts:

    <SearchHITsResponse>                    {'SearchHITsResult': {
      <SearchHITsResult>                        'NumResults': '2',
        <NumResults>2</NumResults>              'HIT': [{'HITId': 'A'},
        <HIT><HITId>A</HITId></HIT>     -->             {'HITId': 'B'}]},
        <HIT><HITId>B</HITId></HIT>          'Result': <same as above>}
      </SearchHITsResult>
    </SearchHITsResponse>

Repeated nodes become lists, a single node stays a dict (see base.as_list),
and leaves are strings. The operation's payload is always found under
tree['Result'].

NOTES:
    Anything that can stand in for Requester only needs a call() method with
    the same signature; the tests use a fake that replays canned trees.

    Nothing here is retried. A call is made once and its outcome reported
    once, through the callback.
"""

import base64
import datetime
import hashlib
import hmac
from urllib.parse import urlencode
from xml.etree import ElementTree

import botocore.session
from botocore.awsrequest import AWSRequest
from botocore.exceptions import BotoCoreError
from botocore.httpsession import URLLib3Session

from mturk_hits.conf import *
from mturk_hits.base import as_list
from mturk_hits.errors import RequestError
from mturk_hits import logger

_log = logger.setup_logger(__name__)


def sign(secret_key, service, operation, timestamp):
    """
    Computes the request signature MTurk expects: the base64 encoded
    HMAC-SHA1 of Service + Operation + Timestamp.

    :param secret_key: The AWS secret key.
    :param service: The service name.
    :param operation: The operation name.
    :param timestamp: The Timestamp parameter of the request.
    :return: The signature, as a string.
    """
    digest = hmac.new(secret_key.encode('utf-8'),
                      (service + operation + timestamp).encode('utf-8'),
                      hashlib.sha1).digest()
    return base64.b64encode(digest).decode('ascii')


def _local_name(tag):
    # strips the {namespace} ElementTree prefixes tags with
    return tag.rsplit('}', 1)[-1]


def xml_to_tree(element):
    """
    Converts an ElementTree element into nested dicts.

    :param element: An ElementTree element.
    :return: A dict if the element has children, else its (stripped) text.
    """
    children = list(element)
    if not children:
        return (element.text or '').strip()
    tree = dict()
    for child in children:
        tag = _local_name(child.tag)
        value = xml_to_tree(child)
        if tag not in tree:
            tree[tag] = value
        elif isinstance(tree[tag], list):
            tree[tag].append(value)
        else:
            tree[tag] = [tree[tag], value]
    return tree


def _first_error(node):
    """
    :param node: Any subtree that may hold an <Errors> node.
    :return: (code, message) of the first error in it, or None.
    """
    if not isinstance(node, dict) or not isinstance(node.get('Errors'), dict):
        return None
    errors = as_list(node['Errors'].get('Error'))
    if not errors:
        return None
    error = errors[0]
    if not isinstance(error, dict):
        return None, str(error)
    return error.get('Code'), error.get('Message', '')


def parse_response(body, operation, root_key=None):
    """
    Parses an MTurk response body and checks it for errors.

    :param body: The response body, as bytes or a string.
    :param operation: The operation the body responds to.
    :param root_key: The node holding the payload. Defaults to
                     '<operation>Result'.
    :return: The response tree, with the payload under 'Result'. Raises
             RequestError if MTurk reported an error.
    """
    try:
        root = ElementTree.fromstring(body)
    except ElementTree.ParseError as e:
        raise RequestError('Could not parse the %s response: %s' %
                           (operation, e))
    tree = xml_to_tree(root)
    if not isinstance(tree, dict):
        raise RequestError('Empty %s response' % operation)
    result = tree.get(root_key or operation + 'Result')
    for node in (tree, tree.get('OperationRequest')):
        error = _first_error(node)
        if error is not None:
            raise RequestError(error[1], code=error[0])
    for entry in as_list(result):
        request = entry.get('Request') if isinstance(entry, dict) else None
        if not isinstance(request, dict):
            continue
        error = _first_error(request)
        if error is not None:
            raise RequestError(error[1], code=error[0])
        if request.get('IsValid', 'True') != 'True':
            raise RequestError('MTurk marked the %s request as invalid' %
                               operation)
    tree['Result'] = result
    return tree


class Requester(object):
    """
    Makes signed calls to the MTurk requester API.
    """
    def __init__(self, access_id=None, secret_key=None, host=None,
                 timeout=None, http_session=None):
        """
        :param access_id: The AWS access key id. Defaults to MTURK_ACCESS_ID
                          (see conf.py), and then to whatever botocore
                          resolves.
        :param secret_key: The AWS secret key, resolved the same way.
        :param host: The MTurk host. Defaults to MTURK_HOST, which is the
                     sandbox unless MTURK_SANDBOX is turned off.
        :param timeout: The HTTP timeout, in seconds.
        :param http_session: Something with botocore's URLLib3Session send()
                             interface.
        :return: A Requester instance.
        """
        self.host = host or MTURK_HOST
        self.access_id = access_id or MTURK_ACCESS_ID
        self.secret_key = secret_key or MTURK_SECRET_KEY
        if self.access_id is None or self.secret_key is None:
            self._resolve_credentials()
        self.http = http_session or URLLib3Session(
            timeout=timeout or MTURK_TIMEOUT)

    def _resolve_credentials(self):
        credentials = botocore.session.get_session().get_credentials()
        if credentials is None:
            _log.warning('No MTurk credentials found; every call will fail')
            return
        frozen = credentials.get_frozen_credentials()
        self.access_id = self.access_id or frozen.access_key
        self.secret_key = self.secret_key or frozen.secret_key

    @property
    def endpoint(self):
        return 'https://%s/' % self.host

    def build_params(self, service, operation, params, timestamp=None):
        """
        Adds the common (and signed) parameters to a parameter bag.

        :param service: The service name.
        :param operation: The operation name.
        :param params: Remote field name -> value. None values are dropped.
        :param timestamp: A datetime, defaults to now (UTC).
        :return: A new dict of request parameters.
        """
        if timestamp is None:
            timestamp = datetime.datetime.now(datetime.timezone.utc)
        stamp = timestamp.strftime(TIMESTAMP_FORMAT)
        request_params = dict()
        for key, value in (params or {}).items():
            if value is None:
                continue
            if isinstance(value, bool):
                value = 'true' if value else 'false'
            request_params[key] = value
        request_params['Service'] = service
        request_params['Operation'] = operation
        request_params['Version'] = API_VERSION
        request_params['AWSAccessKeyId'] = self.access_id
        request_params['Timestamp'] = stamp
        request_params['Signature'] = sign(self.secret_key, service,
                                           operation, stamp)
        return request_params

    def _request(self, service, operation, verb, params, root_key):
        if self.access_id is None or self.secret_key is None:
            raise RequestError('No MTurk credentials configured')
        request_params = self.build_params(service, operation, params)
        if verb == 'GET':
            request = AWSRequest(method='GET', url=self.endpoint,
                                 params=request_params)
        else:
            request = AWSRequest(
                method=verb, url=self.endpoint,
                data=urlencode(request_params),
                headers={'Content-Type': 'application/x-www-form-urlencoded; '
                                         'charset=utf-8'})
        _log.debug('%s %s on %s' % (verb, operation, self.host))
        try:
            response = self.http.send(request.prepare())
        except BotoCoreError as e:
            raise RequestError('%s failed: %s' % (operation, e))
        try:
            tree = parse_response(response.content, operation, root_key)
        except RequestError as e:
            e.status = response.status_code
            raise
        if not 200 <= response.status_code < 300:
            raise RequestError('%s returned HTTP %i' %
                               (operation, response.status_code),
                               status=response.status_code)
        return tree

    def call(self, service, operation, verb, params, root_key=None,
             callback=None):
        """
        Calls MTurk, then the callback.

        :param service: The service name, e.g. SERVICE_NAME.
        :param operation: The operation name, e.g. 'GetHIT'.
        :param verb: 'GET' or 'POST'.
        :param params: Remote field name -> scalar value. None values are
                       omitted.
        :param root_key: The node holding the payload, if it is not
                         '<operation>Result' (e.g. 'HIT' for GetHIT).
        :param callback: Function with signature (RequestError error || None,
                         dict tree || None). Called exactly once.
        :return: None
        """
        error = None
        tree = None
        try:
            tree = self._request(service, operation, verb, params, root_key)
        except RequestError as e:
            _log.warning('%s failed: %s' % (operation, e))
            error = e
        callback(error, tree)
