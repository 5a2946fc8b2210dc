import datetime
import unittest
from unittest import mock
from urllib.parse import parse_qs, urlparse

from botocore.exceptions import EndpointConnectionError

from fakes import Recorder
from mturk_hits.errors import RequestError
from mturk_hits.requester import Requester, parse_response, sign

SEARCH_RESPONSE = b"""<?xml version="1.0"?>
<SearchHITsResponse>
  <OperationRequest><RequestId>r-1</RequestId></OperationRequest>
  <SearchHITsResult>
    <Request><IsValid>True</IsValid></Request>
    <NumResults>2</NumResults>
    <TotalNumResults>2</TotalNumResults>
    <PageNumber>1</PageNumber>
    <HIT><HITId>A</HITId><Reward><Amount>0.10</Amount></Reward></HIT>
    <HIT><HITId>B</HITId></HIT>
  </SearchHITsResult>
</SearchHITsResponse>"""

GET_HIT_RESPONSE = b"""<GetHITResponse>
  <OperationRequest><RequestId>r-2</RequestId></OperationRequest>
  <HIT>
    <Request><IsValid>True</IsValid></Request>
    <HITId>H1</HITId>
    <HITStatus>Assignable</HITStatus>
  </HIT>
</GetHITResponse>"""

INVALID_RESPONSE = b"""<DisposeHITResponse>
  <OperationRequest><RequestId>r-3</RequestId></OperationRequest>
  <DisposeHITResult>
    <Request>
      <IsValid>False</IsValid>
      <Errors><Error>
        <Code>AWS.MechanicalTurk.InvalidHITState</Code>
        <Message>This operation can be called with a status of: Reviewable</Message>
      </Error></Errors>
    </Request>
  </DisposeHITResult>
</DisposeHITResponse>"""

UNAUTHORIZED_RESPONSE = b"""<GetHITResponse>
  <OperationRequest>
    <RequestId>r-4</RequestId>
    <Errors><Error>
      <Code>AWS.NotAuthorized</Code>
      <Message>The identity contained in the request is not authorized.</Message>
    </Error></Errors>
  </OperationRequest>
</GetHITResponse>"""


class TestParseResponse(unittest.TestCase):

    def test_search(self):
        tree = parse_response(SEARCH_RESPONSE, 'SearchHITs')
        result = tree['Result']
        self.assertIs(result, tree['SearchHITsResult'])
        self.assertEqual(result['NumResults'], '2')
        self.assertEqual(len(result['HIT']), 2)
        self.assertEqual(result['HIT'][0]['Reward'], {'Amount': '0.10'})

    def test_root_key(self):
        tree = parse_response(GET_HIT_RESPONSE, 'GetHIT', 'HIT')
        self.assertEqual(tree['Result']['HITId'], 'H1')
        self.assertEqual(tree['Result']['HITStatus'], 'Assignable')

    def test_result_errors(self):
        with self.assertRaises(RequestError) as cm:
            parse_response(INVALID_RESPONSE, 'DisposeHIT')
        self.assertEqual(cm.exception.code,
                         'AWS.MechanicalTurk.InvalidHITState')
        self.assertIn('Reviewable', cm.exception.message)

    def test_operation_errors(self):
        with self.assertRaises(RequestError) as cm:
            parse_response(UNAUTHORIZED_RESPONSE, 'GetHIT', 'HIT')
        self.assertEqual(cm.exception.code, 'AWS.NotAuthorized')

    def test_invalid_without_errors(self):
        body = (b'<GetHITResponse><HIT><Request><IsValid>False</IsValid>'
                b'</Request></HIT></GetHITResponse>')
        self.assertRaises(RequestError, parse_response, body, 'GetHIT', 'HIT')

    def test_not_xml(self):
        self.assertRaises(RequestError, parse_response,
                          b'<html>Service Unavailable', 'GetHIT')

    def test_missing_result(self):
        tree = parse_response(b'<GetHITResponse><OperationRequest>'
                              b'<RequestId>r</RequestId></OperationRequest>'
                              b'</GetHITResponse>', 'GetHIT', 'HIT')
        self.assertIsNone(tree['Result'])


class TestSigning(unittest.TestCase):

    def setUp(self):
        self.requester = Requester(access_id='AKID', secret_key='SECRET',
                                   host='mturk.example.com',
                                   http_session=mock.Mock())

    def test_build_params(self):
        stamp = datetime.datetime(2015, 6, 1, 12, 0, 0)
        params = self.requester.build_params(
            'AWSMechanicalTurkRequester', 'GetHIT',
            {'HITId': 'H1', 'PageSize': None, 'Flag': True}, stamp)
        self.assertEqual(params['HITId'], 'H1')
        self.assertNotIn('PageSize', params)
        self.assertEqual(params['Flag'], 'true')
        self.assertEqual(params['Service'], 'AWSMechanicalTurkRequester')
        self.assertEqual(params['Operation'], 'GetHIT')
        self.assertEqual(params['Version'], '2014-08-15')
        self.assertEqual(params['AWSAccessKeyId'], 'AKID')
        self.assertEqual(params['Timestamp'], '2015-06-01T12:00:00Z')
        self.assertEqual(params['Signature'],
                         sign('SECRET', 'AWSMechanicalTurkRequester',
                              'GetHIT', '2015-06-01T12:00:00Z'))

    def test_signature_covers_operation(self):
        stamp = '2015-06-01T12:00:00Z'
        self.assertNotEqual(sign('SECRET', 'S', 'GetHIT', stamp),
                            sign('SECRET', 'S', 'DisposeHIT', stamp))
        self.assertNotEqual(sign('SECRET', 'S', 'GetHIT', stamp),
                            sign('OTHER', 'S', 'GetHIT', stamp))


class TestCall(unittest.TestCase):

    def setUp(self):
        self.http = mock.Mock()
        self.requester = Requester(access_id='AKID', secret_key='SECRET',
                                   host='mturk.example.com',
                                   http_session=self.http)
        self.callback = Recorder()

    def _respond(self, body, status=200):
        self.http.send.return_value = mock.Mock(status_code=status,
                                                content=body)

    def _sent(self):
        return self.http.send.call_args[0][0]

    def test_get(self):
        self._respond(GET_HIT_RESPONSE)
        self.requester.call('AWSMechanicalTurkRequester', 'GetHIT', 'GET',
                            {'HITId': 'H1'}, root_key='HIT',
                            callback=self.callback)
        error, tree = self.callback.args
        self.assertIsNone(error)
        self.assertEqual(tree['Result']['HITId'], 'H1')
        sent = self._sent()
        self.assertEqual(sent.method, 'GET')
        url = urlparse(sent.url)
        self.assertEqual(url.netloc, 'mturk.example.com')
        query = parse_qs(url.query)
        self.assertEqual(query['Operation'], ['GetHIT'])
        self.assertEqual(query['HITId'], ['H1'])
        self.assertIn('Signature', query)

    def test_post(self):
        self._respond(GET_HIT_RESPONSE.replace(b'GetHITResponse',
                                               b'CreateHITResponse'))
        self.requester.call('AWSMechanicalTurkRequester', 'CreateHIT',
                            'POST', {'HITTypeId': 'HT1',
                                     'Question': '<q>&</q>'},
                            root_key='HIT', callback=self.callback)
        self.assertIsNone(self.callback.args[0])
        sent = self._sent()
        self.assertEqual(sent.method, 'POST')
        body = sent.body
        if isinstance(body, bytes):
            body = body.decode('utf-8')
        form = parse_qs(body)
        self.assertEqual(form['Operation'], ['CreateHIT'])
        self.assertEqual(form['Question'], ['<q>&</q>'])

    def test_service_error(self):
        self._respond(INVALID_RESPONSE)
        self.requester.call('AWSMechanicalTurkRequester', 'DisposeHIT',
                            'GET', {'HITId': 'H1'}, callback=self.callback)
        error, tree = self.callback.args
        self.assertIsInstance(error, RequestError)
        self.assertEqual(error.status, 200)
        self.assertIsNone(tree)

    def test_http_error(self):
        self._respond(b'<html>Service Unavailable</html>', status=503)
        self.requester.call('AWSMechanicalTurkRequester', 'GetHIT', 'GET',
                            {'HITId': 'H1'}, root_key='HIT',
                            callback=self.callback)
        error, tree = self.callback.args
        self.assertIsInstance(error, RequestError)
        self.assertEqual(error.status, 503)

    def test_transport_error(self):
        self.http.send.side_effect = EndpointConnectionError(
            endpoint_url='https://mturk.example.com/')
        self.requester.call('AWSMechanicalTurkRequester', 'GetHIT', 'GET',
                            {'HITId': 'H1'}, root_key='HIT',
                            callback=self.callback)
        error, tree = self.callback.args
        self.assertIsInstance(error, RequestError)
        self.assertIsNone(error.status)

    @mock.patch('mturk_hits.requester.MTURK_SECRET_KEY', None)
    @mock.patch('mturk_hits.requester.MTURK_ACCESS_ID', None)
    @mock.patch('botocore.session.get_session')
    def test_no_credentials(self, get_session):
        get_session.return_value.get_credentials.return_value = None
        requester = Requester(http_session=self.http)
        requester.call('AWSMechanicalTurkRequester', 'GetHIT', 'GET',
                       {'HITId': 'H1'}, root_key='HIT',
                       callback=self.callback)
        self.assertIsInstance(self.callback.args[0], RequestError)
        self.assertFalse(self.http.send.called)

    @mock.patch('mturk_hits.requester.MTURK_SECRET_KEY', None)
    @mock.patch('mturk_hits.requester.MTURK_ACCESS_ID', None)
    @mock.patch('botocore.session.get_session')
    def test_botocore_credentials(self, get_session):
        frozen = get_session.return_value.get_credentials.return_value \
            .get_frozen_credentials.return_value
        frozen.access_key = 'FROM_CHAIN'
        frozen.secret_key = 'CHAIN_SECRET'
        requester = Requester(http_session=self.http)
        self.assertEqual(requester.access_id, 'FROM_CHAIN')
        self.assertEqual(requester.secret_key, 'CHAIN_SECRET')


if __name__ == '__main__':
    unittest.main()
