"""Tests for request validation and response serialization done by @api_endpoint."""
import json
import unittest
from io import BytesIO
from typing import ClassVar, Optional, Union

from pydantic import Field
from twisted.internet.defer import fail, succeed
from twisted.web.resource import Resource
from twisted.web.server import NOT_DONE_YET

from oasforge.api import api_endpoint, get_endpoint_registry
from oasforge.api.schemas import ErrorResponse, RequestModel, ResponseModel
from oasforge.utils.pydantic import BaseModel


class _Request:
    """Just enough of a Twisted request for the decorator."""

    def __init__(self, args: Optional[dict] = None, content: Optional[bytes] = None) -> None:
        self.args = args or {}
        self.content = BytesIO(content or b'')
        self.code = 200
        self.headers: dict[bytes, bytes] = {}
        self.written: list[bytes] = []
        self.finished = False

    def setResponseCode(self, code: int) -> None:
        self.code = code

    def setHeader(self, name: bytes, value: bytes) -> None:
        self.headers[name] = value

    def write(self, data: bytes) -> None:
        self.written.append(data)

    def finish(self) -> None:
        self.finished = True

    def json_value(self) -> dict:
        return json.loads(b''.join(self.written))


class PageParams(BaseModel):
    page: int = Field(description='Page number')
    tag: Optional[str] = None


class NewItem(RequestModel):
    name: str


class ItemResponse(ResponseModel):
    id: int
    name: str


class CreatedResponse(ResponseModel):
    http_status_code: ClassVar[int] = 201
    id: int


class ItemResource(Resource):
    def __init__(self) -> None:
        super().__init__()
        self.received: list = []

    @api_endpoint(
        path='/items',
        method='GET',
        operation_id='list_items',
        summary='List items',
        tags=['items'],
        query_params_model=PageParams,
        response_model=ItemResponse,
    )
    def render_GET(self, request, *, params):
        self.received.append(params)
        return ItemResponse(id=params.page, name=params.tag or 'any')

    @api_endpoint(
        path='/items',
        method='POST',
        operation_id='create_item',
        summary='Create an item',
        request_model=NewItem,
        response_model=Union[CreatedResponse, ErrorResponse],
    )
    def render_POST(self, request, *, body):
        self.received.append(body)
        return CreatedResponse(id=1)


class TestRegistration(unittest.TestCase):
    def test_metadata_registered(self) -> None:
        @api_endpoint(path='/ping', method='GET', operation_id='ping', summary='Ping')
        def render_GET(self, request):
            return b'pong'

        metadata = render_GET._openapi_metadata
        self.assertIn(metadata, get_endpoint_registry())
        self.assertEqual(metadata.path, '/ping')
        self.assertEqual(metadata.tags, [])
        self.assertEqual(metadata.path_params_descriptions, {})
        self.assertIsNone(metadata.docs)
        self.assertEqual(render_GET.__name__, 'render_GET')


class TestValidation(unittest.TestCase):
    def setUp(self) -> None:
        self.resource = ItemResource()

    def test_query_params(self) -> None:
        request = _Request(args={b'page': [b'3'], b'tag': [b'fruit']})
        result = self.resource.render_GET(request)

        self.assertEqual(self.resource.received, [PageParams(page=3, tag='fruit')])
        self.assertEqual(json.loads(result), {'id': 3, 'name': 'fruit'})
        self.assertEqual(request.code, 200)
        self.assertEqual(request.headers[b'content-type'], b'application/json; charset=utf-8')

    def test_invalid_query_params(self) -> None:
        request = _Request(args={b'page': [b'third']})
        result = self.resource.render_GET(request)

        self.assertEqual(self.resource.received, [])
        self.assertEqual(request.code, 400)
        data = json.loads(result)
        self.assertFalse(data['success'])
        self.assertIn('page', data['error'])

    def test_missing_query_params(self) -> None:
        request = _Request()
        self.resource.render_GET(request)
        self.assertEqual(request.code, 400)

    def test_body(self) -> None:
        request = _Request(content=json.dumps({'name': 'apple'}).encode())
        result = self.resource.render_POST(request)

        self.assertEqual(self.resource.received, [NewItem(name='apple')])
        self.assertEqual(request.code, 201)
        self.assertEqual(json.loads(result), {'id': 1})

    def test_invalid_body(self) -> None:
        for content in (b'{"name": 1}', b'{"name": "apple", "extra": true}', b'not json', b'\xff'):
            request = _Request(content=content)
            result = self.resource.render_POST(request)
            self.assertEqual(request.code, 400, content)
            self.assertFalse(json.loads(result)['success'])
        self.assertEqual(self.resource.received, [])


class TestSerialization(unittest.TestCase):
    def test_other_results_pass_through(self) -> None:
        class Raw(Resource):
            @api_endpoint(path='/raw', method='GET', operation_id='raw', summary='Raw')
            def render_GET(self, request):
                return b'{"raw": true}'

        request = _Request()
        self.assertEqual(Raw().render_GET(request), b'{"raw": true}')
        self.assertEqual(request.code, 200)

    def test_deferred_result(self) -> None:
        class Later(Resource):
            @api_endpoint(path='/later', method='GET', operation_id='later', summary='Later')
            def render_GET(self, request):
                return succeed(CreatedResponse(id=7))

        request = _Request()
        self.assertIs(Later().render_GET(request), NOT_DONE_YET)
        self.assertTrue(request.finished)
        self.assertEqual(request.code, 201)
        self.assertEqual(request.json_value(), {'id': 7})

    def test_deferred_failure(self) -> None:
        class Broken(Resource):
            @api_endpoint(path='/broken', method='GET', operation_id='broken', summary='Broken')
            def render_GET(self, request):
                return fail(RuntimeError('database is gone'))

        request = _Request()
        self.assertIs(Broken().render_GET(request), NOT_DONE_YET)
        self.assertTrue(request.finished)
        self.assertEqual(request.code, 500)
        data = request.json_value()
        self.assertFalse(data['success'])
        self.assertIn('database is gone', data['error'])
