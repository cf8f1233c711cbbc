"""Tests for parsing and dumping OpenAPI documents."""
import unittest

from oasforge.openapi import OpenApi, Operation, Parameter, PathItem, Reference, Response, Responses, StatusCode

DOCUMENT = {
    'openapi': '3.1.0',
    'info': {'title': 'Items', 'version': '1.0.0', 'x-logo': {'url': 'https://example.com/logo.png'}},
    'paths': {
        '/items/{item_id}': {
            'get': {
                'operationId': 'get_item',
                'parameters': [
                    {'$ref': '#/components/parameters/Verbose'},
                    {'name': 'item_id', 'in': 'path', 'required': True, 'schema': {'type': 'integer'}},
                ],
                'responses': {
                    '200': {
                        'description': 'The item',
                        'content': {'application/json': {'schema': {'$ref': '#/components/schemas/Item'}}},
                    },
                    '4XX': {'$ref': '#/components/responses/ClientError'},
                    'default': {'description': 'Unexpected error'},
                    'x-internal': True,
                },
            },
        },
        '/legacy': {'$ref': '#/components/pathItems/Legacy'},
    },
}


class TestOpenApiModels(unittest.TestCase):
    def test_parse_document(self) -> None:
        api = OpenApi.from_dict(DOCUMENT)

        self.assertEqual(api.info.title, 'Items')
        item = api.paths['/items/{item_id}']
        self.assertIsInstance(item, PathItem)
        self.assertIsInstance(api.paths['/legacy'], Reference)
        self.assertEqual(api.paths['/legacy'].ref, '#/components/pathItems/Legacy')

        operation = item.get
        self.assertIsInstance(operation, Operation)
        self.assertEqual(operation.operation_id, 'get_item')
        self.assertIsInstance(operation.parameters[0], Reference)
        self.assertIsInstance(operation.parameters[1], Parameter)
        self.assertEqual(operation.parameters[1].in_, 'path')
        self.assertEqual(operation.parameters[1].schema_, {'type': 'integer'})

    def test_parse_flat_responses(self) -> None:
        api = OpenApi.from_dict(DOCUMENT)
        responses = api.paths['/items/{item_id}'].get.responses

        self.assertIsInstance(responses, Responses)
        self.assertEqual(set(responses.responses), {'200', '4XX'})
        self.assertIsInstance(responses.responses['200'], Response)
        self.assertIsInstance(responses.responses['4XX'], Reference)
        self.assertEqual(responses.default.description, 'Unexpected error')
        self.assertIn(StatusCode.code(200), responses)

    def test_dump_keeps_document_shape(self) -> None:
        dumped = OpenApi.from_dict(DOCUMENT).to_dict()

        self.assertEqual(dumped['info']['x-logo'], {'url': 'https://example.com/logo.png'})
        get = dumped['paths']['/items/{item_id}']['get']
        self.assertEqual(get['operationId'], 'get_item')
        self.assertEqual(get['parameters'][0], {'$ref': '#/components/parameters/Verbose'})
        self.assertEqual(get['parameters'][1]['in'], 'path')
        self.assertEqual(
            get['responses'],
            DOCUMENT['paths']['/items/{item_id}']['get']['responses'],
        )
        self.assertEqual(dumped['paths']['/legacy'], {'$ref': '#/components/pathItems/Legacy'})

    def test_dump_leaves_out_unset_fields(self) -> None:
        api = OpenApi.from_dict({'info': {'title': 'Empty', 'version': '0'}})
        self.assertEqual(api.to_dict(), {'openapi': '3.1.0', 'info': {'title': 'Empty', 'version': '0'}})

    def test_responses_built_in_code(self) -> None:
        responses = Responses()
        responses.responses[StatusCode.range(2)] = Response(description='ok')
        responses.default = Reference.component('responses', 'Error')

        self.assertEqual(
            responses.model_dump(mode='json', by_alias=True, exclude_none=True),
            {'2XX': {'description': 'ok'}, 'default': {'$ref': '#/components/responses/Error'}},
        )

    def test_responses_invalid_status(self) -> None:
        with self.assertRaises(ValueError):
            Responses.model_validate({'700': {'description': 'nope'}})

    def test_path_item_operations_in_document_order(self) -> None:
        item = PathItem(post=Operation(operation_id='create'), get=Operation(operation_id='read'))
        self.assertEqual([method for method, _ in item.operations()], ['get', 'post'])
