import pytest

from oxyscraper import (
    ApiHttpClientError, ApiHttpServerError, BadCredentialsError, DeadlineExceeded, ErrorFactory, HttpError,
    JobTimeoutError, ResponseParseError, ScraperError, TooManyRequest, ValidationError
)
from oxyscraper.errors import InvalidParameterError
from conftest import make_response


@pytest.mark.parametrize('status, error_class', [
    (400, ApiHttpClientError),
    (401, BadCredentialsError),
    (403, ApiHttpClientError),
    (429, TooManyRequest),
    (500, ApiHttpServerError),
    (524, ApiHttpServerError),
])
def test_factory_maps_status_codes(status, error_class):
    error = ErrorFactory.create(make_response(status, body={'message': 'nope'}))

    assert type(error) is error_class
    assert isinstance(error, HttpError)
    assert error.kind == ScraperError.KIND_HTTP_BAD_RESPONSE
    assert error.code == 'ERR::API::HTTP_%d' % status
    assert error.message == '%d nope' % status


def test_factory_message_without_json_body():
    error = ErrorFactory.create(make_response(404, body='<h1>gone</h1>', reason='Not Found', content_type='text/html'))

    assert error.message == '404 Not Found'
    assert str(error) == '404 -- Not Found <h1>gone</h1>'
    assert error.request.method == 'POST'


def test_error_kinds():
    assert InvalidParameterError('pages', 0).kind == ScraperError.KIND_VALIDATION
    assert DeadlineExceeded().kind == ScraperError.KIND_DEADLINE
    assert JobTimeoutError('1', 'pending').kind == ScraperError.KIND_DEADLINE
    assert ResponseParseError('broken').kind == ScraperError.KIND_PARSE
    assert issubclass(InvalidParameterError, ValidationError)


def test_invalid_parameter_message():
    error = InvalidParameterError('limit', 50, 'expected one of 24, 48, 96')

    assert error.name == 'limit'
    assert error.value == 50
    assert str(error) == 'invalid limit parameter: 50 (expected one of 24, 48, 96)'


def test_parse_error_offset_counts_bytes():
    document = '{"name": "Zoë",, }'
    position = document.index(',,') + 1

    error = ResponseParseError.from_decode_error('bad json', document, position)

    assert error.offset == position + 1
    assert error.snippet == document
    assert 'at byte %d' % (position + 1) in str(error)
