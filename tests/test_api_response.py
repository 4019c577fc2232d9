import base64
from datetime import datetime

import pytest

from oxyscraper import ResponseNormalizer, ResponseParseError
from conftest import make_response, results_envelope

HTML = '<html><body><h1>Adidas</h1></body></html>'


def test_envelope_without_parsing():
    response = make_response(body=results_envelope(HTML))

    api_response = ResponseNormalizer(parse_requested=False).normalize(response)

    assert api_response.status_code == 200
    assert api_response.raw_body == HTML.encode('utf-8')
    assert api_response.parsed_content is None
    assert api_response.content == HTML
    assert api_response.upstream_status_code == 200
    assert api_response.job_id == '7165482019873'

    result = api_response.results[0]
    assert result.page == 1
    assert result.created_at == datetime(2024, 2, 12, 10, 0, 0)


def test_bare_result_and_envelope_share_the_shape():
    item = results_envelope(HTML)['results'][0]

    bare = ResponseNormalizer(parse_requested=False).normalize(make_response(body=item))
    wrapped = ResponseNormalizer(parse_requested=False).normalize(make_response(body={'results': [item]}))

    assert bare.results == wrapped.results


def test_multiple_pages():
    response = make_response(body=results_envelope('<p>1</p>', '<p>2</p>'))

    api_response = ResponseNormalizer(parse_requested=False).normalize(response)

    assert [result.page for result in api_response.results] == [1, 2]
    assert api_response.results[1].text == '<p>2</p>'


def test_base64_content_is_decoded():
    png = b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR'
    encoded = base64.b64encode(png).decode('ascii')

    response = make_response(body=results_envelope(encoded, content_encoding='base64'))
    api_response = ResponseNormalizer(parse_requested=False).normalize(response)

    assert api_response.raw_body == png


def test_base64_flag_on_the_job():
    body = results_envelope(base64.b64encode(b'hello').decode('ascii'))
    body['job'] = {'id': '1', 'content_encoding': 'base64'}

    api_response = ResponseNormalizer(parse_requested=False).normalize(make_response(body=body))

    assert api_response.raw_body == b'hello'


def test_content_is_kept_verbatim_without_base64_flag():
    encoded = base64.b64encode(b'hello').decode('ascii')
    api_response = ResponseNormalizer(parse_requested=False).normalize(make_response(body=results_envelope(encoded)))

    assert api_response.raw_body == encoded.encode('ascii')


def test_invalid_base64_content():
    response = make_response(body=results_envelope('not base64 !!', content_encoding='base64'))

    with pytest.raises(ResponseParseError):
        ResponseNormalizer(parse_requested=False).normalize(response)


def test_plain_text_body_without_parsing():
    response = make_response(body='plain text answer', content_type='text/plain')

    api_response = ResponseNormalizer(parse_requested=False).normalize(response)

    assert api_response.raw_body == b'plain text answer'
    assert api_response.parsed_content is None


def test_plain_text_body_with_parsing():
    response = make_response(body='plain text answer', content_type='text/plain')

    with pytest.raises(ResponseParseError) as e:
        ResponseNormalizer(parse_requested=True).normalize(response)

    assert e.value.offset == 0
    assert e.value.snippet.startswith('plain')


def test_service_parsed_content():
    parsed = {'results': {'organic': [{'title': 'Adidas', 'price': 100}]}, 'parse_status_code': 12000}
    response = make_response(body=results_envelope(parsed, parse_status_code=12000))

    api_response = ResponseNormalizer(parse_requested=True).normalize(response)

    assert api_response.parsed_content == parsed
    assert api_response.content == parsed
    assert b'"Adidas"' in api_response.raw_body
    assert api_response.results[0].parse_status_code == 12000


def test_json_string_content_is_decoded():
    response = make_response(body=results_envelope('{"title": "Adidas"}'))

    api_response = ResponseNormalizer(parse_requested=True).normalize(response)

    assert api_response.parsed_content == {'title': 'Adidas'}
    assert api_response.raw_body == b'{"title": "Adidas"}'


def test_invalid_structured_content_is_an_error():
    response = make_response(body=results_envelope('{"title": "Adidas",, }'))

    with pytest.raises(ResponseParseError) as e:
        ResponseNormalizer(parse_requested=True).normalize(response)

    assert e.value.offset == 19
    assert '"Adidas",,' in e.value.snippet
    assert 'byte 19' in str(e.value)


def test_parse_requested_without_content():
    response = make_response(body=results_envelope(None))

    with pytest.raises(ResponseParseError):
        ResponseNormalizer(parse_requested=True).normalize(response)


def test_custom_parser_must_produce_an_object():
    response = make_response(body=results_envelope(['a', 'b']))

    assert ResponseNormalizer(parse_requested=True).normalize(response).parsed_content == ['a', 'b']

    with pytest.raises(ResponseParseError):
        ResponseNormalizer(parse_requested=True, custom_parser=True).normalize(response)


@pytest.mark.parametrize('body', [
    {'results': []},
    {'results': 'nope'},
    {'results': ['nope']},
])
def test_malformed_envelopes(body):
    with pytest.raises(ResponseParseError):
        ResponseNormalizer(parse_requested=False).normalize(make_response(body=body))


def test_unknown_json_shape():
    response = make_response(body={'message': 'hello'})

    assert ResponseNormalizer(parse_requested=False).normalize(response).raw_body == b'{"message": "hello"}'

    with pytest.raises(ResponseParseError):
        ResponseNormalizer(parse_requested=True).normalize(response)


def test_invalid_utf8_body_with_parsing():
    response = make_response(body=b'\xff\xfe{')

    with pytest.raises(ResponseParseError) as e:
        ResponseNormalizer(parse_requested=True).normalize(response)

    assert e.value.offset == 0
    assert e.value.snippet.endswith('{')
    assert 'byte 0' in str(e.value)


def test_requested_encoding_applies_without_a_result_flag():
    encoded = base64.b64encode(HTML.encode('utf-8')).decode('ascii')
    response = make_response(body=results_envelope(encoded))

    api_response = ResponseNormalizer(parse_requested=False, content_encoding='base64').normalize(response)

    assert api_response.raw_body == HTML.encode('utf-8')


def test_package_sources_compile_without_escape_warnings():
    import pathlib
    import warnings

    import oxyscraper

    for path in pathlib.Path(oxyscraper.__file__).parent.rglob('*.py'):
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            compile(path.read_text('utf-8'), str(path), 'exec')
