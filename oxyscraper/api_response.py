import binascii
import logging as logger
from base64 import b64decode
from datetime import datetime
from json import JSONDecodeError, dumps, loads
from functools import cached_property
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

from requests import Response
from requests.structures import CaseInsensitiveDict

from .errors import ResponseParseError
from .poller import JobHandle, parse_timestamp

logger.getLogger(__name__)

BASE64 = 'base64'

StructuredContent = Union[Dict[str, Any], List[Any]]


class ScrapeResult(NamedTuple):
    """
    One scraped page. ``status_code`` is the status the target website
    answered with, not the one of the scraping service.
    """

    raw_body: bytes
    parsed_content: Optional[StructuredContent] = None
    status_code: Optional[int] = None
    url: Optional[str] = None
    page: Optional[int] = None
    job_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    parse_status_code: Optional[int] = None

    @property
    def text(self) -> str:
        return self.raw_body.decode('utf-8', errors='replace')


class ScrapeApiResponse:

    def __init__(self, response: Response, results: Tuple[ScrapeResult, ...], job: Optional[JobHandle] = None):
        self._response = response
        self._results = tuple(results)
        self._job = job

    @property
    def response(self) -> Response:
        return self._response

    @property
    def status_code(self) -> int:
        r"""
            /!\ This is the status code of the scraping service, see ScrapeResult.status_code for the target website
        """
        return self._response.status_code

    @property
    def headers(self) -> CaseInsensitiveDict:
        return self._response.headers

    @property
    def results(self) -> Tuple[ScrapeResult, ...]:
        return self._results

    @property
    def job(self) -> Optional[JobHandle]:
        return self._job

    @property
    def job_id(self) -> Optional[str]:
        if self._job is not None:
            return self._job.id

        return self._results[0].job_id

    @property
    def raw_body(self) -> bytes:
        return self._results[0].raw_body

    @property
    def parsed_content(self) -> Optional[StructuredContent]:
        return self._results[0].parsed_content

    @property
    def text(self) -> str:
        return self._results[0].text

    @property
    def content(self) -> Union[str, StructuredContent]:
        if self.parsed_content is not None:
            return self.parsed_content

        return self.text

    @property
    def upstream_status_code(self) -> Optional[int]:
        return self._results[0].status_code

    @cached_property
    def soup(self) -> 'BeautifulSoup':
        try:
            from bs4 import BeautifulSoup
        except ImportError as e:
            logger.error('You must install oxyscraper-sdk[parser] to enable this feature')
            raise e

        return BeautifulSoup(self.text, "lxml")

    def __repr__(self) -> str:
        return '<ScrapeApiResponse [%s] %d result(s)>' % (self.status_code, len(self._results))


class ResponseNormalizer:
    """
    Turns a service answer into a ScrapeApiResponse, whatever its shape:

    - ``{"results": [...]}`` job results envelope, realtime and push-pull,
    - a bare result object carrying ``content``,
    - a non json body, kept verbatim when parsing was not requested.

    Content flagged ``content_encoding: base64``, by the result, the job or
    the request, is decoded before exposure.
    When parsing was requested the content must decode to structured data,
    a custom parser must produce an object.
    """

    def __init__(self, parse_requested: bool, custom_parser: bool = False, content_encoding: Optional[str] = None):
        self.parse_requested = parse_requested
        self.custom_parser = custom_parser
        self.content_encoding = content_encoding

    def normalize(self, response: Response, job: Optional[JobHandle] = None) -> ScrapeApiResponse:
        body = response.content or b''

        try:
            document = loads(body.decode('utf-8'))
        except (UnicodeDecodeError, JSONDecodeError) as e:
            if self.parse_requested:
                raise self._decode_error('response body is not valid json', body, e) from e

            return ScrapeApiResponse(response=response, results=(ScrapeResult(raw_body=body),), job=job)

        items, encoding = self._unwrap(document)

        if items is None:
            if self.parse_requested:
                raise ResponseParseError('unexpected response shape, expected a results envelope or a result object')

            return ScrapeApiResponse(response=response, results=(ScrapeResult(raw_body=body),), job=job)

        results = tuple(self._result(item, encoding) for item in items)

        logger.debug('<-- %d result(s) normalized (parse=%s)' % (len(results), self.parse_requested))

        return ScrapeApiResponse(response=response, results=results, job=job)

    @staticmethod
    def _unwrap(document) -> Tuple[Optional[List[Dict]], Optional[str]]:
        if not isinstance(document, dict):
            return None, None

        encoding = document.get('content_encoding')

        if isinstance(document.get('job'), dict):
            encoding = encoding or document['job'].get('content_encoding')

        if 'results' in document:
            items = document['results']

            if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                raise ResponseParseError('"results" must be a list of objects')

            if not items:
                raise ResponseParseError('results envelope is empty')

            return items, encoding

        if 'content' in document:
            return [document], encoding

        return None, None

    def _result(self, item: Dict, encoding: Optional[str]) -> ScrapeResult:
        encoding = item.get('content_encoding') or encoding or self.content_encoding
        raw_body, parsed_content = self._content(item.get('content'), encoding)

        return ScrapeResult(
            raw_body=raw_body,
            parsed_content=parsed_content,
            status_code=item.get('status_code'),
            url=item.get('url'),
            page=item.get('page'),
            job_id=item.get('job_id'),
            created_at=parse_timestamp(item.get('created_at')),
            updated_at=parse_timestamp(item.get('updated_at')),
            parse_status_code=item.get('parse_status_code')
        )

    def _content(self, content, encoding: Optional[str]) -> Tuple[bytes, Optional[StructuredContent]]:
        if isinstance(content, (dict, list)):
            raw_body = dumps(content, ensure_ascii=False).encode('utf-8')

            if not self.parse_requested:
                return raw_body, None

            return raw_body, self._check_structure(content)

        if content is None:
            if self.parse_requested:
                raise ResponseParseError('result has no content to parse')

            return b'', None

        if not isinstance(content, str):
            raise ResponseParseError('unexpected content type %s' % type(content).__name__)

        raw_body = content.encode('utf-8')

        if encoding == BASE64:
            try:
                raw_body = b64decode(raw_body, validate=True)
            except binascii.Error as e:
                raise ResponseParseError('content flagged base64 could not be decoded: %s' % e) from e

        if not self.parse_requested:
            return raw_body, None

        try:
            parsed = loads(raw_body.decode('utf-8'))
        except (UnicodeDecodeError, JSONDecodeError) as e:
            raise self._decode_error('parsed content is not valid json', raw_body, e) from e

        return raw_body, self._check_structure(parsed)

    def _check_structure(self, parsed) -> StructuredContent:
        if self.custom_parser and not isinstance(parsed, dict):
            raise ResponseParseError('custom parser result must be an object, got %s' % type(parsed).__name__)

        if not isinstance(parsed, (dict, list)):
            raise ResponseParseError('parsed content must be an object or a list, got %s' % type(parsed).__name__)

        return parsed

    @staticmethod
    def _decode_error(message: str, raw: bytes, error: ValueError) -> ResponseParseError:
        if isinstance(error, UnicodeDecodeError):
            start = max(error.start - ResponseParseError.SNIPPET_RADIUS, 0)
            snippet = raw[start:error.start + ResponseParseError.SNIPPET_RADIUS].decode('utf-8', errors='replace')

            return ResponseParseError(message=message, offset=error.start, snippet=snippet)

        return ResponseParseError.from_decode_error(message, error.doc, error.pos)
