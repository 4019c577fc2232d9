from typing import Optional, Tuple
from requests import Request, Response


class ScraperError(Exception):
    KIND_VALIDATION = 'VALIDATION'
    KIND_HTTP_BAD_RESPONSE = 'HTTP_BAD_RESPONSE'
    KIND_NETWORK = 'NETWORK'
    KIND_JOB = 'JOB'
    KIND_DEADLINE = 'DEADLINE'
    KIND_PARSE = 'PARSE'

    kind: str = 'SCRAPER'

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        http_status_code: Optional[int] = None,
    ):
        self.message = message
        self.code = code
        self.http_status_code = http_status_code

        super().__init__(self.message, str(self.code))

    def __str__(self):
        return self.message


class ValidationError(ScraperError):
    kind = ScraperError.KIND_VALIDATION

    def __init__(self, message: str, code: str = 'ERR::VALIDATION::INVALID_PARAMETER'):
        super().__init__(message=message, code=code)


class InvalidUrlError(ValidationError):

    def __init__(self, message: str):
        super().__init__(message=message, code='ERR::VALIDATION::INVALID_URL')


class InvalidParameterError(ValidationError):

    def __init__(self, name: str, value, reason: Optional[str] = None):
        self.name = name
        self.value = value

        message = 'invalid %s parameter: %r' % (name, value)

        if reason:
            message = '%s (%s)' % (message, reason)

        super().__init__(message=message, code='ERR::VALIDATION::INVALID_PARAMETER')


class ParseInstructionsError(ValidationError):

    def __init__(self, message: str, path: Tuple[str, ...] = ()):
        self.path = path

        if path:
            message = '%s at %s' % (message, '.'.join(path))

        super().__init__(message='invalid parse instructions: %s' % message, code='ERR::VALIDATION::PARSE_INSTRUCTIONS')


class EncoderError(ValidationError):

    def __init__(self, content: str):
        self.content = content
        super().__init__(message='error marshalling payload: %s' % content, code='ERR::VALIDATION::PAYLOAD_ENCODING')


class NetworkError(ScraperError):
    kind = ScraperError.KIND_NETWORK

    def __init__(self, message: str, request: Optional[Request] = None):
        self.request = request
        super().__init__(message=message, code='ERR::NETWORK::CONNECTION_FAILED')


class HttpError(ScraperError):
    kind = ScraperError.KIND_HTTP_BAD_RESPONSE

    def __init__(self, request: Optional[Request], response: Response, **kwargs):
        self.request = request
        self.response = response
        super().__init__(**kwargs)

    @property
    def body(self) -> bytes:
        return self.response.content or b''

    def __str__(self) -> str:
        text = "%s -- %s " % (self.response.status_code, self.response.reason)

        try:
            text += self.body.decode('utf-8')
        except UnicodeError:
            text += str(self.body)

        return text


class ApiHttpClientError(HttpError):
    pass


class BadCredentialsError(ApiHttpClientError):
    pass


class TooManyRequest(ApiHttpClientError):
    pass


class ApiHttpServerError(ApiHttpClientError):
    pass


class DeadlineExceeded(ScraperError):
    kind = ScraperError.KIND_DEADLINE

    def __init__(self, message: str = 'deadline exceeded', code: str = 'ERR::DEADLINE::EXCEEDED'):
        super().__init__(message=message, code=code)


class JobTimeoutError(DeadlineExceeded):

    def __init__(self, job_id: str, last_status: Optional[str]):
        self.job_id = job_id
        self.last_status = last_status

        super().__init__(
            message='timed out awaiting job %s (last status: %s)' % (job_id, last_status),
            code='ERR::JOB::TIMEOUT'
        )


class JobFailedError(ScraperError):
    kind = ScraperError.KIND_JOB

    def __init__(self, job_id: str, status: str):
        self.job_id = job_id
        self.status = status

        super().__init__(message='job %s failed with status %s' % (job_id, status), code='ERR::JOB::FAULTED')


class ResponseParseError(ScraperError):
    kind = ScraperError.KIND_PARSE

    SNIPPET_RADIUS = 40

    def __init__(self, message: str, offset: Optional[int] = None, snippet: Optional[str] = None):
        self.offset = offset
        self.snippet = snippet

        if offset is not None:
            message = '%s at byte %d' % (message, offset)

        if snippet:
            message = '%s near %r' % (message, snippet)

        super().__init__(message=message, code='ERR::RESPONSE::PARSE')

    @classmethod
    def from_decode_error(cls, message: str, document: str, position: int) -> 'ResponseParseError':
        start = max(position - cls.SNIPPET_RADIUS, 0)
        end = position + cls.SNIPPET_RADIUS

        return cls(
            message=message,
            offset=len(document[:position].encode('utf-8')),
            snippet=document[start:end]
        )


class ErrorFactory:
    # Notable http error has own class for more convenience
    HTTP_STATUS_TO_ERROR = {
        401: BadCredentialsError,
        429: TooManyRequest
    }

    @staticmethod
    def _message(response: Response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and 'message' in body:
            return '%s %s' % (response.status_code, body['message'])

        return '%s %s' % (response.status_code, response.reason or 'unexpected response')

    @staticmethod
    def create(response: Response) -> HttpError:
        http_code = response.status_code

        args = {
            'request': response.request,
            'response': response,
            'message': ErrorFactory._message(response),
            'code': 'ERR::API::HTTP_%d' % http_code,
            'http_status_code': http_code,
        }

        if http_code >= 500:
            return ApiHttpServerError(**args)

        if http_code in ErrorFactory.HTTP_STATUS_TO_ERROR:
            return ErrorFactory.HTTP_STATUS_TO_ERROR[http_code](**args)

        return ApiHttpClientError(**args)


__all__: Tuple[str, ...] = (
    'ScraperError',
    'ValidationError',
    'InvalidUrlError',
    'InvalidParameterError',
    'ParseInstructionsError',
    'EncoderError',
    'NetworkError',
    'HttpError',
    'ApiHttpClientError',
    'ApiHttpServerError',
    'BadCredentialsError',
    'TooManyRequest',
    'DeadlineExceeded',
    'JobTimeoutError',
    'JobFailedError',
    'ResponseParseError',
    'ErrorFactory',
)
