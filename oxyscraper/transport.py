import json
import platform
from concurrent.futures import Future, ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Any, Dict, NamedTuple, Optional, Tuple

import requests
import urllib3
from decorator import decorator
from requests import Response, Session
from requests import exceptions as RequestExceptions
from requests.auth import HTTPBasicAuth

from . import __version__
from .context import ExecutionContext
from .errors import DeadlineExceeded, EncoderError, NetworkError

NetworkErrors = (
    ConnectionError,
    RequestExceptions.ConnectionError,
    RequestExceptions.ChunkedEncodingError,
)

TimeoutErrors = (
    RequestExceptions.ConnectTimeout,
    RequestExceptions.ReadTimeout,
)


class ApiCredentials(NamedTuple):
    username: str
    password: str

    def auth(self) -> HTTPBasicAuth:
        return HTTPBasicAuth(self.username, self.password)

    def __repr__(self) -> str:
        return 'ApiCredentials(username=%r, password=***)' % self.username


@decorator
def translate_transport_errors(f, *args, **kwargs):
    """
    Surface requests failures as the SDK error kinds: timeouts become
    DeadlineExceeded, any other requests failure a NetworkError.
    """
    try:
        return f(*args, **kwargs)
    except TimeoutErrors as e:
        raise DeadlineExceeded('request timed out: %s' % e) from e
    except NetworkErrors as e:
        raise NetworkError('connection failed: %s' % e, request=getattr(e, 'request', None)) from e
    except RequestExceptions.RequestException as e:
        raise NetworkError('request failed: %s' % e, request=getattr(e, 'request', None)) from e


def encode_payload(payload: Dict[str, Any]) -> bytes:
    try:
        return json.dumps(payload, allow_nan=False).encode('utf-8')
    except (TypeError, ValueError) as e:
        raise EncoderError(content=str(e)) from e


class Transport:
    """
    Immutable bundle of base url, credentials and http session shared by every
    call of a client. ``submit`` performs exactly one request: no retry.
    """

    DEFAULT_CONNECT_TIMEOUT = 10
    DEFAULT_READ_TIMEOUT = 180
    CANCEL_CHECK_INTERVAL = 0.05

    def __init__(
        self,
        username: str,
        password: str,
        base_url: str,
        session: Optional[Session] = None,
        verify: bool = True,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        executor: Optional[ThreadPoolExecutor] = None
    ):
        if not username or not password:
            raise ValueError('username and password are required')

        if base_url[-1] == '/':  # remove last '/' if exists
            base_url = base_url[:-1]

        self._credentials = ApiCredentials(username=username, password=password)
        self._base_url = base_url
        self._verify = verify
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout
        self._session = session
        self._executor = executor or ThreadPoolExecutor(thread_name_prefix='oxyscraper-transport')

        if not self._verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def username(self) -> str:
        return self._credentials.username

    @property
    def ua(self) -> str:
        return 'OxyscraperSDK/%s (Python %s, %s, %s)' % (
            __version__,
            platform.python_version(),
            platform.uname().system,
            platform.uname().machine
        )

    def url(self, *parts: str) -> str:
        return '/'.join((self._base_url,) + parts)

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def with_session(self, session: Optional[Session], renew_executor: bool = False) -> 'Transport':
        return Transport(
            username=self._credentials.username,
            password=self._credentials.password,
            base_url=self._base_url,
            session=session,
            verify=self._verify,
            connect_timeout=self._connect_timeout,
            read_timeout=self._read_timeout,
            executor=None if renew_executor else self._executor
        )

    def _timeout(self, context: ExecutionContext) -> Tuple[float, float]:
        remaining = context.remaining()

        if remaining is None:
            return self._connect_timeout, self._read_timeout

        # at least a millisecond, requests treats 0 as "no timeout" on some adapters
        remaining = max(remaining, 0.001)

        return min(self._connect_timeout, remaining), min(self._read_timeout, remaining)

    def _request_data(self, context: ExecutionContext, method: str, url: str, body: Optional[bytes]) -> Dict:
        headers = {
            'accept': 'application/json',
            'user-agent': self.ua,
        }

        if body is not None:
            headers['content-type'] = 'application/json'

        return {
            'method': method,
            'url': url,
            'data': body,
            'auth': self._credentials.auth(),
            'verify': self._verify,
            'timeout': self._timeout(context),
            'headers': headers,
        }

    @translate_transport_errors
    def _send(self, request_data: Dict) -> Response:
        if self._session is not None:
            return self._session.request(**request_data)

        return requests.request(**request_data)

    def submit(
        self,
        context: ExecutionContext,
        method: str = 'POST',
        url: Optional[str] = None,
        payload: Optional[Dict[str, Any]] = None
    ) -> Response:
        body = encode_payload(payload) if payload is not None else None

        context.raise_if_done()

        future: Future = self._executor.submit(
            self._send, self._request_data(context, method, url or self._base_url, body)
        )

        # the in-flight request is abandoned when the context ends first
        while True:
            try:
                return future.result(timeout=self.CANCEL_CHECK_INTERVAL)
            except FutureTimeout:
                if context.done:
                    future.cancel()
                    context.raise_if_done()

    def close(self, close_session: bool = True):
        if close_session and self._session is not None:
            self._session.close()

        self._executor.shutdown(wait=False)

    def __repr__(self) -> str:
        return '<Transport %s user=%s>' % (self._base_url, self._credentials.username)
