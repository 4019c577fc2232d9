import json
import threading
import time
from typing import Any, Dict, List, NamedTuple, Optional, Tuple, Union

import pytest
from requests import Request, Response
from requests.structures import CaseInsensitiveDict

REALTIME_URL = 'https://realtime.oxylabs.io/v1/queries'
PUSH_PULL_URL = 'https://data.oxylabs.io/v1/queries'


def make_response(
    status_code: int = 200,
    body: Union[bytes, str, Dict, List, None] = None,
    url: str = REALTIME_URL,
    method: str = 'POST',
    reason: Optional[str] = None,
    content_type: str = 'application/json'
) -> Response:
    if isinstance(body, (dict, list)):
        content = json.dumps(body).encode('utf-8')
    elif isinstance(body, str):
        content = body.encode('utf-8')
    else:
        content = body or b''

    response = Response()
    response.status_code = status_code
    response._content = content
    response.url = url
    response.reason = reason or ('OK' if status_code < 400 else 'Error')
    response.headers = CaseInsensitiveDict({'content-type': content_type})
    response.request = Request(method=method, url=url).prepare()

    return response


def results_envelope(*contents, **extra) -> Dict:
    results = []

    for page, content in enumerate(contents, start=1):
        result = {
            'content': content,
            'status_code': 200,
            'url': 'https://www.google.com/search?q=adidas',
            'page': page,
            'job_id': '7165482019873',
            'created_at': '2024-02-12 10:00:00',
            'updated_at': '2024-02-12 10:00:05',
        }
        result.update(extra)
        results.append(result)

    return {'results': results}


def job_body(status: str, job_id: str = '7165482019873') -> Dict:
    return {
        'id': job_id,
        'status': status,
        'created_at': '2024-02-12 10:00:00',
        'updated_at': '2024-02-12 10:00:01',
        '_links': [
            {'rel': 'self', 'href': '%s/%s' % (PUSH_PULL_URL, job_id), 'method': 'GET'},
            {'rel': 'results', 'href': '%s/%s/results' % (PUSH_PULL_URL, job_id), 'method': 'GET'},
        ],
    }


class Call(NamedTuple):
    method: str
    url: str
    payload: Optional[Dict]
    kwargs: Dict[str, Any]
    at: float


class FakeSession:
    """
    Stands in for requests.Session. Responses are queued per (method, url),
    the last queued item keeps being served once the queue is drained.
    Items may be a Response, an exception instance or a callable(call).
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List] = {}
        self.calls: List[Call] = []
        self.closed = False
        self._lock = threading.Lock()

    def add(self, method: str, url: str, *items):
        self.routes.setdefault((method.upper(), url), []).extend(items)
        return self

    def calls_to(self, method: str, url: str) -> List[Call]:
        return [call for call in self.calls if call.method == method.upper() and call.url == url]

    def request(self, method: str, url: str, data: Optional[bytes] = None, **kwargs) -> Response:
        payload = json.loads(data.decode('utf-8')) if data else None
        call = Call(method=method.upper(), url=url, payload=payload, kwargs=kwargs, at=time.monotonic())

        with self._lock:
            self.calls.append(call)
            queue = self.routes.get((call.method, url))

            if not queue:
                raise AssertionError('unexpected request %s %s' % (call.method, url))

            item = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(item, BaseException):
            raise item

        if callable(item):
            return item(call)

        return item

    def close(self):
        self.closed = True


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def realtime_client(session):
    from oxyscraper import RealtimeClient

    return RealtimeClient(username='user', password='pass', session=session)


@pytest.fixture
def push_pull_client(session):
    from oxyscraper import ClientDefaults, PushPullClient

    return PushPullClient(
        username='user',
        password='pass',
        session=session,
        defaults=ClientDefaults()._replace(poll_interval=0.01, timeout=5)
    )
