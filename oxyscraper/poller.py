from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from dateutil.parser import parse as parse_date
from loguru import logger
from requests import Response

from .context import ExecutionContext
from .errors import DeadlineExceeded, ErrorFactory, JobFailedError, JobTimeoutError, ResponseParseError
from .transport import Transport


class JobStatus(Enum):
    """
    Attributes:
        PENDING: The service is still working on the job.
        DONE: Results are ready to be fetched.
        FAULTED: The service gave up on the job.
        CANCELLED: The client stopped waiting, set locally and never sent by the service.
    """

    PENDING = 'pending'
    DONE = 'done'
    FAULTED = 'faulted'
    CANCELLED = 'cancelled'

    @property
    def terminal(self) -> bool:
        return self is not JobStatus.PENDING


def parse_timestamp(value) -> Optional[datetime]:
    if not value:
        return None

    try:
        return parse_date(value)
    except (ValueError, OverflowError):
        return None


class JobHandle:

    def __init__(
        self,
        id: str,
        status: JobStatus,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        links: Optional[List[Dict]] = None
    ):
        self.id = id
        self.status = status
        self.created_at = created_at
        self.updated_at = updated_at
        self.links = links or []

    @classmethod
    def from_response(cls, response: Response) -> 'JobHandle':
        try:
            data = response.json()
        except ValueError as e:
            raise ResponseParseError.from_decode_error(
                'job response is not valid json', response.text, getattr(e, 'pos', 0) or 0
            ) from e

        if not isinstance(data, dict) or 'id' not in data or 'status' not in data:
            raise ResponseParseError('job response misses "id" or "status"')

        try:
            status = JobStatus(data['status'])
        except ValueError:
            raise ResponseParseError('unknown job status %r' % data['status']) from None

        return cls(
            id=str(data['id']),
            status=status,
            created_at=parse_timestamp(data.get('created_at')),
            updated_at=parse_timestamp(data.get('updated_at')),
            links=data.get('_links')
        )

    def __repr__(self) -> str:
        return '<JobHandle %s %s>' % (self.id, self.status.value)


class Poller:
    """
    Drives a pending job to a terminal status, one status request per tick.

    The interval wait happens on the execution context, a cancel or the
    deadline ends it immediately and no further status request is sent.
    """

    DEFAULT_POLL_INTERVAL = 2

    def __init__(self, transport: Transport, interval: float = DEFAULT_POLL_INTERVAL):
        if not interval > 0:
            raise ValueError('poll interval must be greater than 0')

        self.transport = transport
        self.interval = interval

    def status(self, context: ExecutionContext, job_id: str) -> JobHandle:
        response = self.transport.submit(context, method='GET', url=self.transport.url(job_id))

        if not response.ok:
            raise ErrorFactory.create(response)

        return JobHandle.from_response(response)

    def wait(self, context: ExecutionContext, job: JobHandle) -> JobHandle:
        tick = 0

        while not job.status.terminal:
            if not context.wait(self.interval):
                last_status, job.status = job.status, JobStatus.CANCELLED
                raise JobTimeoutError(job_id=job.id, last_status=last_status.value)

            tick += 1

            try:
                job = self.status(context, job.id)
            except DeadlineExceeded as e:
                last_status, job.status = job.status, JobStatus.CANCELLED
                raise JobTimeoutError(job_id=job.id, last_status=last_status.value) from e

            logger.debug('job {} tick {}: {}', job.id, tick, job.status.value)

        if job.status is JobStatus.FAULTED:
            logger.warning('job {} faulted after {} status checks', job.id, tick)
            raise JobFailedError(job_id=job.id, status=job.status.value)

        return job
