import asyncio
import http
from asyncio import AbstractEventLoop
from concurrent.futures.thread import ThreadPoolExecutor
from functools import partial
from typing import Callable, Dict, Optional, Tuple

import logging as logger

from requests import Response, Session

from . import __version__
from .api_response import ResponseNormalizer, ScrapeApiResponse
from .context import ExecutionContext
from .defaults import ClientDefaults, DEFAULTS
from .errors import DeadlineExceeded, ErrorFactory, HttpError, JobTimeoutError, ScraperError
from .parsing_instructions import count_fields
from .poller import JobHandle, Poller
from .reporter import Reporter
from .scrape_config import ScrapeConfig
from .targets import Target, get_target
from .transport import Transport

logger.getLogger(__name__)


class BaseClient:
    """
    Shared plumbing of the realtime and push-pull clients: validation,
    payload building, execution context, reporting and response handling.
    A client instance is bound to one integration mode for its lifetime.
    """

    BASE_URL: str
    DEFAULT_CONNECT_TIMEOUT = Transport.DEFAULT_CONNECT_TIMEOUT
    DEFAULT_READ_TIMEOUT = Transport.DEFAULT_READ_TIMEOUT

    transport: Transport
    defaults: ClientDefaults
    reporter: Reporter
    debug: bool
    version: str

    def __init__(
        self,
        username: str,
        password: str,
        base_url: Optional[str] = None,
        defaults: ClientDefaults = DEFAULTS,
        verify: bool = True,
        debug: bool = False,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        reporter: Optional[Callable] = None,
        session: Optional[Session] = None
    ):
        self.version = __version__
        self.defaults = defaults
        self.debug = debug
        self.async_executor = ThreadPoolExecutor()
        self.transport = Transport(
            username=username,
            password=password,
            base_url=base_url or self.BASE_URL,
            session=session,
            verify=verify,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout
        )
        self._owned_session = False

        if self.debug is True:
            http.client.HTTPConnection.debuglevel = 5

        if reporter is None:
            from .reporter import NoopReporter

            reporter = NoopReporter()

        self.reporter = Reporter(reporter)

    def _call_context(self, scrape_config: ScrapeConfig, context: Optional[ExecutionContext]) -> ExecutionContext:
        timeout = scrape_config.timeout

        if context is None:
            return ExecutionContext(timeout=timeout if timeout is not None else self.defaults.timeout)

        if timeout is None:
            return context

        return context.child(timeout=timeout)

    def prepare(self, scrape_config: ScrapeConfig) -> Tuple[Target, Dict]:
        """
        Validate a scrape config and build its payload without sending anything.
        """
        target = get_target(scrape_config.source)
        payload = target.build_payload(scrape_config, defaults=self.defaults)

        if scrape_config.custom_parser:
            logger.debug('custom parser with %d field(s)' % count_fields(scrape_config.parsing_instructions))

        return target, payload

    def scrape(self, scrape_config: ScrapeConfig, context: Optional[ExecutionContext] = None) -> ScrapeApiResponse:
        """
        Scrape a target
        :param scrape_config: ScrapeConfig
        :param context: Optional[ExecutionContext] - cancellation and deadline of the call, defaults to the client timeout
        :return: ScrapeApiResponse

        Validation errors are raised before any network call. Service errors are
        raised as HttpError subclasses, an elapsed deadline or a cancel as
        DeadlineExceeded, a malformed answer as ResponseParseError.
        """

        try:
            target, payload = self.prepare(scrape_config)

            logger.debug('--> %s %s' % (target.source, scrape_config.target_input))

            call_context = self._call_context(scrape_config, context)
            normalizer = ResponseNormalizer(
                parse_requested=scrape_config.parse,
                custom_parser=scrape_config.custom_parser,
                content_encoding=payload.get('content_encoding')
            )

            api_response = self._dispatch(call_context, scrape_config, payload, normalizer)

            logger.debug('<-- [%s] %s | %d result(s)' % (
                api_response.status_code,
                scrape_config.target_input,
                len(api_response.results)
            ))

            self.reporter.report(scrape_api_response=api_response)

            return api_response
        except HttpError as e:
            logger.critical('<-- %s' % str(e))
            self.reporter.report(error=e)
            raise
        except ScraperError as e:
            logger.debug('<-- %s: %s' % (e.__class__.__name__, e))
            self.reporter.report(error=e)
            raise

    async def async_scrape(
        self,
        scrape_config: ScrapeConfig,
        context: Optional[ExecutionContext] = None,
        loop: Optional[AbstractEventLoop] = None
    ) -> ScrapeApiResponse:
        if loop is None:
            loop = asyncio.get_running_loop()

        if context is None:
            context = ExecutionContext(
                timeout=scrape_config.timeout if scrape_config.timeout is not None else self.defaults.timeout
            )

        try:
            return await loop.run_in_executor(self.async_executor, partial(self.scrape, scrape_config, context))
        except asyncio.CancelledError:
            context.cancel()
            raise

    def _dispatch(
        self,
        context: ExecutionContext,
        scrape_config: ScrapeConfig,
        payload: Dict,
        normalizer: ResponseNormalizer
    ) -> ScrapeApiResponse:
        raise NotImplementedError

    @staticmethod
    def _raise_for_status(response: Response):
        if not response.ok:
            raise ErrorFactory.create(response)

    def open(self):
        if not self._owned_session:
            self.transport = self.transport.with_session(Session())
            self._owned_session = True

    def close(self):
        """
        Release the owned session and shut the worker pools down. The client
        stays usable, fresh pools are created for later calls.
        """
        session = None if self._owned_session else self.transport.session

        self.transport.close(close_session=self._owned_session)
        self.transport = self.transport.with_session(session, renew_executor=True)
        self._owned_session = False

        self.async_executor.shutdown(wait=False)
        self.async_executor = ThreadPoolExecutor()

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return '<%s %s>' % (self.__class__.__name__, self.transport.base_url)


class RealtimeClient(BaseClient):
    """
    Synchronous integration: one POST per scrape, the answer holds the result.
    """

    BASE_URL = 'https://realtime.oxylabs.io/v1/queries'

    def _dispatch(
        self,
        context: ExecutionContext,
        scrape_config: ScrapeConfig,
        payload: Dict,
        normalizer: ResponseNormalizer
    ) -> ScrapeApiResponse:
        response = self.transport.submit(context, method='POST', payload=payload)
        self._raise_for_status(response)

        return normalizer.normalize(response)


class PushPullClient(BaseClient):
    """
    Asynchronous integration: the scrape is submitted as a job, its status
    polled until it is done, then its results fetched.

    ``submit`` alone suits callers relying on ``callback_url`` notifications,
    ``job_status`` and ``fetch_results`` pick the job up later.
    """

    BASE_URL = 'https://data.oxylabs.io/v1/queries'

    def poller(self, scrape_config: Optional[ScrapeConfig] = None) -> Poller:
        interval = self.defaults.poll_interval

        if scrape_config is not None and scrape_config.poll_interval is not None:
            interval = scrape_config.poll_interval

        return Poller(self.transport, interval=interval)

    def _submit(self, context: ExecutionContext, payload: Dict) -> JobHandle:
        response = self.transport.submit(context, method='POST', payload=payload)
        self._raise_for_status(response)

        job = JobHandle.from_response(response)
        logger.debug('<-- job %s submitted (%s)' % (job.id, job.status.value))

        return job

    def _fetch(self, context: ExecutionContext, job_id: str, normalizer: ResponseNormalizer, job: Optional[JobHandle] = None) -> ScrapeApiResponse:
        response = self.transport.submit(context, method='GET', url=self.transport.url(job_id, 'results'))
        self._raise_for_status(response)

        return normalizer.normalize(response, job=job)

    def _dispatch(
        self,
        context: ExecutionContext,
        scrape_config: ScrapeConfig,
        payload: Dict,
        normalizer: ResponseNormalizer
    ) -> ScrapeApiResponse:
        job = self._submit(context, payload)
        job = self.poller(scrape_config).wait(context, job)

        try:
            return self._fetch(context, job.id, normalizer, job=job)
        except DeadlineExceeded as e:
            raise JobTimeoutError(job_id=job.id, last_status=job.status.value) from e

    def submit(self, scrape_config: ScrapeConfig, context: Optional[ExecutionContext] = None) -> JobHandle:
        _, payload = self.prepare(scrape_config)

        return self._submit(self._call_context(scrape_config, context), payload)

    def job_status(self, job_id: str, context: Optional[ExecutionContext] = None) -> JobHandle:
        return self.poller().status(context or ExecutionContext(timeout=self.defaults.timeout), job_id)

    def fetch_results(
        self,
        job_id: str,
        parse: bool = False,
        custom_parser: bool = False,
        content_encoding: Optional[str] = None,
        context: Optional[ExecutionContext] = None
    ) -> ScrapeApiResponse:
        normalizer = ResponseNormalizer(
            parse_requested=parse,
            custom_parser=custom_parser,
            content_encoding=content_encoding
        )

        return self._fetch(context or ExecutionContext(timeout=self.defaults.timeout), job_id, normalizer)
