__version__ = '0.3.0'

from typing import Tuple
from .errors import ScraperError
from .errors import ValidationError
from .errors import InvalidUrlError
from .errors import InvalidParameterError
from .errors import ParseInstructionsError
from .errors import EncoderError
from .errors import NetworkError
from .errors import HttpError
from .errors import ApiHttpClientError
from .errors import ApiHttpServerError
from .errors import BadCredentialsError
from .errors import TooManyRequest
from .errors import DeadlineExceeded
from .errors import JobTimeoutError
from .errors import JobFailedError
from .errors import ResponseParseError
from .errors import ErrorFactory
from .context import ExecutionContext
from .defaults import ClientDefaults
from .scrape_config import ScrapeConfig, ContextOptions, UserAgent, Render, Domain, SortBy, HttpMethod, ContentEncoding
from .targets import Target, get_target, TARGETS
from .poller import JobHandle, JobStatus, Poller
from .api_response import ScrapeApiResponse, ScrapeResult, ResponseNormalizer
from .client import RealtimeClient, PushPullClient


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
    'ExecutionContext',
    'ClientDefaults',
    'ScrapeConfig',
    'ContextOptions',
    'UserAgent',
    'Render',
    'Domain',
    'SortBy',
    'HttpMethod',
    'ContentEncoding',
    'Target',
    'get_target',
    'TARGETS',
    'JobHandle',
    'JobStatus',
    'Poller',
    'ScrapeApiResponse',
    'ScrapeResult',
    'ResponseNormalizer',
    'RealtimeClient',
    'PushPullClient',
)
