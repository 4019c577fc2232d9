from typing import Tuple, Callable, Optional
from .NoopReporter import NoopReporter
from .PrintReporter import PrintReporter
from .ChainReporter import ChainReporter

__all__:Tuple[str, ...] = (
    'NoopReporter',
    'PrintReporter',
    'ChainReporter',
    'Reporter'
)

from ..api_response import ScrapeApiResponse


class Reporter:

    reporter:Callable

    def __init__(self, reporter:Callable):
        self.reporter = reporter

    def report(self, error:Optional[BaseException]=None, scrape_api_response:Optional[ScrapeApiResponse]=None):
        self.reporter(error, scrape_api_response)
