from typing import Callable, Tuple, Optional

from ..api_response import ScrapeApiResponse


class ChainReporter:
    reporters: Tuple[Callable]

    def __init__(self, *args:Callable):
        self.reporters = args

    def __call__(self, error:Optional[Exception]=None, scrape_api_response:Optional[ScrapeApiResponse]=None):
        for reporter in self.reporters:
            reporter(error, scrape_api_response)
