from typing import Optional

from ..api_response import ScrapeApiResponse


class NoopReporter:

    def __call__(self, error:Optional[Exception]=None, scrape_api_response:Optional[ScrapeApiResponse]=None):
        pass
