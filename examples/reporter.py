from typing import Optional

from oxyscraper import RealtimeClient, ScrapeApiResponse, ScrapeConfig, ScraperError, TooManyRequest
from oxyscraper.reporter import ChainReporter, PrintReporter


def my_reporter(error:Optional[Exception]=None, scrape_api_response:Optional[ScrapeApiResponse]=None):
    if scrape_api_response is not None and (scrape_api_response.upstream_status_code or 200) >= 400:
        print('whhoops from my custom reporter')
        # schedule retry for later, store some logs / metrics, anything you want

    if isinstance(error, TooManyRequest):
        print('slow down')
    elif isinstance(error, ScraperError):
        print('failed with %s' % error.code)


client = RealtimeClient(
    username='__USERNAME__',
    password='__PASSWORD__',
    reporter=ChainReporter(my_reporter, PrintReporter())
)

response:ScrapeApiResponse = client.scrape(scrape_config=ScrapeConfig(source='bing_search', query='adidas'))

print(response)
