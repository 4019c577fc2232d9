import logging as logger
from sys import stdout

from oxyscraper import ContextOptions, ExecutionContext, JobTimeoutError, PushPullClient, ScrapeConfig, SortBy

oxyscraper_logger = logger.getLogger('oxyscraper')
oxyscraper_logger.setLevel(logger.DEBUG)
oxyscraper_logger.addHandler(logger.StreamHandler(stdout))

client = PushPullClient(username='__USERNAME__', password='__PASSWORD__')

scrape_config = ScrapeConfig(
    source='google_shopping_search',
    query='running shoes',
    domain='de',
    pages=2,
    parse=True,
    context=ContextOptions(sort_by=SortBy.PRICE_ASCENDING, min_price=20, max_price=120),
    poll_interval=5
)

# the whole job, submission to results, has two minutes
with ExecutionContext(timeout=120) as context:
    try:
        api_response = client.scrape(scrape_config, context=context)
    except JobTimeoutError as e:
        print('gave up on job %s while %s' % (e.job_id, e.last_status))
    else:
        for result in api_response.results:
            print(result.page, len(result.parsed_content['results']['organic']))
