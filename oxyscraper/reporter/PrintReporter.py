from pprint import pprint
from typing import Optional

from ..api_response import ScrapeApiResponse
from ..errors import ScraperError


class PrintReporter:

    def __call__(self, error:Optional[Exception]=None, scrape_api_response:Optional[ScrapeApiResponse]=None):
        debug_data = {
            'status_code': None,
            'job_id': None,
            'upstream_status_codes': None,
            'error': None
        }

        if scrape_api_response:
            debug_data['status_code'] = scrape_api_response.status_code
            debug_data['job_id'] = scrape_api_response.job_id
            debug_data['upstream_status_codes'] = [result.status_code for result in scrape_api_response.results]

        if error is not None:
            debug_data['error'] = {
                'message': str(error),
                'type': error.__class__.__name__,
                'code': error.code if isinstance(error, ScraperError) else None
            }

        pprint(debug_data)
