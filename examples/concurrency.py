import asyncio

from oxyscraper import RealtimeClient, ScrapeConfig

client = RealtimeClient(username='__USERNAME__', password='__PASSWORD__')


async def main():
    scrape_configs = [
        ScrapeConfig(source='google_search', query='adidas'),
        ScrapeConfig(source='bing_search', query='adidas'),
        ScrapeConfig(source='amazon_search', query='adidas', domain='de'),
        ScrapeConfig(source='wayfair_search', query='chair', limit=24),
    ]

    for api_response in await asyncio.gather(*[client.async_scrape(config) for config in scrape_configs]):
        print(api_response.status_code, api_response.upstream_status_code, len(api_response.text))

asyncio.run(main())
