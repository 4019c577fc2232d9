from oxyscraper import RealtimeClient, ScrapeConfig, ScrapeApiResponse

client = RealtimeClient(username='__USERNAME__', password='__PASSWORD__')

api_response:ScrapeApiResponse = client.scrape(scrape_config=ScrapeConfig(
    source='google_search',
    query='adidas',
    geo_location='Berlin,Germany',
    parse=True
))

for item in api_response.parsed_content['results']['organic']:
    print(item['pos'], item['title'])
