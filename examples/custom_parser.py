from pprint import pprint

from oxyscraper import RealtimeClient, ScrapeConfig

client = RealtimeClient(username='__USERNAME__', password='__PASSWORD__')

api_response = client.scrape(ScrapeConfig(
    source='universal',
    url='https://sandbox.oxylabs.io/products/1',
    parse=True,
    parsing_instructions={
        'title': {'_fns': [{'_fn': 'css_one', '_args': ['h2']}, {'_fn': 'element_text'}]},
        'price': {
            '_fns': [
                {'_fn': 'css_one', '_args': ['.price']},
                {'_fn': 'element_text'},
                {'_fn': 'amount_from_string'},
            ]
        },
    }
))

pprint(api_response.parsed_content)
