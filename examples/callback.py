from oxyscraper import JobStatus, PushPullClient, ScrapeConfig

client = PushPullClient(username='__USERNAME__', password='__PASSWORD__')

job = client.submit(ScrapeConfig(
    source='amazon_product',
    query='B07FZ8S74R',
    domain='co.uk',
    callback_url='https://your.server/oxylabs-callback'
))

print('submitted', job)

# later, once the callback arrived or on demand
if client.job_status(job.id).status is JobStatus.DONE:
    api_response = client.fetch_results(job.id)
    print(api_response.text[:200])
