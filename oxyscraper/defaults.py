from typing import NamedTuple


class ClientDefaults(NamedTuple):
    """
    Values applied when a scrape leaves the matching option unset.

    Instances are immutable, override per client with ``_replace``:

        defaults = ClientDefaults()._replace(poll_interval=0.5, timeout=10)
        client = PushPullClient(username, password, defaults=defaults)
    """

    user_agent_type: str = 'desktop'
    domain: str = 'com'
    start_page: int = 1
    pages: int = 1
    serp_limit: int = 10
    ecommerce_limit: int = 48
    content_encoding: str = 'base64'
    poll_interval: float = 2  # seconds
    timeout: float = 50  # seconds, overall deadline of one scrape call

    def limit_for(self, target_class: str) -> int:
        if target_class == 'ecommerce':
            return self.ecommerce_limit

        return self.serp_limit


DEFAULTS = ClientDefaults()
