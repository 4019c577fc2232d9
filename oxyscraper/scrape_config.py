from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from .errors import InvalidParameterError


class UserAgent(Enum):
    """
    Device class the service impersonates.

    Attributes:
        DESKTOP: Random desktop browser.
        MOBILE: Random mobile browser.
        TABLET: Random tablet browser.
    """

    DESKTOP = 'desktop'
    DESKTOP_CHROME = 'desktop_chrome'
    DESKTOP_EDGE = 'desktop_edge'
    DESKTOP_FIREFOX = 'desktop_firefox'
    DESKTOP_OPERA = 'desktop_opera'
    DESKTOP_SAFARI = 'desktop_safari'
    MOBILE = 'mobile'
    MOBILE_ANDROID = 'mobile_android'
    MOBILE_IOS = 'mobile_ios'
    TABLET = 'tablet'
    TABLET_ANDROID = 'tablet_android'
    TABLET_IOS = 'tablet_ios'


class Render(Enum):
    """
    Attributes:
        HTML: Execute javascript and return the rendered HTML.
        PNG: Execute javascript and return a screenshot, base64 encoded.
    """

    HTML = 'html'
    PNG = 'png'


class Domain(Enum):
    COM = 'com'
    CO_UK = 'co.uk'
    CA = 'ca'
    DE = 'de'
    FR = 'fr'
    IT = 'it'
    ES = 'es'
    NL = 'nl'
    PL = 'pl'
    SE = 'se'
    COM_AU = 'com.au'
    COM_BR = 'com.br'
    COM_MX = 'com.mx'
    COM_TR = 'com.tr'
    CO_JP = 'co.jp'
    IN = 'in'
    AE = 'ae'
    SG = 'sg'


class SortBy(Enum):
    """
    Shopping search sort order.

    Attributes:
        RELEVANCE: Service default ordering.
        REVIEW_SCORE: Best reviewed first.
        PRICE_ASCENDING: Cheapest first.
        PRICE_DESCENDING: Most expensive first.
    """

    RELEVANCE = 'r'
    REVIEW_SCORE = 'rv'
    PRICE_ASCENDING = 'p'
    PRICE_DESCENDING = 'pd'


class HttpMethod(Enum):
    GET = 'get'
    POST = 'post'


class ContentEncoding(Enum):
    BASE64 = 'base64'


def enum_value(enum_class, name: str, value) -> str:
    try:
        return enum_class(value).value
    except ValueError:
        raise InvalidParameterError(name, getattr(value, 'value', value)) from None


class ContextOptions:
    """
    Target specific filters, sent as an ordered ``context`` list of
    ``{"key": ..., "value": ...}`` pairs. Only the fields the target accepts
    may be set, see ``oxyscraper.targets``.
    """

    FIELDS: Tuple[str, ...] = (
        'nfpr',
        'safe_search',
        'sort_by',
        'min_price',
        'max_price',
        'hotel_occupancy',
        'hotel_dates',
        'http_method',
        'category_id',
        'merchant_id',
        'autoselect_variant',
    )

    nfpr: Optional[bool] = None
    safe_search: Optional[bool] = None
    sort_by: Optional[Union[SortBy, str]] = None
    min_price: Optional[Union[int, float]] = None
    max_price: Optional[Union[int, float]] = None
    hotel_occupancy: Optional[int] = None
    hotel_dates: Optional[str] = None
    http_method: Optional[Union[HttpMethod, str]] = None
    category_id: Optional[str] = None
    merchant_id: Optional[str] = None
    autoselect_variant: Optional[bool] = None

    def __init__(
        self,
        nfpr: Optional[bool] = None,
        safe_search: Optional[bool] = None,
        sort_by: Optional[Union[SortBy, str]] = None,
        min_price: Optional[Union[int, float]] = None,
        max_price: Optional[Union[int, float]] = None,
        hotel_occupancy: Optional[int] = None,
        hotel_dates: Optional[str] = None,  # "2024-06-01,2024-06-03"
        http_method: Optional[Union[HttpMethod, str]] = None,
        category_id: Optional[str] = None,
        merchant_id: Optional[str] = None,
        autoselect_variant: Optional[bool] = None
    ):
        self.nfpr = nfpr
        self.safe_search = safe_search
        self.sort_by = sort_by
        self.min_price = min_price
        self.max_price = max_price
        self.hotel_occupancy = hotel_occupancy
        self.hotel_dates = hotel_dates
        self.http_method = http_method
        self.category_id = category_id
        self.merchant_id = merchant_id
        self.autoselect_variant = autoselect_variant

    def items(self) -> Iterator[Tuple[str, Any]]:
        for name in self.FIELDS:
            value = getattr(self, name)

            if value is not None:
                yield name, value

    def get(self, name: str):
        return getattr(self, name, None)

    def __repr__(self) -> str:
        return 'ContextOptions(%s)' % ', '.join('%s=%r' % item for item in self.items())


class ScrapeConfig:
    """
    Options of one scrape.

    ``source`` names the target (``"google_shopping_search"``, ``"universal"``...)
    and decides which of the optional fields are accepted. Unset fields
    (``None``) fall back to the client defaults or are left out of the payload.

    ``poll_interval`` and ``timeout`` (seconds) are not sent to the service,
    they tune the polling loop and the deadline of this call.
    """

    source: str
    url: Optional[str] = None
    query: Optional[str] = None
    user_agent_type: Optional[Union[UserAgent, str]] = None
    render: Optional[Union[Render, str]] = None
    callback_url: Optional[str] = None
    geo_location: Optional[str] = None
    parse: bool = False
    parsing_instructions: Optional[Dict] = None
    domain: Optional[Union[Domain, str]] = None
    start_page: Optional[int] = None
    pages: Optional[int] = None
    limit: Optional[int] = None
    locale: Optional[str] = None
    results_language: Optional[str] = None
    content_encoding: Optional[Union[ContentEncoding, str]] = None
    context: Optional[ContextOptions] = None
    poll_interval: Optional[float] = None
    timeout: Optional[float] = None

    OPTIONAL_FIELDS: Tuple[str, ...] = (
        'domain',
        'start_page',
        'pages',
        'limit',
        'locale',
        'results_language',
        'content_encoding',
    )

    def __init__(
        self,
        source,
        url: Optional[str] = None,
        query: Optional[str] = None,
        user_agent_type: Optional[Union[UserAgent, str]] = None,
        render: Optional[Union[Render, str]] = None,
        callback_url: Optional[str] = None,
        geo_location: Optional[str] = None,
        parse: bool = False,
        parsing_instructions: Optional[Dict] = None,
        domain: Optional[Union[Domain, str]] = None,
        start_page: Optional[int] = None,
        pages: Optional[int] = None,
        limit: Optional[int] = None,
        locale: Optional[str] = None,
        results_language: Optional[str] = None,
        content_encoding: Optional[Union[ContentEncoding, str]] = None,
        context: Optional[ContextOptions] = None,
        poll_interval: Optional[float] = None,
        timeout: Optional[float] = None
    ):
        if context is not None and not isinstance(context, ContextOptions):
            raise InvalidParameterError('context', context, 'expected ContextOptions')

        if poll_interval is not None and not poll_interval > 0:
            raise InvalidParameterError('poll_interval', poll_interval, 'must be greater than 0')

        if timeout is not None and not timeout > 0:
            raise InvalidParameterError('timeout', timeout, 'must be greater than 0')

        self.source = source
        self.url = url
        self.query = query
        self.user_agent_type = user_agent_type
        self.render = render
        self.callback_url = callback_url
        self.geo_location = geo_location
        self.parse = parse
        self.parsing_instructions = parsing_instructions
        self.domain = domain
        self.start_page = start_page
        self.pages = pages
        self.limit = limit
        self.locale = locale
        self.results_language = results_language
        self.content_encoding = content_encoding
        self.context = context or ContextOptions()
        self.poll_interval = poll_interval
        self.timeout = timeout

    @property
    def custom_parser(self) -> bool:
        return self.parsing_instructions is not None

    @property
    def target_input(self) -> Optional[str]:
        return self.url if self.url is not None else self.query

    def __repr__(self) -> str:
        return '<ScrapeConfig source=%s %s>' % (getattr(self.source, 'source', self.source), self.target_input)
