"""
Catalogue of scrape targets.

Each source is one data-driven ``Target`` entry: which input it takes (an URL
or a search query), which optional fields and context filters it accepts,
their defaults and the checks they must pass. ``Target.build_payload`` turns a
``ScrapeConfig`` into the ordered payload sent to the service, raising a
``ValidationError`` before any network call when the config is invalid.
"""
from numbers import Real
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlparse

from dateutil.parser import isoparse

from .defaults import ClientDefaults, DEFAULTS
from .errors import InvalidParameterError, InvalidUrlError, ValidationError
from .parsing_instructions import validate_parse_instructions
from .scrape_config import (
    ContentEncoding, ContextOptions, Domain, HttpMethod, Render, ScrapeConfig, SortBy, UserAgent, enum_value
)

INPUT_URL = 'url'
INPUT_QUERY = 'query'

CLASS_SERP = 'serp'
CLASS_ECOMMERCE = 'ecommerce'
CLASS_UNIVERSAL = 'universal'


def _boolean(name: str, value) -> bool:
    if not isinstance(value, bool):
        raise InvalidParameterError(name, value, 'expected a boolean')

    return value


def _string(name: str, value) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidParameterError(name, value, 'expected a non empty string')

    return value


def _positive_int(name: str, value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidParameterError(name, value, 'must be an integer greater than 0')

    return value


def _price(name: str, value) -> Union[int, float]:
    if isinstance(value, bool) or not isinstance(value, Real) or value < 0:
        raise InvalidParameterError(name, value, 'must be a number greater than or equal to 0')

    return value


def _sort_by(name: str, value) -> str:
    return enum_value(SortBy, name, value)


def _http_method(name: str, value) -> str:
    return enum_value(HttpMethod, name, value)


def _hotel_dates(name: str, value) -> str:
    _string(name, value)
    parts = value.split(',')

    if len(parts) != 2:
        raise InvalidParameterError(name, value, 'expected "check_in,check_out" dates')

    try:
        check_in, check_out = (isoparse(part.strip()) for part in parts)
    except ValueError:
        raise InvalidParameterError(name, value, 'dates must be ISO 8601 formatted') from None

    if check_out <= check_in:
        raise InvalidParameterError(name, value, 'check out must be after check in')

    return value


class ContextField:

    def __init__(self, name: str, check: Callable[[str, Any], Any], default=None):
        self.name = name
        self.check = check
        self.default = default


NFPR = ContextField('nfpr', _boolean)
SAFE_SEARCH = ContextField('safe_search', _boolean)
SORT_BY = ContextField('sort_by', _sort_by, default=SortBy.RELEVANCE.value)
MIN_PRICE = ContextField('min_price', _price)
MAX_PRICE = ContextField('max_price', _price)
HOTEL_OCCUPANCY = ContextField('hotel_occupancy', _positive_int, default=2)
HOTEL_DATES = ContextField('hotel_dates', _hotel_dates)
HTTP_METHOD = ContextField('http_method', _http_method, default=HttpMethod.GET.value)
CATEGORY_ID = ContextField('category_id', _string)
MERCHANT_ID = ContextField('merchant_id', _string)
AUTOSELECT_VARIANT = ContextField('autoselect_variant', _boolean)


PAGINATION = ('domain', 'start_page', 'pages', 'locale', 'results_language')


class Target:

    def __init__(
        self,
        source: str,
        input_kind: str,
        target_class: str = CLASS_SERP,
        options: Iterable[str] = (),
        url_host: Optional[str] = None,
        allowed_limits: Optional[Tuple[int, ...]] = None,
        context: Iterable[ContextField] = ()
    ):
        self.source = source
        self.input_kind = input_kind
        self.target_class = target_class
        self.options: FrozenSet[str] = frozenset(options)
        self.url_host = url_host
        self.allowed_limits = allowed_limits
        self.context: Tuple[ContextField, ...] = tuple(context)

        unknown = self.options - set(ScrapeConfig.OPTIONAL_FIELDS)
        assert not unknown, 'unknown options %s' % unknown

    def accepts(self, option: str) -> bool:
        return option in self.options

    def validate(self, config: ScrapeConfig, defaults: ClientDefaults = DEFAULTS):
        self.build_payload(config, defaults=defaults)

    def build_payload(self, config: ScrapeConfig, defaults: ClientDefaults = DEFAULTS) -> Dict[str, Any]:
        payload: Dict[str, Any] = {'source': self.source}

        if self.input_kind == INPUT_URL:
            if config.query is not None:
                raise InvalidParameterError('query', config.query, 'source %s takes an url' % self.source)

            payload['url'] = self._check_url(config.url)
        else:
            if config.url is not None:
                raise InvalidParameterError('url', config.url, 'source %s takes a query' % self.source)

            if not isinstance(config.query, str) or not config.query.strip():
                raise ValidationError('a non empty query is required by source %s' % self.source)

            payload['query'] = config.query

        self._reject_unsupported(config)

        if self.accepts('domain'):
            payload['domain'] = enum_value(Domain, 'domain', config.domain if config.domain is not None else defaults.domain)

        if self.accepts('start_page'):
            payload['start_page'] = _positive_int('start_page', self._or_default(config.start_page, defaults.start_page))

        if self.accepts('pages'):
            payload['pages'] = _positive_int('pages', self._or_default(config.pages, defaults.pages))

        if self.accepts('limit'):
            limit = _positive_int('limit', self._or_default(config.limit, defaults.limit_for(self.target_class)))

            if self.allowed_limits is not None and limit not in self.allowed_limits:
                raise InvalidParameterError('limit', limit, 'accepted values: %s' % ', '.join(map(str, self.allowed_limits)))

            payload['limit'] = limit

        if self.accepts('locale') and config.locale is not None:
            payload['locale'] = _string('locale', config.locale)

        if self.accepts('results_language') and config.results_language is not None:
            payload['results_language'] = _string('results_language', config.results_language)

        if config.geo_location is not None:
            payload['geo_location'] = _string('geo_location', config.geo_location)

        payload['user_agent_type'] = enum_value(
            UserAgent, 'user_agent_type', self._or_default(config.user_agent_type, defaults.user_agent_type)
        )

        if config.render is not None:
            payload['render'] = enum_value(Render, 'render', config.render)

        if self.accepts('content_encoding'):
            payload['content_encoding'] = enum_value(
                ContentEncoding, 'content_encoding', self._or_default(config.content_encoding, defaults.content_encoding)
            )

        if config.callback_url is not None:
            payload['callback_url'] = self._check_url(config.callback_url, name='callback_url', host=None)

        payload['parse'] = _boolean('parse', config.parse)

        if config.parsing_instructions is not None:
            if config.parse is not True:
                raise InvalidParameterError('parse', config.parse, 'parsing_instructions require parse=True')

            validate_parse_instructions(config.parsing_instructions)
            payload['parsing_instructions'] = config.parsing_instructions

        context = self._build_context(config.context)

        if context:
            payload['context'] = context

        return payload

    @staticmethod
    def _or_default(value, default):
        return default if value is None else value

    def _reject_unsupported(self, config: ScrapeConfig):
        for option in ScrapeConfig.OPTIONAL_FIELDS:
            value = getattr(config, option)

            if value is not None and not self.accepts(option):
                raise InvalidParameterError(option, getattr(value, 'value', value), 'not supported by source %s' % self.source)

    def _check_url(self, url, name: str = 'url', host: Optional[str] = '') -> str:
        if host == '':
            host = self.url_host

        if not isinstance(url, str) or not url:
            raise InvalidUrlError('%s parameter is required by source %s' % (name, self.source))

        parsed = urlparse(url)

        if parsed.scheme not in ('http', 'https') or not parsed.netloc:
            raise InvalidUrlError('%s %r must be an absolute http(s) url' % (name, url))

        if host is not None and host not in parsed.netloc:
            raise InvalidUrlError('%s %r does not belong to %s' % (name, url, host))

        return url

    def _build_context(self, options: ContextOptions) -> List[Dict[str, Any]]:
        accepted = {field.name for field in self.context}

        for name, value in options.items():
            if name not in accepted:
                raise InvalidParameterError(name, getattr(value, 'value', value), 'not supported by source %s' % self.source)

        context = []
        values = {}

        for field in self.context:
            value = options.get(field.name)

            if value is None:
                value = field.default

            if value is None:
                continue

            values[field.name] = field.check(field.name, value)
            context.append({'key': field.name, 'value': values[field.name]})

        min_price, max_price = values.get('min_price'), values.get('max_price')

        if min_price is not None and max_price is not None and min_price > max_price:
            raise InvalidParameterError('min_price', min_price, 'must not exceed max_price %s' % max_price)

        return context

    def __repr__(self) -> str:
        return '<Target %s>' % self.source


TARGETS: Dict[str, Target] = {target.source: target for target in (
    Target(
        'universal', INPUT_URL, target_class=CLASS_UNIVERSAL,
        options=('locale', 'content_encoding'),
        context=(HTTP_METHOD,)
    ),
    Target('google_url', INPUT_URL, url_host='google'),
    Target(
        'google_search', INPUT_QUERY,
        options=PAGINATION + ('limit',),
        context=(NFPR, SAFE_SEARCH)
    ),
    Target(
        'google_hotels', INPUT_QUERY,
        options=PAGINATION,
        context=(HOTEL_OCCUPANCY, HOTEL_DATES)
    ),
    Target('google_shopping_url', INPUT_URL, target_class=CLASS_ECOMMERCE, url_host='shopping.google'),
    Target(
        'google_shopping_search', INPUT_QUERY, target_class=CLASS_ECOMMERCE,
        options=PAGINATION,
        context=(NFPR, SORT_BY, MIN_PRICE, MAX_PRICE)
    ),
    Target(
        'google_shopping_product', INPUT_QUERY, target_class=CLASS_ECOMMERCE,
        options=('domain', 'locale', 'results_language')
    ),
    Target(
        'google_shopping_pricing', INPUT_QUERY, target_class=CLASS_ECOMMERCE,
        options=PAGINATION
    ),
    Target(
        'bing_search', INPUT_QUERY,
        options=('domain', 'start_page', 'pages', 'limit', 'locale')
    ),
    Target(
        'amazon_search', INPUT_QUERY, target_class=CLASS_ECOMMERCE,
        options=('domain', 'start_page', 'pages', 'locale'),
        context=(CATEGORY_ID, MERCHANT_ID)
    ),
    Target(
        'amazon_product', INPUT_QUERY, target_class=CLASS_ECOMMERCE,
        options=('domain', 'locale'),
        context=(AUTOSELECT_VARIANT,)
    ),
    Target(
        'wayfair_search', INPUT_QUERY, target_class=CLASS_ECOMMERCE,
        options=('start_page', 'pages', 'limit'),
        allowed_limits=(24, 48, 96)
    ),
)}


def get_target(source: Union[str, Target]) -> Target:
    if isinstance(source, Target):
        return source

    try:
        return TARGETS[source]
    except (KeyError, TypeError):
        raise ValidationError('unsupported source %r' % (source,), code='ERR::VALIDATION::UNSUPPORTED_SOURCE') from None
