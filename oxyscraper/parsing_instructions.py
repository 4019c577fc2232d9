"""
Validation of custom parser instructions.

A parse instruction set maps output field names to extraction pipelines:

    {
        "title": {"_fns": [{"_fn": "xpath_one", "_args": ["//h1/text()"]}]},
        "prices": {
            "_fns": [{"_fn": "css", "_args": [".price"]}],
            "_items": {
                "amount": {"_fns": [{"_fn": "amount_from_string"}]}
            }
        }
    }

Every ``_fn`` must name a supported operator. Nested field groups and
``_items`` are validated recursively, the set is sent to the service verbatim.
"""
from typing import Any, Dict, Mapping, Tuple

from .errors import ParseInstructionsError

SELECTOR_FUNCTIONS = frozenset({
    'xpath',
    'xpath_one',
    'css',
    'css_one',
})

SUPPORTED_FUNCTIONS = SELECTOR_FUNCTIONS | frozenset({
    'element_text',
    'length',
    'select_nth',
    'join',
    'amount_from_string',
    'amount_range_from_string',
    'regex_find_all',
    'regex_search',
    'regex_substring',
    'convert_to_float',
    'convert_to_int',
    'convert_to_str',
    'average',
    'max',
    'min',
    'product',
    'sum',
})

# functions which cannot run without arguments
FUNCTIONS_REQUIRING_ARGS = SELECTOR_FUNCTIONS | frozenset({
    'select_nth',
    'join',
    'regex_find_all',
    'regex_search',
    'regex_substring',
})

FUNCTIONS_KEY = '_fns'
FUNCTION_KEY = '_fn'
ARGS_KEY = '_args'
ITEMS_KEY = '_items'

RESERVED_KEYS = frozenset({FUNCTIONS_KEY, ITEMS_KEY})


def validate_parse_instructions(instructions: Mapping[str, Any]):
    if not isinstance(instructions, Mapping):
        raise ParseInstructionsError('expected a mapping, got %s' % type(instructions).__name__)

    if not instructions:
        raise ParseInstructionsError('instruction set is empty')

    _validate_group(instructions, ())


def _validate_group(group: Mapping[str, Any], path: Tuple[str, ...]):
    for key, value in group.items():
        if not isinstance(key, str) or not key:
            raise ParseInstructionsError('field names must be non empty strings', path)

        field_path = path + (key,)

        if key == FUNCTIONS_KEY:
            _validate_functions(value, field_path)
        elif key == ITEMS_KEY:
            if not isinstance(value, Mapping) or not value:
                raise ParseInstructionsError('"_items" must be a non empty mapping', field_path)

            _validate_group(value, field_path)
        elif key.startswith('_'):
            raise ParseInstructionsError('unsupported reserved key "%s"' % key, path)
        else:
            if not isinstance(value, Mapping) or not value:
                raise ParseInstructionsError('field must be a non empty mapping', field_path)

            _validate_group(value, field_path)


def _validate_functions(functions, path: Tuple[str, ...]):
    if not isinstance(functions, list) or not functions:
        raise ParseInstructionsError('"_fns" must be a non empty list', path)

    for position, function in enumerate(functions):
        function_path = path + (str(position),)

        if not isinstance(function, Mapping):
            raise ParseInstructionsError('function entry must be a mapping', function_path)

        name = function.get(FUNCTION_KEY)

        if name not in SUPPORTED_FUNCTIONS:
            raise ParseInstructionsError('unsupported function %r' % (name,), function_path)

        unknown = set(function.keys()) - {FUNCTION_KEY, ARGS_KEY}

        if unknown:
            raise ParseInstructionsError('unexpected keys %s' % ', '.join(sorted(map(str, unknown))), function_path)

        if name in FUNCTIONS_REQUIRING_ARGS and function.get(ARGS_KEY) in (None, '', []):
            raise ParseInstructionsError('function %s requires "_args"' % name, function_path)

        if name in SELECTOR_FUNCTIONS:
            _validate_selector_args(function[ARGS_KEY], function_path)


def _validate_selector_args(args, path: Tuple[str, ...]):
    if isinstance(args, str):
        args = [args]

    if not isinstance(args, list) or not all(isinstance(arg, str) and arg for arg in args):
        raise ParseInstructionsError('selector "_args" must be a string or a list of strings', path)


def count_fields(instructions: Dict[str, Any]) -> int:
    count = 0

    for key, value in instructions.items():
        if key in RESERVED_KEYS:
            if key == ITEMS_KEY:
                count += count_fields(value)
            continue

        count += 1

        if isinstance(value, Mapping):
            count += count_fields(value)

    return count
