import pytest

from oxyscraper import ParseInstructionsError
from oxyscraper.parsing_instructions import count_fields, validate_parse_instructions

PRODUCT_INSTRUCTIONS = {
    'title': {'_fns': [{'_fn': 'xpath_one', '_args': ['//h1/text()']}]},
    'price': {
        '_fns': [
            {'_fn': 'css_one', '_args': '.price'},
            {'_fn': 'element_text'},
            {'_fn': 'amount_from_string'},
        ]
    },
    'reviews': {
        '_fns': [{'_fn': 'xpath', '_args': ['//div[@class="review"]']}],
        '_items': {
            'author': {'_fns': [{'_fn': 'xpath_one', '_args': ['.//span/text()']}]},
            'rating': {'_fns': [{'_fn': 'css_one', '_args': ['.stars']}, {'_fn': 'convert_to_int'}]},
        }
    },
    'seller': {
        'name': {'_fns': [{'_fn': 'css_one', '_args': ['.seller']}]},
    },
}


def test_valid_instruction_set():
    validate_parse_instructions(PRODUCT_INSTRUCTIONS)


def test_count_fields():
    assert count_fields(PRODUCT_INSTRUCTIONS) == 7


@pytest.mark.parametrize('instructions, fragment', [
    ({}, 'empty'),
    ([], 'expected a mapping'),
    ({'title': 'h1'}, 'title'),
    ({'title': {'_fns': []}}, '"_fns" must be a non empty list'),
    ({'title': {'_fns': [{'_fn': 'teleport'}]}}, "unsupported function 'teleport'"),
    ({'title': {'_fns': [{'_args': ['//h1']}]}}, 'unsupported function None'),
    ({'title': {'_fns': [{'_fn': 'xpath'}]}}, 'requires "_args"'),
    ({'title': {'_fns': [{'_fn': 'css', '_args': [3]}]}}, 'selector "_args"'),
    ({'title': {'_fns': [{'_fn': 'length', '_kwargs': {}}]}}, 'unexpected keys _kwargs'),
    ({'title': {'_fns': ['xpath']}}, 'function entry must be a mapping'),
    ({'title': {'_fns': [{'_fn': 'length'}], '_cache': True}}, 'unsupported reserved key "_cache"'),
    ({'list': {'_fns': [{'_fn': 'css', '_args': ['li']}], '_items': {}}}, '"_items" must be a non empty mapping'),
])
def test_invalid_instruction_sets(instructions, fragment):
    with pytest.raises(ParseInstructionsError) as e:
        validate_parse_instructions(instructions)

    assert fragment in str(e.value)


def test_errors_point_at_the_nested_entry():
    instructions = {
        'reviews': {
            '_fns': [{'_fn': 'xpath', '_args': ['//div']}],
            '_items': {
                'rating': {'_fns': [{'_fn': 'convert_to_int'}, {'_fn': 'stars'}]},
            }
        }
    }

    with pytest.raises(ParseInstructionsError) as e:
        validate_parse_instructions(instructions)

    assert e.value.path == ('reviews', '_items', 'rating', '_fns', '1')
    assert 'reviews._items.rating._fns.1' in str(e.value)
