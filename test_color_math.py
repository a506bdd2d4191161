"""
Color math and semantic context tests.
"""

import pytest

from focustheme.tools.theme import (
    MAX_RGB_DISTANCE,
    SemanticContextResolver,
    available_contexts,
    contrast_ratio,
    expected_animations,
    expected_color_families,
    hex_to_hsl,
    hex_to_rgb,
    is_dark_color,
    is_valid_hex,
    meets_wcag_aa,
    rgb_distance
)


def test_hex_to_rgb_accepts_optional_hash():
    assert hex_to_rgb('#0077BE') == (0, 119, 190)
    assert hex_to_rgb('0077be') == (0, 119, 190)


@pytest.mark.parametrize("value", ['', '#FFF', '#GGGGGG', 'blue', None, '#1234567'])
def test_hex_to_rgb_rejects_invalid(value):
    assert hex_to_rgb(value) is None
    assert not is_valid_hex(value)


def test_rgb_distance_bounds():
    assert rgb_distance('#0077BE', '#0077BE') == 0
    assert rgb_distance('#000000', '#FFFFFF') == pytest.approx(441.67, abs=0.1)
    assert MAX_RGB_DISTANCE == pytest.approx(441.67, abs=0.01)


def test_rgb_distance_invalid_colors():
    # Unparseable colors count as identical unless told otherwise
    assert rgb_distance('nope', '#FFFFFF') == 0
    assert rgb_distance('nope', '#FFFFFF', invalid_distance=MAX_RGB_DISTANCE) == MAX_RGB_DISTANCE


def test_hex_to_hsl_known_values():
    assert hex_to_hsl('#FF0000') == (0, 100, 50)
    assert hex_to_hsl('#0077BE') == (202, 100, 37)
    assert hex_to_hsl('#808080') == (0, 0, 50)
    assert hex_to_hsl('#008B8B') == (180, 100, 27)


def test_hex_to_hsl_is_pure_and_never_raises():
    assert hex_to_hsl('#87CEEB') == hex_to_hsl('#87CEEB')
    assert hex_to_hsl('not-a-color') is None
    assert hex_to_hsl(None) is None


def test_contrast_and_darkness():
    assert contrast_ratio('#000000', '#FFFFFF') == pytest.approx(21.0)
    assert contrast_ratio('#FFFFFF', '#000000') == pytest.approx(21.0)
    assert meets_wcag_aa('#000000', '#FFFFFF')
    assert not meets_wcag_aa('#F0F2FF', '#FFFFFF')
    assert is_dark_color('#1A202C')
    assert not is_dark_color('#F0FFF4')


def test_resolver_picks_most_keyword_matches():
    resolver = SemanticContextResolver()
    assert resolver.resolve('ocean waves').name == 'ocean'
    assert resolver.resolve('Winter Snow').name == 'winter'
    assert resolver.resolve('quiet library') is None


def test_resolver_ties_go_to_first_declared():
    # "fire" and "sunset" both list "red" and "orange"; sunset is declared first
    assert SemanticContextResolver().resolve('red orange').name == 'sunset'


def test_context_catalog_helpers():
    assert available_contexts() == [
        'ocean', 'sunset', 'forest', 'mountain', 'fire', 'space', 'spring', 'winter'
    ]
    assert [family.name for family in expected_color_families('ocean')] == ['Blues', 'Cool Colors']
    assert 'flowing' in expected_animations('ocean')
    assert expected_color_families('unknown') == []
    assert expected_animations('unknown') == []
