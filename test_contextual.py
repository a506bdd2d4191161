"""
Contextual validation tests.
"""

import pytest

from focustheme.generation.contextual_validator import ContextualValidator, family_score
from focustheme.models.candidate import CandidateTheme
from focustheme.tools.theme.semantic_contexts import BLUES, ORANGES


def with_animations(candidate: CandidateTheme, *types: str) -> CandidateTheme:
    data = candidate.model_dump()
    data['visualElements']['animations'] = [{'type': animation_type} for animation_type in types]
    return CandidateTheme.model_validate(data)


def test_ocean_theme_is_appropriate(ocean_candidate):
    result = ContextualValidator().validate('ocean waves', ocean_candidate)

    assert result.context_name == 'ocean'
    assert result.color_score > 0.6
    assert result.animation_score > 0.6
    assert result.is_appropriate
    assert result.issues == []


def test_winter_with_fire_animations_is_rejected(winter_candidate):
    result = ContextualValidator().validate('winter snow', winter_candidate)

    assert result.context_name == 'winter'
    assert result.animation_score < 0.6
    assert not result.is_appropriate
    assert len(result.issues) > 0
    assert 'Animation type "flicker" is inappropriate for this context' in result.issues
    assert any(rec.startswith('Use crystalline, crisp') for rec in result.recommendations)


def test_no_context_returns_neutral_result(ocean_candidate):
    result = ContextualValidator().validate('quiet library', ocean_candidate)

    assert result.is_appropriate
    assert result.color_score == result.animation_score == result.overall_score == 0.7
    assert result.recommendations == [
        'Consider using more specific prompt keywords for better contextual validation'
    ]


def test_missing_animations_score_half(ocean_candidate):
    candidate = with_animations(ocean_candidate)
    result = ContextualValidator().validate('ocean', candidate)

    assert result.animation_score == 0.5
    assert 'No animations specified' in result.issues
    assert result.recommendations[-1].startswith('Consider adding flowing or wave')


def test_animation_matching_is_bidirectional_and_case_insensitive(ocean_candidate):
    # "Gentle-Wave" contains "wave"; "flow" is contained in "flowing"
    candidate = with_animations(ocean_candidate, 'Gentle-Wave', 'flow')
    result = ContextualValidator().validate('ocean', candidate)
    assert result.animation_score == 1.0


def test_mixed_animations_score(ocean_candidate):
    candidate = with_animations(ocean_candidate, 'ripple', 'flicker', 'spin')
    result = ContextualValidator().validate('ocean', candidate)
    # (1 appropriate - 1 inappropriate) / 3
    assert result.animation_score == 0


def test_wrong_colors_raise_phase_issues(ocean_candidate):
    data = ocean_candidate.model_dump()
    data['studyColors'].update(primary='#FF4500', secondary='#DC143C', accent='#FF6347')
    data['breakColors'].update(primary='#FF4500', secondary='#DC143C', accent='#FF6347')
    result = ContextualValidator().validate('ocean', CandidateTheme.model_validate(data))

    assert result.color_score < 0.4
    assert 'Study colors do not match expected color families for this prompt' in result.issues
    assert 'Break colors do not match expected color families for this prompt' in result.issues
    assert 'Consider using colors from: Blues, Cool Colors' in result.recommendations


def test_hue_falloff_and_wraparound():
    # Inside the band on every axis
    assert family_score((200, 50, 50), BLUES) == pytest.approx(1.0)
    # 30 degrees past the boundary: half the hue weight
    assert family_score((270, 50, 50), BLUES) == pytest.approx(0.35 + 0.2 + 0.1)
    # 60 or more degrees away: no hue credit
    assert family_score((300, 50, 50), BLUES) == pytest.approx(0.3)
    # Oranges/Reds wrap from 340 to 60
    assert family_score((350, 70, 50), ORANGES) == pytest.approx(1.0)
    assert family_score((10, 70, 50), ORANGES) == pytest.approx(1.0)
    assert family_score((310, 70, 50), ORANGES) == pytest.approx(0.35 + 0.2 + 0.1)


def test_saturation_and_lightness_falloff():
    # Saturation 10 vs band 30-100 (midpoint 65): 1 - 55/50 clamps to 0
    assert family_score((200, 10, 50), BLUES) == pytest.approx(0.7 + 0.0 + 0.1)
    # Lightness 90 vs band 20-80 (midpoint 50): 1 - 40/50 = 0.2
    assert family_score((200, 50, 90), BLUES) == pytest.approx(0.7 + 0.2 + 0.02)
