"""
Theme assembly, fallback construction and persistence round-trip tests.
"""

import re

import pytest

from focustheme.domain.models import AcceptedTheme, ThemeKind, is_generated_theme
from focustheme.exceptions import DiversitySimilarityError, StructuralValidationError
from focustheme.generation.diversity_validator import DiversitySettings, DiversityValidator
from focustheme.generation.theme_assembler import (
    ThemeAssembler,
    accessibility_report,
    generate_theme_name,
    hash32
)
from focustheme.models.candidate import CandidateTheme, VisualElements


def make_assembler(now: float = 1700000000.0) -> ThemeAssembler:
    return ThemeAssembler(DiversityValidator(DiversitySettings()), clock=lambda: now)


def test_hash32_matches_rolling_int32_hash():
    assert hash32('') == '0'
    assert hash32('a') == '2p'
    assert hash32('ocean') == hash32('ocean')
    # Characters outside the BMP hash as two surrogate units
    assert hash32('\U0001F600') == '11zz7'
    # Long input overflows int32 and must still produce a positive base36 value
    assert re.fullmatch(r'[0-9a-z]+', hash32('a much longer prompt that overflows'))


def test_generate_theme_name():
    assert generate_theme_name('  OCEAN waves ') == 'Ocean waves'
    assert generate_theme_name('a very long prompt about oceans') == 'A very long prompt a...'


def test_assemble_builds_accepted_theme(ocean_candidate):
    assembler = make_assembler()
    theme = assembler.assemble(ocean_candidate, 'ocean waves')

    assert re.fullmatch(r'ai-theme-[0-9a-z]+-1700000000000', theme.id)
    assert theme.name == 'Tidal Focus'
    assert theme.kind is ThemeKind.GENERATED
    assert is_generated_theme(theme)
    assert theme.created_at == 1700000000000
    assert theme.study_colors.gradient == ('#87CEEB', '#0077BE')
    assert theme.study_colors.background == '#87CEEB'
    assert theme.animations.duration == 4000
    assert theme.animations.easing == 'ease-in-out'
    assert theme.diversity_report.is_unique
    assert theme.diversity_report.overall_distance >= 50

    particles = theme.background_elements[0]
    assert particles.type == 'particles'
    assert particles.config['pattern'] == 'bubbles'
    assert particles.config['count'] == 6
    assert particles.config['opacity'] == 0.4

    assert assembler.diversity_validator.session_count() == 1


def test_assembled_theme_is_immutable(ocean_candidate):
    theme = make_assembler().assemble(ocean_candidate, 'ocean')
    with pytest.raises(Exception):
        theme.name = 'changed'
    with pytest.raises(TypeError):
        theme.background_elements[0].config['count'] = 99


def test_assemble_uses_prompt_when_name_missing(ocean_response):
    ocean_response['themeName'] = None
    theme = make_assembler().assemble(CandidateTheme.model_validate(ocean_response), 'deep blue sea')
    assert theme.name == 'Deep blue sea'


def test_assemble_rejects_fallback_palette(fallback_candidate):
    assembler = make_assembler()
    with pytest.raises(DiversitySimilarityError) as excinfo:
        assembler.assemble(fallback_candidate, 'anything')

    assert 'fallback theme' in str(excinfo.value)
    assert excinfo.value.distance == 0
    assert assembler.diversity_validator.session_count() == 0


def test_assemble_rejects_repeat_of_session_theme(ocean_candidate):
    assembler = make_assembler()
    first = assembler.assemble(ocean_candidate, 'ocean')

    with pytest.raises(DiversitySimilarityError) as excinfo:
        assembler.assemble(ocean_candidate, 'ocean')

    assert 'too similar to 1 existing theme(s) (100.0% similarity)' in str(excinfo.value)
    assert excinfo.value.conflicting_ids == [first.id]


def test_validate_structure_names_field(ocean_response):
    assembler = make_assembler()

    missing = dict(ocean_response, studyColors={'primary': '#0077BE', 'secondary': '#87CEEB'})
    with pytest.raises(StructuralValidationError) as excinfo:
        assembler.validate_structure(CandidateTheme.model_validate(missing))
    assert str(excinfo.value) == 'Missing accent color in studyColors'
    assert excinfo.value.field_name == 'studyColors.accent'

    malformed = dict(ocean_response, breakColors={'primary': '#12', 'secondary': '#E0FFFF', 'accent': '#008B8B'})
    with pytest.raises(StructuralValidationError) as excinfo:
        assembler.validate_structure(CandidateTheme.model_validate(malformed))
    assert str(excinfo.value) == 'Invalid hex color format for primary in breakColors: #12'

    no_visuals = dict(ocean_response, visualElements=None)
    with pytest.raises(StructuralValidationError) as excinfo:
        assembler.validate_structure(CandidateTheme.model_validate(no_visuals))
    assert str(excinfo.value) == 'Missing visual elements in AI response'


@pytest.mark.parametrize("elements, expected", [
    (['one'], 5),
    (['one', 'two', 'three'], 9),
    (['e'] * 6, 15),
])
def test_particle_count_is_clamped(elements, expected):
    visual = VisualElements(backgroundType='particles', elements=elements)
    (element,) = ThemeAssembler.background_elements(visual)
    assert element.config['count'] == expected


def test_pattern_and_gradient_backgrounds():
    (pattern,) = ThemeAssembler.background_elements(VisualElements(backgroundType='pattern', elements=['fish']))
    assert dict(pattern.config) == {
        'studyCharacter': 'fish',
        'breakCharacter': 'default-break',
        'position': 'left-side',
        'scale': 0.8,
    }

    (gradient,) = ThemeAssembler.background_elements(VisualElements(backgroundType='gradient', elements=None))
    assert gradient.config['colors'] == ('#f0f0f0', '#e0e0e0')
    assert gradient.config['direction'] == 'vertical'

    assert ThemeAssembler.background_elements(VisualElements(backgroundType='particles', elements=[])) == ()


def test_animation_duration_clamp():
    from focustheme.models.candidate import AnimationSuggestion

    assert ThemeAssembler.animations(None).duration == 6000
    assert ThemeAssembler.animations([AnimationSuggestion(type='wave', duration=20000)]).duration == 10000
    assert ThemeAssembler.animations([AnimationSuggestion(type='wave', duration=100)]).duration == 3000
    assert ThemeAssembler.animations([AnimationSuggestion(type='wave')]).duration == 6000


def test_build_fallback():
    assembler = make_assembler()
    theme = assembler.build_fallback('ocean waves')

    assert theme.kind is ThemeKind.FALLBACK
    assert theme.name == 'Ocean waves'
    assert theme.confidence == 0.5
    assert theme.study_colors.primary == '#6B73FF'
    assert theme.break_colors.gradient == ('#F0FFF4', '#E6FFFA')
    assert theme.animations.particles.count == 6
    assert theme.animations.particles.opacity == 0.3
    assert theme.diversity_report.is_unique is False
    assert theme.diversity_report.similarity_score == 1.0
    assert theme.diversity_report.conflicting_ids == ('fallback',)
    assert assembler.diversity_validator.session_count() == 1


def test_accessibility_report_for_fallback():
    theme = make_assembler().build_fallback('x')
    report = accessibility_report(theme.study_colors, theme.break_colors)
    assert report.study.contrast > 1
    assert report.meets_aa == (report.study.meets_aa and report.break_.meets_aa)


def test_accepted_theme_dict_round_trip(ocean_candidate):
    theme = make_assembler().assemble(ocean_candidate, 'ocean')
    assert AcceptedTheme.from_dict(theme.to_dict()) == theme
