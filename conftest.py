"""Shared fixtures: candidate themes as the AI service would return them."""

import copy

import pytest

from focustheme.models.candidate import CandidateTheme

OCEAN_RESPONSE = {
    "studyColors": {
        "primary": "#0077BE",
        "secondary": "#87CEEB",
        "accent": "#20B2AA",
        "description": "Deep water focus"
    },
    "breakColors": {
        "primary": "#4A90E2",
        "secondary": "#E0FFFF",
        "accent": "#008B8B",
        "description": "Shallow lagoon rest"
    },
    "visualElements": {
        "backgroundType": "particles",
        "elements": ["bubbles", "waves"],
        "animations": [
            {"type": "flowing", "duration": 4000, "properties": {}},
            {"type": "wave", "duration": 5000, "properties": {}}
        ]
    },
    "themeName": "Tidal Focus",
    "confidence": 0.9
}

FALLBACK_RESPONSE = {
    "studyColors": {"primary": "#6B73FF", "secondary": "#F0F2FF", "accent": "#4C51BF"},
    "breakColors": {"primary": "#48BB78", "secondary": "#F0FFF4", "accent": "#38A169"},
    "visualElements": {"backgroundType": "gradient", "elements": ["#F0F2FF", "#E6E8FF"]},
    "themeName": "Default Again",
    "confidence": 0.8
}

WINTER_RESPONSE = {
    "studyColors": {"primary": "#B0E0E6", "secondary": "#F0F8FF", "accent": "#708090"},
    "breakColors": {"primary": "#DCDCDC", "secondary": "#E0FFFF", "accent": "#4682B4"},
    "visualElements": {
        "backgroundType": "pattern",
        "elements": ["snowflake", "icicle"],
        "animations": [
            {"type": "flicker", "duration": 2000},
            {"type": "intensity", "duration": 2000}
        ]
    },
    "themeName": "Frosted Embers",
    "confidence": 0.7
}


@pytest.fixture
def ocean_response():
    return copy.deepcopy(OCEAN_RESPONSE)


@pytest.fixture
def ocean_candidate():
    return CandidateTheme.model_validate(copy.deepcopy(OCEAN_RESPONSE))


@pytest.fixture
def fallback_candidate():
    return CandidateTheme.model_validate(copy.deepcopy(FALLBACK_RESPONSE))


@pytest.fixture
def winter_candidate():
    return CandidateTheme.model_validate(copy.deepcopy(WINTER_RESPONSE))
