"""
Prompt composition for the theme generation service.

Builds the system and user instructions sent to the text-generation engine:
accessibility rules, semantic guidance for the prompt, colors to avoid,
an escalating diversity directive and a randomized creative direction.
"""

import random
import time
from dataclasses import dataclass
from typing import Optional, Sequence

from focustheme.domain.models import DiversityLevel, ThemeColorSummary
from focustheme.tools.theme.semantic_contexts import SemanticContext, SemanticContextResolver

CREATIVE_DIRECTIONS = (
    'unique variation',
    'creative interpretation',
    'distinctive approach',
    'original perspective',
    'fresh take',
    'innovative style',
    'novel combination',
    'artistic flair',
)

DIVERSITY_DIRECTIVES = {
    'maximum': """MAXIMUM DIVERSITY MODE:
- Generate extremely unique color combinations
- Avoid any common or predictable color schemes
- Push creative boundaries while maintaining usability
- Ensure maximum visual distinction from defaults""",
    'high': """HIGH DIVERSITY MODE:
- Prioritize unique and distinctive color choices
- Avoid standard color combinations
- Emphasize creative and contextual appropriateness""",
    'standard': """STANDARD DIVERSITY MODE:
- Generate visually distinct themes
- Ensure contextual appropriateness
- Avoid repetitive color patterns""",
}

RESPONSE_SCHEMA = """{
  "studyColors": {
    "primary": "#hexcolor",
    "secondary": "#hexcolor",
    "accent": "#hexcolor",
    "description": "brief description focusing on uniqueness"
  },
  "breakColors": {
    "primary": "#hexcolor",
    "secondary": "#hexcolor",
    "accent": "#hexcolor",
    "description": "brief description focusing on uniqueness"
  },
  "visualElements": {
    "backgroundType": "pattern|particles|gradient",
    "elements": ["element1", "element2"],
    "animations": [{"type": "animation_type", "duration": 3000, "properties": {}}]
  },
  "themeName": "Unique Theme Name",
  "confidence": 0.95
}"""

GENERAL_GUIDANCE = """CREATIVE INTERPRETATION GUIDANCE:
- Analyze the prompt for color associations, mood, and visual elements
- Consider what colors and animations would best represent this concept
- Think beyond literal interpretations to create unique, artistic themes
- Ensure the theme captures the essence and feeling of the prompt

CONTEXTUAL VALIDATION:
- Colors should be semantically appropriate for the prompt
- Animations should match the implied mood and energy level
- Overall theme should feel cohesive with the prompt's meaning"""


@dataclass(frozen=True)
class PromptOptions:
    """What the engine needs to know about the current attempt."""
    diversity_level: DiversityLevel = 'standard'
    previous_themes: Sequence[ThemeColorSummary] = ()
    session_token: Optional[str] = None


@dataclass(frozen=True)
class ComposedPrompt:
    system_text: str
    user_text: str
    randomization_seed: str
    creative_direction: str
    diversity_directive: str


class PromptComposer:
    """Builds engine instructions for a single generation attempt.

    Deterministic for a given `rng` and `clock`; both are injectable so tests
    can pin the creative direction and seed.
    """

    def __init__(
        self,
        resolver: Optional[SemanticContextResolver] = None,
        rng: Optional[random.Random] = None,
        clock=time.time
    ):
        self.resolver = resolver or SemanticContextResolver()
        self.rng = rng or random.Random()
        self.clock = clock

    def compose(self, prompt: str, options: Optional[PromptOptions] = None) -> ComposedPrompt:
        options = options or PromptOptions()
        directive = DIVERSITY_DIRECTIVES.get(options.diversity_level, DIVERSITY_DIRECTIVES['standard'])
        direction = self.rng.choice(CREATIVE_DIRECTIONS)
        seed = self._randomization_seed(options.session_token)

        system_text = self.build_system_text(directive)
        user_text = self.build_user_text(
            prompt,
            self.resolver.resolve(prompt),
            options.previous_themes,
            direction,
            seed,
        )

        return ComposedPrompt(
            system_text=system_text,
            user_text=user_text,
            randomization_seed=seed,
            creative_direction=direction,
            diversity_directive=directive,
        )

    def build_system_text(self, diversity_directive: str) -> str:
        return f"""You are an expert UI/UX designer specializing in creating beautiful, unique, and accessible color themes for a Pomodoro timer app.

CRITICAL DIVERSITY REQUIREMENTS:
- Generate UNIQUE color palettes that are visually distinct from common defaults
- AVOID generic blue/green combinations unless specifically requested
- Each theme MUST be contextually appropriate to the user's prompt
- Colors MUST differ significantly from previous themes in this session
- Ensure visual diversity in both color choice and animation style

ACCESSIBILITY STANDARDS:
- All colors must meet WCAG 2.1 AA standards (4.5:1 contrast ratio minimum)
- Ensure sufficient contrast between text and background colors
- Consider color blindness accessibility in color choices

THEME REQUIREMENTS:
- Study phase colors should promote focus and concentration
- Break phase colors should promote relaxation and rest
- Include appropriate visual elements and animations
- Ensure colors work harmoniously together

{diversity_directive}

RESPONSE FORMAT:
Return ONLY valid JSON in the exact format specified. No additional text or explanations."""

    def build_user_text(
        self,
        prompt: str,
        context: Optional[SemanticContext],
        previous_themes: Sequence[ThemeColorSummary],
        creative_direction: str,
        seed: str
    ) -> str:
        return f"""Create a {creative_direction} theme for: "{prompt}"

{self.context_guidance(context)}

{self.avoid_list(previous_themes)}

DIVERSITY EMPHASIS:
- Generate colors that are DISTINCTLY DIFFERENT from typical blue/green defaults
- Ensure this theme is VISUALLY UNIQUE and contextually appropriate
- Use creative color combinations that reflect the prompt's meaning
- Make animations match the theme's mood and context

RANDOMIZATION CONTEXT:
- Variation seed: {seed}
- Creative direction: {creative_direction}

Return JSON in this exact format:
{RESPONSE_SCHEMA}"""

    @staticmethod
    def context_guidance(context: Optional[SemanticContext]) -> str:
        if context is None:
            return GENERAL_GUIDANCE

        moods = ', '.join(context.mood_descriptors)
        metaphors = ', '.join(context.visual_metaphors)
        return f"""SEMANTIC CONTEXT for "{context.name}":
- Suggested color palette: {', '.join(context.suggested_colors)}
- Visual mood: {moods}
- Animation style: {', '.join(context.suggested_animations)}
- Visual metaphors: {metaphors}

CONTEXTUAL REQUIREMENTS:
- Colors MUST reflect the {context.name} theme appropriately
- Animations MUST match the expected mood: {moods}
- Visual elements should evoke: {metaphors}"""

    @staticmethod
    def avoid_list(previous_themes: Sequence[ThemeColorSummary]) -> str:
        if not previous_themes:
            return 'FIRST THEME: Create a unique baseline theme.'

        used_colors = [color for summary in previous_themes for color in summary.avoid_colors()]
        return f"""AVOID THESE RECENTLY USED COLORS:
{', '.join(used_colors)}

ENSURE NEW THEME IS VISUALLY DISTINCT from previous themes in this session."""

    def _randomization_seed(self, session_token: Optional[str]) -> str:
        millis = int(self.clock() * 1000)
        nonce = self.rng.randrange(1000)
        if session_token:
            return f"{session_token}-{millis}-{nonce}"
        return f"{millis}-{nonce}"
