from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal


class ColorTriple(BaseModel):
    """Colors for one timer phase as proposed by the AI service (unvalidated)."""
    primary: Optional[str] = Field(default=None, description="Main hex color, e.g. '#0077BE'")
    secondary: Optional[str] = Field(default=None, description="Supporting hex color, used as the background")
    accent: Optional[str] = Field(default=None, description="Highlight hex color")
    description: str = ""


class AnimationSuggestion(BaseModel):
    type: str
    duration: Optional[int] = Field(default=None, description="Animation duration in milliseconds")
    properties: Dict[str, Any] = Field(default_factory=dict)


class VisualElements(BaseModel):
    backgroundType: Literal["particles", "pattern", "gradient"] = "gradient"
    elements: Optional[List[str]] = Field(default_factory=list)
    animations: Optional[List[AnimationSuggestion]] = None


class CandidateTheme(BaseModel):
    """Untrusted theme proposal returned by the AI service.

    Discarded once validation finishes; accepted themes are rebuilt as
    immutable `AcceptedTheme` records.
    """
    studyColors: Optional[ColorTriple] = None
    breakColors: Optional[ColorTriple] = None
    visualElements: Optional[VisualElements] = None
    themeName: Optional[str] = None
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    def animation_types(self) -> List[str]:
        if not self.visualElements or not self.visualElements.animations:
            return []
        return [animation.type for animation in self.visualElements.animations]
