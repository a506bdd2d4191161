from .candidate import ColorTriple, AnimationSuggestion, VisualElements, CandidateTheme

__all__ = ["ColorTriple", "AnimationSuggestion", "VisualElements", "CandidateTheme"]
