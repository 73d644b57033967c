"""Config Promotion Advisor - transform and stop-rule suggestions for environment promotion."""

from .errors import FileLoadError, SuggestionEngineError
from .models import FileDiffResult, PromotionConfig, SuggestionResult
from .suggestion_engine import analyze_differences_for_suggestions, format_suggestions_as_yaml

__all__ = [
    'analyze_differences_for_suggestions',
    'format_suggestions_as_yaml',
    'FileDiffResult',
    'PromotionConfig',
    'SuggestionResult',
    'SuggestionEngineError',
    'FileLoadError',
]
