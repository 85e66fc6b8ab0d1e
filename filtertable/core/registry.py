"""Matcher registry mapping filter types to their row-matching functions."""

from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping

if TYPE_CHECKING:
    from .filters import FilterType

# A matcher answers: does ``row`` pass filter ``key`` with applied ``value``?
Matcher = Callable[[Mapping[str, Any], str, Any], bool]

# Global registry mapping filter types to their matchers
_MATCHER_REGISTRY: Dict["FilterType", Matcher] = {}


def register_matcher(filter_type: "FilterType"):
    """
    Decorator to register a matcher function for a filter type.

    Args:
        filter_type: The FilterType the decorated function handles

    Returns:
        Decorator function

    Example:
        @register_matcher(FilterType.SELECT)
        def match_select(row, key, value):
            ...
    """

    def decorator(func: Matcher) -> Matcher:
        if filter_type in _MATCHER_REGISTRY:
            raise ValueError(
                f"Filter type '{filter_type.value}' already has a matcher: "
                f"{_MATCHER_REGISTRY[filter_type].__name__}"
            )
        _MATCHER_REGISTRY[filter_type] = func
        return func

    return decorator


def get_matcher(filter_type: "FilterType") -> Matcher:
    """
    Get the matcher registered for a filter type.

    Args:
        filter_type: The filter type to look up

    Returns:
        The matcher function

    Raises:
        KeyError: If no matcher is registered for that type
    """
    if filter_type not in _MATCHER_REGISTRY:
        available = [t.value for t in _MATCHER_REGISTRY]
        raise KeyError(
            f"No matcher registered for filter type '{filter_type}'. "
            f"Available types: {available}"
        )
    return _MATCHER_REGISTRY[filter_type]


def list_registered_matchers() -> Dict["FilterType", Matcher]:
    """
    Get all registered matchers.

    Returns:
        Dict mapping filter types to their matcher functions
    """
    return _MATCHER_REGISTRY.copy()


def is_registered(filter_type: "FilterType") -> bool:
    """Check if a matcher is registered for a filter type."""
    return filter_type in _MATCHER_REGISTRY
