"""Shared validation utilities.

Helpers here are used by the template registry, the scaffold request models and the materializer.
"""

import logging
from typing import Callable, Hashable, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


def find_duplicates(items: list[T], key_func: Callable[[T], Hashable]) -> dict[Hashable, list[T]]:
    """Group items that share a key.

    Args:
        items: List to check
        key_func: Function to extract hashable key from item (e.g., lambda t: t.name)

    Returns:
        Mapping of each key that appears more than once to the items sharing it, in first-seen order.
    """
    grouped: dict[Hashable, list[T]] = {}
    for item in items:
        grouped.setdefault(key_func(item), []).append(item)
    return {key: group for key, group in grouped.items() if len(group) > 1}


def check_duplicates_or_raise(
    items: list[T],
    key_func: Callable[[T], Hashable],
    error_message_func: Callable[[list[Hashable]], str],
) -> list[T]:
    """Check for duplicates and raise ValueError if found.

    Use this for strict validation where duplicates are not allowed.
    Examples: template names in a registry, extra render context keys.

    Args:
        items: List to check
        key_func: Function to extract hashable key from item (e.g., lambda t: t.name)
        error_message_func: Function that takes list of *duplicate keys* (not items) and returns
                           error message.

    Returns:
        Original list unchanged if no duplicates

    Raises:
        ValueError: If duplicates are found, with message from error_message_func
    """
    duplicates = list(find_duplicates(items, key_func).keys())
    if duplicates:
        raise ValueError(error_message_func(duplicates))

    return items
