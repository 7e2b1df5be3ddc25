"""Type guard functions for runtime type checking in sqlchain.

These checks let the builder normalize loosely shaped caller input (table
names, predicate values) into its explicit clause types.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from typing_extensions import TypeGuard

__all__ = ("is_dict_row", "is_pair", "is_value_sequence")


def is_value_sequence(obj: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if an object is a sequence of values rather than a scalar.

    Strings and bytes are sequences in Python but scalars in SQL.

    Args:
        obj: The object to check

    Returns:
        True if the object is a non-text sequence, False otherwise
    """
    return isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray))


def is_pair(obj: Any) -> "TypeGuard[Sequence[Any]]":
    """Check if an object is a two-item list or tuple.

    Args:
        obj: The object to check

    Returns:
        True if the object is a list or tuple with exactly two items
    """
    return isinstance(obj, (list, tuple)) and len(obj) == 2


def is_dict_row(row: Any) -> "TypeGuard[dict[str, Any]]":
    """Check if a row is a dictionary.

    Args:
        row: The row to check

    Returns:
        True if the row is a dictionary, False otherwise
    """
    return isinstance(row, dict)
