"""
Identifier case conversion
"""
import functools
import re
from typing import List

_SEPARATOR_RE = re.compile(r"[^a-zA-Z0-9]+")
_SPLIT_WORDS_RE = re.compile(
    r"[A-Z]?[a-z]+|[A-Z]+(?=[A-Z][a-z]|\d|\b)|[A-Z]|\d+"
)


def split_words(name: str) -> List[str]:
    """
    Split an identifier in any common casing into its words

    Examples:
        >>> split_words("user_profile")
        ['user', 'profile']
        >>> split_words("HTTPResponse")
        ['HTTP', 'Response']
    """
    return _SPLIT_WORDS_RE.findall(_SEPARATOR_RE.sub(" ", name))


@functools.lru_cache(maxsize=None)
def to_snake_case(name: str) -> str:
    """
    Examples:
        >>> to_snake_case("UserProfile")
        'user_profile'
    """
    return "_".join(word.lower() for word in split_words(name))


@functools.lru_cache(maxsize=None)
def to_pascal_case(name: str) -> str:
    """
    Examples:
        >>> to_pascal_case("user_profile")
        'UserProfile'
    """
    return "".join(word.capitalize() for word in split_words(name))


@functools.lru_cache(maxsize=None)
def to_camel_case(name: str) -> str:
    """
    Examples:
        >>> to_camel_case("user_profile")
        'userProfile'
    """
    words = split_words(name)
    if not words:
        return ""
    return words[0].lower() + "".join(word.capitalize() for word in words[1:])


@functools.lru_cache(maxsize=None)
def to_upper_case(name: str) -> str:
    """
    Examples:
        >>> to_upper_case("user_profile")
        'USER PROFILE'
    """
    return " ".join(word.upper() for word in split_words(name))
