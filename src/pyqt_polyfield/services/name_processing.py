"""
Display name helpers for variant types.

Turns declared class names into menu labels: 'StandardNameGenerator' with
the shared 'NameGenerator' suffix stripped becomes 'Standard'.
"""

import re
from typing import List, Sequence, Tuple

_WORD_PATTERN = re.compile(r"[A-Z]+(?=[A-Z][a-z]|[0-9]|\b|_)|[A-Z]?[a-z]+|[A-Z]+|[0-9]+")


def split_words(name: str) -> List[str]:
    """Split a CamelCase or snake_case name: 'HTTPNameGenerator' -> ['HTTP', 'Name', 'Generator']"""
    return _WORD_PATTERN.findall(name)


def nicify_name(name: str) -> str:
    """
    Convert a type or variable name to display form.

    'StandardName' -> 'Standard Name', 'm_familyNames' -> 'Family Names',
    'kMaxCount' -> 'Max Count', '_private_field' -> 'Private Field'
    """
    if name.startswith("m_"):
        name = name[2:]
    elif len(name) > 1 and name[0] == "k" and name[1].isupper():
        name = name[1:]
    name = name.lstrip("_")

    words = split_words(name)
    if not words:
        return name
    return " ".join(word[:1].upper() + word[1:] for word in words)


def common_affixes(names: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Find the word-level prefix and suffix shared by all names.

    Needs at least two names. Each name keeps at least one word, so the
    affixes never consume a whole name.

    Returns:
        (prefix_words, suffix_words)
    """
    if len(names) < 2:
        return [], []

    split = [split_words(name) for name in names]
    shortest = min(len(words) for words in split)

    prefix: List[str] = []
    for index in range(shortest - 1):
        word = split[0][index]
        if all(words[index] == word for words in split):
            prefix.append(word)
        else:
            break

    suffix: List[str] = []
    for index in range(1, shortest - len(prefix)):
        word = split[0][-index]
        if all(words[-index] == word for words in split):
            suffix.insert(0, word)
        else:
            break

    return prefix, suffix


def strip_affixes(name: str, prefix: Sequence[str], suffix: Sequence[str]) -> str:
    """
    Remove prefix/suffix words from name.

    The remaining words are joined with spaces so nicify_name() splits them
    the same way again. Without affixes the name is returned as declared.
    """
    if not prefix and not suffix:
        return name
    words = split_words(name)
    stripped = words
    if prefix and stripped[:len(prefix)] == list(prefix):
        stripped = stripped[len(prefix):]
    if suffix and len(stripped) > len(suffix) and stripped[-len(suffix):] == list(suffix):
        stripped = stripped[:-len(suffix)]
    if not stripped or stripped == words:
        return name
    return " ".join(stripped)
