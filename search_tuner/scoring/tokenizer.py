"""
Tokenizer for field scoring and corpus statistics.

Tokenization pipeline:
1. Lowercase conversion
2. Replace every non-word, non-whitespace character with a space
3. Split on whitespace runs
4. Drop single-character tokens

No stemming and no stopword removal: "mocha" and "mochas" are different
terms, and "the" counts like any other word.
"""

import re
from typing import List, Optional

_NON_WORD = re.compile(r'[^\w\s]')


def tokenize(text: Optional[str]) -> List[str]:
    """
    Tokenize text into comparable terms.

    Order and duplicates are preserved (term frequency depends on it).

    Args:
        text: Input text to tokenize

    Returns:
        List of lowercase tokens longer than one character

    Examples:
        >>> tokenize("Best mocha latte in town!")
        ['best', 'mocha', 'latte', 'in', 'town']

        >>> tokenize("Family-owned coffee house")
        ['family', 'owned', 'coffee', 'house']

        >>> tokenize("A 5 star spot")
        ['star', 'spot']

        >>> tokenize("   ")
        []
    """
    if not text:
        return []

    text = _NON_WORD.sub(' ', text.lower())

    return [t for t in text.split() if len(t) > 1]
