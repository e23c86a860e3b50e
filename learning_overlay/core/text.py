"""Subtitle text cleaning and word tokenization.

WHY: Raw cue text carries inline markup ("<i>", "<c.yellow>"), SSA style
codes ("{\\an8}") and irregular whitespace. Renderers need the clean text
split into words (looked up in the vocabulary cache) and the separators
between them (shown as-is).

HOW: clean_subtitle_text applies four regex passes. tokenize walks the
text with one alternation regex: a run of letter/number code points is a
word, any other run is a separator. Because the two classes are exact
complements, every character lands in exactly one token.

RULES:
- Word = maximal run of Unicode letters/digits (underscore is a separator)
- Word tokens carry the lowercased form for lookup, original for display
- "".join(t.display_text for t in tokenize(s)) == s for every s
- tokenize("") == []
"""

from __future__ import annotations

import re
from typing import List

from learning_overlay.core.ir import Token, TokenKind

_TAG_RE = re.compile(r"<[^>]+>")
_STYLE_CODE_RE = re.compile(r"\{[^}]+\}")
_WHITESPACE_RE = re.compile(r"\s+")

# Group 1: letters/digits. Group 2: everything else.
_TOKEN_RE = re.compile(r"([^\W_]+)|([\W_]+)")
_NON_WORD_RE = re.compile(r"[\W_]+")


def clean_subtitle_text(text: str) -> str:
    """Strip markup tags and style codes, collapse whitespace, trim."""
    text = _TAG_RE.sub("", text)
    text = _STYLE_CODE_RE.sub("", text)
    text = _WHITESPACE_RE.sub(" ", text)
    return text.strip()


def tokenize(text: str) -> List[Token]:
    """Split text into word and separator tokens.

    Args:
        text: Cleaned segment text (any string is accepted).

    Returns:
        Tokens in order; their display_text concatenates back to text.
    """
    if not text:
        return []

    tokens: List[Token] = []
    for match in _TOKEN_RE.finditer(text):
        word, separator = match.group(1), match.group(2)
        if word:
            tokens.append(Token(TokenKind.WORD, word.lower(), word))
        else:
            tokens.append(Token(TokenKind.SEPARATOR, separator, separator))
    return tokens


def clean_word(word: str) -> str:
    """Normalize a clicked or typed word to its vocabulary key."""
    return _NON_WORD_RE.sub("", word.lower()).strip()


def extract_words(text: str) -> List[str]:
    """Normalized words of text, in order, duplicates kept."""
    return [t.normalized_text for t in tokenize(text) if t.is_word]


def normalize_expression(expression: str) -> str:
    return expression.strip().lower()


def is_phrase(text: str) -> bool:
    """True if text contains more than one word."""
    return len(extract_words(text)) > 1
