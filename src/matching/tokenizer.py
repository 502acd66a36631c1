"""Ingredient tokenizer.

A recipe's ingredient field is one free-text string such as "flour, 2 eggs; olive oil".
Tokens are the trimmed pieces between commas and semicolons. They are not deduplicated:
the token count stands in for "number of ingredients in the recipe".
"""

import re

INGREDIENT_DELIMITERS = re.compile(r"[,;]")


def tokenize(ingredients_text: str) -> list[str]:
    """Split ingredient text into trimmed tokens, keeping the original casing.

    Empty or whitespace-only text yields no tokens, so token counts are never
    inflated by a single empty piece.

    Examples:
        >>> tokenize("flour, 2 eggs; olive oil")
        ['flour', '2 eggs', 'olive oil']
        >>> tokenize("   ")
        []
    """
    if not ingredients_text or not ingredients_text.strip():
        return []
    return [piece.strip() for piece in INGREDIENT_DELIMITERS.split(ingredients_text)]


def normalize(ingredients_text: str) -> list[str]:
    """Lower-cased tokens, used when comparing against user-supplied ingredients."""
    return [token.lower() for token in tokenize(ingredients_text)]


def extract_key_ingredients(ingredients_text: str, limit: int = 5, min_length: int = 3) -> list[str]:
    """First `limit` tokens longer than `min_length` characters, in original order."""
    if limit <= 0:
        return []
    return [token for token in tokenize(ingredients_text) if len(token) > min_length][:limit]
