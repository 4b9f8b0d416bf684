"""
String utility functions for admin_forms.

Inflection helpers used to build relation routes, sentinel tokens and
human-readable labels.
"""

from __future__ import annotations

import re

# Irregular plurals that don't follow standard rules
_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
    "foot": "feet",
    "tooth": "teeth",
    "goose": "geese",
    "mouse": "mice",
    "ox": "oxen",
    "datum": "data",
    "medium": "media",
    "criterion": "criteria",
    "index": "indices",
    "matrix": "matrices",
    "vertex": "vertices",
    "status": "statuses",
    "address": "addresses",
}

_IRREGULAR_SINGULARS = {plural: singular for singular, plural in _IRREGULAR_PLURALS.items()}


def _match_case(word: str, replacement: str) -> str:
    if word[:1].isupper():
        return replacement.capitalize()
    return replacement


def pluralize(word: str) -> str:
    """
    Convert a singular English word to its plural form.

    Only the last ``_``-separated segment is inflected, so relation names
    such as ``phone_number`` become ``phone_numbers``.

    Examples:
        >>> pluralize("category")
        'categories'
        >>> pluralize("phone_number")
        'phone_numbers'
        >>> pluralize("person")
        'people'
    """
    if not word:
        return word

    head, sep, last = word.rpartition("_")
    if sep:
        return head + sep + pluralize(last)

    lower_word = word.lower()
    if lower_word in _IRREGULAR_PLURALS:
        return _match_case(word, _IRREGULAR_PLURALS[lower_word])

    if lower_word.endswith(("s", "x", "z", "ch", "sh")):
        return word + "es"
    if lower_word.endswith("y"):
        if len(word) > 1 and lower_word[-2] in "aeiou":
            return word + "s"
        return word[:-1] + "ies"
    if lower_word.endswith("fe"):
        return word[:-2] + "ves"
    if lower_word.endswith(("elf", "alf", "olf", "eaf", "oaf", "arf")):
        return word[:-1] + "ves"
    if lower_word.endswith(("hero", "potato", "tomato", "echo", "veto")):
        return word + "es"
    return word + "s"


def singularize(word: str) -> str:
    """
    Convert a plural English word to its singular form.

    Examples:
        >>> singularize("phone_numbers")
        'phone_number'
        >>> singularize("categories")
        'category'
        >>> singularize("addresses")
        'address'
    """
    if not word:
        return word

    head, sep, last = word.rpartition("_")
    if sep:
        return head + sep + singularize(last)

    lower_word = word.lower()
    if lower_word in _IRREGULAR_SINGULARS:
        return _match_case(word, _IRREGULAR_SINGULARS[lower_word])
    if lower_word in _IRREGULAR_PLURALS or lower_word.endswith("ss"):
        return word

    if lower_word.endswith("ies") and len(word) > 3:
        return word[:-3] + "y"
    if lower_word.endswith(("ches", "shes", "xes", "zes")):
        return word[:-2]
    if lower_word.endswith("s"):
        return word[:-1]
    return word


def humanize(name: str) -> str:
    """
    Turn an identifier into a label.

    Examples:
        >>> humanize("first_name")
        'First name'
        >>> humanize("category_id")
        'Category'
    """
    text = re.sub(r"_id$", "", str(name))
    text = text.replace("_", " ").strip()
    return text[:1].upper() + text[1:]
