"""
Heuristic keyword matching for exercise names and free-text answers.

Restricted movements, dislikes, favourites, sport signals and movement
patterns are all matched through this module. Matching is deliberately fuzzy:
both sides are folded (lowercase, hyphens to spaces, common plurals singular)
and compared by substring.
"""

import re


LIST_SPLIT_RE = re.compile(r"[,\n;]+")

# ---------------------------------------------------------------------------
# Pluralization normalization (applied after lowercasing/hyphen folding)
# ---------------------------------------------------------------------------
DEPLURALIZE_PATTERNS = [
    (re.compile(r"\bpull ups\b"), "pull up"),
    (re.compile(r"\bpush ups\b"), "push up"),
    (re.compile(r"\bchin ups\b"), "chin up"),
    (re.compile(r"\bstep ups\b"), "step up"),
    (re.compile(r"\bsit ups\b"), "sit up"),
    (re.compile(r"\bmuscle ups\b"), "muscle up"),
    (re.compile(r"\bburpees\b"), "burpee"),
    (re.compile(r"\blunges\b"), "lunge"),
    (re.compile(r"\bsquats\b"), "squat"),
    (re.compile(r"\bdeadlifts\b"), "deadlift"),
    (re.compile(r"\brows\b"), "row"),
    (re.compile(r"\bplanks\b"), "plank"),
    (re.compile(r"\bdips\b"), "dip"),
    (re.compile(r"\bcurls\b"), "curl"),
    (re.compile(r"\braises\b"), "raise"),
    (re.compile(r"\bfl(?:y|i)es\b|\bflys\b"), "fly"),
    (re.compile(r"\bpresses\b"), "press"),
    (re.compile(r"\bjumps\b"), "jump"),
    (re.compile(r"\bthrusters\b"), "thruster"),
    (re.compile(r"\bswings\b"), "swing"),
    (re.compile(r"\bcrunches\b"), "crunch"),
    (re.compile(r"\bextensions\b"), "extension"),
    (re.compile(r"\bcarries\b"), "carry"),
    (re.compile(r"\bsprints\b"), "sprint"),
    (re.compile(r"\bpulldowns\b"), "pulldown"),
    (re.compile(r"\bpushdowns\b"), "pushdown"),
]


def fold(value):
    """Fold text into the comparable form used by every matcher."""
    if not value:
        return ""
    result = str(value).lower().replace("-", " ").replace("_", " ")
    result = re.sub(r"\s+", " ", result).strip()
    for pattern, replacement in DEPLURALIZE_PATTERNS:
        result = pattern.sub(replacement, result)
    return result


def canonical_key(name):
    """Key used when two exercise names must be the *same* exercise."""
    return re.sub(r"[^a-z0-9 ]+", "", fold(name)).strip()


def split_list(value):
    """Split a delimited string (comma/newline/semicolon) into trimmed items."""
    if not value:
        return []
    return [item.strip() for item in LIST_SPLIT_RE.split(value) if item.strip()]


def normalize_list(values):
    """
    Flatten, trim and de-duplicate a list of free-text answers.

    Items may themselves contain delimiters. Order of first appearance is
    kept; duplicates are detected case-insensitively.
    """
    seen = set()
    result = []
    for value in values or []:
        for item in split_list(value):
            key = fold(item)
            if key and key not in seen:
                seen.add(key)
                result.append(item)
    return result


def contains_keyword(text, keywords):
    """True if any keyword is a substring of text (both folded)."""
    return first_match(text, keywords) is not None


def first_match(text, keywords):
    """Return the first keyword found in text, or None."""
    haystack = fold(text)
    if not haystack:
        return None
    for keyword in keywords or []:
        needle = fold(keyword)
        if needle and needle in haystack:
            return keyword
    return None


def matching_keywords(text, keywords):
    """All keywords found in text, in keyword order."""
    haystack = fold(text)
    return [k for k in keywords or [] if fold(k) and fold(k) in haystack]


def contains_word(text, words):
    """Whole-word variant for short tokens that would over-match as substrings."""
    return first_word_match(text, words) is not None


def first_word_match(text, words):
    haystack = fold(text)
    for word in words or []:
        needle = fold(word)
        if needle and re.search(rf"\b{re.escape(needle)}\b", haystack):
            return word
    return None


class KeywordMatcher:
    """
    A reusable keyword set.

    Usage:
        restricted = KeywordMatcher(["overhead press", "deadlift"])
        restricted.matches("Barbell Overhead Press")  # -> True
    """

    def __init__(self, keywords=None):
        self.keywords = tuple(normalize_list(keywords or []))
        self._folded = tuple(fold(k) for k in self.keywords)

    def __bool__(self):
        return bool(self.keywords)

    def __iter__(self):
        return iter(self.keywords)

    def __len__(self):
        return len(self.keywords)

    def matches(self, text):
        haystack = fold(text)
        return bool(haystack) and any(k in haystack for k in self._folded)

    def match(self, text):
        """Return the first matching keyword, or None."""
        haystack = fold(text)
        for original, folded in zip(self.keywords, self._folded):
            if haystack and folded in haystack:
                return original
        return None

    def union(self, other):
        return KeywordMatcher(list(self.keywords) + list(other))
