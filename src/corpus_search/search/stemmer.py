"""Porter stemming algorithm.

A faithful rendition of M.F. Porter's suffix-stripping algorithm
("An algorithm for suffix stripping", Program 14(3), 1980) following the
published reference implementation, including its two documented departures
from the paper: ``bli -> ble`` replaces ``abli -> able`` and ``logi -> log``
is added to step 2. Two terms are treated as the same concept if and only if
they stem identically, so outputs must match the reference vocabulary exactly.

The stemmer works on a character buffer and two cursors, mirroring the
reference: ``k`` is the index of the last character of the current word and
``j`` marks the end of the stem preceding a matched suffix.
"""

from __future__ import annotations

from functools import lru_cache


_VOWELS = frozenset("aeiou")

# Step 2 and step 3 rules are keyed on the penultimate character of the word
# so that only a handful of suffixes are tested per word.
_STEP2_RULES: dict[str, tuple[tuple[str, str], ...]] = {
    "a": (("ational", "ate"), ("tional", "tion")),
    "c": (("enci", "ence"), ("anci", "ance")),
    "e": (("izer", "ize"),),
    "l": (("bli", "ble"), ("alli", "al"), ("entli", "ent"), ("eli", "e"), ("ousli", "ous")),
    "o": (("ization", "ize"), ("ation", "ate"), ("ator", "ate")),
    "s": (("alism", "al"), ("iveness", "ive"), ("fulness", "ful"), ("ousness", "ous")),
    "t": (("aliti", "al"), ("iviti", "ive"), ("biliti", "ble")),
    "g": (("logi", "log"),),
}

_STEP3_RULES: dict[str, tuple[tuple[str, str], ...]] = {
    "e": (("icate", "ic"), ("ative", ""), ("alize", "al")),
    "i": (("iciti", "ic"),),
    "l": (("ical", "ic"), ("ful", "")),
    "s": (("ness", ""),),
}

_STEP4_SUFFIXES: dict[str, tuple[str, ...]] = {
    "a": ("al",),
    "c": ("ance", "ence"),
    "e": ("er",),
    "i": ("ic",),
    "l": ("able", "ible"),
    "n": ("ant", "ement", "ment", "ent"),
    "s": ("ism",),
    "t": ("ate", "iti"),
    "u": ("ous",),
    "v": ("ive",),
    "z": ("ize",),
}


class _WordBuffer:
    """Mutable working state for stemming a single word."""

    __slots__ = ("b", "j", "k")

    def __init__(self, word: str) -> None:
        self.b = list(word)
        self.k = len(word) - 1
        self.j = 0

    def __str__(self) -> str:
        return "".join(self.b[: self.k + 1])

    # --- structural predicates -------------------------------------------

    def cons(self, i: int) -> bool:
        """True when ``b[i]`` is a consonant; ``y`` after a consonant is a vowel."""
        ch = self.b[i]
        if ch in _VOWELS:
            return False
        if ch == "y":
            return True if i == 0 else not self.cons(i - 1)
        return True

    def m(self) -> int:
        """Count the VC sequences in ``b[0..j]``: the measure of the stem."""
        n = 0
        i = 0
        while True:
            if i > self.j:
                return n
            if not self.cons(i):
                break
            i += 1
        i += 1
        while True:
            while True:
                if i > self.j:
                    return n
                if self.cons(i):
                    break
                i += 1
            i += 1
            n += 1
            while True:
                if i > self.j:
                    return n
                if not self.cons(i):
                    break
                i += 1
            i += 1

    def vowel_in_stem(self) -> bool:
        return any(not self.cons(i) for i in range(self.j + 1))

    def double_consonant(self, i: int) -> bool:
        if i < 1:
            return False
        if self.b[i] != self.b[i - 1]:
            return False
        return self.cons(i)

    def cvc(self, i: int) -> bool:
        """True when ``b[i-2..i]`` is consonant-vowel-consonant and ``b[i]`` is not w, x or y."""
        if i < 2 or not self.cons(i) or self.cons(i - 1) or not self.cons(i - 2):
            return False
        return self.b[i] not in ("w", "x", "y")

    # --- suffix manipulation ---------------------------------------------

    def ends(self, suffix: str) -> bool:
        length = len(suffix)
        offset = self.k - length + 1
        if offset < 0:
            return False
        if "".join(self.b[offset : self.k + 1]) != suffix:
            return False
        self.j = self.k - length
        return True

    def set_to(self, replacement: str) -> None:
        start = self.j + 1
        self.b[start : self.k + 1] = list(replacement)
        self.k = self.j + len(replacement)

    def replace_if_measured(self, replacement: str) -> None:
        if self.m() > 0:
            self.set_to(replacement)

    # --- algorithm steps -------------------------------------------------

    def step1ab(self) -> None:
        """Remove plurals and -ed or -ing endings."""
        if self.b[self.k] == "s":
            if self.ends("sses"):
                self.k -= 2
            elif self.ends("ies"):
                self.set_to("i")
            elif self.b[self.k - 1] != "s":
                self.k -= 1
        if self.ends("eed"):
            if self.m() > 0:
                self.k -= 1
        elif (self.ends("ed") or self.ends("ing")) and self.vowel_in_stem():
            self.k = self.j
            if self.ends("at"):
                self.set_to("ate")
            elif self.ends("bl"):
                self.set_to("ble")
            elif self.ends("iz"):
                self.set_to("ize")
            elif self.double_consonant(self.k):
                self.k -= 1
                if self.b[self.k] in ("l", "s", "z"):
                    self.k += 1
            elif self.m() == 1 and self.cvc(self.k):
                self.set_to("e")

    def step1c(self) -> None:
        """Turn terminal y into i when the stem holds another vowel."""
        if self.ends("y") and self.vowel_in_stem():
            self.b[self.k] = "i"

    def step2(self) -> None:
        """Map double suffixes to single ones, e.g. -ization to -ize."""
        if self.k == 0:
            return
        for suffix, replacement in _STEP2_RULES.get(self.b[self.k - 1], ()):
            if self.ends(suffix):
                self.replace_if_measured(replacement)
                return

    def step3(self) -> None:
        """Handle -ic-, -full, -ness and similar endings."""
        for suffix, replacement in _STEP3_RULES.get(self.b[self.k], ()):
            if self.ends(suffix):
                self.replace_if_measured(replacement)
                return

    def step4(self) -> None:
        """Strip -ant, -ence and friends when the stem measure exceeds one."""
        if self.k == 0:
            return
        penultimate = self.b[self.k - 1]
        if penultimate == "o":
            if self.ends("ion") and self.j >= 0 and self.b[self.j] in ("s", "t"):
                pass
            elif not self.ends("ou"):
                return
        else:
            suffixes = _STEP4_SUFFIXES.get(penultimate)
            if suffixes is None:
                return
            for suffix in suffixes:
                if self.ends(suffix):
                    break
            else:
                return
        if self.m() > 1:
            self.k = self.j

    def step5(self) -> None:
        """Remove a final -e and reduce a final -ll when the measure allows it."""
        self.j = self.k
        if self.b[self.k] == "e":
            measure = self.m()
            if measure > 1 or (measure == 1 and not self.cvc(self.k - 1)):
                self.k -= 1
        if self.b[self.k] == "l" and self.double_consonant(self.k) and self.m() > 1:
            self.k -= 1


class PorterStemmer:
    """Callable Porter stemmer.

    Words of one or two characters are returned unchanged. Input is expected
    to be a normalized lowercase term; the stemmer does not lowercase.
    """

    def stem(self, word: str) -> str:
        if len(word) <= 2:
            return word
        buffer = _WordBuffer(word)
        buffer.step1ab()
        if buffer.k > 0:
            buffer.step1c()
            buffer.step2()
            buffer.step3()
            buffer.step4()
            buffer.step5()
        return str(buffer)

    def __call__(self, word: str) -> str:
        return self.stem(word)


_DEFAULT_STEMMER = PorterStemmer()


@lru_cache(maxsize=65536)
def stem(word: str) -> str:
    """Return the Porter stem of ``word`` (memoized)."""
    return _DEFAULT_STEMMER.stem(word)
