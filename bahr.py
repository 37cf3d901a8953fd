import re
from typing import List, Optional

from feet import segment_feet
from meter import composition_message, describe_meter, validate_composition
from models import CompositionResult, LineAnalysis, Script, Syllable, Weight
from settings import get_logger

logger = get_logger("analysis")

# ------------------------ Unicode sets (Devanagari) ------------------------ #

DEV_BLOCK = "\u0900-\u097F"
# Letters and signs of the block; leaves out danda, double danda, digits and
# the abbreviation sign
DEV_LETTERS = "\u0900-\u0963\u0971-\u097F"
DEV_VIRAMA = "\u094D"

# Dependent signs that stay with the letter before them: candrabindu,
# anusvara, visarga, nukta, matras and the remaining combining marks.
# The virama is handled on its own so it always keeps its next consonant.
DEV_SIGNS_RE = re.compile(
    "[\u0900-\u0903\u093A-\u093C\u093E-\u094C\u094E\u094F\u0951-\u0957\u0962\u0963]"
)
DEV_CONSONANTS_RE = re.compile("[\u0915-\u0939\u0958-\u095F\u0978-\u097F]")
DEV_HEAVY_RE = re.compile(
    "[\u0906\u0908\u090A\u090F-\u0914"   # long independent vowels
    "\u093E\u0940\u0942\u0947-\u094C"    # long matras
    "\u094D\u0902\u0903]"                # virama, anusvara, visarga
)

DEV_RE = re.compile(f"[{DEV_BLOCK}]")
DEV_DIGITS_RE = re.compile("[\u0966-\u096F]")

# ------------------------ Latin (Hinglish) ------------------------ #

LATIN_RE = re.compile("[a-zA-Z]")
ASCII_DIGITS_RE = re.compile("[0-9]")

ROMAN_VOWELS = set("aeiou")
ROMAN_CONSONANTS = set("bcdfghjklmnpqrstvwxyz")
ROMAN_LONG_RE = re.compile("aa|ee|ii|oo|uu|ai|au|aw|ay|ey|oy")
ROMAN_CLUSTER_RE = re.compile("ch|sh|th|kh|gh|ph|bh|dh|jh|ng|nk|nt|nd|st|sp")
ROMAN_IMPLICIT_VOWEL = "a"

# Guards the per-word scan against malformed input
MAX_SYLLABLES_PER_WORD = 20

# ------------------------ Script detection ------------------------ #

def classify_text(text: str) -> Script:
    has_dev = bool(DEV_RE.search(text))
    has_latin = bool(LATIN_RE.search(text))
    if has_dev and has_latin:
        return Script.MIXED
    if has_dev:
        return Script.DEVANAGARI
    if has_latin:
        return Script.ROMANIZED
    return Script.UNKNOWN


def detect_script(text: str) -> Script:
    """
    Script of a composition, read off its first non-blank line.

    Later lines do not change the answer, even when they are written in the
    other script. The whole text is only consulted when the first line has no
    letters at all.
    """
    text = text or ""
    first = next((ln for ln in text.split("\n") if ln.strip()), "")
    script = classify_text(first)
    if script == Script.UNKNOWN:
        script = classify_text(text)
    return script


def rule_set_for(script: Script) -> Script:
    """Mixed text runs through the Hinglish rules, which hand Devanagari words back."""
    if script in (Script.ROMANIZED, Script.MIXED):
        return Script.ROMANIZED
    return Script.DEVANAGARI


def is_line_legal(line: str, script: Script) -> bool:
    rules = rule_set_for(script)
    if ASCII_DIGITS_RE.search(line) or DEV_DIGITS_RE.search(line):
        return False
    if rules == Script.DEVANAGARI and LATIN_RE.search(line):
        return False
    return True

# ------------------------ Devanagari syllables ------------------------ #

def _consume_signs(text: str, i: int) -> int:
    while i < len(text) and DEV_SIGNS_RE.match(text[i]):
        i += 1
    return i


def parse_dev_syllables(text: str) -> List[str]:
    clean = re.sub(rf"[^{DEV_LETTERS}\s]", "", text or "").strip()
    sylls: List[str] = []
    i, n = 0, len(clean)
    while i < n:
        if clean[i].isspace():
            i += 1
            continue

        start = i
        i = _consume_signs(clean, i + 1)

        # Conjuncts: virama + consonant (+ its signs), repeated
        while i < n and clean[i] == DEV_VIRAMA:
            i += 1
            if i < n and DEV_CONSONANTS_RE.match(clean[i]):
                i = _consume_signs(clean, i + 1)

        syl = clean[start:i]
        if syl.strip():
            sylls.append(syl)
    return sylls

# ------------------------ Hinglish syllables ------------------------ #

def parse_roman_word(word: str) -> List[str]:
    if not word:
        return []
    if DEV_RE.search(word):
        return parse_dev_syllables(word)

    sylls: List[str] = []
    i, n = 0, len(word)
    while i < n and len(sylls) < MAX_SYLLABLES_PER_WORD:
        start = i
        while i < n and word[i] in ROMAN_CONSONANTS:
            i += 1
        while i < n and word[i] in ROMAN_VOWELS:
            i += 1
        if i == start:
            # not a Latin letter; step over it
            i += 1
            continue
        syl = word[start:i]
        if not any(ch in ROMAN_VOWELS for ch in syl):
            syl += ROMAN_IMPLICIT_VOWEL
        sylls.append(syl)

    return sylls if sylls else [word]


def parse_roman_syllables(text: str) -> List[str]:
    clean = re.sub(rf"[^{DEV_LETTERS}a-z\s]", "", (text or "").lower()).strip()
    sylls: List[str] = []
    for word in clean.split():
        sylls.extend(parse_roman_word(word))
    return sylls


def syllabify(line: str, script: Script) -> List[str]:
    if rule_set_for(script) == Script.ROMANIZED:
        return parse_roman_syllables(line)
    return parse_dev_syllables(line)

# ------------------------ Weights ------------------------ #

def dev_weight(syllable: str) -> Weight:
    return Weight.HEAVY if DEV_HEAVY_RE.search(syllable) else Weight.LIGHT


def roman_weight(syllable: str) -> Weight:
    syl = syllable.lower()
    if ROMAN_LONG_RE.search(syl):
        return Weight.HEAVY
    if sum(1 for ch in syl if ch in ROMAN_CONSONANTS) > 2:
        return Weight.HEAVY
    if ROMAN_CLUSTER_RE.search(syl):
        return Weight.HEAVY
    return Weight.LIGHT


def classify_weight(syllable: str, script: Script) -> Weight:
    if not syllable:
        return Weight.LIGHT
    if rule_set_for(script) == Script.DEVANAGARI or DEV_RE.search(syllable):
        return dev_weight(syllable)
    return roman_weight(syllable)


def weigh(syllables: List[str], script: Script) -> List[Syllable]:
    return [Syllable(text=s, weight=classify_weight(s, script)) for s in syllables]

# ------------------------ Pipeline ------------------------ #

def analyze_line(line: str, script: Script) -> Optional[LineAnalysis]:
    """
    Syllabify, weigh and segment one line.

    Returns None for a blank line and for a legal line without any syllables;
    such lines do not appear in the result at all.
    """
    raw = (line or "").strip()
    if not raw:
        return None

    if not is_line_legal(raw, script):
        return LineAnalysis(raw_line=raw, is_invalid=True)

    sylls = weigh(syllabify(raw, script), script)
    if not sylls:
        logger.debug("no syllables in %r, line dropped", raw)
        return None

    feet = segment_feet(sylls, script)
    return LineAnalysis(raw_line=raw, feet=tuple(feet), syllables=tuple(sylls))


def analyze(text: str) -> CompositionResult:
    text = text or ""
    script = detect_script(text)
    lines = [ln for ln in text.split("\n") if ln.strip()]
    if not lines:
        return CompositionResult(language=script)

    logger.debug("script %s, %d line(s)", script.value, len(lines))
    analyses = [a for a in (analyze_line(ln, script) for ln in lines) if a is not None]
    if not analyses:
        return CompositionResult(language=script)

    validated, has_errors, dominant = validate_composition(analyses)
    meter = None if has_errors else describe_meter(validated, script, dominant)
    return CompositionResult(
        language=script,
        lines=validated,
        has_errors=has_errors,
        message=composition_message(script, has_errors),
        dominant=dominant,
        meter=meter,
    )
