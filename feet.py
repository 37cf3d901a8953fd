from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from models import Foot, Script, Syllable, Weight

# ------------------------ Foot library ------------------------ #

@dataclass(frozen=True)
class FootPattern:
    key: str
    name: str           # Devanagari display name
    name_roman: str     # Hinglish display name
    pattern: Tuple[int, ...]
    tag: str            # colour hint for renderers

    def display_name(self, script: Script) -> str:
        return self.name_roman if script == Script.ROMANIZED else self.name


# Declaration order matters: equal-length matches go to the first entry
FOOT_LIBRARY: Tuple[FootPattern, ...] = (
    FootPattern("mufailun",    "मुफ़ाइलुन",    "mafa'ilun",    (1, 2, 1, 2),    "blue"),
    FootPattern("failatun",    "फ़इलातुन",     "fai'latun",    (1, 1, 2, 2),    "pink"),
    FootPattern("felun",       "फ़ेलुन",       "fe'lun",       (2, 2),          "gray"),
    FootPattern("failun",      "फ़ाइलुन",      "fa'ilun",      (2, 1, 2),       "green"),
    FootPattern("fe",          "फे़",          "fe'",          (2,),            "purple"),
    FootPattern("mustafailun", "मुस्तफ़ाइलुन", "mustafa'ilun", (2, 1, 2, 1, 2), "yellow"),
)

_BY_KEY = {p.key: p for p in FOOT_LIBRARY}

# Residual feet used when nothing in the library matches
REST_DOUBLE = "felun"
REST_SINGLE = "fe"


def get_pattern(key: str) -> FootPattern:
    return _BY_KEY[key]


def foot_name(key: str, script: Script) -> str:
    pattern = _BY_KEY.get(key)
    if pattern is None:
        return key
    return pattern.display_name(script)

# ------------------------ Bahr library ------------------------ #

@dataclass(frozen=True)
class Bahr:
    key: str
    name: str
    name_roman: str
    feet: Tuple[str, ...]

    @property
    def pattern(self) -> Tuple[int, ...]:
        return tuple(w for k in self.feet for w in _BY_KEY[k].pattern)

    @property
    def signature(self) -> str:
        return "".join(str(w) for w in self.pattern)

    def display_name(self, script: Script) -> str:
        return self.name_roman if script == Script.ROMANIZED else self.name


MUJTAS = Bahr(
    "mujtas",
    "मुज्तस मुसम्मन मख़बून महज़ूफ़ मस्कन",
    "mujtas musamman makhbun mahzuf maskan",
    ("mufailun", "failatun", "mufailun", "felun"),
)

BAHR_LIBRARY: Tuple[Bahr, ...] = (MUJTAS,)


def find_bahr(weight_signature: str) -> Optional[Bahr]:
    for bahr in BAHR_LIBRARY:
        if bahr.signature == weight_signature:
            return bahr
    return None

# ------------------------ Segmentation ------------------------ #

def match_at(weights: Sequence[int], pattern: Sequence[int], start: int) -> bool:
    if start + len(pattern) > len(weights):
        return False
    return all(weights[start + i] == w for i, w in enumerate(pattern))


def longest_match(weights: Sequence[int], start: int) -> Optional[FootPattern]:
    best = None
    for pattern in FOOT_LIBRARY:
        if match_at(weights, pattern.pattern, start):
            # strict '>' keeps the first-declared entry on ties
            if best is None or len(pattern.pattern) > len(best.pattern):
                best = pattern
    return best


def segment_feet(syllables: Sequence[Syllable], script: Script) -> List[Foot]:
    """
    Greedy left-to-right partition of weighted syllables into feet.

    At each position the longest library foot whose weights match exactly is
    taken. Where nothing matches, the next two syllables (or the last one)
    form a residual foot, so every syllable lands in exactly one foot.
    """
    weights = [int(s.weight) for s in syllables]
    feet: List[Foot] = []
    i, n = 0, len(syllables)
    while i < n:
        pattern = longest_match(weights, i)
        if pattern is not None:
            size = len(pattern.pattern)
        else:
            size = min(2, n - i)
            pattern = _BY_KEY[REST_DOUBLE if size == 2 else REST_SINGLE]
        feet.append(Foot(
            key=pattern.key,
            name=pattern.display_name(script),
            syllables=tuple(syllables[i:i + size]),
            tag=pattern.tag,
        ))
        i += size
    return feet


def segment_fixed(syllables: Sequence[Syllable], script: Script, bahr: Bahr = MUJTAS) -> List[Foot]:
    """
    Lay syllables onto the fixed feet of a bahr, ignoring their own weights.

    A weight-1 slot takes one syllable. A weight-2 slot joins the next two
    syllables into one heavy cell, or takes the last syllable alone as a light
    cell. Feet stop being filled once the syllables run out; syllables beyond
    the bahr's length are not shown.
    """
    feet: List[Foot] = []
    i, n = 0, len(syllables)
    for key in bahr.feet:
        if i >= n:
            break
        pattern = _BY_KEY[key]
        cells: List[Syllable] = []
        for slot in pattern.pattern:
            if i >= n:
                break
            if slot == 2 and i + 1 < n:
                pair = syllables[i:i + 2]
                cells.append(Syllable(
                    text=pair[0].text + pair[1].text,
                    weight=Weight.HEAVY,
                    is_error=pair[0].is_error or pair[1].is_error,
                ))
                i += 2
            else:
                single = syllables[i]
                cells.append(Syllable(
                    text=single.text,
                    weight=Weight.LIGHT,
                    is_error=single.is_error,
                ))
                i += 1
        feet.append(Foot(
            key=pattern.key,
            name=pattern.display_name(script),
            syllables=tuple(cells),
            tag=pattern.tag,
        ))
    return feet
