import math
from collections import Counter
from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from feet import find_bahr, segment_fixed
from models import (
    DominantPattern,
    ErrorKind,
    Foot,
    LineAnalysis,
    MeterDescription,
    Script,
)
from settings import get_logger

logger = get_logger("meter")

# ------------------------ Thresholds ------------------------ #
# Number of leading lines the dominant pattern is inferred from
SAMPLE_SIZE = 3
# Short lines: feet from this fraction of the line onward are marked
SHORT_ERROR_SPLIT = 0.6
# Pattern mismatches: feet from this fraction of the line onward are marked
PATTERN_ERROR_SPLIT = 0.5

ERROR_TAG = "error"
ERROR_COLOUR = "red"

# ------------------------ Messages ------------------------ #

ERROR_MESSAGES = {
    Script.ROMANIZED: "Line is short, error near red blocks",
    Script.DEVANAGARI: "पंक्ति छोटी है, लाल ब्लॉक के पास त्रुटि",
}
SUCCESS_MESSAGES = {
    Script.ROMANIZED: "Great! Your poetry is in Bahr. Keep up the good work!",
    Script.DEVANAGARI: "बहुत बढ़िया! आपकी कविता बहर में है। अच्छा काम जारी रखें!",
}
SUMMARY_TITLES = {
    Script.ROMANIZED: "Your composition follows this meter:",
    Script.DEVANAGARI: "आप की रचना निम्नलिखित बहर में है:",
}


def _message_script(script: Script) -> Script:
    return Script.ROMANIZED if script == Script.ROMANIZED else Script.DEVANAGARI


def composition_message(script: Script, has_errors: bool) -> str:
    table = ERROR_MESSAGES if has_errors else SUCCESS_MESSAGES
    return table[_message_script(script)]

# ------------------------ Inference ------------------------ #

def line_signature(line: LineAnalysis) -> DominantPattern:
    return DominantPattern(line.syllable_count, line.weight_signature)


def infer_dominant_pattern(lines: Sequence[LineAnalysis]) -> Optional[DominantPattern]:
    """
    Most frequent (syllable count, weight signature) among the first lines.

    Only the first SAMPLE_SIZE entries are looked at; entries without feet
    (invalid lines) are skipped, not replaced by later lines. Ties go to the
    signature seen first.
    """
    counts: Counter = Counter()
    for line in lines[:SAMPLE_SIZE]:
        if line.feet:
            counts[line_signature(line)] += 1
    if not counts:
        return None
    # Counter keeps insertion order, and most_common is stable for equal counts
    dominant, _ = counts.most_common(1)[0]
    return dominant

# ------------------------ Validation ------------------------ #

def validate_line(line: LineAnalysis, dominant: Optional[DominantPattern]) -> ErrorKind:
    if dominant is None or line.is_invalid:
        return ErrorKind.NONE
    count = line.syllable_count
    if count < dominant.syllable_count:
        return ErrorKind.TOO_SHORT
    if count > dominant.syllable_count:
        return ErrorKind.TOO_LONG
    if line.weight_signature != dominant.weight_signature:
        return ErrorKind.PATTERN_MISMATCH
    return ErrorKind.NONE

# ------------------------ Annotation ------------------------ #

def _mark_foot(foot: Foot, error: bool) -> Foot:
    syllables = tuple(replace(s, is_error=error) for s in foot.syllables)
    if error:
        return replace(foot, syllables=syllables, name=ERROR_TAG, tag=ERROR_COLOUR)
    return replace(foot, syllables=syllables)


def _mark_from(feet: Sequence[Foot], start: int) -> List[Foot]:
    return [_mark_foot(foot, idx >= start) for idx, foot in enumerate(feet)]


def _mark_after(feet: Sequence[Foot], keep: int) -> List[Foot]:
    out: List[Foot] = []
    seen = 0
    for foot in feet:
        syllables = []
        for syl in foot.syllables:
            syllables.append(replace(syl, is_error=seen >= keep))
            seen += 1
        marked = replace(foot, syllables=tuple(syllables))
        if marked.is_error:
            marked = replace(marked, name=ERROR_TAG, tag=ERROR_COLOUR)
        out.append(marked)
    return out


def annotate_line(line: LineAnalysis, kind: ErrorKind, dominant: DominantPattern) -> LineAnalysis:
    """
    Return a copy of the line with its error syllables flagged.

    The error locus is positional: the tail of a short line, every syllable
    past the expected count of a long line, the second half of a line whose
    weights differ.
    """
    if kind == ErrorKind.NONE:
        return line

    n = len(line.feet)
    if kind == ErrorKind.TOO_SHORT:
        feet = _mark_from(line.feet, max(0, math.floor(n * SHORT_ERROR_SPLIT)))
    elif kind == ErrorKind.TOO_LONG:
        feet = _mark_after(line.feet, dominant.syllable_count)
    else:
        feet = _mark_from(line.feet, math.floor(n * PATTERN_ERROR_SPLIT))

    return replace(
        line,
        feet=tuple(feet),
        syllables=tuple(s for f in feet for s in f.syllables),
        has_meter_error=True,
        error_kind=kind,
    )


def validate_composition(
    lines: Sequence[LineAnalysis],
) -> Tuple[List[LineAnalysis], bool, Optional[DominantPattern]]:
    dominant = infer_dominant_pattern(lines)
    logger.debug("dominant pattern: %s", dominant)

    annotated: List[LineAnalysis] = []
    has_errors = False
    for idx, line in enumerate(lines):
        if line.is_invalid:
            # with no pattern there is no meter for the line to break
            if dominant is not None:
                has_errors = True
            annotated.append(line)
            continue
        kind = validate_line(line, dominant)
        if kind != ErrorKind.NONE:
            has_errors = True
            logger.debug("line %d: %s", idx + 1, kind.value)
            line = annotate_line(line, kind, dominant)
        annotated.append(line)
    return annotated, has_errors, dominant

# ------------------------ Summary ------------------------ #

def describe_meter(
    lines: Sequence[LineAnalysis],
    script: Script,
    dominant: Optional[DominantPattern],
) -> Optional[MeterDescription]:
    """
    Summary of the meter an error-free composition follows.

    Built from the first line with feet. When the dominant signature is a
    known bahr, that line is also laid out on the bahr's fixed feet.
    """
    first = next((ln for ln in lines if ln.feet and not ln.has_meter_error), None)
    if first is None or dominant is None:
        return None

    bahr = find_bahr(dominant.weight_signature)
    return MeterDescription(
        title=SUMMARY_TITLES[_message_script(script)],
        foot_names=[f.name for f in first.feet],
        weight_patterns=[f.signature for f in first.feet],
        bahr_name=bahr.display_name(script) if bahr else None,
        fixed_feet=tuple(segment_fixed(first.syllables, script, bahr)) if bahr else (),
    )
