"""Tests for script detection, syllabification, weights and the analysis pipeline."""

import pytest

from bahr import (
    MAX_SYLLABLES_PER_WORD,
    analyze,
    classify_weight,
    detect_script,
    is_line_legal,
    parse_dev_syllables,
    parse_roman_syllables,
    parse_roman_word,
    syllabify,
)
from meter import ERROR_MESSAGES, SUCCESS_MESSAGES
from models import ErrorKind, Script, Weight


@pytest.mark.parametrize(
    "text, expected",
    [
        ("मैं अच्छा हूँ", Script.DEVANAGARI),
        ("yeh dil hai", Script.ROMANIZED),
        ("dil दिल", Script.MIXED),
        ("123 !!", Script.UNKNOWN),
        ("", Script.UNKNOWN),
        ("\n\nyeh dil\nमैं अच्छा हूँ", Script.ROMANIZED),
        ("...\nमैं अच्छा हूँ", Script.DEVANAGARI),
    ],
)
def test_detect_script(text, expected):
    assert detect_script(text) == expected


def test_conjunct_keeps_halant_with_next_consonant():
    assert parse_dev_syllables("क्या") == ["क्या"]


def test_devanagari_line_syllables():
    assert parse_dev_syllables("मैं अच्छा हूँ") == ["मैं", "अ", "च्छा", "हूँ"]


def test_devanagari_strips_danda_and_latin():
    assert parse_dev_syllables("दिल। abc") == ["दि", "ल"]


def test_devanagari_word_final_halant():
    assert parse_dev_syllables("जगत्") == ["ज", "ग", "त्"]


def test_devanagari_empty_input():
    assert parse_dev_syllables("") == []
    assert parse_dev_syllables("abc 123") == []


@pytest.mark.parametrize(
    "syllable, expected",
    [
        ("क", Weight.LIGHT),
        ("कि", Weight.LIGHT),
        ("का", Weight.HEAVY),
        ("मैं", Weight.HEAVY),
        ("क्या", Weight.HEAVY),
        ("त्", Weight.HEAVY),
        ("आ", Weight.HEAVY),
        ("अ", Weight.LIGHT),
    ],
)
def test_devanagari_weights(syllable, expected):
    assert classify_weight(syllable, Script.DEVANAGARI) == expected


def test_roman_syllables():
    assert parse_roman_syllables("Yeh dil hai!") == ["ye", "ha", "di", "la", "hai"]


def test_roman_pure_consonant_gets_implicit_vowel():
    assert parse_roman_word("str") == ["stra"]


def test_roman_word_is_capped():
    assert len(parse_roman_word("ba" * 25)) == MAX_SYLLABLES_PER_WORD


def test_roman_rules_hand_devanagari_words_back():
    assert parse_roman_syllables("dil दिल") == ["di", "la", "दि", "ल"]


@pytest.mark.parametrize(
    "syllable, expected",
    [
        ("ye", Weight.LIGHT),
        ("ha", Weight.LIGHT),
        ("hai", Weight.HEAVY),
        ("naa", Weight.HEAVY),
        ("kha", Weight.HEAVY),
        ("stra", Weight.HEAVY),
        ("pya", Weight.LIGHT),
        ("का", Weight.HEAVY),
    ],
)
def test_roman_weights(syllable, expected):
    assert classify_weight(syllable, Script.ROMANIZED) == expected


def test_line_legality_examples():
    assert is_line_legal("मैं अच्छा हूँ", Script.DEVANAGARI)
    assert not is_line_legal("मैं 123 हूँ", Script.DEVANAGARI)
    assert not is_line_legal("मैं abc हूँ", Script.DEVANAGARI)
    assert is_line_legal("yeh dil hai", Script.ROMANIZED)
    assert not is_line_legal("yeh 2 dil", Script.ROMANIZED)
    assert not is_line_legal("yeh ३ dil", Script.ROMANIZED)
    assert is_line_legal("yeh dil दिल", Script.MIXED)


@pytest.mark.parametrize("text", ["", "   ", "\n \n\t\n"])
def test_blank_input(text):
    result = analyze(text)
    assert result.lines == []
    assert result.has_errors is False
    assert result.message == ""


def test_analyze_is_deterministic():
    text = "मैं अच्छा हूँ\nमैं अच्छा हूँ\nमैं अच्छा"
    assert analyze(text) == analyze(text)
    assert analyze(text).to_dict() == analyze(text).to_dict()


def test_invalid_line_is_stable():
    for _ in range(3):
        result = analyze("मैं 123 हूँ")
        assert len(result.lines) == 1
        line = result.lines[0]
        assert line.is_invalid
        assert line.syllables == ()
        assert line.feet == ()
        assert result.dominant is None
        assert result.has_errors is False


def test_feet_reproduce_syllabifier_output():
    text = "मुझे पता है कि तुम कभी नहीं आओगे\nफिर भी दिल को तेरा इंतज़ार रहता है"
    result = analyze(text)
    for line in result.lines:
        texts = [s.text for f in line.feet for s in f.syllables]
        assert texts == syllabify(line.raw_line, result.language)
        assert [s.text for s in line.syllables] == texts


def test_short_devanagari_line_is_flagged():
    result = analyze("मैं अच्छा हूँ\nमैं अच्छा हूँ\nमैं अच्छा")
    assert result.language == Script.DEVANAGARI
    assert [ln.error_kind for ln in result.lines] == [
        ErrorKind.NONE,
        ErrorKind.NONE,
        ErrorKind.TOO_SHORT,
    ]
    assert result.has_errors
    assert result.message == ERROR_MESSAGES[Script.DEVANAGARI]
    assert result.meter is None
    assert all(s.is_error for s in result.lines[2].syllables)


def test_every_error_foot_has_an_error_syllable():
    result = analyze("मैं अच्छा हूँ\nमैं अच्छा हूँ\nमैं अच्छा हूँ हूँ हूँ\nमैं")
    for line in result.lines:
        for foot in line.feet:
            assert foot.is_error == any(s.is_error for s in foot.syllables)
            assert ("x" in foot.cells) == foot.is_error


def test_romanized_composition_in_meter():
    result = analyze("yeh dil hai\nyeh dil hai")
    assert result.language == Script.ROMANIZED
    assert not result.has_errors
    assert result.message == SUCCESS_MESSAGES[Script.ROMANIZED]
    assert result.meter is not None
    assert result.meter.foot_names == ["fe'lun", "fe'lun", "fe'"]
    assert result.meter.bahr_name is None


def test_line_without_syllables_is_dropped():
    result = analyze("मैं अच्छा हूँ\n।।")
    assert [ln.raw_line for ln in result.lines] == ["मैं अच्छा हूँ"]


def test_invalid_lines_alone_break_no_meter():
    result = analyze("मैं 123 हूँ\nमैं abc हूँ")
    assert [ln.is_invalid for ln in result.lines] == [True, True]
    assert result.dominant is None
    assert result.has_errors is False
    assert result.message == SUCCESS_MESSAGES[Script.DEVANAGARI]


def test_lines_split_on_newline_only():
    result = analyze("yeh dil hai\x0cphir")
    assert len(result.lines) == 1
    assert detect_script(" \nyeh dil") == Script.ROMANIZED


def test_hinglish_line_after_devanagari_first_line_is_invalid():
    result = analyze("मैं अच्छा हूँ\nyeh dil hai")
    assert result.language == Script.DEVANAGARI
    assert [ln.is_invalid for ln in result.lines] == [False, True]
    assert result.lines[1].syllables == ()
    assert result.has_errors


def test_devanagari_line_after_hinglish_first_line_uses_devanagari_rules():
    result = analyze("yeh dil hai\nमैं अच्छा हूँ")
    assert result.language == Script.ROMANIZED
    second = result.lines[1]
    assert not second.is_invalid
    assert [s.text for s in second.syllables] == parse_dev_syllables("मैं अच्छा हूँ")
    assert [int(s.weight) for s in second.syllables] == [2, 1, 2, 2]
