import pytest

from tihu.char_map import CharMap, CharMapper, TokenType
from tihu.utf8 import InvalidUtf16


def test_default_char_map():
    m = CharMap()
    assert (m.normed, m.code, m.type) == ("", 0, TokenType.UNKNOWN)


@pytest.mark.parametrize("code", [ord("\n"), ord("\r")])
def test_line_breaks(code):
    assert CharMap("x", code, TokenType.DELIMITER).is_line_break()


@pytest.mark.parametrize("code", [ord(" "), ord("\t"), 0x0627])
def test_not_line_breaks(code):
    assert not CharMap("x", code, TokenType.DELIMITER).is_line_break()


def test_arabic_vowel_is_diacritic():
    assert CharMap("\u064e", 0x064E, TokenType.PERSIAN).is_diacritic()


def test_letter_is_not_diacritic():
    assert not CharMap("\u0627", 0x0627, TokenType.PERSIAN).is_diacritic()


def test_set_then_get_round_trip():
    mapper = CharMapper()
    entry = CharMap("\u06cc", 0x06CC, TokenType.PERSIAN)
    mapper.set_char_map(0x064A, entry)
    assert mapper.get_char_map(0x064A) == entry


def test_unmapped_row_maps_letter_to_itself():
    mapper = CharMapper()
    result = mapper.get_char_map(ord("A"))
    assert result == CharMap("A", ord("A"), TokenType.UNKNOWN)


def test_unset_column_in_filled_row_is_empty():
    mapper = CharMapper()
    mapper.set_char_map(0x0627, CharMap("\u0627", 0x0627, TokenType.PERSIAN))
    assert mapper.get_char_map(0x0628) == CharMap()


def test_delimiters_like_tokenizer_setup():
    mapper = CharMapper()
    mapper.set_char_map(ord("\t"), CharMap("\t", ord("\t"), TokenType.DELIMITER))
    mapper.set_char_map(ord(" "), CharMap(" ", ord(" "), TokenType.DELIMITER))
    assert mapper.get_char_map(ord(" ")).type is TokenType.DELIMITER
    assert mapper.get_char_map(ord("\t")).normed == "\t"
    # Same row as the delimiters but never set.
    assert mapper.get_char_map(ord("a")).type is TokenType.UNKNOWN
    assert mapper.get_char_map(ord("a")).normed == ""


def test_later_set_overrides_earlier():
    mapper = CharMapper()
    mapper.set_char_map(0x0643, CharMap("\u0643", 0x0643, TokenType.PERSIAN))
    replacement = CharMap("\u06a9", 0x06A9, TokenType.PERSIAN)
    mapper.set_char_map(0x0643, replacement)
    assert mapper.get_char_map(0x0643) == replacement


def test_letters_are_sixteen_bit():
    mapper = CharMapper()
    entry = CharMap("b", ord("b"), TokenType.ENGLISH)
    mapper.set_char_map(0x10000 + ord("b"), entry)
    assert mapper.get_char_map(ord("b")) == entry


def test_lone_surrogate_in_empty_row_raises():
    with pytest.raises(InvalidUtf16):
        CharMapper().get_char_map(0xD800)


def test_token_type_from_code_letter():
    for member in TokenType:
        assert TokenType(member.value) is member