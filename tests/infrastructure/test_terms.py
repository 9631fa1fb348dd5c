import pytest

from kanjiorder.domain.errors import CorpusFormatError
from kanjiorder.infrastructure.terms import load_terms, parse_term, parse_terms


def test_parse_term_with_readings():
    term = parse_term("漢字;漢じ [かんじ;からもじ] /(n) kanji/Chinese characters/(P)/EntL1234X/")

    assert term.id == "EntL1234X"
    assert term.writings == ("漢字", "漢じ")
    assert term.readings == ("かんじ", "からもじ")
    assert term.meanings == ("(n) kanji", "Chinese characters")
    assert term.popular


def test_parse_term_without_readings():
    term = parse_term("ＡＢＣ /(n) ABC/EntL2X/")

    assert term.writings == ("ＡＢＣ",)
    assert term.readings is None
    assert not term.popular


def test_writing_tags_are_dropped():
    term = parse_term("森(P);杜(oK) [もり(P)] /(n) forest/(P)/EntL3X/")

    assert term.writings == ("森", "杜")
    assert term.readings == ("もり",)


def test_unknown_entry():
    with pytest.raises(CorpusFormatError, match="unknown term entry"):
        parse_term("nothing-useful")


def test_parse_terms_skips_header_and_blanks():
    lines = [
        "　？？？ /EDICT2 header/",
        "森 [もり] /(n) forest/(P)/EntL1/",
        "",
        "林 [はやし] /(n) grove/EntL2/",
    ]
    terms = parse_terms(lines)
    assert [t.id for t in terms] == ["EntL1", "EntL2"]


def test_parse_terms_reports_line():
    with pytest.raises(CorpusFormatError, match="line 3"):
        parse_terms(["header", "森 [もり] /forest/EntL1/", "broken"])


def test_load_terms(tmp_path):
    path = tmp_path / "edict2u"
    path.write_text("header\n森 [もり] /(n) forest/(P)/EntL1/\n", encoding="utf-8")

    terms = load_terms(path)

    assert len(terms) == 1
    assert terms[0].popular
