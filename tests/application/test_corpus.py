import pytest

from kanjiorder.application.corpus import Corpus
from kanjiorder.domain.errors import (
    DanglingReferenceError,
    DuplicateIdError,
    KanjiOrderError,
    NotFoundError,
)
from kanjiorder.domain.models import Character


def test_load_and_get(forest):
    corpus = Corpus.load(forest)

    assert len(corpus) == 3
    assert corpus.get("林").components == ("木",)
    assert "森" in corpus
    assert "山" not in corpus


def test_iterates_in_code_point_order(forest):
    corpus = Corpus.load(reversed(forest))
    assert [c.id for c in corpus] == ["木", "林", "森"]


def test_radicals(forest):
    assert [c.id for c in Corpus.load(forest).radicals] == ["木"]


def test_duplicate_id():
    with pytest.raises(DuplicateIdError) as exc:
        Corpus.load([Character("木"), Character("木", is_radical=True)])
    assert exc.value.char_id == "木"


def test_dangling_reference():
    with pytest.raises(DanglingReferenceError) as exc:
        Corpus.load([Character("林", components=("木",))])

    assert exc.value.char_id == "林"
    assert exc.value.component_id == "木"


def test_get_missing():
    corpus = Corpus.load([])

    with pytest.raises(NotFoundError) as exc:
        corpus.get("木")

    assert str(exc.value) == "character '木' not found"
    # Usable wherever a KeyError or a package error is expected
    assert isinstance(exc.value, KeyError)
    assert isinstance(exc.value, KanjiOrderError)


def test_kind_is_a_role_flag():
    assert Character("木", is_radical=True).kind == "radical"
    assert Character("林").kind == "kanji"
