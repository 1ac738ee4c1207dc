from dataclasses import FrozenInstanceError

from stresstrainer.models import Explanation, Group, Variant, Word
from stresstrainer.util import word_hash


def test_new_lowercases_and_hashes_text() -> None:
    word = Word.new("ОтЗыВ", 0)
    assert word.text == "отзыв"
    assert word.hash == word_hash("отзыв")
    assert word.detail is None
    assert word.group is None
    assert word.explanation is None


def test_builder_steps_return_new_words() -> None:
    base = Word.new("водопровод", 8)
    built = base.with_detail("  (труба) ").with_group("ПРОВОД", False).with_explanation("Пояснение.")
    assert base.detail is None
    assert built.detail == "(труба)"
    assert built.group == Group(inverted=False, rule=word_hash("провод"))
    assert built.explanation == "Пояснение."
    assert built.hash == base.hash


def test_equality_covers_all_fields() -> None:
    assert Word.new("отзыв", 3) == Word.new("отзыв", 3)
    assert Word.new("отзыв", 3) != Word.new("отзыв", 0)
    assert Word.new("отзыв", 3).with_detail("(посла)") != Word.new("отзыв", 3)


def test_word_is_immutable() -> None:
    word = Word.new("слово", 2)
    try:
        word.emphasis = 4  # type: ignore[misc]
        raise AssertionError("Expected FrozenInstanceError.")
    except FrozenInstanceError:
        pass


def test_variants_one_per_vowel() -> None:
    word = Word.new("слово", 2)
    variants = word.variants()
    assert [variant.emphasis for variant in variants] == [2, 4]
    assert all(variant.word == "слово" and variant.detail is None for variant in variants)


def test_variants_carry_detail_and_include_non_vowel_emphasis() -> None:
    word = Word.new("брр", 1).with_detail("(междометие)")
    assert word.variants() == [Variant(emphasis=1, word="брр", detail="(междометие)")]


def test_word_str_marks_emphasis_and_detail() -> None:
    assert str(Word.new("отзыв", 3).with_detail("(посла)")) == "отзЫв (посла)"
    assert str(Word.new("свёкла", 2)) == "свЁкла"


def test_variant_str_hides_yo() -> None:
    variants = Word.new("свёкла", 2).variants()
    assert [str(variant) for variant in variants] == ["свЕкла", "свеклА"]


def test_group_opposite_relation() -> None:
    follows = Group(inverted=False, rule=1)
    assert Group(inverted=True, rule=1).is_opposite_of(follows)
    assert not Group(inverted=False, rule=1).is_opposite_of(follows)
    assert not Group(inverted=True, rule=2).is_opposite_of(follows)


def test_explanation_normalizes_tag() -> None:
    explanation = Explanation.new("  ПРОВЕРКА ", " Текст. ")
    assert explanation == Explanation(tag="проверка", text="Текст.")
