import random

import pytest

import catalog
import questions
from questions import (
    CHOICE_GEO_RUS,
    CHOICE_RUS_GEO,
    INPUT_GEO_RUS,
    PHRASE_ASSEMBLY,
    TRANSLATE_INPUT,
    TRANSLIT_INPUT,
    WORD_ASSEMBLY,
    assemble_answer,
    build_question,
    check_answer,
    normalize_text,
)

LETTERS = catalog.list_items("letters")
WORDS_MODE = catalog.list_items("words")


def item_by_id(item_id):
    return catalog.get_item(item_id)


def tiles_for(pool, parts):
    used = set()
    tiles = []
    for part in parts:
        idx = next(i for i, value in enumerate(pool) if value == part and i not in used)
        used.add(idx)
        tiles.append(idx)
    return tiles


class TestTemplateSelection:

    def test_letter_templates(self):
        rng = random.Random(0)
        seen = {questions.select_template(item_by_id("l1"), rng) for _ in range(200)}
        assert seen == set(questions.LETTER_TEMPLATES)

    def test_word_templates(self):
        rng = random.Random(0)
        seen = {questions.select_template(item_by_id("w1"), rng) for _ in range(200)}
        assert seen == set(questions.WORD_TEMPLATES)

    def test_phrase_always_assembled(self):
        rng = random.Random(0)
        assert questions.select_template(item_by_id("p1"), rng) == PHRASE_ASSEMBLY

    def test_template_must_fit_item(self):
        with pytest.raises(ValueError):
            build_question(item_by_id("p1"), CHOICE_GEO_RUS, WORDS_MODE, random.Random(0))


class TestChoice:

    def test_letter_choice_options(self):
        question = build_question(item_by_id("l8"), CHOICE_GEO_RUS, LETTERS, random.Random(1))
        assert question.kind == questions.KIND_CHOICE
        assert question.prompt == "თ"
        assert question.correct_answer == "тх"
        assert len(question.options) == 4
        assert len(set(question.options)) == 4
        assert "тх" in question.options
        targets = {item.target_text for item in LETTERS}
        assert set(question.options) <= targets
        assert question.hint is None

    def test_word_choice_ignores_phrases(self):
        word = item_by_id("w3")
        phrase_texts = {item.source_text for item in catalog.PHRASES}
        for seed in range(20):
            question = build_question(word, CHOICE_RUS_GEO, WORDS_MODE, random.Random(seed))
            assert question.correct_answer == "სახლი"
            assert not set(question.options) & phrase_texts
            assert question.hint == "სახლი"

    def test_choice_with_few_items(self):
        items = LETTERS[:2]
        question = build_question(items[0], CHOICE_GEO_RUS, items, random.Random(0))
        assert sorted(question.options) == sorted(item.target_text for item in items)

    def test_choice_check_is_exact(self):
        question = build_question(item_by_id("l1"), CHOICE_GEO_RUS, LETTERS, random.Random(0))
        assert check_answer(question, "а")
        assert not check_answer(question, "б")


class TestInput:

    def test_input_ignores_case_and_spaces(self):
        question = build_question(item_by_id("l8"), INPUT_GEO_RUS, LETTERS, random.Random(0))
        assert check_answer(question, "  ТХ ")
        assert not check_answer(question, "т")

    def test_translate_input(self):
        question = build_question(item_by_id("w4"), TRANSLATE_INPUT, WORDS_MODE, random.Random(0))
        assert question.prompt == "წიგნი"
        assert check_answer(question, "Книга")

    def test_translit_input_credits_letter(self):
        question = build_question(item_by_id("l5"), TRANSLIT_INPUT, LETTERS, random.Random(0))
        assert question.item_id == "l5"
        word = catalog.get_item(question.rendered_item_id)
        assert word in catalog.simple_words()
        assert question.correct_answer == word.transliteration
        assert question.prompt == word.source_text


class TestAssembly:

    def test_word_assembly_pool(self):
        question = build_question(item_by_id("l2"), WORD_ASSEMBLY, LETTERS, random.Random(4))
        word = catalog.get_item(question.rendered_item_id)
        assert question.item_id == "l2"
        assert question.required_length == len(word.source_text)
        assert len(question.pool) == len(word.source_text) + questions.ASSEMBLY_DISTRACTORS
        distractors = list(question.pool)
        for ch in word.source_text:
            distractors.remove(ch)
        assert not set(distractors) & set(word.source_text)

    def test_word_assembly_with_tiles(self):
        question = build_question(item_by_id("l2"), WORD_ASSEMBLY, LETTERS, random.Random(4))
        tiles = tiles_for(question.pool, list(question.correct_answer))
        answer = assemble_answer(question, tiles)
        assert answer == question.correct_answer
        assert check_answer(question, answer)

    def test_phrase_assembly_ignores_punctuation(self):
        phrase = item_by_id("p1")
        question = build_question(phrase, PHRASE_ASSEMBLY, WORDS_MODE, random.Random(0))
        assert sorted(question.pool) == sorted(phrase.tokens)
        assert question.hint == "ეს ჩემი სახლია."
        tiles = tiles_for(question.pool, ["ეს", "ჩემი", "სახლია"])
        assert assemble_answer(question, tiles) == "ეს ჩემი სახლია"
        assert check_answer(question, "ეს ჩემი სახლია")
        assert not check_answer(question, "ჩემი ეს სახლია")

    def test_phrase_with_comma(self):
        question = build_question(item_by_id("p9"), PHRASE_ASSEMBLY, WORDS_MODE, random.Random(0))
        assert check_answer(question, "გიორგი სად მიდიხარ")

    def test_tile_errors(self):
        question = build_question(item_by_id("p2"), PHRASE_ASSEMBLY, WORDS_MODE, random.Random(0))
        with pytest.raises(ValueError):
            assemble_answer(question, [0, 0])
        with pytest.raises(ValueError):
            assemble_answer(question, [5])
        with pytest.raises(ValueError):
            assemble_answer(question, [-1])
        with pytest.raises(ValueError):
            assemble_answer(question, [0, 1, 0])

    def test_tiles_only_for_assembly(self):
        question = build_question(item_by_id("l1"), INPUT_GEO_RUS, LETTERS, random.Random(0))
        with pytest.raises(ValueError):
            assemble_answer(question, [0])


def test_normalize_text():
    assert normalize_text("  Где   ТЫ? ") == "где ты?"
    assert normalize_text("რა გქვია?", strip_punctuation=True) == "რა გქვია"


def test_to_dict_hides_solution():
    question = build_question(item_by_id("l1"), INPUT_GEO_RUS, LETTERS, random.Random(0))
    assert "solution" not in question.to_dict()
    assert question.to_dict(include_solution=True)["solution"] == "а"


def test_make_question_for_every_item():
    rng = random.Random(9)
    for item in [*LETTERS, *WORDS_MODE]:
        question = questions.make_question(item, LETTERS if item in LETTERS else WORDS_MODE, rng)
        assert question.item_id == item.id
        assert check_answer(question, question.correct_answer)
