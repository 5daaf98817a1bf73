"""
Question templates for the Georgian trainer.

A template turns a catalog item into something the learner can answer:
pick one of four options, type the answer, or assemble it from shuffled
letters or words. Templates are chosen at random per question and do not
influence scheduling.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import catalog
from catalog import Item, ItemKind, Phrase, Word
from scheduler import pick_random, shuffled

CHOICE_GEO_RUS = "choice_geo_rus"
CHOICE_RUS_GEO = "choice_rus_geo"
INPUT_GEO_RUS = "input_geo_rus"
INPUT_RUS_GEO = "input_rus_geo"
WORD_ASSEMBLY = "word_assembly"
TRANSLIT_INPUT = "translit_input"
TRANSLATE_INPUT = "translate_input"
PHRASE_ASSEMBLY = "phrase_assembly"

LETTER_TEMPLATES = (
    CHOICE_GEO_RUS,
    CHOICE_RUS_GEO,
    INPUT_GEO_RUS,
    INPUT_RUS_GEO,
    WORD_ASSEMBLY,
    TRANSLIT_INPUT,
)
WORD_TEMPLATES = (CHOICE_GEO_RUS, CHOICE_RUS_GEO, TRANSLATE_INPUT, INPUT_RUS_GEO)
PHRASE_TEMPLATES = (PHRASE_ASSEMBLY,)

# Templates that drill a letter through a whole simple word.
SIMPLE_WORD_TEMPLATES = {WORD_ASSEMBLY, TRANSLIT_INPUT}

KIND_CHOICE = "choice"
KIND_INPUT = "input"
KIND_ASSEMBLY = "assembly"
KIND_PHRASE_ASSEMBLY = "phrase_assembly"

CHOICE_DISTRACTORS = 3
ASSEMBLY_DISTRACTORS = 3
PHRASE_PUNCTUATION = "?.!,"


@dataclass
class Question:
    item_id: str
    template: str
    kind: str
    instruction: str
    prompt: str
    correct_answer: str
    options: List[str] = field(default_factory=list)
    pool: List[str] = field(default_factory=list)
    required_length: Optional[int] = None
    hint: Optional[str] = None
    rendered_item_id: Optional[str] = None

    @property
    def is_assembly(self) -> bool:
        return self.kind in (KIND_ASSEMBLY, KIND_PHRASE_ASSEMBLY)

    def to_dict(self, include_solution: bool = False) -> Dict[str, object]:
        payload: Dict[str, object] = {
            "item_id": self.item_id,
            "template": self.template,
            "kind": self.kind,
            "instruction": self.instruction,
            "prompt": self.prompt,
            "options": list(self.options),
            "pool": list(self.pool),
            "required_length": self.required_length,
            "hint": self.hint,
        }
        if include_solution:
            payload["solution"] = self.correct_answer
        return payload


def normalize_text(
    value: str,
    strip_punctuation: bool = False,
    collapse_spaces: bool = True,
) -> str:
    cleaned = value.strip().lower()
    if strip_punctuation:
        cleaned = "".join(ch for ch in cleaned if ch not in PHRASE_PUNCTUATION)
    if collapse_spaces:
        cleaned = " ".join(cleaned.split())
    return cleaned


def templates_for(item: Item) -> Tuple[str, ...]:
    if item.kind is ItemKind.LETTER:
        return LETTER_TEMPLATES
    if item.kind is ItemKind.WORD:
        return WORD_TEMPLATES
    return PHRASE_TEMPLATES


def select_template(item: Item, rng: random.Random) -> str:
    return rng.choice(templates_for(item))


def _distinct(values: Sequence[str]) -> List[str]:
    return list(dict.fromkeys(values))


def _choice_options(
    correct: str,
    item: Item,
    session_items: Sequence[Item],
    attribute: str,
    rng: random.Random,
) -> List[str]:
    others = _distinct(
        [
            getattr(other, attribute)
            for other in session_items
            if other.kind is item.kind and getattr(other, attribute) != correct
        ]
    )
    distractors = pick_random(others, CHOICE_DISTRACTORS, rng)
    return shuffled([correct, *distractors], rng)


def _word_hint(item: Item, text: str) -> Optional[str]:
    return text if item.kind is ItemKind.WORD else None


def _choice_geo_rus(item: Item, session_items: Sequence[Item], rng: random.Random) -> Question:
    is_word = item.kind is ItemKind.WORD
    return Question(
        item_id=item.id,
        template=CHOICE_GEO_RUS,
        kind=KIND_CHOICE,
        instruction="Выберите перевод" if is_word else "Какая буква соответствует?",
        prompt=item.source_text,
        correct_answer=item.target_text,
        options=_choice_options(item.target_text, item, session_items, "target_text", rng),
        hint=_word_hint(item, item.target_text),
    )


def _choice_rus_geo(item: Item, session_items: Sequence[Item], rng: random.Random) -> Question:
    is_word = item.kind is ItemKind.WORD
    return Question(
        item_id=item.id,
        template=CHOICE_RUS_GEO,
        kind=KIND_CHOICE,
        instruction="Выберите перевод" if is_word else "Выберите на грузинском",
        prompt=item.target_text,
        correct_answer=item.source_text,
        options=_choice_options(item.source_text, item, session_items, "source_text", rng),
        hint=_word_hint(item, item.source_text),
    )


def _input_geo_rus(item: Item, session_items: Sequence[Item], rng: random.Random) -> Question:
    return Question(
        item_id=item.id,
        template=INPUT_GEO_RUS,
        kind=KIND_INPUT,
        instruction="Напишите соответствие",
        prompt=item.source_text,
        correct_answer=item.target_text,
    )


def _input_rus_geo(item: Item, session_items: Sequence[Item], rng: random.Random) -> Question:
    is_word = item.kind is ItemKind.WORD
    return Question(
        item_id=item.id,
        template=INPUT_RUS_GEO,
        kind=KIND_INPUT,
        instruction="Напишите перевод" if is_word else "Напишите на грузинском",
        prompt=item.target_text,
        correct_answer=item.source_text,
        hint=_word_hint(item, item.source_text),
    )


def _translate_input(item: Item, session_items: Sequence[Item], rng: random.Random) -> Question:
    return Question(
        item_id=item.id,
        template=TRANSLATE_INPUT,
        kind=KIND_INPUT,
        instruction="Переведите слово",
        prompt=item.source_text,
        correct_answer=item.target_text,
        hint=item.target_text,
    )


def _word_assembly(word: Word, rng: random.Random) -> Question:
    letters = list(word.source_text)
    spare = [letter.source_text for letter in catalog.all_letters() if letter.source_text not in letters]
    distractors = pick_random(spare, ASSEMBLY_DISTRACTORS, rng)
    return Question(
        item_id=word.id,
        template=WORD_ASSEMBLY,
        kind=KIND_ASSEMBLY,
        instruction="Соберите слово из букв",
        prompt=word.transliteration or word.target_text,
        correct_answer=word.source_text,
        pool=shuffled(letters + distractors, rng),
        required_length=len(letters),
        hint=word.target_text,
    )


def _translit_input(word: Word, rng: random.Random) -> Question:
    return Question(
        item_id=word.id,
        template=TRANSLIT_INPUT,
        kind=KIND_INPUT,
        instruction="Напишите транслитерацию",
        prompt=word.source_text,
        correct_answer=word.transliteration or "",
        hint=word.target_text,
    )


def _phrase_assembly(phrase: Phrase, rng: random.Random) -> Question:
    tokens = list(phrase.tokens) or phrase.source_text.split()
    return Question(
        item_id=phrase.id,
        template=PHRASE_ASSEMBLY,
        kind=KIND_PHRASE_ASSEMBLY,
        instruction="Соберите фразу",
        prompt=phrase.target_text,
        correct_answer=phrase.source_text,
        pool=shuffled(tokens, rng),
        required_length=len(tokens),
        hint=phrase.source_text,
    )


_ITEM_RENDERERS = {
    CHOICE_GEO_RUS: _choice_geo_rus,
    CHOICE_RUS_GEO: _choice_rus_geo,
    INPUT_GEO_RUS: _input_geo_rus,
    INPUT_RUS_GEO: _input_rus_geo,
    TRANSLATE_INPUT: _translate_input,
}


def build_question(
    item: Item,
    template: str,
    session_items: Sequence[Item],
    rng: random.Random,
) -> Question:
    if template not in templates_for(item):
        raise ValueError(f"Template {template!r} does not apply to {item.kind.value} items")

    if template == PHRASE_ASSEMBLY:
        return _phrase_assembly(item, rng)

    if template in SIMPLE_WORD_TEMPLATES:
        # The letter is drilled through a random simple word; credit goes to the letter.
        word = rng.choice(catalog.simple_words())
        render = _word_assembly if template == WORD_ASSEMBLY else _translit_input
        question = render(word, rng)
        question.item_id = item.id
        question.rendered_item_id = word.id
        return question

    return _ITEM_RENDERERS[template](item, session_items, rng)


def make_question(
    item: Item,
    session_items: Sequence[Item],
    rng: random.Random,
    template: Optional[str] = None,
) -> Question:
    return build_question(item, template or select_template(item, rng), session_items, rng)


def assemble_answer(question: Question, tiles: Sequence[int]) -> str:
    if not question.is_assembly:
        raise ValueError("Only assembly questions accept tiles.")
    if question.required_length is not None and len(tiles) > question.required_length:
        raise ValueError(f"At most {question.required_length} tiles can be used.")
    seen = set()
    parts: List[str] = []
    for tile in tiles:
        if tile < 0 or tile >= len(question.pool):
            raise ValueError(f"Tile {tile} is out of range.")
        if tile in seen:
            raise ValueError(f"Tile {tile} is already used.")
        seen.add(tile)
        parts.append(question.pool[tile])
    separator = " " if question.kind == KIND_PHRASE_ASSEMBLY else ""
    return separator.join(parts)


def check_answer(question: Question, answer: str) -> bool:
    if question.kind == KIND_CHOICE:
        return answer == question.correct_answer
    strip_punctuation = question.kind == KIND_PHRASE_ASSEMBLY
    return normalize_text(answer, strip_punctuation=strip_punctuation) == normalize_text(
        question.correct_answer, strip_punctuation=strip_punctuation
    )
