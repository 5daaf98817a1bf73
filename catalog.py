"""
Static vocabulary for the Georgian trainer.

Letters, words and phrases are compiled into the module and never change at
runtime. Georgian is the source language, Russian the reference language.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import ClassVar, Dict, List, Optional, Tuple, Union


class ItemKind(str, enum.Enum):
    LETTER = "letter"
    WORD = "word"
    PHRASE = "phrase"


@dataclass(frozen=True)
class Letter:
    id: str
    source_text: str
    target_text: str
    pronunciation_note: Optional[str] = None

    kind: ClassVar[ItemKind] = ItemKind.LETTER


@dataclass(frozen=True)
class Word:
    id: str
    source_text: str
    target_text: str
    transliteration: Optional[str] = None

    kind: ClassVar[ItemKind] = ItemKind.WORD


@dataclass(frozen=True)
class Phrase:
    """A sentence drilled by assembling its Georgian tokens in order."""

    id: str
    source_text: str
    target_text: str
    tokens: Tuple[str, ...] = ()

    kind: ClassVar[ItemKind] = ItemKind.PHRASE


Item = Union[Letter, Word, Phrase]

CATEGORY_LETTERS = "letters"
CATEGORY_WORDS = "words"
CATEGORIES = (
    (CATEGORY_LETTERS, "Алфавит", "33 буквы грузинского алфавита."),
    (CATEGORY_WORDS, "Слова и фразы", "Базовые слова и короткие фразы."),
)


def _letter(num: int, geo: str, rus: str, note: Optional[str] = None) -> Letter:
    return Letter(id=f"l{num}", source_text=geo, target_text=rus, pronunciation_note=note)


LETTERS: Tuple[Letter, ...] = (
    _letter(1, "ა", "а"),
    _letter(2, "ბ", "б"),
    _letter(3, "გ", "г"),
    _letter(4, "დ", "д"),
    _letter(5, "ე", "э"),
    _letter(6, "ვ", "в"),
    _letter(7, "ზ", "з"),
    _letter(8, "თ", "тх", "С придыханием"),
    _letter(9, "ი", "и"),
    _letter(10, "კ", "к", "Резкое, без выдоха"),
    _letter(11, "ლ", "л"),
    _letter(12, "მ", "м"),
    _letter(13, "ნ", "н"),
    _letter(14, "ო", "о"),
    _letter(15, "პ", "п", "Лёгкое, на выдохе"),
    _letter(16, "ჟ", "ж"),
    _letter(17, "რ", "р"),
    _letter(18, "ს", "с"),
    _letter(19, "ტ", "т"),
    _letter(20, "უ", "у"),
    _letter(21, "ფ", "пф"),
    _letter(22, "ქ", "кх", "Лёгкое, на выдохе"),
    _letter(23, "ღ", "гх"),
    _letter(24, "ყ", "кх!", "Глубокое, без выдоха"),
    _letter(25, "შ", "ш", "Мягкое"),
    _letter(26, "ჩ", "ч"),
    _letter(27, "ც", "ц"),
    _letter(28, "ძ", "дз"),
    _letter(29, "წ", "ц!", "Резкое, без выдоха"),
    _letter(30, "ჭ", "ч!", "Резкое, без выдоха"),
    _letter(31, "ხ", "х", "Глубокое"),
    _letter(32, "ჯ", "дж", "Совмещённое"),
    _letter(33, "ჰ", "хх", "Лёгкое, на выдохе"),
)

_WORD_ROWS = (
    ("მამა", "отец", "мама"),
    ("დედა", "мать", "дэда"),
    ("სახლი", "дом", "сахли"),
    ("წიგნი", "книга", "цигни"),
    ("ქალაქი", "город", "калаки"),
    ("მთა", "гора", "мта"),
    ("წყალი", "вода", "цкали"),
    ("ძმა", "брат", "дзма"),
    ("და", "сестра", "да"),
    ("ბავშვი", "ребенок", "бавшви"),
    ("კაცი", "мужчина", "каци"),
    ("ქალი", "женщина", "кали"),
    ("ძაღლი", "собака", "дзагли"),
    ("კატა", "кошка", "ката"),
    ("ხე", "дерево", "хэ"),
    ("მზე", "солнце", "мзэ"),
    ("ღამე", "ночь", "гамэ"),
    ("დღე", "день", "дгэ"),
    ("პური", "хлеб", "пури"),
    ("ღვინო", "вино", "гвино"),
    ("გზა", "дорога", "гза"),
    ("ენა", "язык", "эна"),
    ("სიყვარული", "любовь", "сикварули"),
    ("მეგობარი", "друг", "мэгобари"),
    ("კარგი", "хороший", "карги"),
    ("ცუდი", "плохой", "цуди"),
    ("დიდი", "большой", "диди"),
    ("პატარა", "маленький", "патара"),
    ("ახალი", "новый", "ахали"),
    ("ლამაზი", "красивый", "ламази"),
)

WORDS: Tuple[Word, ...] = tuple(
    Word(id=f"w{idx}", source_text=geo, target_text=rus, transliteration=translit)
    for idx, (geo, rus, translit) in enumerate(_WORD_ROWS, start=1)
)

# Short words used to drill letters through assembly and transliteration.
_SIMPLE_WORD_ROWS = (
    ("მამა", "отец", "мама"),
    ("დედა", "мать", "дэда"),
    ("კატა", "кошка", "ката"),
    ("სახლი", "дом", "сахли"),
    ("წიგნი", "книга", "цигни"),
    ("ვარ", "есть (я)", "вар"),
    ("და", "и / сестра", "да"),
    ("არის", "есть (он/она)", "арис"),
    ("კარგი", "хороший", "карги"),
    ("დიდი", "большой", "диди"),
)

SIMPLE_WORDS: Tuple[Word, ...] = tuple(
    Word(id=f"sw{idx}", source_text=geo, target_text=rus, transliteration=translit)
    for idx, (geo, rus, translit) in enumerate(_SIMPLE_WORD_ROWS, start=1)
)

_PHRASE_ROWS = (
    ("Это мой дом.", "ეს ჩემი სახლია.", ("სახლია", "ჩემი", "ეს")),
    ("Как тебя зовут?", "რა გქვია?", ("გქვია", "რა")),
    ("Где твоя книга?", "სად არის შენი წიგნი?", ("წიგნი", "შენი", "არის", "სად")),
    ("Я тебя люблю.", "მე შენ მიყვარხარ.", ("მიყვარხარ", "შენ", "მე")),
    ("Это твоя книга?", "ეს შენი წიგნია?", ("წიგნია", "შენი", "ეს")),
    ("Он их друг.", "ის მათი მეგობარია.", ("მეგობარია", "მათი", "ის")),
    ("Где ваша машина?", "სად არის თქვენი მანქანა?", ("მანქანა", "თქვენი", "არის", "სად")),
    ("Это наша школа.", "ეს ჩვენი სკოლაა.", ("სკოლაა", "ჩვენი", "ეს")),
    ("Георгий, куда ты идёшь?", "გიორგი, სად მიდიხარ?", ("სად", "გიორგი", "მიდიხარ")),
    (
        "Где ресторан «Багратони»?",
        "სად არის რესტორანი ბაგრატონი?",
        ("სად", "არის", "რესტორანი", "ბაგრატონი"),
    ),
    (
        "Извините, где улица Руставели?",
        "უკაცრავად, სად არის რუსთაველის ქუჩა?",
        ("სად", "არის", "რუსთაველის", "ქუჩა", "უკაცრავად"),
    ),
    (
        "Нана, когда ты идёшь на работу?",
        "ნანა, როდის მიდიხარ სამსახურზე?",
        ("როდის", "ნანა", "მიდიხარ", "სამსახურზე"),
    ),
    (
        "Лика, когда ты идёшь к Нане?",
        "ლიკა, როდის მიდიხარ ნანასთან?",
        ("როდის", "ლიკა", "მიდიხარ", "ნანასთან"),
    ),
    (
        "Я еду на рынок на такси.",
        "მე მივდივარ ბაზარში ტაქსით.",
        ("ტაქსით", "მე", "მივდივარ", "ბაზარში"),
    ),
    (
        "Моя подруга идёт в парк пешком.",
        "ჩემი დაქალი მიდის პარკში ფეხით.",
        ("ფეხით", "ჩემი", "დაქალი", "მიდის", "პარკში"),
    ),
    (
        "Ты домой едешь на машине или идёшь пешком?",
        "შენ სახლში მანქანით მიდიხარ თუ ფეხით?",
        ("ფეხით", "შენ", "სახლში", "მანქანით", "მიდიხარ", "თუ"),
    ),
    (
        "Мой друг идёт на работу пешком.",
        "ჩემი მეგობარი სამსახურში ფეხით მიდის.",
        ("ფეხით", "ჩემი", "მეგობარი", "სამსახურში", "მიდის"),
    ),
    (
        "Мой ребёнок едет в школу на автобусе.",
        "ჩემი შვილი სკოლაში ავტობუსით მიდის.",
        ("ავტობუსით", "ჩემი", "შვილი", "სკოლაში", "მიდის"),
    ),
    (
        "Моя дочь приходит домой пешком.",
        "ჩემი გოგო სახლში ფეხით მოდის.",
        ("ფეხით", "ჩემი", "გოგო", "სახლში", "მოდის"),
    ),
    ("Я домой прихожу пешком.", "მე სახლში ფეხით მოვდივარ.", ("ფეხით", "მე", "სახლში", "მოვდივარ")),
    ("Я иду на рынок.", "მე მივდივარ ბაზარში", ("ბაზარში", "მე", "მივდივარ")),
    ("Ты идёшь домой.", "შენ მიდიხარ სახლში", ("სახლში", "შენ", "მიდიხარ")),
    ("Он идёт в Батуми.", "ის მიდის ბათუმში", ("ის", "მიდის", "ბათუმში")),
    ("Мы идём в Тбилиси.", "ჩვენ მივდივართ თბილისში", ("თბილისში", "ჩვენ", "მივდივართ")),
    ("Вы идёте в Кутаиси.", "თქვენ მიდიხართ ქუთაისში", ("ქუთაისში", "თქვენ", "მიდიხართ")),
    ("Они идут в Кобулети.", "ისინი მიდიან ქობულეთში", ("ისინი", "მიდიან", "ქობულეთში")),
)

PHRASES: Tuple[Phrase, ...] = tuple(
    Phrase(id=f"p{idx}", source_text=geo, target_text=rus, tokens=tokens)
    for idx, (rus, geo, tokens) in enumerate(_PHRASE_ROWS, start=1)
)

_INDEX: Dict[str, Item] = {
    item.id: item for item in (*LETTERS, *WORDS, *SIMPLE_WORDS, *PHRASES)
}


def list_items(category: str) -> List[Item]:
    if category == CATEGORY_LETTERS:
        return list(LETTERS)
    if category == CATEGORY_WORDS:
        return [*WORDS, *PHRASES]
    raise ValueError(f"Unknown category: {category!r}")


def category_ids() -> List[str]:
    return [key for key, _, _ in CATEGORIES]


def get_item(item_id: str) -> Optional[Item]:
    return _INDEX.get(item_id)


def all_letters() -> List[Letter]:
    return list(LETTERS)


def simple_words() -> List[Word]:
    return list(SIMPLE_WORDS)
