#!/usr/bin/env python3
"""
Console tutor for the Georgian alphabet, words and phrases.

Each session shuffles one module (letters or words), asks questions in
several formats and retires an item once it is answered correctly enough
times in a row. Progress lives only as long as the session; nothing is
written to disk.
"""
from __future__ import annotations

import logging
import os
import random
import sys
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

import catalog
from controller import SessionController
from questions import KIND_CHOICE, Question
from scheduler import ENV_PREFIX, SchedulerConfig, SessionStats, config_from_env

QUIT_COMMANDS = {"q", "quit", "exit", "выход"}
SHOW_COMMANDS = {"?", "help", "ответ", "подсказка"}
YES_ANSWERS = {"да", "д", "y", "yes"}
NO_ANSWERS = {"нет", "н", "n", "no"}

LOG_LEVEL_ENV = "GEO_TRAINER_LOG_LEVEL"
SEED_ENV = "GEO_TRAINER_SEED"

USE_COLORS = sys.stdout.isatty() and os.environ.get("NO_COLOR") is None
COLOR_RESET = "\033[0m"
COLOR_PROMPT = "\033[96m"  # cyan
COLOR_TITLE = "\033[93m"  # yellow
COLOR_GOOD = "\033[92m"  # green
COLOR_BAD = "\033[91m"  # red


def color_text(content: str, color_code: str) -> str:
    if not USE_COLORS:
        return content
    return f"{color_code}{content}{COLOR_RESET}"


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def seed_from_env() -> Optional[int]:
    raw = os.environ.get(SEED_ENV, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logging.getLogger(__name__).warning("Ignoring non-numeric %s=%r", SEED_ENV, raw)
        return None


def ask_yes_no(prompt: str) -> bool:
    while True:
        answer = input(prompt).strip().lower()
        if answer in YES_ANSWERS:
            return True
        if answer in NO_ANSWERS:
            return False
        print("Ответьте да/нет.")


def progress_line(stats: SessionStats) -> str:
    return (
        f"Выучено {stats.mastered}/{stats.total}, осталось {stats.remaining}. "
        f"Ответов: {stats.answered}, точность {stats.accuracy_percent}%."
    )


def show_question(question: Question, number: int) -> None:
    print("\n----------------------------------------")
    print(f"Вопрос {number}")
    print(color_text(question.instruction, COLOR_TITLE))
    print(color_text(question.prompt, COLOR_PROMPT))
    if question.kind == KIND_CHOICE:
        for idx, option in enumerate(question.options, start=1):
            print(f"  {idx}) {option}")
    elif question.is_assembly:
        tiles = "  ".join(f"[{idx}] {part}" for idx, part in enumerate(question.pool, start=1))
        print(f"  {tiles}")
        print(f"  Нужно элементов: {question.required_length}")
    print("Введите '?' чтобы увидеть ответ или 'q' для выхода.")


def parse_tiles(raw: str) -> Optional[List[int]]:
    parts = raw.replace(",", " ").split()
    if not parts or not all(part.isdigit() for part in parts):
        return None
    return [int(part) - 1 for part in parts]


def collect_answer(question: Question) -> Dict[str, object]:
    """Read one answer; choice options and assembly tiles may be given by number."""
    while True:
        raw = input("Ответ: ").strip()
        lowered = raw.lower()
        if lowered in QUIT_COMMANDS:
            return {"quit": True}
        if lowered in SHOW_COMMANDS:
            return {"revealed": True}
        if question.kind == KIND_CHOICE and raw.isdigit():
            choice = int(raw)
            if 1 <= choice <= len(question.options):
                return {"answer": question.options[choice - 1]}
            print("Нет такого варианта.")
            continue
        if question.is_assembly:
            tiles = parse_tiles(raw)
            if tiles is not None:
                return {"tiles": tiles}
        if raw:
            return {"answer": raw}
        print("Введите ответ.")


def ask_question(controller: SessionController, question: Question) -> bool:
    """Ask the current question; returns False when the learner quits."""
    show_question(question, controller.questions_shown)
    while True:
        reply = collect_answer(question)
        if reply.get("quit"):
            return False
        try:
            result = controller.submit(
                answer=reply.get("answer"),
                tiles=reply.get("tiles"),
                revealed=bool(reply.get("revealed")),
            )
        except ValueError as exc:
            print(f"Не получилось: {exc}")
            continue
        break

    if result.correct:
        print(color_text("✅ Верно!", COLOR_GOOD))
        if result.mastered:
            print("🎓 Элемент выучен!")
    elif result.revealed:
        print(f"Правильный ответ: {result.correct_answer}")
    else:
        print(color_text("❌ Неверно.", COLOR_BAD))
        print(f"Правильный ответ: {result.correct_answer}")
    print(progress_line(result.stats))
    return True


def session_loop(category: str, config: SchedulerConfig, rng: random.Random) -> None:
    print_module_instructions(category, config.mastery_threshold)
    while True:
        controller = SessionController.start(category, config=config, rng=rng, auto_advance=False)
        print(f"\nНачинаем! Всего элементов: {controller.stats().total}")
        try:
            while True:
                question = controller.advance()
                if question is None:
                    break
                if not ask_question(controller, question):
                    print("Сессия прервана.")
                    return
        finally:
            controller.close()

        print("\nВсе элементы выучены! 🏁")
        print_summary(controller.stats())
        if not ask_yes_no("Начать ещё раз с тем же модулем? (да/нет): "):
            break


def print_summary(stats: SessionStats) -> None:
    print(
        f"Итог: {stats.mastered} из {stats.total} выучено, "
        f"{stats.correct} верных из {stats.answered} ({stats.accuracy_percent}% точность)."
    )


def choose_module(categories: Sequence = catalog.CATEGORIES) -> Optional[str]:
    while True:
        print("\nЧто будем учить?")
        for idx, (_, label, description) in enumerate(categories, start=1):
            print(f"  {idx}) {label}: {description}")
        print("  q) Выход")
        answer = input("Выбор: ").strip().lower()
        if answer in QUIT_COMMANDS:
            return None
        if answer.isdigit() and 1 <= int(answer) <= len(categories):
            return categories[int(answer) - 1][0]
        print("Неизвестный выбор, попробуйте ещё раз.")


def print_module_instructions(category: str, mastery_threshold: int) -> None:
    print("\nИнструкция:")
    if category == catalog.CATEGORY_LETTERS:
        print("  - Буквы спрашиваются в обе стороны, иногда через короткие слова.")
    else:
        print("  - Слова переводятся в обе стороны, фразы собираются из слов.")
    print("  - Варианты и плитки можно выбирать по номеру (например '3 1 2').")
    print(f"  - Элемент считается выученным после {mastery_threshold} верных ответов подряд.")


def main() -> None:
    configure_logging()
    try:
        config = config_from_env()
    except ValidationError as exc:
        names = ", ".join(ENV_PREFIX + str(error["loc"][0]).upper() for error in exc.errors())
        print(f"Некорректные настройки: {names}")
        sys.exit(2)
    rng = random.Random(seed_from_env())

    print("Грузинский тренажёр (алфавит, слова и фразы)")
    try:
        while True:
            module = choose_module()
            if module is None:
                print("До встречи!")
                break
            session_loop(module, config, rng)
    except (KeyboardInterrupt, EOFError):
        print("\nПрервано. До встречи!")


if __name__ == "__main__":
    main()
