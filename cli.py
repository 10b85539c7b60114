import argparse
import logging
import random
import sys
from pathlib import Path

from pydantic import ValidationError

from satprep.database import SessionLocal, init_db
from satprep.logging_setup import setup_console_logging
from satprep.models import QuestionSetCreate, TestConfig, TestLength, TestType
from satprep.sat_flow import Difficulty
from satprep.services.question_service import create_question_set
from satprep.services.test_generator import generate_test
from satprep.utils.json_utils import json_dump, read_json_file

logger = logging.getLogger("satprep.cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="SAT question bank tools")
    commands = parser.add_subparsers(dest="command", required=True)

    importer = commands.add_parser("import", help="Import question sets from JSON")
    importer.add_argument("file", type=Path, help="JSON file with one set or a list of sets")
    importer.add_argument(
        "--unofficial",
        action="store_true",
        help="Store the sets as unofficial (not used by the test generator)",
    )
    importer.add_argument("--author", type=str, default=None, help="Author user id")

    generator = commands.add_parser("generate", help="Assemble a practice test")
    generator.add_argument("--user", required=True, help="User id the attempt belongs to")
    generator.add_argument(
        "--type",
        choices=[t.value for t in TestType],
        default=TestType.COMBINED.value,
    )
    generator.add_argument(
        "--length",
        choices=[length.value for length in TestLength],
        default=TestLength.QUICK.value,
    )
    generator.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.NORMAL.value,
    )
    generator.add_argument("--no-timer", action="store_true", help="Generate an untimed test")
    generator.add_argument("--seed", type=int, default=None, help="Random seed")
    return parser.parse_args(argv)


def load_question_sets(path: Path, official: bool) -> list[QuestionSetCreate]:
    """Parse a JSON file holding one question set or a list of them."""
    data = read_json_file(path)
    items = data if isinstance(data, list) else [data]
    question_sets = []
    for item in items:
        if not isinstance(item, dict):
            raise ValueError(f"{path}: expected an object, got {type(item).__name__}")
        item = dict(item)
        item.setdefault("is_official", official)
        if not official:
            item["is_official"] = False
        question_sets.append(QuestionSetCreate.model_validate(item))
    return question_sets


def run_import(args: argparse.Namespace) -> int:
    try:
        question_sets = load_question_sets(args.file, official=not args.unofficial)
    except (OSError, ValueError, ValidationError) as exc:
        logger.error("Cannot import %s: %s", args.file, exc)
        return 1

    db = SessionLocal()
    try:
        for payload in question_sets:
            stored = create_question_set(db, payload, created_by=args.author)
            print(f"Imported {stored.id}: {stored.title} ({stored.question_count} questions)")
    finally:
        db.close()
    return 0


def run_generate(args: argparse.Namespace) -> int:
    config = TestConfig(
        test_type=TestType(args.type),
        length=TestLength(args.length),
        difficulty=Difficulty(args.difficulty),
        timer_enabled=not args.no_timer,
    )
    rng = random.Random(args.seed) if args.seed is not None else None

    db = SessionLocal()
    try:
        generated = generate_test(db, config, args.user, rng=rng)
    finally:
        db.close()

    if generated is None:
        logger.error("Unable to start test")
        return 1
    print(json_dump(generated.model_dump(mode="json"), pretty=True))
    return 0


def main(argv: list[str] | None = None) -> int:
    setup_console_logging(logging.INFO)
    args = parse_args(argv)
    init_db()
    if args.command == "import":
        return run_import(args)
    return run_generate(args)


if __name__ == "__main__":
    sys.exit(main())
