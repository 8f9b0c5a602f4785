"""CLI: command-line interface for flashsr."""

import argparse
import json
import logging
import pathlib
import sys
from datetime import date

from flashsr.app import App
from flashsr.cards import create_card, import_deck
from flashsr.flags import FLAGGED, add_flag, remove_flag
from flashsr.models import CardType, Grade, MalformedDueDate, parse_date
from flashsr.stats import collection_stats


def _date_arg(value: str) -> date:
    try:
        return parse_date(value)
    except MalformedDueDate:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}")


def _today(args) -> date:
    return args.date or date.today()


def _report_malformed(errors):
    for err in errors:
        print(f"Warning: {err} (skipped)", file=sys.stderr)


def _fail(app: App, message: str):
    print(f"Error: {message}", file=sys.stderr)
    app.close()
    sys.exit(1)


def cmd_add(args, app: App):
    app.init_db()
    card = create_card(app.conn, args.front, args.back, _today(args), deck=args.deck,
                       card_type=CardType(args.type), notes=args.notes, tags=args.tag or [])
    print(f"Added card {card.id} to deck '{card.deck}'")
    app.close()


def cmd_import(args, app: App):
    app.init_db()
    try:
        stats = import_deck(app.conn, pathlib.Path(args.file), _today(args))
    except (OSError, ValueError) as e:
        _fail(app, f"cannot import {args.file}: {e}")
    print(f"Imported: {stats['added']} added, {stats['skipped']} skipped")
    app.close()


def cmd_due(args, app: App):
    app.init_db()
    due = app.due_cards(_today(args), deck=args.deck, tag=args.tag, flag=args.flag, limit=0)
    _report_malformed(due.malformed)
    if not due:
        print("No cards due.")
    for card in due:
        print(f"{card.id}  {card.state.due_date}  [{card.deck}] {card.front}")
    app.close()


def _prompt_grade() -> Grade | None:
    while True:
        choice = input("[a]gain [h]ard [g]ood [e]asy, [q]uit: ").strip()
        if choice.lower() in ("q", "quit"):
            return None
        try:
            return Grade.from_label(choice)
        except ValueError:
            print(f"Unknown grade: {choice!r}")


def cmd_review(args, app: App):
    app.init_db()
    try:
        app.load_scheduler()
    except (FileNotFoundError, AttributeError) as e:
        _fail(app, f"cannot load scheduler '{app.settings.get('scheduler')}': {e}")

    session = app.start_session(_today(args), deck=args.deck, tag=args.tag,
                                flag=args.flag, limit=args.limit)
    _report_malformed(session.malformed)
    if session.finished:
        print("No cards due.")
        app.close()
        return

    print(f"{session.total} card(s) due")
    try:
        while not session.finished:
            card = session.current_card
            print(f"\n[{session.position + 1}/{session.total}] {card.deck}")
            print(card.front)
            answer = None
            if card.card_type is CardType.INPUT:
                answer = input("Your answer: ").strip()
            else:
                input("(Enter to reveal) ")
            session.reveal()
            print(f"--- {card.back}")
            if answer:
                print(f"You answered: {answer}")
            if card.notes:
                print(f"Notes: {card.notes}")
            grade = _prompt_grade()
            if grade is None:
                break
            updated = session.grade(grade)
            print(f"Next review in {updated.state.interval:g} day(s) ({updated.state.due_date})")
    except EOFError:
        print()

    print(f"\nReviewed {session.reviewed} of {session.total} card(s)")
    for failed in session.failed_saves:
        print(f"Warning: card {failed.card.id} was not saved: {failed.error}", file=sys.stderr)
    app.close()


def cmd_status(args, app: App):
    if not app.db_path.exists():
        print("No database found. Add cards with 'flashsr add' or 'flashsr import' first.")
        return

    app.init_db()
    stats = collection_stats(app.conn, _today(args))
    if args.json:
        print(json.dumps(stats, indent=2))
        app.close()
        return

    by_status = stats["by_status"]
    print(f"Cards:          {stats['total']} total")
    print(f"  new:          {by_status['new']}")
    print(f"  learning:     {by_status['learning']}")
    print(f"  review:       {by_status['review']}")
    print(f"  relearning:   {by_status['relearning']}")
    print(f"Due today:      {stats['due']}")
    if stats["malformed"]:
        print(f"Bad due dates:  {stats['malformed']}")
    print(f"Flagged:        {stats['flagged']}")
    print(f"Reviewed today: {stats['reviewed_today']}")
    print(f"Total reviews:  {stats['total_reviews']}")
    print(f"Streak:         {stats['streak']} day(s)")
    app.close()


def cmd_flag(args, app: App):
    app.init_db()
    try:
        if args.command == "flag":
            add_flag(app.conn, args.card_id, args.flag, args.note)
            print(f"Flagged {args.card_id} ({args.flag})")
        elif remove_flag(app.conn, args.card_id, args.flag):
            print(f"Unflagged {args.card_id} ({args.flag})")
        else:
            print(f"Card {args.card_id} was not flagged ({args.flag})")
    except KeyError:
        _fail(app, f"unknown card: {args.card_id}")
    app.close()


def _add_filters(p):
    p.add_argument("--deck", help="Only cards in this deck")
    p.add_argument("--tag", help="Filter by tag")
    p.add_argument("--flag", help=f"Filter by flag (e.g. {FLAGGED})")


def main():
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--date", type=_date_arg, help="Treat this YYYY-MM-DD as today")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    parser = argparse.ArgumentParser(prog="flashsr", description="Flashcard spaced repetition")
    subparsers = parser.add_subparsers(dest="command")

    p_add = subparsers.add_parser("add", parents=[common], help="Add a card")
    p_add.add_argument("front")
    p_add.add_argument("back")
    p_add.add_argument("--deck", default="default")
    p_add.add_argument("--tag", action="append", help="Tag (repeatable)")
    p_add.add_argument("--type", default="standard", choices=[t.value for t in CardType])
    p_add.add_argument("--notes")

    p_import = subparsers.add_parser("import", parents=[common], help="Import cards from JSON")
    p_import.add_argument("file")

    p_due = subparsers.add_parser("due", parents=[common], help="List cards due today")
    _add_filters(p_due)

    p_review = subparsers.add_parser("review", parents=[common], help="Review due cards")
    _add_filters(p_review)
    p_review.add_argument("--limit", type=int, help="Maximum cards this session")

    p_status = subparsers.add_parser("status", parents=[common], help="Show card counts and stats")
    p_status.add_argument("--json", action="store_true", help="Print stats as JSON")

    for name, help_text in (("flag", "Flag a card"), ("unflag", "Remove a card flag")):
        p = subparsers.add_parser(name, parents=[common], help=help_text)
        p.add_argument("card_id")
        p.add_argument("--flag", default=FLAGGED, help=f"Flag name (default: {FLAGGED})")
        if name == "flag":
            p.add_argument("--note")

    args = parser.parse_args()
    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        app = App()
    except ValueError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        sys.exit(1)
    if not app.sr_dir.exists():
        app.sr_dir.mkdir(parents=True, exist_ok=True)
        print(f"Created flashsr directory: {app.sr_dir}")

    level = "DEBUG" if args.verbose else str(app.settings.get("log_level", "WARNING")).upper()
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "add":
        cmd_add(args, app)
    elif args.command == "import":
        cmd_import(args, app)
    elif args.command == "due":
        cmd_due(args, app)
    elif args.command == "review":
        cmd_review(args, app)
    elif args.command == "status":
        cmd_status(args, app)
    elif args.command in ("flag", "unflag"):
        cmd_flag(args, app)


if __name__ == "__main__":
    main()
