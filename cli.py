import argparse
import logging
import shutil
import sys
from typing import List, Optional

from config import DEFAULT_DB_PATH, DEFAULT_YAML_PATH, configure_logging, load_settings
from controller import ViewContext, WorkoutController
from db import EntryRepository, KeyValueStore, ThemeRepository
from errors import StorageError
from tools import DateFormatter, EntryExporter
from workout_entry import WorkoutEntry
from workout_service import WorkoutService

logger = logging.getLogger(__name__)


class ConsoleView:
    """Print-based view used by the command line."""

    def __init__(self, assume_yes: bool = False) -> None:
        self.assume_yes = assume_yes
        self.had_error = False

    def render(self, entries: List[WorkoutEntry]) -> None:
        if not entries:
            print("No entries")
            return
        for e in entries:
            line = f"{e.date}  {e.type}  {e.minutes} min  {e.value}"
            if e.note:
                line += f"  {e.note}"
            print(f"{line}  [{e.id}]")

    def show_error(self, message: str) -> None:
        self.had_error = True
        print(f"Error: {message}", file=sys.stderr)

    def show_info(self, message: str) -> None:
        print(message)

    def confirm(self, message: str) -> bool:
        if self.assume_yes:
            return True
        return input(f"{message} [y/N] ").strip().lower() in {"y", "yes"}

    def context(self) -> ViewContext:
        return ViewContext(
            render=self.render,
            show_error=self.show_error,
            show_info=self.show_info,
            confirm=self.confirm,
        )


def build_service(db_path: str, yaml_path: str) -> WorkoutService:
    settings = load_settings(yaml_path)
    store = KeyValueStore(db_path, settings.quota_bytes)
    return WorkoutService(EntryRepository(store, settings.storage_key))


def export_entries(db_path: str, yaml_path: str, fmt: str, out_path: str) -> int:
    """Write all entries to ``out_path`` and return how many were written."""
    entries = build_service(db_path, yaml_path).get_all()
    if fmt == "csv":
        data = EntryExporter.to_csv(entries)
    else:
        data = EntryExporter.to_json(entries)
    with open(out_path, "w", encoding="utf-8", newline="") as f:
        f.write(data)
    return len(entries)


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def demo_data(db_path: str, yaml_path: str) -> None:
    """Populate the log with demo entries if it is empty."""
    service = build_service(db_path, yaml_path)
    if service.get_all():
        print("Log already contains entries")
        return
    today = DateFormatter.today()
    service.add({"date": today, "type": "ランニング", "minutes": "30", "value": "5", "note": "Demo run"})
    service.add({"date": today, "type": "筋トレ", "minutes": "20", "value": "40", "note": ""})
    print("Demo data inserted")


def theme(db_path: str, yaml_path: str, value: Optional[str]) -> str:
    settings = load_settings(yaml_path)
    repo = ThemeRepository(KeyValueStore(db_path, settings.quota_bytes), settings.theme_key)
    if value:
        repo.set_theme(value)
    return repo.get_theme()


def _add_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--db", default=DEFAULT_DB_PATH)
    parser.add_argument("--yaml", default=DEFAULT_YAML_PATH)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Workout log commands")
    sub = parser.add_subparsers(dest="cmd", required=True)

    add = sub.add_parser("add")
    _add_paths(add)
    add.add_argument("--date", default=None)
    add.add_argument("--type", required=True)
    add.add_argument("--minutes", default="0")
    add.add_argument("--value", default="0")
    add.add_argument("--note", default="")

    lst = sub.add_parser("list")
    _add_paths(lst)
    lst.add_argument("--date", default=None)

    dele = sub.add_parser("delete")
    _add_paths(dele)
    dele.add_argument("id")

    clr = sub.add_parser("clear")
    _add_paths(clr)
    clr.add_argument("--yes", action="store_true")

    exp = sub.add_parser("export")
    _add_paths(exp)
    exp.add_argument("--fmt", choices=["csv", "json"], default="csv")
    exp.add_argument("--out", default="workouts.csv")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default=DEFAULT_DB_PATH)
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default=DEFAULT_DB_PATH)

    demo = sub.add_parser("demo")
    _add_paths(demo)

    thm = sub.add_parser("theme")
    _add_paths(thm)
    thm.add_argument("value", nargs="?", choices=["light", "dark"])

    args = parser.parse_args(argv)

    if args.cmd in {"add", "list", "delete", "clear", "export", "demo", "theme"}:
        configure_logging(load_settings(args.yaml).log_level)

    if args.cmd in {"add", "list", "delete", "clear"}:
        view = ConsoleView(assume_yes=getattr(args, "yes", False))
        controller = WorkoutController(build_service(args.db, args.yaml), view.context())
        if args.cmd == "add":
            ok = controller.submit_form(
                {
                    "date": args.date or controller.default_date(),
                    "type": args.type,
                    "minutes": args.minutes,
                    "value": args.value,
                    "note": args.note,
                }
            )
            return 0 if ok else 1
        if args.cmd == "list":
            controller.request_filter(args.date)
        elif args.cmd == "delete":
            controller.request_delete(args.id)
        else:
            controller.request_clear_all()
        return 1 if view.had_error else 0

    try:
        if args.cmd == "export":
            count = export_entries(args.db, args.yaml, args.fmt, args.out)
            logger.info("exported %d entries to %s", count, args.out)
            print(f"Exported {count} entries to {args.out}")
        elif args.cmd == "backup":
            backup_db(args.db, args.out)
        elif args.cmd == "restore":
            restore_db(args.src, args.db)
        elif args.cmd == "demo":
            demo_data(args.db, args.yaml)
        elif args.cmd == "theme":
            print(theme(args.db, args.yaml, args.value))
    except StorageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
