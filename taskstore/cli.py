"""
TaskStore CLI — bootstrap and inspection commands.

Commands:
- taskstore check     — Load config, open the pool, ping, close (fail fast)
- taskstore init-db   — Create the task tables on the configured database (dev)
- taskstore list      — Print tasks as JSON lines (optional filters)
- taskstore show ID   — Print one task as JSON

Configuration comes from taskstore.yaml (``--config``) overridden by the
DBUSER / DBPASS / DBHOST / DBPORT / DBNAME environment variables.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Optional

logger = logging.getLogger("taskstore.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="taskstore",
        description="TaskStore — task-tracking data-access layer",
    )
    parser.add_argument(
        "--config", default=None, help="Path to taskstore.yaml (default: auto-discover)"
    )
    parser.add_argument(
        "--log-level", default=None, help="Override the configured log level"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("check", help="Verify the database is reachable")
    subparsers.add_parser("init-db", help="Create task tables (dev only)")

    list_parser = subparsers.add_parser("list", help="List tasks as JSON lines")
    list_parser.add_argument("--task-id", type=int, default=None, help="Only this task")
    list_parser.add_argument("--author-id", type=int, default=None, help="Only this author")
    list_parser.add_argument("--label-id", type=int, default=None, help="Only tasks with this label")

    show_parser = subparsers.add_parser("show", help="Show one task")
    show_parser.add_argument("task_id", type=int, help="Task id")

    args = parser.parse_args(argv)

    if args.command == "check":
        return cmd_check(args)
    elif args.command == "init-db":
        return cmd_init_db(args)
    elif args.command == "list":
        return cmd_list(args)
    elif args.command == "show":
        return cmd_show(args)
    else:
        parser.print_help()
        return 0


def _open_store(args: argparse.Namespace):
    """Load config and construct the store. Errors propagate to the caller."""
    from taskstore.engine.config import load_config
    from taskstore.engine.logging import configure_logging
    from taskstore.store import TaskStore

    config = load_config(args.config)
    configure_logging(args.log_level or config.logging.level)
    return TaskStore.from_config(config)


def cmd_check(args: argparse.Namespace) -> int:
    """Bootstrap check: config → pool → ping → close."""
    from taskstore.engine.errors import TaskStoreError

    try:
        store = _open_store(args)
    except TaskStoreError as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        if not store.ping():
            print(f"[ERROR] Database not responding: {store.safe_url}")
            return 1
        print(f"[OK] Connected to {store.safe_url}")
        return 0
    finally:
        store.close()


def cmd_init_db(args: argparse.Namespace) -> int:
    """Create the tasks / labels / tasks_labels tables if missing."""
    from sqlalchemy.exc import SQLAlchemyError

    from taskstore.db.base import create_schema
    from taskstore.engine.errors import TaskStoreError

    try:
        store = _open_store(args)
    except TaskStoreError as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        create_schema(store.engine)
        print(f"[OK] Schema ready on {store.safe_url}")
        return 0
    except SQLAlchemyError as e:
        print(f"[ERROR] Failed to create schema: {e}")
        return 1
    finally:
        store.close()


def cmd_list(args: argparse.Namespace) -> int:
    from taskstore.engine.errors import TaskStoreError

    try:
        store = _open_store(args)
    except TaskStoreError as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        if args.label_id is not None:
            tasks = store.get_tasks_by_label(args.label_id)
            # Label listing has no author/id filter of its own
            if args.task_id:
                tasks = [t for t in tasks if t.id == args.task_id]
            if args.author_id:
                tasks = [t for t in tasks if t.author_id == args.author_id]
        else:
            tasks = store.tasks(args.task_id, args.author_id)
        for task in tasks:
            print(json.dumps(task.model_dump(), ensure_ascii=False))
        return 0
    except TaskStoreError as e:
        print(f"[ERROR] {e}")
        return 1
    finally:
        store.close()


def cmd_show(args: argparse.Namespace) -> int:
    from taskstore.engine.errors import TaskStoreError, TaskStoreNotFoundError

    try:
        store = _open_store(args)
    except TaskStoreError as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        task = store.get_task_by_id(args.task_id)
        print(json.dumps(task.model_dump(), ensure_ascii=False, indent=2))
        return 0
    except TaskStoreNotFoundError:
        print(f"[ERROR] Task {args.task_id} not found")
        return 1
    except TaskStoreError as e:
        print(f"[ERROR] {e}")
        return 1
    finally:
        store.close()


if __name__ == "__main__":
    sys.exit(main())
