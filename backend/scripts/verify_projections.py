"""
Check that the todo list projections agree with the event log.

A failure between the two projection writes (or between the event write and
the projection writes) leaves the storage tree ahead of, or out of step with,
what the projections show. This walks the stream index, counts the
TodoListCreated entries and their names, and compares them with the
todoLists and todoListsCount projections. It only reports; it never rewrites
a projection.

Usage:
    cd backend
    python scripts/verify_projections.py [storage_root]

Exits 1 if any mismatch is found.
"""

import json
import sys
from pathlib import Path

CREATED_SUFFIX = "_TodoListCreated"


def read_index(root: Path) -> list[str]:
    index = root / "events" / "index"
    if not index.exists():
        return []
    return index.read_text(encoding="utf-8").splitlines()


def load_json(path: Path, problems: list[str]):
    """Parse a JSON file, recording a problem and returning None if it can't be read."""
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        problems.append(f"unreadable {path.name}: {e}")
        return None


def created_names(root: Path, references: list[str], problems: list[str]) -> list[str]:
    """Names carried by every readable TodoListCreated entry, in index order."""
    names = []
    for ref in references:
        if not ref.endswith(CREATED_SUFFIX):
            continue
        event = load_json(root / ref, problems)
        if event is None:
            continue
        try:
            names.append(event["payload"]["name"])
        except (KeyError, TypeError):
            problems.append(f"event without payload name: {ref}")
    return names


def projected_names(todo_lists, problems: list[str]) -> list[str] | None:
    try:
        return [entry["Name"] for entry in todo_lists]
    except (KeyError, TypeError):
        problems.append("todoLists is not a list of {\"Name\": ...} entries")
        return None


def verify(root: Path) -> list[str]:
    problems: list[str] = []

    references = read_index(root)
    missing = [ref for ref in references if not (root / ref).exists()]
    for ref in missing:
        problems.append(f"index entry without event file: {ref}")

    names = created_names(root, [r for r in references if r not in missing], problems)

    todo_lists = load_json(root / "projections" / "todoLists", problems)
    count = load_json(root / "projections" / "todoListsCount", problems)
    listed = projected_names(todo_lists, problems) if todo_lists is not None else None

    if listed is not None and listed != names:
        problems.append(
            f"todoLists has {len(listed)} entries, "
            f"event log has {len(names)} TodoListCreated events"
        )
    if count is not None and listed is not None and count != len(listed):
        problems.append(f"todoListsCount is {count}, todoLists has {len(listed)} entries")
    if count is not None and count != len(names):
        problems.append(f"todoListsCount is {count}, event log has {len(names)} TodoListCreated events")

    return problems


def main(argv: list[str]) -> int:
    root = Path(argv[1]) if len(argv) > 1 else Path("storage")
    if not root.is_dir():
        print(f"Storage root not found: {root}")
        return 1

    problems = verify(root)
    if not problems:
        print(f"Projections consistent with {len(read_index(root))} indexed events.")
        return 0

    for problem in problems:
        print(problem)
    return 1


if __name__ == "__main__":
    sys.exit(main(sys.argv))
