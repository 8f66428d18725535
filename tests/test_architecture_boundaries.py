"""Architecture guardrails: presentation logic stays independent of the TUI."""

from __future__ import annotations

import ast
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src" / "tripboard"

UI_FREE_PACKAGES = ("models", "store", "presenters")
UI_LIBRARIES = {"textual", "rich"}


def _imported_roots(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    roots: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            roots.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            roots.add(node.module.split(".")[0])
    return roots


def test_presentation_layers_do_not_import_ui_libraries() -> None:
    violations: list[str] = []
    for package in UI_FREE_PACKAGES:
        for path in sorted((SRC_ROOT / package).rglob("*.py")):
            leaked = _imported_roots(path) & UI_LIBRARIES
            if leaked:
                violations.append(f"{path.relative_to(SRC_ROOT)}: {sorted(leaked)}")

    assert not violations, "UI imports outside tripboard.tui:\n" + "\n".join(violations)


def test_stores_do_not_know_about_presenters() -> None:
    violations: list[str] = []
    for path in sorted((SRC_ROOT / "store").rglob("*.py")):
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        for node in ast.walk(tree):
            if (
                isinstance(node, ast.ImportFrom)
                and node.module
                and node.module.startswith(("tripboard.presenters", "tripboard.tui"))
            ):
                violations.append(f"{path.name}: {node.module}")

    assert not violations, "\n".join(violations)
