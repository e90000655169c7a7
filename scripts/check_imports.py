#!/usr/bin/env python3
"""Enforce the layering of the gavel package.

Rules:
- domain/: imports no other gavel layer
- application/: imports domain/ only
- config/: imports domain/ only
- infrastructure/: imports domain/, application/ and config/
- bootstrap/: wiring, may import every layer

Database drivers (sqlalchemy, asyncpg) may only be imported from
infrastructure/ and bootstrap/.

Usage:
    python scripts/check_imports.py [package_directory]

Exit codes:
    0: No violations found
    1: Violations found
"""
import ast
import sys
from pathlib import Path
from typing import NamedTuple

PACKAGE = "gavel"

ALLOWED_IMPORTS: dict[str, set[str]] = {
    "domain": set(),
    "application": {"domain"},
    "config": {"domain"},
    "infrastructure": {"domain", "application", "config"},
    "bootstrap": {"domain", "application", "config", "infrastructure"},
}

DRIVER_MODULES: frozenset[str] = frozenset({"sqlalchemy", "asyncpg"})
DRIVER_LAYERS: frozenset[str] = frozenset({"infrastructure", "bootstrap"})


class Violation(NamedTuple):
    path: str
    line: int
    message: str


def imported_modules(node: ast.Import | ast.ImportFrom) -> list[str]:
    """Return the absolute module names an import statement pulls in."""
    if isinstance(node, ast.ImportFrom):
        # Relative imports stay inside their own layer
        if node.level or node.module is None:
            return []
        return [node.module]
    return [alias.name for alias in node.names]


def layer_of(py_file: Path, package_dir: Path) -> str | None:
    try:
        parts = py_file.relative_to(package_dir).parts
    except ValueError:
        return None
    if len(parts) < 2:
        return None
    return parts[0] if parts[0] in ALLOWED_IMPORTS else None


def check_module(module: str, layer: str) -> str | None:
    """Return a violation message for ``module`` imported from ``layer``."""
    root = module.split(".")[0]

    if root in DRIVER_MODULES and layer not in DRIVER_LAYERS:
        return f"{layer} layer cannot import database driver {root}"

    if root != PACKAGE:
        return None
    parts = module.split(".")
    if len(parts) < 2 or parts[1] not in ALLOWED_IMPORTS:
        return None

    target = parts[1]
    if target == layer or target in ALLOWED_IMPORTS[layer]:
        return None
    return f"{layer} layer cannot import from {target}"


def check_file(py_file: Path, package_dir: Path) -> list[Violation]:
    layer = layer_of(py_file, package_dir)
    if layer is None:
        return []

    try:
        tree = ast.parse(py_file.read_text(encoding="utf-8"), filename=str(py_file))
    except (SyntaxError, UnicodeDecodeError) as e:
        print(f"Warning: could not parse {py_file}: {e}", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for node in ast.walk(tree):
        if not isinstance(node, (ast.Import, ast.ImportFrom)):
            continue
        for module in imported_modules(node):
            message = check_module(module, layer)
            if message:
                violations.append(Violation(str(py_file), node.lineno, message))
    return violations


def check_package(package_dir: Path) -> list[Violation]:
    if not package_dir.is_dir():
        print(f"Error: '{package_dir}' is not a directory", file=sys.stderr)
        return []

    violations: list[Violation] = []
    for py_file in sorted(package_dir.rglob("*.py")):
        violations.extend(check_file(py_file, package_dir))
    return violations


def format_violations(violations: list[Violation]) -> str:
    lines = ["Import boundary violations found:", ""]
    lines.extend(f"  {v.path}:{v.line}: {v.message}" for v in sorted(violations))
    lines.append("")
    lines.append(f"Total: {len(violations)} violation(s)")
    return "\n".join(lines)


def main() -> int:
    if len(sys.argv) > 1:
        package_dir = Path(sys.argv[1])
    else:
        package_dir = Path(__file__).resolve().parent.parent / PACKAGE

    violations = check_package(package_dir)
    if violations:
        print(format_violations(violations))
        return 1

    print("No import boundary violations found.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
