"""Unit tests for the import boundary checking script.

Layer rules:
- domain/ imports nothing from other gavel layers
- application/ and config/ import from domain/ only
- infrastructure/ imports from domain/, application/ and config/
- bootstrap/ wires everything
- sqlalchemy and asyncpg stay in infrastructure/ and bootstrap/
"""

import ast
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent / "scripts"))

from check_imports import (
    ALLOWED_IMPORTS,
    check_file,
    check_module,
    check_package,
    imported_modules,
    layer_of,
)

PACKAGE_DIR = Path(__file__).parent.parent.parent / "gavel"


def _write(package_dir: Path, relative: str, source: str) -> Path:
    path = package_dir / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(source, encoding="utf-8")
    return path


class TestAllowedImports:
    def test_domain_imports_nothing(self) -> None:
        assert ALLOWED_IMPORTS["domain"] == set()

    def test_application_imports_domain_only(self) -> None:
        assert ALLOWED_IMPORTS["application"] == {"domain"}

    def test_bootstrap_sees_every_layer(self) -> None:
        assert ALLOWED_IMPORTS["bootstrap"] == {
            "domain",
            "application",
            "config",
            "infrastructure",
        }


class TestCheckModule:
    @pytest.mark.parametrize(
        ("module", "layer"),
        [
            ("gavel.domain.models.ballot", "application"),
            ("gavel.application.ports.proxy_repository", "infrastructure"),
            ("gavel.domain.errors", "config"),
            ("gavel.infrastructure.stubs", "bootstrap"),
            ("gavel.domain.models.vote_token", "domain"),
            ("structlog", "application"),
        ],
    )
    def test_allowed(self, module: str, layer: str) -> None:
        assert check_module(module, layer) is None

    @pytest.mark.parametrize(
        ("module", "layer"),
        [
            ("gavel.application.dtos.quorum", "domain"),
            ("gavel.infrastructure.stubs", "application"),
            ("gavel.config.governance_config", "application"),
            ("gavel.bootstrap.governance", "infrastructure"),
        ],
    )
    def test_forbidden(self, module: str, layer: str) -> None:
        message = check_module(module, layer)
        assert message is not None
        assert layer in message

    def test_driver_outside_infrastructure(self) -> None:
        """Database drivers never reach the application layer."""
        assert check_module("sqlalchemy.ext.asyncio", "application") is not None
        assert check_module("asyncpg", "domain") is not None
        assert check_module("sqlalchemy", "infrastructure") is None


class TestImportedModules:
    def test_relative_imports_ignored(self) -> None:
        node = ast.parse("from .ballot import Ballot").body[0]
        assert imported_modules(node) == []

    def test_plain_import(self) -> None:
        node = ast.parse("import gavel.domain, structlog").body[0]
        assert imported_modules(node) == ["gavel.domain", "structlog"]


class TestCheckFile:
    def test_layer_of_top_level_module(self, tmp_path: Path) -> None:
        assert layer_of(tmp_path / "__init__.py", tmp_path) is None
        assert layer_of(tmp_path / "domain" / "x.py", tmp_path) == "domain"

    def test_reports_line(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "domain/models/bad.py",
            '"""Bad."""\n\nfrom gavel.application.dtos import quorum\n',
        )
        violations = check_file(path, tmp_path)
        assert [v.line for v in violations] == [3]

    def test_syntax_error_skipped(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "domain/broken.py", "def (:\n")
        assert check_file(path, tmp_path) == []


class TestRealPackage:
    def test_gavel_respects_boundaries(self) -> None:
        """The shipped package has no violations."""
        assert check_package(PACKAGE_DIR) == []
