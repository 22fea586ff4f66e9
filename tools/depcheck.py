from __future__ import annotations

import argparse
import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Sequence

SRC_ROOT = Path(__file__).resolve().parents[1] / "src" / "tableflow"

_FRAMEWORKS = frozenset(
    {"fastapi", "starlette", "sqlalchemy", "alembic", "redis", "psycopg", "httpx", "opentelemetry"}
)

# Imports each layer may not reach for. Outer layers depend inwards only.
LAYER_RULES: dict[str, frozenset[str]] = {
    "domain": _FRAMEWORKS
    | {"pydantic", "prometheus_client", "tableflow.api", "tableflow.application"}
    | {"tableflow.infrastructure", "tableflow.tools"},
    "application": _FRAMEWORKS | {"tableflow.api", "tableflow.infrastructure", "tableflow.tools"},
}


@dataclass(frozen=True)
class Violation:
    layer: str
    file_path: Path
    line: int
    module: str

    def render(self) -> str:
        return f"[{self.layer}] {self.file_path}:{self.line} -> {self.module}"


def _is_forbidden(module: str, forbidden: frozenset[str]) -> bool:
    root = module
    while root:
        if root in forbidden:
            return True
        root, _, _ = root.rpartition(".")
    return False


def _imported_modules(tree: ast.AST) -> Iterator[tuple[int, str]]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            yield node.lineno, node.module


def scan(layer: str, paths: Sequence[Path]) -> list[Violation]:
    forbidden = LAYER_RULES[layer]
    violations: list[Violation] = []
    for path in paths:
        files = [path] if path.is_file() else sorted(path.rglob("*.py"))
        for file_path in files:
            tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
            violations.extend(
                Violation(layer=layer, file_path=file_path, line=line, module=module)
                for line, module in _imported_modules(tree)
                if _is_forbidden(module, forbidden)
            )
    return violations


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check that inner tableflow layers never import outer ones."
    )
    parser.add_argument(
        "--layer",
        choices=sorted(LAYER_RULES),
        help="Rule set to apply. Without --path every layer is checked.",
    )
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        help="Path to scan (repeatable). Checked against the --layer rules, domain by default.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.path:
        violations = scan(args.layer or "domain", [Path(item) for item in args.path])
    else:
        layers = [args.layer] if args.layer else sorted(LAYER_RULES)
        violations = [v for layer in layers for v in scan(layer, [SRC_ROOT / layer])]

    if not violations:
        print("depcheck passed")
        return 0

    print(f"depcheck failed: {len(violations)} forbidden import(s)")
    for violation in violations:
        print(violation.render())
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
