"""Static checks that the simulation package only draws from injected RNGs."""

import ast
from pathlib import Path
from typing import Iterator, List, Set, Tuple

import pytest

PACKAGE_ROOT = Path(__file__).resolve().parents[1] / "mycorrhiza"

# Constructors are fine: they build RNGs that are then passed around
PERMITTED = {"Random", "SystemRandom"}


def _package_sources() -> List[Path]:
    return sorted(path for path in PACKAGE_ROOT.rglob("*.py") if "__pycache__" not in path.parts)


def _module_names_for_random(tree: ast.Module) -> Set[str]:
    names = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.asname or alias.name for alias in node.names if alias.name == "random")
    return names


def _global_draws(tree: ast.Module) -> Iterator[Tuple[int, str]]:
    """Yield uses of the ``random`` module other than building an RNG."""
    names = _module_names_for_random(tree)
    attribute_bases = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.ImportFrom) and node.module == "random":
            for alias in node.names:
                if alias.name not in PERMITTED:
                    yield node.lineno, f"from random import {alias.name}"
        elif isinstance(node, ast.Attribute) and isinstance(node.value, ast.Name):
            if node.value.id in names:
                attribute_bases.add(id(node.value))
                if node.attr not in PERMITTED:
                    yield node.lineno, f"{node.value.id}.{node.attr}"
    # Bare references (passing the module itself around as an RNG)
    for node in ast.walk(tree):
        if isinstance(node, ast.Name) and node.id in names and id(node) not in attribute_bases:
            yield node.lineno, node.id


def _unseeded_constructions(tree: ast.Module) -> Iterator[Tuple[int, str]]:
    names = _module_names_for_random(tree)
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call) or node.args or node.keywords:
            continue
        func = node.func
        if (
            isinstance(func, ast.Attribute)
            and func.attr == "Random"
            and isinstance(func.value, ast.Name)
            and func.value.id in names
        ):
            yield node.lineno, "random.Random() without a seed"


def _violations(check) -> List[str]:
    found = []
    for path in _package_sources():
        tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
        found.extend(f"{path.relative_to(PACKAGE_ROOT)}:{line}: {what}" for line, what in check(tree))
    return sorted(found)


def test_package_sources_found():
    names = {path.name for path in _package_sources()}
    assert {"growth.py", "nutrient_exchange.py", "session.py"} <= names


@pytest.mark.parametrize(
    "check, message",
    [
        (_global_draws, "Module-level random usage"),
        (_unseeded_constructions, "Unseeded RNG"),
    ],
)
def test_rng_policy(check, message):
    violations = _violations(check)
    assert not violations, f"{message}:\n" + "\n".join(violations)


def test_checks_catch_violations():
    tree = ast.parse("import random\nx = random.random()\nrng = random.Random()\nf(random)\n")
    assert [line for line, _ in _global_draws(tree)] == [2, 4]
    assert [line for line, _ in _unseeded_constructions(tree)] == [3]
