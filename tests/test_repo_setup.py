# /// script
# requires-python = ">=3.12"
# dependencies = ["pytest>=7.0", "pydantic>=2.0"]
# ///
"""Tests for the repo_setup feature.

Validates the project bootstrap:
  1. Every module is a runnable single-file script with PEP 723 inline metadata
  2. pyproject.toml declares the runtime and test dependencies and every module
  3. The core models are pydantic models and the engine modules import cleanly
  4. The sample roster file ships with the project
"""

import importlib
import re
import sys
import tomllib
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import pytest
from pydantic import BaseModel

PROJECT_ROOT = Path(__file__).resolve().parent.parent

MODULES = [
    "at_bat",
    "ball_in_play",
    "baserunning",
    "box_score",
    "config",
    "game",
    "lineup",
    "models",
    "play_log",
    "rng",
    "scorekeeper",
    "simulation",
]

PYDANTIC_MODULES = ["game", "lineup", "models", "scorekeeper", "simulation"]


def load_pyproject():
    with open(PROJECT_ROOT / "pyproject.toml", "rb") as f:
        return tomllib.load(f)


# ---------------------------------------------------------------------------
# Step 1: PEP 723 inline metadata
# ---------------------------------------------------------------------------

class TestStep1PEP723Metadata:
    @pytest.mark.parametrize("module", MODULES)
    def test_module_has_pep723_block(self, module):
        text = (PROJECT_ROOT / f"{module}.py").read_text()
        assert text.startswith("# /// script")
        assert re.search(r"^# requires-python = \">=3\.12\"$", text, re.MULTILINE)

    @pytest.mark.parametrize("module", PYDANTIC_MODULES)
    def test_pydantic_modules_declare_pydantic(self, module):
        text = (PROJECT_ROOT / f"{module}.py").read_text()
        header = text.split("# ///\n", 2)[0]
        assert "pydantic" in header

    def test_game_py_is_executable_script(self):
        text = (PROJECT_ROOT / "game.py").read_text()
        assert 'if __name__ == "__main__":' in text
        assert "sys.exit(main())" in text


# ---------------------------------------------------------------------------
# Step 2: pyproject.toml
# ---------------------------------------------------------------------------

class TestStep2Pyproject:
    def test_runtime_dependencies(self):
        deps = load_pyproject()["project"]["dependencies"]
        assert any(d.startswith("pydantic") for d in deps)

    def test_test_extra(self):
        extras = load_pyproject()["project"]["optional-dependencies"]
        assert any(d.startswith("pytest") for d in extras["test"])

    def test_every_module_is_installed(self):
        py_modules = load_pyproject()["tool"]["setuptools"]["py-modules"]
        assert sorted(py_modules) == sorted(MODULES)
        for module in py_modules:
            assert (PROJECT_ROOT / f"{module}.py").exists()

    def test_console_script(self):
        scripts = load_pyproject()["project"]["scripts"]
        assert scripts["diamondsim"] == "game:main"


# ---------------------------------------------------------------------------
# Step 3: Models and imports
# ---------------------------------------------------------------------------

class TestStep3Models:
    @pytest.mark.parametrize("module", MODULES)
    def test_module_imports(self, module):
        importlib.import_module(module)

    @pytest.mark.parametrize("name", [
        "BatterRatings", "PitcherRatings", "Batter", "Pitcher", "Count",
        "BaseState", "AtBatResult", "RunnerMove", "PaResolution", "GameState",
        "ApplyResult",
    ])
    def test_pydantic_models(self, name):
        models = importlib.import_module("models")
        assert issubclass(getattr(models, name), BaseModel)


# ---------------------------------------------------------------------------
# Step 4: Data files
# ---------------------------------------------------------------------------

def test_sample_rosters_present():
    assert (PROJECT_ROOT / "data" / "sample_rosters.json").is_file()
