"""Fixtures for the runnable folio examples.

Each example directory holds an ``app.py`` and a ``test_*.py``. The
``example_app`` fixture executes the sibling app.py afresh for every test.
Apps that write files read ``FOLIO_EXAMPLE_OUTPUT`` so tests can send their
output to ``tmp_path``.
"""

import importlib.util
from pathlib import Path
from types import ModuleType

import pytest

OUTPUT_ENV = "FOLIO_EXAMPLE_OUTPUT"


def load_app(app_path: Path) -> ModuleType:
    """Execute ``app_path`` as a throwaway module and return it."""
    spec = importlib.util.spec_from_file_location(
        f"folio_example_{app_path.parent.name}", app_path
    )
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load example app: {app_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_output(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    output = tmp_path / "public"
    monkeypatch.setenv(OUTPUT_ENV, str(output))
    return output


@pytest.fixture
def example_app(request: pytest.FixtureRequest, example_output: Path) -> ModuleType:
    return load_app(Path(request.path).parent / "app.py")
