from pathlib import Path
import sys

import pytest

# Project root on the import path so tests run from any directory
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import Session
from data_store import RouteStore, StudentStore


@pytest.fixture
def routes():
    return RouteStore()


@pytest.fixture
def students():
    return StudentStore()


@pytest.fixture
def session(tmp_path):
    """Session whose files all live in a temporary data folder"""
    return Session(str(tmp_path))


@pytest.fixture
def scripted_input(monkeypatch):
    """Feed answers to input(); running out of answers behaves like end of input"""
    def feed(*answers):
        remaining = iter(answers)

        def fake_input(prompt=""):
            try:
                return next(remaining)
            except StopIteration:
                raise EOFError

        monkeypatch.setattr("builtins.input", fake_input)

    return feed
