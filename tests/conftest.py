# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the nbayes test suite.
# =============================================================================

import pytest
import tempfile
from pathlib import Path

from nbayes import NBayes


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def xdg_dirs(temp_dir, monkeypatch):
    """Point the XDG config/data homes at a temporary directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(temp_dir / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(temp_dir / "data"))
    return temp_dir


@pytest.fixture
def nbayes():
    """A fresh classifier with default options."""
    return NBayes()


@pytest.fixture
def trained():
    """A classifier trained on two small, distinct categories."""
    nb = NBayes()
    nb.train(["a", "a", "a", "a"], "classA")
    nb.train(["b", "b", "b", "b"], "classB")
    return nb


@pytest.fixture
def sample_spam_text():
    """Sample spam text for tokenizer and CLI tests."""
    return """
    CONGRATULATIONS!!! You have been selected to receive $$$ money!!!

    Click here NOW to claim your prize: http://scam.example.com/prize
    """


@pytest.fixture
def sample_ham_text():
    """Sample ham text for tokenizer and CLI tests."""
    return "Are we still meeting for lunch tomorrow? Bring the quarterly report."
