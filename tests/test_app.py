# =============================================================================
# CLI Tests
# =============================================================================

import pytest

from nbayes import NBayes
from nbayes.app import main


@pytest.fixture
def model_path(xdg_dirs):
    return xdg_dirs / "model.json"


def run(model_path, *args):
    return main(["--model", str(model_path), *args])


class TestCommands:
    def test_train_and_classify(self, model_path, capsys, sample_spam_text, sample_ham_text):
        assert run(model_path, "train", "spam", sample_spam_text) == 0
        assert run(model_path, "train", "ham", sample_ham_text) == 0
        assert model_path.exists()

        capsys.readouterr()
        assert run(model_path, "classify", "claim your prize money") == 0
        out = capsys.readouterr().out
        assert out.strip().endswith("=> spam")

    def test_raw_tokens(self, model_path):
        run(model_path, "train", "low", "1", "2", "--tokens")
        model = NBayes.load(model_path)
        assert model.data.count_of("low", "1") == 1

    def test_untrain(self, model_path):
        run(model_path, "train", "a", "x", "y", "--tokens")
        run(model_path, "untrain", "a", "x", "y", "--tokens")
        assert NBayes.load(model_path).data.categories() == []

    def test_purge_and_stats(self, model_path, capsys):
        run(model_path, "train", "a", "x", "x", "y", "--tokens")
        assert run(model_path, "purge", "2") == 0
        assert "Removed 1 tokens" in capsys.readouterr().out

        assert run(model_path, "stats") == 0
        out = capsys.readouterr().out
        assert "1 categories" in out
        assert "For category a, 1 examples (100.00% of the total) and 2 total_tokens" in out

    def test_delete_category(self, model_path, capsys):
        run(model_path, "train", "a", "x", "--tokens")
        run(model_path, "train", "b", "y", "--tokens")
        assert run(model_path, "delete-category", "a") == 0
        assert "Categories: b" in capsys.readouterr().out

    def test_classify_without_model(self, model_path, capsys):
        assert run(model_path, "classify", "anything") == 0
        assert "No categories trained yet." in capsys.readouterr().out

    def test_db_push_and_pull(self, model_path, xdg_dirs):
        run(model_path, "train", "a", "x", "--tokens")
        assert run(model_path, "db", "push") == 0
        model_path.unlink()

        assert run(model_path, "db", "pull") == 0
        assert NBayes.load(model_path).data.count_of("a", "x") == 1
        assert (xdg_dirs / "data" / "nbayes" / "nbayes.db").exists()

    def test_paths(self, model_path, capsys):
        assert run(model_path, "paths") == 0
        assert "Config file:" in capsys.readouterr().out


class TestErrors:
    def test_bad_config(self, temp_dir, capsys):
        path = temp_dir / "bad.toml"
        path.write_text("[classifier]\nk = -3\n")
        assert main(["--config", str(path), "stats"]) == 1
        assert "Config error" in capsys.readouterr().err

    def test_corrupt_model(self, model_path, capsys):
        model_path.write_text("not a model")
        assert run(model_path, "stats") == 1
        assert "Error:" in capsys.readouterr().err

    def test_degenerate_query(self, model_path, capsys):
        run(model_path, "train", "only", "x", "y", "--tokens")
        assert run(model_path, "classify", "--tokens", "x") == 0
        # "a" tokenizes to nothing: an empty query against a single category
        assert run(model_path, "classify", "a") == 1
        assert "Error:" in capsys.readouterr().err
