# =============================================================================
# Configuration Tests
# =============================================================================

import logging

import pytest

from nbayes import NBayes
from nbayes.config import Config, ConfigError, get_xdg_config_home, get_xdg_data_home


class TestPaths:
    def test_xdg_environment_respected(self, xdg_dirs):
        assert get_xdg_config_home() == xdg_dirs / "config" / "nbayes"
        assert get_xdg_data_home() == xdg_dirs / "data" / "nbayes"

    def test_default_model_and_database_paths(self, xdg_dirs):
        config = Config()
        assert config.model_path() == xdg_dirs / "data" / "nbayes" / "model.json"
        assert config.database_path() == xdg_dirs / "data" / "nbayes" / "nbayes.db"

    def test_explicit_paths(self, temp_dir):
        config = Config()
        config.storage.model_path = str(temp_dir / "m.json")
        assert config.model_path() == temp_dir / "m.json"


class TestLoadSave:
    def test_missing_file_gives_defaults(self, xdg_dirs):
        config = Config.load()
        assert config.classifier.k == 1.0
        assert not config.classifier.binarized
        assert config.log_level == logging.WARNING

    def test_save_and_load_round_trip(self, temp_dir):
        path = temp_dir / "config.toml"
        config = Config()
        config.classifier.k = 0.5
        config.classifier.binarized = True
        config.tokenizer.min_token_length = 3
        config.logging.level = "DEBUG"
        config.save(path)

        loaded = Config.load(path)
        assert loaded.classifier.k == 0.5
        assert loaded.classifier.binarized
        assert loaded.tokenizer.min_token_length == 3
        assert loaded.log_level == logging.DEBUG

    def test_partial_file(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[classifier]\nassume_uniform = true\n")
        config = Config.load(path)
        assert config.classifier.assume_uniform
        assert config.classifier.k == 1.0

    def test_invalid_toml(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[classifier\nk = ")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_negative_k(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text("[classifier]\nk = -1\n")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_unknown_log_level(self, temp_dir):
        path = temp_dir / "config.toml"
        path.write_text('[logging]\nlevel = "LOUD"\n')
        with pytest.raises(ConfigError):
            Config.load(path)

    @pytest.mark.parametrize("body", [
        "[logging]\nlevel = 3\n",
        '[tokenizer]\nmin_token_length = "two"\n',
        "[tokenizer]\nmax_token_length = 4.5\n",
        '[classifier]\nk = "1"\n',
        "[classifier]\nk = true\n",
        '[classifier]\nbinarized = "yes"\n',
    ])
    def test_wrongly_typed_values(self, temp_dir, body):
        path = temp_dir / "config.toml"
        path.write_text(body)
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_classifier_from_config(self):
        config = Config()
        config.classifier.k = 3
        config.classifier.log_vocab = True
        nb = NBayes.from_config(config.classifier)
        assert nb.k == 3
        assert nb.log_vocab
        assert not nb.binarized
