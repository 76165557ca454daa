"""
Tests for core/config/runtime.py
"""
import pytest
import yaml

from core.config.runtime import (
    HashConfig,
    LoggingConfig,
    RuntimeConfig,
    TreeConfig,
    get_default_config,
    set_default_config,
)
from core.crypto.hashing import blake2b_256, sha3_256
from core.merkle import (
    LoggingEventSink,
    LonePeakPolicy,
    RecordingEventSink,
    StreamingMerkleAccumulator,
)
from core.schemas.errors import ConfigurationException, ErrorCodes


class TestDefaults:
    """Tests for default construction."""

    def test_defaults(self):
        config = RuntimeConfig()

        assert config.hash.algorithm == "sha256"
        assert config.tree.lone_peak_policy == "promote"
        assert config.tree.emit_events is False
        assert config.logging.level == "INFO"
        assert config.logging.file is None

    def test_sections_normalize_values(self):
        assert HashConfig(algorithm=" SHA3_256 ").algorithm == "sha3_256"
        assert LoggingConfig(level="debug").level == "DEBUG"
        assert TreeConfig(lone_peak_policy=LonePeakPolicy.EMPTY_SIBLING).lone_peak_policy == "empty_sibling"


class TestValidation:
    """Invalid values raise ConfigurationException."""

    def test_unknown_hash_algorithm(self):
        with pytest.raises(ConfigurationException) as exc_info:
            HashConfig(algorithm="md5")
        assert exc_info.value.code == ErrorCodes.INVALID_CONFIG
        assert exc_info.value.details["field_path"] == "hash.algorithm"

    def test_unknown_policy(self):
        with pytest.raises(ConfigurationException) as exc_info:
            TreeConfig(lone_peak_policy="duplicate")
        assert exc_info.value.details["field_path"] == "tree.lone_peak_policy"

    def test_unknown_log_level(self):
        with pytest.raises(ConfigurationException):
            LoggingConfig(level="VERBOSE")

    def test_unknown_key_in_section(self):
        with pytest.raises(ConfigurationException, match="Invalid configuration"):
            RuntimeConfig.from_dict({"tree": {"arity": 3}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigurationException, match="must be a mapping"):
            RuntimeConfig.from_dict({"hash": "sha256"})

    def test_unknown_section_rejected(self):
        with pytest.raises(ConfigurationException, match="Unknown config section") as exc_info:
            RuntimeConfig.from_dict({"hash": {"algorithm": "sha256"}, "extra": {"owner": "ops"}})
        assert exc_info.value.details["field_path"] == "extra"

    def test_unknown_section_in_yaml_rejected(self, tmp_path):
        path = tmp_path / "streamtree.yaml"
        path.write_text("extra: null\n")

        with pytest.raises(ConfigurationException, match="Unknown config section"):
            RuntimeConfig.from_yaml(path)

    def test_to_dict_lists_only_known_sections(self):
        assert list(RuntimeConfig().to_dict()) == ["hash", "tree", "logging"]


class TestFromDict:
    """Tests for RuntimeConfig.from_dict()."""

    def test_partial_data_keeps_defaults(self):
        config = RuntimeConfig.from_dict({"tree": {"lone_peak_policy": "empty_sibling"}})

        assert config.tree.lone_peak_policy == "empty_sibling"
        assert config.hash.algorithm == "sha256"
        assert config.logging.level == "INFO"

    def test_null_section_uses_defaults(self):
        config = RuntimeConfig.from_dict({"hash": None})

        assert config.hash.algorithm == "sha256"

    def test_to_dict_round_trip(self):
        config = RuntimeConfig.from_dict({
            "hash": {"algorithm": "blake2b_256"},
            "tree": {"emit_events": True},
            "logging": {"level": "WARNING", "file": "streamtree.log"},
        })

        assert RuntimeConfig.from_dict(config.to_dict()) == config


class TestFromYaml:
    """Tests for RuntimeConfig.from_yaml()."""

    def test_load(self, tmp_path):
        path = tmp_path / "streamtree.yaml"
        path.write_text("hash:\n  algorithm: sha3_256\ntree:\n  lone_peak_policy: empty_sibling\n")

        config = RuntimeConfig.from_yaml(path)

        assert config.hash.algorithm == "sha3_256"
        assert config.tree.lone_peak_policy == "empty_sibling"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RuntimeConfig.from_yaml(tmp_path / "absent.yaml")

    def test_empty_file_is_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert RuntimeConfig.from_yaml(path) == RuntimeConfig()

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- sha256\n- promote\n")

        with pytest.raises(ConfigurationException, match="mapping"):
            RuntimeConfig.from_yaml(path)

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("hash: [unclosed\n")

        with pytest.raises(ConfigurationException, match="Could not parse"):
            RuntimeConfig.from_yaml(path)

    def test_to_yaml_round_trip(self, tmp_path):
        config = RuntimeConfig.from_dict({"tree": {"lone_peak_policy": "empty_sibling"}})
        path = tmp_path / "out.yaml"
        path.write_text(config.to_yaml())

        assert yaml.safe_load(path.read_text())["tree"]["lone_peak_policy"] == "empty_sibling"
        assert RuntimeConfig.from_yaml(path) == config


class TestEnvironment:
    """Tests for STREAMTREE_* environment overrides."""

    def test_from_env_without_variables(self, clean_env):
        assert RuntimeConfig.from_env() == RuntimeConfig()

    def test_from_env(self, clean_env):
        clean_env.setenv("STREAMTREE_HASH_ALGORITHM", "blake2b_256")
        clean_env.setenv("STREAMTREE_LONE_PEAK_POLICY", "empty_sibling")
        clean_env.setenv("STREAMTREE_EMIT_EVENTS", "yes")
        clean_env.setenv("STREAMTREE_LOG_LEVEL", "debug")
        clean_env.setenv("STREAMTREE_LOG_FILE", "/tmp/streamtree.log")

        config = RuntimeConfig.from_env()

        assert config.hash.algorithm == "blake2b_256"
        assert config.tree.lone_peak_policy == "empty_sibling"
        assert config.tree.emit_events is True
        assert config.logging.level == "DEBUG"
        assert config.logging.file == "/tmp/streamtree.log"

    def test_emit_events_false_values(self, clean_env):
        clean_env.setenv("STREAMTREE_EMIT_EVENTS", "0")

        assert RuntimeConfig.from_env().tree.emit_events is False

    def test_env_overrides_file_values(self, clean_env, tmp_path):
        path = tmp_path / "streamtree.yaml"
        path.write_text("hash:\n  algorithm: sha3_256\nlogging:\n  level: WARNING\n")
        clean_env.setenv("STREAMTREE_LOG_LEVEL", "ERROR")

        config = RuntimeConfig.from_yaml(path).with_env_overrides()

        assert config.hash.algorithm == "sha3_256"
        assert config.logging.level == "ERROR"

    def test_with_env_overrides_without_variables_is_identity(self, clean_env):
        config = RuntimeConfig.from_dict({"hash": {"algorithm": "sha3_256"}})

        assert config.with_env_overrides() is config

    def test_invalid_env_value(self, clean_env):
        clean_env.setenv("STREAMTREE_HASH_ALGORITHM", "crc32")

        with pytest.raises(ConfigurationException):
            RuntimeConfig.from_env()

    def test_default_config_is_cached(self, clean_env):
        first = get_default_config()

        assert get_default_config() is first

    def test_set_default_config(self, clean_env):
        custom = RuntimeConfig.from_dict({"hash": {"algorithm": "sha3_256"}})
        set_default_config(custom)

        assert get_default_config() is custom

        set_default_config(None)
        assert get_default_config() == RuntimeConfig()


class TestAccumulatorFromConfig:
    """Tests for StreamingMerkleAccumulator.from_config()."""

    def test_uses_hash_and_policy(self):
        config = RuntimeConfig.from_dict({
            "hash": {"algorithm": "blake2b_256"},
            "tree": {"lone_peak_policy": "empty_sibling"},
        })

        acc = StreamingMerkleAccumulator.from_config(config)

        assert acc.hash_fn is blake2b_256
        assert acc.lone_peak_policy is LonePeakPolicy.EMPTY_SIBLING
        assert acc.event_sink is None

    def test_emit_events_installs_logging_sink(self):
        config = RuntimeConfig.from_dict({"tree": {"emit_events": True}})

        acc = StreamingMerkleAccumulator.from_config(config)

        assert isinstance(acc.event_sink, LoggingEventSink)

    def test_explicit_sink_wins(self):
        config = RuntimeConfig.from_dict({"tree": {"emit_events": True}})
        sink = RecordingEventSink()

        acc = StreamingMerkleAccumulator.from_config(config, event_sink=sink)
        acc.append(b"1 transaction")

        assert acc.event_sink is sink
        assert len(sink) == 1

    def test_config_root_matches_direct_construction(self):
        config = RuntimeConfig.from_dict({"hash": {"algorithm": "sha3_256"}})
        configured = StreamingMerkleAccumulator.from_config(config)
        direct = StreamingMerkleAccumulator(hash_fn=sha3_256)

        configured.append(b"x")
        direct.append(b"x")

        assert configured.current_root() == direct.current_root()
