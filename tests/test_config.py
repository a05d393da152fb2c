# =============================================================================
# FILE: tests/test_config.py
"""
Unit Tests for configuration loading
"""
from pathlib import Path

import pytest

from sale_harness.config import (
    ANVIL_CHAIN_ID,
    ANVIL_DEFAULT_KEY,
    PROJECT_ROOT,
    HarnessConfig,
    load_config
)


class TestLoadConfig:

    def test_defaults_from_repo_config(self):
        config = load_config(env={})
        assert config.chain_id == ANVIL_CHAIN_ID
        assert config.private_key == ANVIL_DEFAULT_KEY
        assert config.contracts_dir == PROJECT_ROOT / "solidity"
        assert config.artifacts_dir == PROJECT_ROOT / "solidity" / "artifacts"
        assert config.anvil_alias == "anvil"
        assert config.postgres_alias == "postgres"
        assert config.rpc_timeout == 10

    def test_yaml_values_and_relative_paths(self, tmp_path):
        path = tmp_path / "harness.yaml"
        path.write_text(
            "contracts_dir: contracts-project\n"
            "anvil_image: anvil-socat\n"
            "rpc_timeout: 3.5\n"
        )

        config = load_config(path, env={})

        assert config.contracts_dir == PROJECT_ROOT / "contracts-project"
        assert config.anvil_image == "anvil-socat"
        assert config.rpc_timeout == 3.5

    def test_env_overrides_yaml(self, tmp_path):
        path = tmp_path / "harness.yaml"
        path.write_text("rpc_timeout: 3\n")

        config = load_config(path, env={
            'HARNESS_RPC_TIMEOUT': '7',
            'HARNESS_PRINT_CONTAINER_LOGS': '1',
            'HARNESS_CONTRACTS_DIR': str(tmp_path),
            'PRIVATE_KEY': '0x' + '11' * 32,
        })

        assert config.rpc_timeout == 7.0
        assert config.print_container_logs is True
        assert config.contracts_dir == Path(tmp_path)
        assert config.private_key == '0x' + '11' * 32

    def test_unknown_keys_rejected(self, tmp_path):
        path = tmp_path / "harness.yaml"
        path.write_text("rpc_timout: 3\n")
        with pytest.raises(ValueError, match="rpc_timout"):
            load_config(path, env={})

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yaml", env={})

    def test_to_dict_masks_key(self):
        data = HarnessConfig().to_dict()
        assert data['private_key'] == ANVIL_DEFAULT_KEY[:6] + "..."
        assert isinstance(data['contracts_dir'], str)
