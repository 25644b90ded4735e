"""Tests for ConfigStore."""

import json
import stat
from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from toolserver_config import ConfigDecodeError
from toolserver_config import ConfigFileError
from toolserver_config import ConfigStore
from toolserver_config import LoadStatus
from toolserver_config import LocalFileSystem
from toolserver_config import ServerDefinition
from toolserver_config import ServerRegistry


class TestConfigStore:
    """Test ConfigStore class."""

    @pytest.fixture
    def root(self):
        """Create a temporary directory for documents."""
        with TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    @pytest.fixture
    def store(self):
        return ConfigStore()

    @pytest.fixture
    def registry(self):
        return ServerRegistry(
            servers={
                "git": ServerDefinition(command="uvx", args=["mcp-server-git"]),
                "fetch": ServerDefinition(
                    command="npx", args=["-y", "fetch"], env={"TOKEN": "abc"}, timeout=3000, disabled=True
                ),
            }
        )

    # ===== Load Tests =====

    def test_read_missing_returns_default(self, store, root):
        """Test reading a missing document returns an empty registry."""
        assert store.read(root / "missing.json") == ServerRegistry()

    def test_load_missing_returns_default(self, store, root):
        """Test loading a missing document is not an error."""
        result = store.load(root / "missing.json")
        assert result.status is LoadStatus.DEFAULT
        assert result.registry == ServerRegistry()
        assert result.error is None
        assert result.available

    def test_load_does_not_create(self, store, root):
        """Test loading never writes."""
        store.load(root / "nested" / "mcp.json")
        assert not (root / "nested").exists()

    def test_load_malformed_is_contained(self, store, root, caplog):
        """Test malformed documents are reported as unavailable."""
        path = root / "mcp.json"
        path.write_text("{not json")

        result = store.load(path)

        assert result.status is LoadStatus.UNAVAILABLE
        assert result.registry is None
        assert isinstance(result.error, ConfigDecodeError)
        assert result.error.path == path
        assert not result.available
        assert "Invalid server configuration" in caplog.text

    def test_load_invalid_structure_is_contained(self, store, root):
        """Test structurally invalid documents are unavailable too."""
        path = root / "mcp.json"
        path.write_text(json.dumps({"mcpServers": {"a": {"args": []}}}))
        assert store.load(path).status is LoadStatus.UNAVAILABLE

    def test_read_malformed_raises(self, store, root):
        """Test strict reads propagate decode errors."""
        path = root / "mcp.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigDecodeError, match="expected a mapping"):
            store.read(path)

    def test_read_empty_file_is_default(self, store, root):
        """Test an empty document decodes as the default registry."""
        path = root / "mcp.json"
        path.write_text("")
        assert store.read(path) == ServerRegistry()

    def test_read_directory_raises_file_error(self, store, root):
        """Test I/O failures surface as ConfigFileError."""
        path = root / "mcp.json"
        path.mkdir()
        with pytest.raises(ConfigFileError):
            store.read(path)

    # ===== Save Tests =====

    def test_round_trip_json(self, store, root, registry):
        """Test save then load returns an equal registry."""
        path = root / "mcp.json"
        store.save(path, registry)
        assert store.read(path) == registry
        assert store.read(path).get("git").env is None

    def test_round_trip_yaml(self, store, root, registry):
        """Test YAML documents round-trip too."""
        path = root / "mcp.yaml"
        store.save(path, registry)
        assert store.read(path) == registry
        content = path.read_text()
        assert "mcpServers:" in content
        assert "command: uvx" in content

    def test_save_creates_parent_directories(self, store, root, registry):
        """Test save creates missing directories."""
        path = root / "a" / "b" / "mcp.json"
        store.save(path, registry)
        assert path.exists()

    def test_save_writes_document_format(self, store, root, registry):
        """Test the persisted JSON layout."""
        path = root / "mcp.json"
        store.save(path, registry)
        data = json.loads(path.read_text())
        assert data["useProfileServersOnly"] is False
        assert data["mcpServers"]["fetch"] == {
            "command": "npx",
            "args": ["-y", "fetch"],
            "env": {"TOKEN": "abc"},
            "timeout": 3000,
            "disabled": True,
        }
        assert "env" not in data["mcpServers"]["git"]

    def test_save_leaves_no_temp_files(self, store, root, registry):
        """Test atomic replace cleans up after itself."""
        path = root / "mcp.json"
        store.save(path, registry)
        store.save(path, ServerRegistry())
        assert [p.name for p in root.iterdir()] == ["mcp.json"]
        assert store.read(path) == ServerRegistry()

    def test_save_keeps_file_permissions(self, store, root, registry):
        """Test rewriting a document keeps its existing mode."""
        path = root / "mcp.json"
        store.save(path, ServerRegistry())
        path.chmod(0o644)

        store.save(path, registry)

        assert stat.S_IMODE(path.stat().st_mode) == 0o644

    def test_invalid_servers_value_is_malformed(self, store, root):
        """Test a non-mapping mcpServers value is not read as an empty registry."""
        path = root / "mcp.json"
        for value in ([], "", 0, False):
            path.write_text(json.dumps({"mcpServers": value}))
            with pytest.raises(ConfigDecodeError):
                store.read(path)
            assert store.load(path).status is LoadStatus.UNAVAILABLE

    def test_failed_write_keeps_previous_document(self, root, registry):
        """Test a failing write does not corrupt the existing file."""

        class FailingFileSystem(LocalFileSystem):
            def write_text(self, path, text):
                raise OSError("disk full")

        path = root / "mcp.json"
        ConfigStore().save(path, registry)
        before = path.read_bytes()

        with pytest.raises(ConfigFileError, match="disk full"):
            ConfigStore(FailingFileSystem()).save(path, ServerRegistry())

        assert path.read_bytes() == before

    # ===== Ensure Tests =====

    def test_ensure_creates_default(self, store, root):
        """Test ensure persists an empty document when missing."""
        path = root / "new" / "mcp.json"
        assert store.ensure(path) == ServerRegistry()
        assert path.exists()
        assert store.read(path) == ServerRegistry()

    def test_ensure_reads_existing(self, store, root, registry):
        """Test ensure returns the existing document untouched."""
        path = root / "mcp.json"
        store.save(path, registry)
        before = path.read_bytes()
        assert store.ensure(path) == registry
        assert path.read_bytes() == before

    def test_ensure_malformed_raises(self, store, root):
        """Test ensure never overwrites a malformed document."""
        path = root / "mcp.json"
        path.write_text("{broken")
        with pytest.raises(ConfigDecodeError):
            store.ensure(path)
        assert path.read_text() == "{broken"
