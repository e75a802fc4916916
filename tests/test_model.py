"""
Tests for methd.config.model module.

Tests the configuration document including:
- Parsing and type checking
- Field-by-field daemon merging
- Whole-entry peer merging
- Serialization
- Compiled-in defaults
"""

from __future__ import annotations

import pytest

from methd.config.model import (
    DEFAULT_CONFIG_YAML,
    ConfigDocument,
    DaemonSettings,
    PeerSettings,
    default_document,
    merge,
    parse,
    serialize,
)
from methd.exceptions import ConfigError, ParseError


class TestParse:
    """Tests for parse()."""

    def test_parse_full_document(self):
        """Test that every field is read."""
        doc = parse(
            """
daemon:
  endpoint: "0.0.0.0:4040"
  key_path: "/etc/methd/key"
  config_dir: "conf.d"
peers:
  alice:
    public_key: "AAA"
    endpoint: "10.0.0.2:4040"
  bob:
    public_key: "BBB"
"""
        )

        assert doc.daemon == DaemonSettings(
            endpoint="0.0.0.0:4040", key_path="/etc/methd/key", config_dir="conf.d"
        )
        assert doc.peers == {
            "alice": PeerSettings(public_key="AAA", endpoint="10.0.0.2:4040"),
            "bob": PeerSettings(public_key="BBB"),
        }

    def test_parse_applies_no_defaults(self):
        """Test that missing fields stay None."""
        doc = parse("daemon:\n  endpoint: 'x:1'\n")

        assert doc.daemon.key_path is None
        assert doc.daemon.config_dir is None
        assert doc.peers is None

    def test_parse_empty_text(self):
        """Test that an empty file is an empty document."""
        assert parse("") == ConfigDocument()

    def test_parse_ignores_unknown_keys(self):
        """Test that unknown keys do not fail parsing."""
        doc = parse("daemon:\n  endpoint: 'x:1'\n  color: blue\nextra: 1\n")

        assert doc.daemon.endpoint == "x:1"

    def test_invalid_yaml_raises(self):
        """Test that malformed YAML raises ParseError."""
        with pytest.raises(ParseError, match="invalid YAML"):
            parse("daemon: [unclosed\n")

    def test_top_level_list_raises(self):
        """Test that the document must be a mapping."""
        with pytest.raises(ParseError, match="document"):
            parse("- a\n- b\n")

    def test_daemon_wrong_type_raises(self):
        """Test that the daemon section must be a mapping."""
        with pytest.raises(ParseError, match="daemon"):
            parse("daemon: [1, 2]\n")

    def test_field_wrong_type_raises(self):
        """Test that fields must be strings."""
        with pytest.raises(ParseError, match="daemon.endpoint"):
            parse("daemon:\n  endpoint: 4040\n")

    def test_peer_missing_public_key_raises(self):
        """Test that public_key is required on every peer entry."""
        with pytest.raises(ParseError, match="public_key"):
            parse("peers:\n  alice:\n    endpoint: 'x:1'\n")

    def test_unquoted_peer_names_stay_strings(self):
        """Test that names YAML would read as ints or bools are kept as text."""
        doc = parse(
            "peers:\n"
            "  1:\n    public_key: 'A'\n"
            "  no:\n    public_key: 'B'\n"
            "  on:\n    public_key: 'C'\n"
        )

        assert set(doc.peers) == {"1", "no", "on"}
        assert doc.peers["no"].public_key == "B"

    def test_unquoted_peer_names_survive_serialize(self):
        """Test that a numeric-looking name reads back as the same name."""
        doc = parse("peers:\n  1:\n    public_key: 'A'\n")

        assert parse(serialize(doc)) == doc

    def test_values_are_still_typed(self):
        """Test that only keys are kept as text; values keep their YAML type."""
        with pytest.raises(ParseError, match="peers.no.public_key"):
            parse("peers:\n  no:\n    public_key: yes\n")

    def test_non_scalar_key_raises(self):
        """Test that a sequence used as a mapping key is a parse error."""
        with pytest.raises(ParseError, match="invalid YAML"):
            parse("peers:\n  ? [a, b]\n  : {public_key: 'A'}\n")

    def test_from_dict_rejects_non_string_peer_name(self):
        """Test that mappings built in code still need string peer names."""
        with pytest.raises(ParseError, match="peer names"):
            ConfigDocument.from_dict({"peers": {1: {"public_key": "AAA"}}})

    def test_parse_error_is_config_error(self):
        """Test that ParseError can be caught as ConfigError."""
        with pytest.raises(ConfigError):
            parse("peers: 5\n")


class TestMergeDaemon:
    """Tests for daemon settings merging."""

    def test_override_wins_when_present(self):
        """Test that a non-null override field replaces the base field."""
        base = parse("daemon:\n  endpoint: 'a:1'\n  key_path: 'k1'\n")
        override = parse("daemon:\n  endpoint: 'b:2'\n")

        merged = merge(base, override)

        assert merged.daemon.endpoint == "b:2"

    def test_base_inherited_when_override_absent(self):
        """Test that null override fields inherit the base value."""
        base = parse("daemon:\n  endpoint: 'a:1'\n  key_path: 'k1'\n")
        override = parse("daemon:\n  endpoint: 'b:2'\n")

        merged = merge(base, override)

        assert merged.daemon.key_path == "k1"
        assert merged.daemon.config_dir is None

    def test_only_base_has_daemon(self):
        """Test that a missing override section keeps the base section."""
        base = parse("daemon:\n  endpoint: 'a:1'\n")

        merged = merge(base, ConfigDocument())

        assert merged.daemon == base.daemon

    def test_only_override_has_daemon(self):
        """Test that a missing base section takes the override section."""
        override = parse("daemon:\n  endpoint: 'b:2'\n")

        merged = merge(ConfigDocument(), override)

        assert merged.daemon == override.daemon

    def test_neither_has_daemon(self):
        """Test that daemon stays absent when both sides lack it."""
        assert merge(ConfigDocument(), ConfigDocument()).daemon is None


class TestMergePeers:
    """Tests for peer table merging."""

    def test_union_of_peers(self):
        """Test that peers from both sides are kept."""
        a = parse("peers:\n  p1:\n    public_key: 'X'\n")
        b = parse("peers:\n  p2:\n    public_key: 'Y'\n")

        merged = merge(a, b)

        assert set(merged.peers) == {"p1", "p2"}

    def test_override_entry_replaces_whole_entry(self):
        """Test that same-named entries are replaced, not merged per field."""
        a = parse("peers:\n  p1:\n    public_key: 'X'\n    endpoint: 'e:1'\n")
        b = parse("peers:\n  p1:\n    public_key: 'Y'\n")

        merged = merge(a, b)

        assert merged.peers["p1"] == PeerSettings(public_key="Y")
        assert merged.peers["p1"].endpoint is None

    def test_merge_order_decides_winner(self):
        """Test that the later merge argument wins, not key order."""
        a = parse("peers:\n  zz:\n    public_key: 'A'\n  aa:\n    public_key: 'A'\n")
        b = parse("peers:\n  aa:\n    public_key: 'B'\n  zz:\n    public_key: 'B'\n")

        assert merge(a, b).peers == b.peers
        assert merge(b, a).peers == a.peers

    def test_peers_absent_on_both_sides(self):
        """Test that the peers table stays absent when neither side has it."""
        assert merge(ConfigDocument(), ConfigDocument()).peers is None

    def test_merge_does_not_mutate_inputs(self):
        """Test that merge returns a new document and leaves inputs alone."""
        a = parse("peers:\n  p1:\n    public_key: 'X'\n")
        b = parse("peers:\n  p2:\n    public_key: 'Y'\n")

        merged = merge(a, b)

        assert merged is not a
        assert merged.peers is not a.peers
        assert set(a.peers) == {"p1"}
        assert set(b.peers) == {"p2"}


class TestSerialize:
    """Tests for serialize()."""

    def test_serialize_reads_back(self):
        """Test that serialized text parses to an equal document."""
        doc = ConfigDocument(
            daemon=DaemonSettings(endpoint="a:1", config_dir="conf.d"),
            peers={"p1": PeerSettings(public_key="X", endpoint="e:1")},
        )

        assert parse(serialize(doc)) == doc

    def test_serialize_omits_absent_fields(self):
        """Test that None fields are not written."""
        text = serialize(ConfigDocument(daemon=DaemonSettings(endpoint="a:1")))

        assert "key_path" not in text
        assert "peers" not in text


class TestDefaultDocument:
    """Tests for the compiled-in defaults."""

    def test_default_supplies_config_dir(self):
        """Test that defaults always set daemon.config_dir."""
        doc = default_document()

        assert doc.daemon is not None
        assert doc.daemon.config_dir == "methd.d"

    def test_default_matches_template(self):
        """Test that the default document is the parsed template."""
        assert default_document() == parse(DEFAULT_CONFIG_YAML)

    def test_merge_identity(self):
        """Test that merging the defaults onto themselves changes nothing."""
        assert merge(default_document(), default_document()) == default_document()

    def test_default_keeps_config_dir_after_empty_override(self):
        """Test that an empty root cannot drop config_dir."""
        merged = merge(default_document(), parse(""))

        assert merged.daemon.config_dir == "methd.d"
