"""Tests for the tolerant packages-map normalizer."""

import json
import logging

from npm_lockfile.config import LockfileConfig
from npm_lockfile.models import PackageRecord
from npm_lockfile.normalizer import (
    normalize_engines,
    normalize_packages,
    resolve_package_key,
)


class TestNormalizeEngines:
    """Tests for rewriting array-shaped engines fields."""

    def test_array_to_object(self):
        raw = {"version": "7.18.6", "engines": ["node >=6.9.0"]}
        normalize_engines(raw)
        assert raw["engines"] == {"node": ">=6.9.0"}

    def test_splits_on_first_space_only(self):
        raw = {"engines": ["node >=6 <8", "npm >=3"]}
        normalize_engines(raw)
        assert raw["engines"] == {"node": ">=6 <8", "npm": ">=3"}

    def test_empty_array_removed(self):
        raw = {"version": "1.0.0", "engines": []}
        normalize_engines(raw)
        assert "engines" not in raw

    def test_unsplittable_entry(self):
        raw = {"engines": ["node"]}
        normalize_engines(raw)
        assert raw["engines"] == {"not_found": "not_found"}

    def test_non_string_entry(self):
        raw = {"engines": [6]}
        normalize_engines(raw)
        assert raw["engines"] == {"not_found": "not_found"}

    def test_object_left_alone(self):
        engines = {"node": ">=14"}
        raw = {"engines": engines}
        normalize_engines(raw)
        assert raw["engines"] is engines
        assert raw["engines"] == {"node": ">=14"}

    def test_missing_engines(self):
        raw = {"version": "1.0.0"}
        normalize_engines(raw)
        assert raw == {"version": "1.0.0"}

    def test_logs_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="npm_lockfile"):
            normalize_engines({"engines": ["node >=0.6.0"]}, "node_modules/extsprintf")
        assert any(
            record.levelname == "WARNING" and "node_modules/extsprintf" in record.message
            for record in caplog.records
        )


class TestResolvePackageKey:
    """Tests for mapping install paths to package names."""

    def test_top_level(self):
        record = PackageRecord(version="1.0.0")
        assert resolve_package_key("node_modules/lodash", record) == "lodash"

    def test_scoped(self):
        record = PackageRecord(version="1.0.0")
        assert resolve_package_key("node_modules/@babel/core", record) == "@babel/core"

    def test_nested_install_dropped(self):
        record = PackageRecord(version="4.0.0")
        key = "node_modules/@babel/highlight/node_modules/js-tokens"
        assert resolve_package_key(key, record) is None

    def test_workspace_uses_declared_name(self):
        record = PackageRecord(version="1.0.0", name="@acme/base")
        assert resolve_package_key("packages/base", record) == "@acme/base"

    def test_workspace_without_name(self):
        record = PackageRecord(version="1.0.0")
        assert resolve_package_key("packages/base", record) == "packages/base"

    def test_declared_name_ignored_for_installed_package(self):
        record = PackageRecord(version="1.0.0", name="other")
        assert resolve_package_key("node_modules/lodash", record) == "lodash"

    def test_custom_prefix(self):
        record = PackageRecord(version="1.0.0")
        assert resolve_package_key("vendor/lodash", record, "vendor/") == "lodash"


class TestNormalizePackages:
    """Tests for normalizing the whole packages map."""

    def test_root_entry_skipped(self, caplog):
        raw = {
            "": {"name": "app", "version": "1.0.0"},
            "node_modules/lodash": {"version": "4.17.21"},
        }
        with caplog.at_level(logging.INFO, logger="npm_lockfile"):
            packages = normalize_packages(raw)

        assert list(packages) == ["lodash"]
        assert any(
            record.levelname == "INFO" and "Skipping root" in record.message
            for record in caplog.records
        )

    def test_engines_array_fixed(self):
        raw = {
            "node_modules/extsprintf": {
                "version": "1.3.0",
                "dev": True,
                "engines": ["node >=0.6.0"],
            }
        }
        packages = normalize_packages(raw)

        package = packages["extsprintf"]
        assert package.version == "1.3.0"
        assert package.is_dev
        assert package.engines == {"node": ">=0.6.0"}

    def test_empty_engines_array(self):
        raw = {"node_modules/a": {"version": "1.0.0", "engines": []}}
        assert normalize_packages(raw)["a"].engines is None

    def test_input_not_modified(self):
        raw = {"node_modules/a": {"version": "1.0.0", "engines": ["node >=8"]}}
        normalize_packages(raw)
        assert raw["node_modules/a"]["engines"] == ["node >=8"]

    def test_malformed_entry_dropped(self, caplog):
        raw = {
            "node_modules/good": {"version": "1.0.0"},
            "node_modules/bad": {"version": 1},
            "node_modules/also-good": {"version": "2.0.0"},
        }
        with caplog.at_level(logging.ERROR, logger="npm_lockfile"):
            packages = normalize_packages(raw)

        assert set(packages) == {"good", "also-good"}
        assert any(
            record.levelname == "ERROR" and "Could not parse this dependency" in record.message
            for record in caplog.records
        )

    def test_non_object_entry_dropped(self):
        raw = {
            "node_modules/a": "1.0.0",
            "node_modules/b": {"version": "1.0.0"},
        }
        assert list(normalize_packages(raw)) == ["b"]

    def test_one_bad_entry_in_hundred(self):
        raw = {
            f"node_modules/pkg-{i}": {"version": f"1.0.{i}", "dev": i % 2 == 0}
            for i in range(100)
        }
        raw["node_modules/pkg-42"] = {"version": "1.0.42", "dev": "true"}

        packages = normalize_packages(raw)

        assert len(packages) == 99
        assert "pkg-42" not in packages
        for i in range(100):
            if i == 42:
                continue
            assert packages[f"pkg-{i}"] == PackageRecord(version=f"1.0.{i}", is_dev=i % 2 == 0)

    def test_nested_installs_never_keys(self):
        raw = {
            "node_modules/a": {"version": "1.0.0"},
            "node_modules/a/node_modules/b": {"version": "2.0.0"},
            "node_modules/b": {"version": "1.0.0"},
            "node_modules/c/node_modules/d/node_modules/e": {"version": "3.0.0"},
        }
        packages = normalize_packages(raw)

        assert packages["b"].version == "1.0.0"
        assert set(packages) == {"a", "b"}
        assert not any("node_modules/" in key for key in packages)

    def test_workspace_members(self):
        raw = {
            "node_modules/@acme/base": {"resolved": "packages/base", "link": True},
            "packages/base": {"name": "@acme/base", "version": "1.0.0"},
            "packages/unnamed": {"version": "0.0.1"},
        }
        packages = normalize_packages(raw)

        assert set(packages) == {"@acme/base", "packages/unnamed"}
        assert packages["@acme/base"].version == "1.0.0"

    def test_link_entries_skipped(self, caplog):
        raw = {"node_modules/@acme/web": {"resolved": "packages/web", "link": True}}
        with caplog.at_level(logging.INFO, logger="npm_lockfile"):
            packages = normalize_packages(raw)

        assert packages == {}
        assert not any(record.levelname == "ERROR" for record in caplog.records)

    def test_collision_last_write_wins(self):
        raw = {
            "packages/foo": {"name": "foo", "version": "2.0.0"},
            "node_modules/foo": {"version": "1.0.0"},
        }
        assert normalize_packages(raw)["foo"].version == "1.0.0"

        reversed_raw = dict(reversed(list(raw.items())))
        assert normalize_packages(reversed_raw)["foo"].version == "2.0.0"

    def test_custom_install_prefix(self):
        raw = {
            "vendor/lodash": {"version": "4.17.21"},
            "vendor/lodash/vendor/x": {"version": "1.0.0"},
        }
        packages = normalize_packages(raw, LockfileConfig(install_prefix="vendor/"))
        assert list(packages) == ["lodash"]

    def test_every_key_comes_from_one_raw_entry(self, read_fixture):
        raw = json.loads(read_fixture("v3"))["packages"]
        packages = normalize_packages(raw)

        for name in packages:
            matches = [key for key in raw if key == f"node_modules/{name}"]
            assert len(matches) == 1
