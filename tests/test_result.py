"""Tests for the result shape: path normalization and the JSON boundary."""

import json

from gta.models import Package
from gta.result import Packages, normalize_package_path, unique_package_paths


def _pkgs(*paths):
    return [Package(id=p, pkg_path=p) for p in paths]


class TestUniquePackagePaths:
    def test_sorted_and_deduplicated(self):
        assert unique_package_paths(_pkgs("c", "a", "b", "a")) == ["a", "b", "c"]

    def test_test_suffixes_fold_into_base(self):
        paths = unique_package_paths(_pkgs("foo", "foo_test", "foo.test", "bar_test"))
        assert paths == ["bar", "foo"]

    def test_normalization_is_idempotent(self):
        once = unique_package_paths(_pkgs("foo", "foo_test"))
        twice = unique_package_paths(_pkgs(*once))
        assert once == twice == ["foo"]

    def test_only_suffix_is_stripped(self):
        assert normalize_package_path("testing/internal/test") == "testing/internal/test"
        assert normalize_package_path("a_test/b") == "a_test/b"

    def test_empty(self):
        assert unique_package_paths([]) == []


class TestPackagesJSON:
    def test_marshal(self):
        packages = Packages(
            dependencies={
                "foo": _pkgs("qux", "bar", "bar_test"),
                "foo2": _pkgs("afa", "bar", "qux"),
            },
            changes=_pkgs("foo2", "foo"),
            all_changes=_pkgs("foo", "foo2", "afa", "bar", "qux", "foo.test"),
        )
        assert json.loads(packages.to_json()) == {
            "dependencies": {"foo": ["bar", "qux"], "foo2": ["afa", "bar", "qux"]},
            "changes": ["foo", "foo2"],
            "all_changes": ["afa", "bar", "foo", "foo2", "qux"],
        }

    def test_empty_fields_omitted(self):
        assert json.loads(Packages().to_json()) == {}
        assert Packages(changes=_pkgs("foo")).to_dict() == {"changes": ["foo"]}

    def test_dependency_keys_merge_variants(self):
        packages = Packages(dependencies={
            "foo": _pkgs("bar"),
            "foo_test": _pkgs("baz"),
        })
        assert packages.to_dict() == {"dependencies": {"foo": ["bar", "baz"]}}

    def test_unmarshal_builds_stubs(self):
        data = json.dumps({
            "dependencies": {"foo": ["bar", "qux"]},
            "changes": ["foo"],
            "all_changes": ["bar", "foo", "qux"],
        })
        packages = Packages.from_json(data)
        assert [p.pkg_path for p in packages.changes] == ["foo"]
        assert [p.pkg_path for p in packages.dependencies["foo"]] == ["bar", "qux"]
        stub = packages.all_changes[0]
        assert stub.id == stub.pkg_path == "bar"
        assert stub.files == []
        assert stub.dependencies == {} and stub.dependents == {}

    def test_unmarshal_missing_fields(self):
        packages = Packages.from_json("{}")
        assert packages.dependencies == {}
        assert packages.changes == []
        assert packages.all_changes == []

    def test_round_trip(self):
        packages = Packages(
            dependencies={"foo": _pkgs("bar", "qux", "bar")},
            changes=_pkgs("foo"),
            all_changes=_pkgs("qux", "foo", "bar"),
        )
        decoded = Packages.from_json(packages.to_json())
        assert decoded.to_dict() == packages.to_dict()
        assert unique_package_paths(decoded.all_changes) == ["bar", "foo", "qux"]
