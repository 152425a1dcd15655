"""Unit loader backed by `go list`."""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path

from gta.errors import LoadError
from gta.loader.base import UnitLoader
from gta.models import UnitDescriptor, strip_variant

logger = logging.getLogger(__name__)

# go list fields grouped the way go/packages reports them
_GO_FIELDS = ("GoFiles", "CgoFiles")
_IGNORED_FIELDS = ("IgnoredGoFiles", "IgnoredOtherFiles")
_OTHER_FIELDS = (
    "CFiles", "CXXFiles", "MFiles", "HFiles", "FFiles", "SFiles",
    "SwigFiles", "SwigCXXFiles", "SysoFiles", "EmbedFiles",
)
# test variants also own the embeds of their _test.go files
_TEST_EMBED_FIELDS = ("TestEmbedFiles",)
_XTEST_EMBED_FIELDS = ("XTestEmbedFiles",)


class GoListLoader(UnitLoader):
    """Load Go packages, their test variants and their imports with `go list`."""

    def __init__(self, go: str = "go", cwd: Path | str | None = None):
        self.go = go
        self.cwd = cwd

    def command(self, include_prefixes: list[str], tags: list[str]) -> list[str]:
        cmd = [self.go, "list", "-e", "-json", "-deps", "-test"]
        if tags:
            cmd.append("-tags=" + ",".join(tags))
        if include_prefixes:
            cmd.extend(f"{prefix}..." for prefix in include_prefixes)
        else:
            cmd.append("./...")
        return cmd

    def load(self, include_prefixes: list[str], tags: list[str]) -> list[UnitDescriptor]:
        cmd = self.command(include_prefixes, tags)
        logger.debug("running %s", " ".join(cmd))
        try:
            proc = subprocess.run(
                cmd, cwd=self.cwd, capture_output=True, text=True, check=False,
            )
        except OSError as e:
            raise LoadError(f"loading packages: running {self.go}: {e}") from e
        if proc.returncode != 0:
            raise LoadError(f"loading packages: {proc.stderr.strip() or f'exit status {proc.returncode}'}")
        return parse_go_list(proc.stdout)


def parse_go_list(output: str) -> list[UnitDescriptor]:
    """Turn the concatenated JSON objects printed by `go list -json` into linked descriptors."""
    records = list(_decode_stream(output))

    by_id: dict[str, UnitDescriptor] = {}
    for record in records:
        desc = _descriptor(record)
        by_id[desc.id] = desc

    for record in records:
        desc = by_id[record["ImportPath"]]
        for imported_id in record.get("Imports") or []:
            imported = by_id.get(imported_id)
            if imported is None:
                # pseudo packages such as "C" are never listed
                logger.debug("package %s imports unlisted %s", desc.id, imported_id)
                continue
            desc.imports.append(imported)

    return list(by_id.values())


def _decode_stream(output: str):
    decoder = json.JSONDecoder()
    pos = 0
    end = len(output)
    while True:
        while pos < end and output[pos].isspace():
            pos += 1
        if pos >= end:
            return
        try:
            record, pos = decoder.raw_decode(output, pos)
        except json.JSONDecodeError as e:
            raise LoadError(f"loading packages: decoding go list output: {e}") from e
        yield record


def _descriptor(record: dict) -> UnitDescriptor:
    unit_id = record["ImportPath"]
    directory = record.get("Dir", "")

    def files(*fields: str) -> list[str]:
        names: list[str] = []
        for name in fields:
            names.extend(os.path.join(directory, f) for f in record.get(name) or [])
        return list(dict.fromkeys(names))

    pkg_path = strip_variant(unit_id)
    for_test = record.get("ForTest")
    other_fields = _OTHER_FIELDS
    if for_test == pkg_path:
        other_fields += _TEST_EMBED_FIELDS
    elif for_test and pkg_path == for_test + "_test":
        other_fields += _XTEST_EMBED_FIELDS

    errors: list[str] = []
    if record.get("Error"):
        errors.append(record["Error"].get("Err", ""))
    for dep_error in record.get("DepsErrors") or []:
        errors.append(dep_error.get("Err", ""))

    return UnitDescriptor(
        id=unit_id,
        pkg_path=pkg_path,
        go_files=files(*_GO_FIELDS),
        compiled_go_files=files("CompiledGoFiles"),
        ignored_files=files(*_IGNORED_FIELDS),
        other_files=files(*other_fields),
        errors=errors,
    )
