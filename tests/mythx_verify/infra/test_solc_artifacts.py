import json

import pytest

from fakes import solc_contract, solc_output
from mythx_verify.core.domain.exceptions import ValidationError
from mythx_verify.core.services import CompilationStore
from mythx_verify.infra.solc_artifacts import SolcArtifacts


def write_json(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_takes_contents_from_standard_json_input(tmp_path):
    output = write_json(tmp_path / "out.json", solc_output({"A.sol": {"A": solc_contract()}}, ["A.sol"]))
    std_input = write_json(tmp_path / "in.json", {"language": "Solidity", "sources": {"A.sol": {"content": "contract A {}"}}})
    store = CompilationStore()

    SolcArtifacts(store=store, base_dir=tmp_path).load(output, std_input)

    snapshot = store.snapshot()
    assert dict(snapshot.inputs) == {"A.sol": "contract A {}"}
    assert "A" in snapshot.result["contracts"]["A.sol"]


def test_load_reads_sources_from_disk(tmp_path):
    (tmp_path / "contracts").mkdir()
    (tmp_path / "contracts" / "B.sol").write_text("contract B {}", encoding="utf-8")
    output = write_json(tmp_path / "out.json", solc_output({}, ["contracts/B.sol"]))
    store = CompilationStore()

    SolcArtifacts(store=store, base_dir=tmp_path).load(output)

    assert store.snapshot().inputs["contracts/B.sol"] == "contract B {}"


def test_missing_source_file_is_a_validation_error(tmp_path):
    output = write_json(tmp_path / "out.json", solc_output({}, ["Missing.sol"]))

    with pytest.raises(ValidationError):
        SolcArtifacts(store=CompilationStore(), base_dir=tmp_path).load(output)


def test_unreadable_compiler_json_is_a_validation_error(tmp_path):
    bad = tmp_path / "out.json"
    bad.write_text("not json", encoding="utf-8")

    with pytest.raises(ValidationError):
        SolcArtifacts(store=CompilationStore()).load(bad)
    with pytest.raises(ValidationError):
        SolcArtifacts(store=CompilationStore()).load(write_json(tmp_path / "list.json", []))
