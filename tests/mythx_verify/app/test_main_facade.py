"""Facade function tests for main module."""
import pytest

from mythx_verify import analyze, list_analyses, report, status
from mythx_verify.core.domain.exceptions import ValidationError
from mythx_verify.core.domain.models import AnalysisStatus


def test_analyze_returns_outcome_per_contract(mock_container, test_config, compilation):
    output_path, input_path = compilation
    seen = []

    outcomes = analyze(output_path, input_path=input_path, on_outcome=seen.append, config=test_config)

    assert sorted(o.contract_name for o in outcomes) == ["Token", "Vault"]
    assert len(seen) == 2
    token = next(o for o in outcomes if o.contract_name == "Token")
    (diag,) = token.diagnostics
    assert diag.file_path == "Token.sol"
    assert diag.messages[0].start.line == 2
    assert [r.analysis_mode for r in mock_container.submitted] == ["quick", "quick"]


def test_analyze_filters_contracts_and_applies_overrides(mock_container, test_config, compilation):
    output_path, input_path = compilation

    outcomes = analyze(
        output_path,
        input_path=input_path,
        contracts=["Vault"],
        mode="standard",
        no_cache_lookup=True,
        config=test_config,
    )

    assert [o.contract_name for o in outcomes] == ["Vault"]
    (request,) = mock_container.submitted
    assert request.analysis_mode == "standard"
    assert request.no_cache_lookup is True


def test_analyze_rejects_invalid_format_before_submitting(mock_container, test_config, compilation):
    output_path, input_path = compilation

    with pytest.raises(ValidationError):
        analyze(output_path, input_path=input_path, output_format="xml", config=test_config)
    assert mock_container.auth_calls == 0


def test_analyze_writes_run_log(mock_container, tmp_path, test_config, compilation):
    output_path, input_path = compilation
    config = test_config.model_copy(update={"runtime": test_config.runtime.model_copy(update={"run_id": "run-1"})})

    analyze(output_path, input_path=input_path, config=config)

    log_file = tmp_path / "logs" / "run-1.jsonl"
    assert log_file.exists()
    assert '"unit_submitted"' in log_file.read_text(encoding="utf-8")


def test_status_report_and_list(mock_container, test_config, compilation):
    output_path, input_path = compilation

    handle = status("UUID-TOKEN", config=test_config)
    diagnostics = report("uuid-Token", output_path=output_path, input_path=input_path, config=test_config)
    analyses = list_analyses(config=test_config)

    assert handle.uuid == "uuid-token"
    assert handle.status == AnalysisStatus.FINISHED
    assert analyses[0].uuid == "u-1"
    (diag,) = diagnostics
    assert diag.file_path == "Token.sol"
    assert diag.error_count == 1


def _with_run_id(config, run_id):
    return config.model_copy(update={"runtime": config.runtime.model_copy(update={"run_id": run_id})})


def test_empty_compilation_is_logged(mock_container, tmp_path, test_config):
    empty = tmp_path / "empty-output.json"
    empty.write_text('{"contracts": {}, "sources": {}}', encoding="utf-8")

    outcomes = analyze(empty, config=_with_run_id(test_config, "run-empty"))
    diagnostics = report("uuid-Token", output_path=empty, config=_with_run_id(test_config, "report-empty"))

    assert outcomes == []
    assert mock_container.submitted == []
    assert '"empty_compilation"' in (tmp_path / "logs" / "run-empty.jsonl").read_text(encoding="utf-8")
    assert '"empty_compilation"' in (tmp_path / "logs" / "report-empty.jsonl").read_text(encoding="utf-8")
    (diag,) = diagnostics
    assert diag.file_path == "<unknown>"


def test_report_without_compilation_does_not_warn(mock_container, tmp_path, test_config):
    report("uuid-Token", config=_with_run_id(test_config, "report-plain"))

    assert '"empty_compilation"' not in (tmp_path / "logs" / "report-plain.jsonl").read_text(encoding="utf-8")
