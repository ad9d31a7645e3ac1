from fakes import finding
from mythx_verify.core.domain.models import IssueReport, Location, Position, RawFinding
from mythx_verify.core.services import ReportNormalizer
from mythx_verify.core.services.report_normalizer import UNKNOWN_PATH, severity_ordinal


SOURCES = {"A.sol": "contract A {}\ncontract B {}\n"}


def test_single_high_finding_is_located_and_counted():
    reports = [IssueReport(issues=(finding("0:5:0", severity="High"),))]

    diagnostics = ReportNormalizer().normalize(reports, SOURCES)

    assert len(diagnostics) == 1
    d = diagnostics[0]
    assert d.file_path == "A.sol"
    assert d.source_code == SOURCES["A.sol"]
    assert len(d.messages) == 1
    m = d.messages[0]
    assert m.severity == 2
    assert m.start == Position(line=1, column=0)
    assert m.end == Position(line=1, column=5)
    assert d.error_count == 1
    assert d.warning_count == 0


def test_identical_findings_are_deduplicated():
    reports = [
        IssueReport(issues=(finding("14:13:0", severity="Low"),)),
        IssueReport(issues=(finding("14:13:0", severity="Low"),)),
    ]

    (d,) = ReportNormalizer().normalize(reports, SOURCES)

    assert len(d.messages) == 1
    assert d.error_count == 0
    assert d.warning_count == 1


def test_findings_differing_in_location_are_kept():
    reports = [IssueReport(issues=(finding("0:5:0"), finding("14:13:0")))]

    (d,) = ReportNormalizer().normalize(reports, SOURCES)

    assert len(d.messages) == 2
    assert d.messages[1].start == Position(line=2, column=0)
    assert d.messages[1].source_snippet == "contract B {}"


def test_findings_are_grouped_per_file_in_first_seen_order():
    sources = {"A.sol": "contract A {}\n", "lib/B.sol": "library B {}\n"}
    reports = [IssueReport(issues=(finding("0:7:1"), finding("0:8:0"), finding("0:3:1", head="other")))]

    diagnostics = ReportNormalizer().normalize(reports, sources)

    assert [d.file_path for d in diagnostics] == ["lib/B.sol", "A.sol"]
    assert len(diagnostics[0].messages) == 2


def test_out_of_range_file_index_degrades_to_unknown():
    reports = [IssueReport(issues=(finding("0:5:7"),))]

    (d,) = ReportNormalizer().normalize(reports, SOURCES)

    assert d.file_path == UNKNOWN_PATH
    assert d.source_code == ""
    # no linebreaks known: offset still decodes on the first line
    assert d.messages[0].start == Position(line=1, column=0)


def test_finding_without_text_location_has_unknown_position():
    bytecode_only = RawFinding(
        severity="Medium",
        head="Unprotected selfdestruct",
        locations=(Location(source_map="120:1:0", source_type="raw-bytecode", source_format="evm-byzantium-bytecode"),),
    )

    (d,) = ReportNormalizer().normalize([IssueReport(issues=(bytecode_only,))], SOURCES)

    m = d.messages[0]
    assert d.file_path == UNKNOWN_PATH
    assert m.start is None and m.end is None
    assert m.text_locations == ()
    assert m.source_snippet == ""


def test_only_first_text_location_is_decoded():
    two_sites = RawFinding(
        severity="High",
        head="Reentrancy",
        locations=(Location(source_map="0:5:0"), Location(source_map="14:13:0")),
    )

    (d,) = ReportNormalizer().normalize([IssueReport(issues=(two_sites,))], SOURCES)

    assert len(d.messages) == 1
    assert d.messages[0].start == Position(line=1, column=0)
    assert len(d.messages[0].text_locations) == 2


def test_rule_id_links_to_swc_registry():
    reports = [IssueReport(issues=(finding(swc_id="107"), finding("14:1:0", swc_id=None)))]

    (d,) = ReportNormalizer().normalize(reports, SOURCES)

    assert d.messages[0].rule_id == "https://swcregistry.io/docs/107"
    assert d.messages[1].rule_id == "N/A"


def test_function_hashes_are_attached():
    hashes = {"a9059cbb": "transfer(address,uint256)"}

    (d,) = ReportNormalizer().normalize([IssueReport(issues=(finding(),))], SOURCES, hashes)

    assert d.function_hashes == hashes


def test_empty_reports_yield_no_diagnostics():
    assert ReportNormalizer().normalize([IssueReport()], SOURCES) == []


def test_severity_ordinal():
    assert severity_ordinal("High") == 2
    assert severity_ordinal("medium") == 1
    assert severity_ordinal("Low") == 1
    assert severity_ordinal(None) == 1
