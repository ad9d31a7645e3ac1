from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


ALL_CONTRACTS = "_ALL_"


class Mode(str, Enum):
    QUICK = "quick"
    STANDARD = "standard"
    FULL = "full"
    DEEP = "deep"


class OutputFormat(str, Enum):
    TEXT = "text"
    STYLISH = "stylish"
    COMPACT = "compact"
    TABLE = "table"
    HTML = "html"
    JSON = "json"


class AnalysisStatus(str, Enum):
    """Lifecycle of a remote analysis job.

    FINISHED and ERROR are terminal: no further transitions are expected.
    """
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    FINISHED = "Finished"
    ERROR = "Error"

    @property
    def is_terminal(self) -> bool:
        return self in (AnalysisStatus.FINISHED, AnalysisStatus.ERROR)


@dataclass(frozen=True)
class ContractBytecode:
    """Bytecode object plus its byte-offset source map, as emitted by solc."""
    object: str = ""
    source_map: str = ""


@dataclass(frozen=True)
class SourceEntry:
    """A source file attached to an analysis unit."""
    content: str
    ast: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class AnalysisUnit:
    """One contract (plus its supporting source files) submitted as a single job.

    Built once from compiler output at the start of a run and never mutated.
    ``sources`` keeps the compiler's source-table order, which is also the
    order of the ``sourceList`` sent to the service.
    """
    contract_name: str
    file_path: str
    bytecode: ContractBytecode
    deployed_bytecode: ContractBytecode
    sources: Mapping[str, SourceEntry]
    method_identifiers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class SubmissionRequest:
    contract_name: str
    bytecode: str
    source_map: str
    deployed_bytecode: str
    deployed_source_map: str
    main_source: str
    source_list: list[str]
    sources: dict[str, dict[str, Any]]
    analysis_mode: str
    tool_name: str
    no_cache_lookup: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON body expected by ``POST /v1/analyses``."""
        return {
            "clientToolName": self.tool_name,
            "noCacheLookup": self.no_cache_lookup,
            "data": {
                "contractName": self.contract_name,
                "bytecode": self.bytecode,
                "sourceMap": self.source_map,
                "deployedBytecode": self.deployed_bytecode,
                "deployedSourceMap": self.deployed_source_map,
                "mainSource": self.main_source,
                "sourceList": list(self.source_list),
                "sources": self.sources,
                "analysisMode": self.analysis_mode,
            },
        }


@dataclass(frozen=True)
class AnalysisHandle:
    uuid: str
    status: AnalysisStatus = AnalysisStatus.PENDING


@dataclass(frozen=True)
class Location:
    """One location of a finding; only solidity-file/text ones are decodable."""
    source_map: str
    source_type: str = "solidity-file"
    source_format: str = "text"

    @property
    def is_text(self) -> bool:
        return self.source_type == "solidity-file" and self.source_format == "text"


@dataclass(frozen=True)
class RawFinding:
    """An issue as returned by the remote service."""
    severity: str
    head: str
    tail: str = ""
    swc_id: str | None = None
    swc_title: str | None = None
    locations: tuple[Location, ...] = ()


@dataclass(frozen=True)
class IssueReport:
    """One report object per originating contract."""
    issues: tuple[RawFinding, ...] = ()


@dataclass(frozen=True)
class Position:
    line: int
    column: int


@dataclass(frozen=True)
class Message:
    """A normalized finding located in a single source file.

    ``start``/``end`` are None when the location could not be decoded.
    ``finding``, ``text_locations`` and ``source_snippet`` are kept as
    evidence so a renderer can trace the message back to the raw report.
    """
    start: Position | None
    end: Position | None
    severity: int
    text: str
    rule_id: str
    finding: RawFinding
    text_locations: tuple[Location, ...] = ()
    source_snippet: str = ""
    fatal: bool = False

    @property
    def is_error(self) -> bool:
        return self.fatal or self.severity == 2


@dataclass(frozen=True)
class Diagnostic:
    """All messages for one source file, after deduplication."""
    file_path: str
    source_code: str
    messages: tuple[Message, ...] = ()
    error_count: int = 0
    warning_count: int = 0
    function_hashes: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class RecentAnalysis:
    uuid: str
    mode: str
    main_source: str
    vulnerability_counts: Mapping[str, int]
    submitted_at: str


@dataclass(frozen=True)
class PollTiming:
    """Initial delay and overall timeout, both in seconds."""
    initial_delay: float
    timeout: float


@dataclass(frozen=True)
class RunOptions:
    mode: str = Mode.QUICK.value
    output_format: str = OutputFormat.STYLISH.value
    no_cache_lookup: bool = False
    debug: bool = False
    limit: int = 10
    contracts: tuple[str, ...] = (ALL_CONTRACTS,)
    timeout: float | None = None
    tool_name: str = "mythx-verify"

    @property
    def selects_all(self) -> bool:
        return not self.contracts or (len(self.contracts) == 1 and self.contracts[0] == ALL_CONTRACTS)


@dataclass(frozen=True)
class MultipleContractsWarning:
    """A source file declaring more than one contract.

    MythX may not support this case; only the primary contract is submitted.
    """
    file_path: str
    contract_names: tuple[str, ...]

    def describe(self) -> str:
        names = "', '".join(self.contract_names)
        return (
            f"Contract file '{self.file_path}' contains multiple contract definitions ('{names}'). "
            "MythX may not support this case and therefore the results produced may not be correct."
        )


@dataclass
class UnitOutcome:
    """Result of one unit's submit/poll/fetch/normalize pipeline."""
    contract_name: str
    uuid: str | None = None
    status: AnalysisStatus | None = None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
