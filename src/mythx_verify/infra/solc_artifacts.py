from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..core.domain.exceptions import ValidationError
from ..core.services import CompilationStore


class SolcArtifacts:
    """Loads solc standard-JSON files as compile events into a CompilationStore.

    Source contents come from the standard-JSON input when it carries them;
    otherwise each compiled source path is read from disk relative to
    ``base_dir``.
    """

    def __init__(self, *, store: CompilationStore, base_dir: Path | None = None) -> None:
        self._store = store
        self._base_dir = base_dir or Path.cwd()

    def load(self, output_path: Path, input_path: Path | None = None) -> None:
        result = self._read_json(output_path)
        declared: dict[str, Any] = {}
        if input_path is not None:
            declared = self._read_json(input_path).get("sources") or {}

        inputs: dict[str, str] = {}
        for source_path in result.get("sources") or {}:
            content = (declared.get(source_path) or {}).get("content")
            if content is None:
                content = self._read_source(source_path)
            inputs[source_path] = content

        self._store.ingest(result, inputs)

    def _read_source(self, source_path: str) -> str:
        path = Path(source_path)
        if not path.is_absolute():
            path = self._base_dir / path
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            raise ValidationError(f"Cannot read source file {source_path}: {e}") from e

    @staticmethod
    def _read_json(path: Path) -> dict[str, Any]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise ValidationError(f"Cannot read compiler JSON {path}: {e}") from e
        if not isinstance(data, dict):
            raise ValidationError(f"Compiler JSON {path} must contain an object")
        return data
