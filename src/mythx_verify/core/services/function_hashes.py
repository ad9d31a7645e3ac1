from __future__ import annotations

from typing import Mapping


def build_index(method_identifiers: Mapping[str, str]) -> dict[str, str]:
    """Invert a solc ``methodIdentifiers`` table into ``{hash: signature}``.

    Same hashes are overwritten (last write wins): there is no distinction
    between them even when the signature is declared in different contracts.
    """
    index: dict[str, str] = {}
    for signature, selector in method_identifiers.items():
        index[selector] = signature
    return index
