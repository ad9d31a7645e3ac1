from __future__ import annotations

import re


# Dynamic linking is not supported: unresolved library placeholders are zeroed.
_LINK_PLACEHOLDER = re.compile(r"__\$\w+\$__")
ZERO_ADDRESS = "0" * 40


def normalize(bytecode: str | None) -> str | None:
    """Replace unresolved library-link placeholders with the zero address.

    Placeholders vary per build; zeroing them keeps bytecode identity and
    hashes stable. Empty or missing bytecode is returned unchanged.
    """
    if not bytecode:
        return bytecode
    return _LINK_PLACEHOLDER.sub(ZERO_ADDRESS, bytecode)
