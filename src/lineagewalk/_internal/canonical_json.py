"""Canonical JSON for traversal results.

Layer and entry lists keep their traversal order; only object keys are sorted,
so two runs over the same graph print byte-identical output.
"""

import json
from typing import Any


def canonical_dumps(obj: Any) -> str:
    """Serialize a traversal result for printing or writing to --output-dir.

    Object keys are sorted; list order (layers, entries, rows) is kept as the
    traversal produced it, so row order still carries edge order.
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False
    )
