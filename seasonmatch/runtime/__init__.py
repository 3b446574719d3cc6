# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Delivery runtime for evaluation results.

1. Result tags -- Derived metadata written onto the product image element
2. Reports -- Human-readable or JSON summaries of an Evaluation

The delivery layer never modifies evaluation content.
"""

from seasonmatch.runtime.serializers import SerializerFormat, to_report
from seasonmatch.runtime.tags import apply_result_tags, result_tags

__all__ = [
    "to_report",
    "SerializerFormat",
    "result_tags",
    "apply_result_tags",
]
