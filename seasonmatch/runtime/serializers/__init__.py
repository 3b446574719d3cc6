# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Serializers for Evaluation delivery.

Serializers only format an Evaluation; they never change its content.
"""

from seasonmatch.runtime.serializers.base import SerializerFormat
from seasonmatch.runtime.serializers.report import to_report

__all__ = [
    "SerializerFormat",
    "to_report",
]
