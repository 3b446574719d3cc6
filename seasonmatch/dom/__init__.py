# Copyright (c) 2026 Coriro
# SPDX-License-Identifier: MIT

"""
Page snapshot model and the heuristics that read it.

Only the snapshot types are re-exported here. Heuristic modules
(discovery, selection, swatch_color, text_sources, report) depend on the
measurement core and are imported from their own modules.
"""

from seasonmatch.dom.snapshot import Element, ImageResource, Rect

__all__ = ["Element", "ImageResource", "Rect"]
