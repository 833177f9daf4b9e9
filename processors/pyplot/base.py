"""
Shared plumbing for pyplot layer processors.

Artists drawn by a recorded call are named
``graphics-plot-{group}-{kind}-{n}`` before the figure is rendered; n
counts per kind within the group, in call order. Processors find their
nodes in the rendered tree with exact patterns on those names.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Optional

import numpy as np
from matplotlib.artist import Artist

from processors.base import LayerProcessor, PairedLayerProcessor, ProcessingContext
from rendering.artists import artist_kind, iter_artists
from rendering.tree import find_nodes_by_pattern

NODE_PREFIX = "graphics-plot"

# boxplot() result roles → node kind; caps and means are not addressed
BOX_ROLES = (("boxes", "polygon"), ("medians", "segments"), ("whiskers", "lines"), ("fliers", "points"))


def node_name(group_index: int, kind: str, n: int) -> str:
    return f"{NODE_PREFIX}-{group_index}-{kind}-{n}"


def node_pattern(group_index: int, kind: str) -> str:
    return rf"^{NODE_PREFIX}-{group_index}-{kind}-[0-9]+$"


def iter_call_artists(call) -> Iterator[tuple[str, Artist]]:
    """``(kind, artist)`` for every addressable artist a call drew."""
    if call.function_name == "boxplot" and isinstance(call.result, dict):
        for role, kind in BOX_ROLES:
            for artist in call.result.get(role, []):
                yield kind, artist
        return
    for artist in iter_artists(call.result):
        kind = artist_kind(artist)
        if kind is not None:
            yield kind, artist


def as_array(value: Any) -> np.ndarray:
    """1-D array of a call argument (scalars become length 1)."""
    if value is None:
        return np.asarray([])
    if hasattr(value, "to_numpy"):
        value = value.to_numpy()
    return np.atleast_1d(np.asarray(value, dtype=object if _has_strings(value) else None)).ravel()


def _has_strings(value: Any) -> bool:
    if isinstance(value, str):
        return True
    try:
        return any(isinstance(v, str) for v in value)
    except TypeError:
        return False


class PyplotNodesMixin:
    """Look up the rendered nodes that belong to this layer."""

    def rendered_nodes(self, ctx: ProcessingContext, kind: str) -> list[Optional[str]]:
        """This layer's node names of *kind* in assignment order.

        Names missing from the rendered tree come back as None.
        """
        group_index = self.descriptor.group_index
        found = set(find_nodes_by_pattern(ctx.tree, node_pattern(group_index, kind)))
        own = [n for n in self.descriptor.nodes if _kind_of(n) == kind]
        own.sort(key=_number_of)
        return [n if n in found else None for n in own]


_NAME = re.compile(rf"^{NODE_PREFIX}-\d+-([a-z]+)-(\d+)$")


def _kind_of(name: str) -> Optional[str]:
    m = _NAME.match(name)
    return m.group(1) if m else None


def _number_of(name: str) -> int:
    m = _NAME.match(name)
    return int(m.group(2)) if m else 0


class PyplotLayerProcessor(PyplotNodesMixin, PairedLayerProcessor):
    """Paired processor over a recorded matplotlib call."""


class PyplotGroupedProcessor(PyplotNodesMixin, LayerProcessor):
    """Processor whose selectors address whole series or the whole layer."""
