"""
matplotlib artist classification for node naming.

Both orchestrators name the artists they need to address before the
figure is saved; the node kind in a name comes from ``artist_kind``.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Any, Iterator, Optional

from matplotlib.artist import Artist
from matplotlib.collections import Collection, LineCollection, PathCollection, PolyCollection, QuadMesh
from matplotlib.image import AxesImage
from matplotlib.legend import Legend
from matplotlib.lines import Line2D
from matplotlib.patches import Patch, Rectangle
from matplotlib.spines import Spine
from matplotlib.text import Text


def artist_kind(artist: Artist) -> Optional[str]:
    """Node kind of an artist, or None for artists that are not addressed."""
    if isinstance(artist, (Text, Legend, Spine)):
        return None
    if isinstance(artist, (AxesImage, QuadMesh)) or type(artist).__name__ == "PolyQuadMesh":
        return "image"
    if isinstance(artist, Rectangle):
        return "rect"
    if isinstance(artist, Line2D):
        return "lines"
    if isinstance(artist, PathCollection):
        return "points"
    if isinstance(artist, LineCollection):
        return "segments"
    if isinstance(artist, (PolyCollection, Patch)):
        return "polygon"
    return None


def iter_artists(result: Any) -> Iterator[Artist]:
    """Artists in a call's return value (containers, lists, tuples, dicts)."""
    if isinstance(result, Artist):
        yield result
    elif isinstance(result, dict):
        for value in result.values():
            yield from iter_artists(value)
    elif isinstance(result, (list, tuple)):
        for item in result:
            yield from iter_artists(item)


def data_artists(ax) -> list[Artist]:
    """Artists of an axes that draw data, in the order the axes holds them.

    Excludes the axes background, spines, axis objects, text and legends.
    """
    artists = []
    for artist in ax.get_children():
        if artist is ax.patch:
            continue
        if isinstance(artist, (Collection, Line2D, AxesImage)) or (
            isinstance(artist, Patch) and not isinstance(artist, Spine)
        ):
            artists.append(artist)
    return artists


def artists_by_layer(ax, n_layers: int) -> dict[int, list[Artist]]:
    """Split an axes' data artists among layers 1..n_layers.

    plotnine draws layer i with ``zorder = i``. When the zorders do not
    identify layers (all equal, or out of range) and there is a single
    layer, every artist belongs to it.
    """
    artists = data_artists(ax)
    layers: dict[int, list[Artist]] = defaultdict(list)
    for artist in artists:
        z = artist.get_zorder()
        if float(z).is_integer() and 1 <= int(z) <= n_layers:
            layers[int(z)].append(artist)
    if not layers and n_layers == 1:
        layers[1] = artists
    return dict(layers)
