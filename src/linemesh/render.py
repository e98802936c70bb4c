from __future__ import annotations

from typing import Any

import numpy as np

from .scene import Group, Line


def plot(
    target: Any,
    ax: Any | None = None,
    show: bool = True,
    equal: bool = True,
    title: str | None = None,
    line_width: float | None = None,
    elev: float = 90.0,
    azim: float = -90.0,
):
    group = _resolve_group(target)
    return plot_group(
        group,
        ax=ax,
        show=show,
        equal=equal,
        title=title,
        line_width=line_width,
        elev=elev,
        azim=azim,
    )


def plot_group(
    group: Group,
    ax: Any | None = None,
    show: bool = True,
    equal: bool = True,
    title: str | None = None,
    line_width: float | None = None,
    elev: float = 90.0,
    azim: float = -90.0,
):
    plt = _require_matplotlib()
    if ax is None:
        fig = plt.figure()
        ax = fig.add_subplot(projection="3d")
        ax.view_init(elev=elev, azim=azim)

    for line in group:
        _draw_line(ax, line, line_width)

    if title:
        ax.set_title(title)
    if equal:
        _apply_equal_limits(ax, group)
    if show:
        plt.show()
    return ax


def _require_matplotlib():
    try:
        import matplotlib.pyplot as plt
    except Exception as exc:
        raise ImportError(
            "matplotlib is required for plotting. "
            "Install it with `pip install matplotlib`."
        ) from exc
    return plt


def _resolve_group(target: Any) -> Group:
    if isinstance(target, Group):
        return target
    if target is None:
        raise ValueError("nothing to plot: no line entities were drawn")
    if hasattr(target, "draw"):
        return _resolve_group(target.draw())
    if isinstance(target, dict):
        from .drawer import draw

        return _resolve_group(draw(target))
    raise TypeError("plot() expects a Group, Document, or parsed drawing mapping")


def _draw_line(ax, line: Line, line_width: float | None) -> None:
    material = line.material
    linestyle = "--" if material.is_dashed else "-"
    width = material.line_width if line_width is None else line_width
    for path in _segments_to_paths(line.world_segments()):
        ax.plot(
            path[:, 0],
            path[:, 1],
            path[:, 2],
            color=material.color,
            linestyle=linestyle,
            linewidth=width,
        )


def _segments_to_paths(segments) -> list[np.ndarray]:
    paths: list[list[np.ndarray]] = []
    for start, end in segments:
        if paths and np.allclose(paths[-1][-1], start):
            paths[-1].append(end)
        else:
            paths.append([start, end])
    return [np.array(path) for path in paths]


def _apply_equal_limits(ax, group: Group) -> None:
    points = [point for line in group for segment in line.world_segments() for point in segment]
    if not points:
        return
    stacked = np.array(points)
    lo = stacked.min(axis=0)
    hi = stacked.max(axis=0)
    span = float((hi - lo).max())
    if span <= 0:
        return
    center = (lo + hi) * 0.5
    half = span * 0.5
    ax.set_xlim(center[0] - half, center[0] + half)
    ax.set_ylim(center[1] - half, center[1] + half)
    ax.set_zlim(center[2] - half, center[2] + half)
