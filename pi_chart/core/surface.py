#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Drawing surfaces for the chart renderer.

The renderer only issues primitive commands in pixel coordinates (origin
top-left, y downwards). Two implementations are provided:
- MatplotlibSurface: rasterizes through the Agg backend and saves PNGs
- RecordingSurface: keeps the command list in memory (tests, JSON dumps)
"""
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import matplotlib
matplotlib.use("Agg")  # non-interactive backend
import matplotlib.pyplot as plt
from matplotlib.patches import Circle


class DrawingSurface:
    def clear(self, width: float, height: float) -> None:
        raise NotImplementedError

    def begin_path(self) -> None:
        raise NotImplementedError

    def move_to(self, x: float, y: float) -> None:
        raise NotImplementedError

    def line_to(self, x: float, y: float) -> None:
        raise NotImplementedError

    def stroke(self, color: str, width: float = 1.0) -> None:
        raise NotImplementedError

    def fill_circle(self, x: float, y: float, r: float, color: str,
                    outline: Optional[str] = None, outline_width: float = 0.0) -> None:
        raise NotImplementedError

    def fill_text(self, text: str, x: float, y: float, align: str = "left",
                  baseline: str = "alphabetic", color: str = "#000000", size: float = 11) -> None:
        raise NotImplementedError


@dataclass
class DrawCommand:
    op: str
    args: Dict[str, Any] = field(default_factory=dict)


class RecordingSurface(DrawingSurface):
    """Records every primitive; paths are flattened into one 'stroke' command with its points."""

    def __init__(self) -> None:
        self.commands: List[DrawCommand] = []
        self.width = 0.0
        self.height = 0.0
        self._path: List[Tuple[float, float]] = []

    def clear(self, width: float, height: float) -> None:
        self.commands = [DrawCommand("clear", {"width": width, "height": height})]
        self.width, self.height = width, height
        self._path = []

    def begin_path(self) -> None:
        self._path = []

    def move_to(self, x: float, y: float) -> None:
        self._path.append((x, y))

    def line_to(self, x: float, y: float) -> None:
        self._path.append((x, y))

    def stroke(self, color: str, width: float = 1.0) -> None:
        self.commands.append(DrawCommand("stroke", {"points": list(self._path), "color": color, "width": width}))

    def fill_circle(self, x, y, r, color, outline=None, outline_width=0.0) -> None:
        self.commands.append(DrawCommand("circle", {
            "x": x, "y": y, "r": r, "color": color, "outline": outline, "outline_width": outline_width,
        }))

    def fill_text(self, text, x, y, align="left", baseline="alphabetic", color="#000000", size=11) -> None:
        self.commands.append(DrawCommand("text", {
            "text": text, "x": x, "y": y, "align": align, "baseline": baseline, "color": color, "size": size,
        }))

    def of(self, op: str) -> List[DrawCommand]:
        return [c for c in self.commands if c.op == op]

    def to_dicts(self) -> List[Dict[str, Any]]:
        return [asdict(c) for c in self.commands]


# canvas-style alignment -> matplotlib
_HA = {"left": "left", "start": "left", "center": "center", "right": "right", "end": "right"}
_VA = {"top": "top", "middle": "center", "bottom": "bottom", "alphabetic": "baseline"}


class MatplotlibSurface(DrawingSurface):
    """One figure whose single axes spans the canvas in pixel units."""

    def __init__(self, dpi: int = 100, background: str = "#0b1411") -> None:
        self.dpi = dpi
        self.background = background
        self.fig = None
        self.ax = None
        self._xs: List[float] = []
        self._ys: List[float] = []

    def clear(self, width: float, height: float) -> None:
        self.close()
        self.fig = plt.figure(figsize=(width / self.dpi, height / self.dpi), dpi=self.dpi)
        self.fig.patch.set_facecolor(self.background)
        self.ax = self.fig.add_axes((0.0, 0.0, 1.0, 1.0))
        self.ax.set_xlim(0, width)
        self.ax.set_ylim(height, 0)  # pixel rows grow downwards
        self.ax.set_facecolor(self.background)
        self.ax.axis("off")

    def begin_path(self) -> None:
        self._xs, self._ys = [], []

    def move_to(self, x: float, y: float) -> None:
        # Disconnected sub-paths are separated by NaN
        if self._xs:
            self._xs.append(float("nan"))
            self._ys.append(float("nan"))
        self._xs.append(x)
        self._ys.append(y)

    def line_to(self, x: float, y: float) -> None:
        self._xs.append(x)
        self._ys.append(y)

    def stroke(self, color: str, width: float = 1.0) -> None:
        self._require()
        # canvas line widths are pixels, matplotlib's are points
        self.ax.plot(self._xs, self._ys, color=color, linewidth=width * 72.0 / self.dpi,
                     solid_capstyle="round")

    def fill_circle(self, x, y, r, color, outline=None, outline_width=0.0) -> None:
        self._require()
        self.ax.add_patch(Circle(
            (x, y), r, facecolor=color,
            edgecolor=outline or "none", linewidth=outline_width * 72.0 / self.dpi, zorder=5,
        ))

    def fill_text(self, text, x, y, align="left", baseline="alphabetic", color="#000000", size=11) -> None:
        self._require()
        self.ax.text(x, y, text, ha=_HA.get(align, "left"), va=_VA.get(baseline, "baseline"),
                     color=color, fontsize=size * 72.0 / self.dpi, family="monospace")

    def save(self, path: str | Path) -> Path:
        self._require()
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        self.fig.savefig(str(out), dpi=self.dpi, facecolor=self.fig.get_facecolor())
        return out

    def close(self) -> None:
        if self.fig is not None:
            plt.close(self.fig)
        self.fig, self.ax = None, None

    def _require(self) -> None:
        if self.ax is None:
            raise RuntimeError("MatplotlibSurface.clear() must be called before drawing")
