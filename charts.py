"""Donut, line and bar charts: geometry, hit-testing and drawing.

Coordinates are pixels with the origin at the top-left corner and y growing
downwards, the same frame pointer events arrive in. Angles follow that frame
too, so increasing angles run clockwise on screen and -pi/2 is 12 o'clock.

Drawing goes to a matplotlib Axes whose data limits are set to the pixel
frame, which keeps one data unit equal to one pixel.
"""
import math
import time
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle, Wedge

from utils import COLORS, format_currency

PAD = 20
DPI = 100
ANIMATION_SECONDS = 0.5
HOLE_RATIO = 0.5
BAR_FILL = 0.8
START_ANGLE = -math.pi / 2
MUTED = "#6b7280"


def progress(elapsed: float, duration: float) -> float:
    """Linear animation progress in [0, 1] after `elapsed` seconds."""
    if duration <= 0:
        return 1.0
    return max(0.0, min(elapsed / duration, 1.0))


def animate(draw, duration=ANIMATION_SECONDS, fps=60, clock=time.monotonic, sleep=time.sleep) -> int:
    """Call ``draw(p)`` once per frame until p reaches 1; returns the frame count."""
    start = clock()
    frames = 0
    while True:
        p = progress(clock() - start, duration)
        draw(p)
        frames += 1
        if p >= 1.0:
            return frames
        sleep(1.0 / fps)


@dataclass(frozen=True)
class Slice:
    label: str
    value: float
    color: str
    start: float
    end: float

    def swept(self, p: float) -> "Slice":
        return replace(self, end=self.start + (self.end - self.start) * p)


@dataclass(frozen=True)
class Point:
    x: float
    y: float
    value: float
    label: str


@dataclass(frozen=True)
class Bar:
    x: float
    y: float
    width: float
    height: float
    value: float
    label: str

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height


class Chart:
    empty_label = "No data"

    def __init__(self, width: float, height: float, symbol: str = '$'):
        self.width = float(width)
        self.height = float(height)
        self.symbol = symbol

    @property
    def total(self) -> float:
        raise NotImplementedError

    @property
    def is_empty(self) -> bool:
        return self.total == 0

    def hit_test(self, x: float, y: float):
        raise NotImplementedError

    def tooltip(self, x: float, y: float) -> Optional[str]:
        hit = None if self.is_empty else self.hit_test(x, y)
        if hit is None:
            return None
        return f"{hit.label}: {format_currency(hit.value, self.symbol)}"

    def render(self, ax, p: float = 1.0) -> None:
        ax.clear()
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)
        ax.set_axis_off()
        if self.is_empty:
            ax.text(self.width / 2, self.height / 2, self.empty_label,
                    ha='center', va='center', color=MUTED, fontsize=14)
            return
        self._draw(ax, p)

    def _draw(self, ax, p: float) -> None:
        raise NotImplementedError

    def figure(self, p: float = 1.0) -> Figure:
        fig = Figure(figsize=(self.width / DPI, self.height / DPI), dpi=DPI)
        FigureCanvasAgg(fig)
        ax = fig.add_axes((0, 0, 1, 1))
        self.render(ax, p)
        return fig

    def render_png(self, target, p: float = 1.0) -> None:
        """Write a frame (the final one by default) to a path or binary file."""
        self.figure(p).savefig(target, format='png', dpi=DPI)


class DonutChart(Chart):
    empty_label = "No expenses"

    def __init__(self, width, height, rollup: dict, symbol='$'):
        super().__init__(width, height, symbol)
        self.cx = self.width / 2
        self.cy = self.height / 2
        self.radius = max(min(self.cx, self.cy) - PAD, 1.0)
        self.inner = self.radius * HOLE_RATIO
        self.slices = self._layout(rollup)

    @staticmethod
    def _layout(rollup: dict) -> list[Slice]:
        total = sum(rollup.values())
        if total <= 0:
            return []
        slices = []
        start = START_ANGLE
        for idx, (label, value) in enumerate(rollup.items()):
            angle = value / total * math.pi * 2
            slices.append(Slice(label, float(value), COLORS[idx % len(COLORS)], start, start + angle))
            start += angle
        return slices

    @property
    def total(self) -> float:
        return sum(s.value for s in self.slices)

    def legend(self) -> list[tuple[str, str]]:
        return [(s.label, s.color) for s in self.slices]

    def frame(self, p: float) -> list[Slice]:
        return [s.swept(p) for s in self.slices]

    def hit_test(self, x, y) -> Optional[Slice]:
        dx = x - self.cx
        dy = y - self.cy
        r = math.hypot(dx, dy)
        if r < self.inner or r > self.radius:
            return None
        angle = math.atan2(dy, dx)
        # atan2 covers (-pi, pi]; slices run from -pi/2 to 3pi/2.
        if angle < START_ANGLE:
            angle += math.pi * 2
        for s in self.slices:
            if s.start <= angle < s.end:
                return s
        return None

    def _draw(self, ax, p):
        for s in self.frame(p):
            if s.end <= s.start:
                continue
            ax.add_patch(Wedge(
                (self.cx, self.cy), self.radius,
                math.degrees(s.start), math.degrees(s.end),
                width=self.radius - self.inner, facecolor=s.color, edgecolor='none',
            ))


class _SeriesChart(Chart):
    def __init__(self, width, height, series, symbol='$'):
        super().__init__(width, height, symbol)
        self.labels = [d.isoformat() if isinstance(d, date) else str(d) for d, _ in series]
        self.values = [float(v) for _, v in series]
        self.scale = max(self.values + [1.0])

    @property
    def total(self) -> float:
        return sum(self.values)

    def _height(self, value: float, p: float) -> float:
        return value * p / self.scale * (self.height - PAD * 2)


class LineChart(_SeriesChart):
    def points(self, p: float = 1.0) -> list[Point]:
        n = len(self.values)
        step = (self.width - PAD * 2) / (n - 1) if n > 1 else 0.0
        return [
            Point(PAD + i * step, self.height - PAD - self._height(v, p), v, self.labels[i])
            for i, v in enumerate(self.values)
        ]

    def hit_test(self, x, y=None) -> Optional[Point]:
        pts = self.points()
        if not pts:
            return None
        return min(pts, key=lambda pt: abs(x - pt.x))

    def _draw(self, ax, p):
        pts = self.points(p)
        ax.plot([pt.x for pt in pts], [pt.y for pt in pts], color=COLORS[0], linewidth=3)


class BarChart(_SeriesChart):
    def bars(self, p: float = 1.0) -> list[Bar]:
        if not self.values:
            return []
        slot = (self.width - PAD * 2) / len(self.values)
        out = []
        for i, v in enumerate(self.values):
            h = self._height(v, p)
            out.append(Bar(PAD + i * slot, self.height - PAD - h, slot * BAR_FILL, h, v, self.labels[i]))
        return out

    def hit_test(self, x, y) -> Optional[Bar]:
        for bar in self.bars():
            if bar.contains(x, y):
                return bar
        return None

    def _draw(self, ax, p):
        for bar in self.bars(p):
            ax.add_patch(Rectangle((bar.x, bar.y), bar.width, bar.height,
                                   facecolor=COLORS[0], edgecolor='none'))
