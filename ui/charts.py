"""PNG rendering of the bucket bar chart and category breakdown donut."""
from pathlib import Path
from typing import Iterable

from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from models.chart import Bucket
from models.summary import CategorySummary
from services.chart_service import bucket_keys
from utils.constants import UNKNOWN_CATEGORY_COLOR

BG = "#f4f4f4"
FG = "#444444"


def _style_ax(ax, fig):
    fig.patch.set_facecolor(BG)
    ax.set_facecolor(BG)
    ax.tick_params(colors=FG, labelsize=8)
    for spine in ax.spines.values():
        spine.set_edgecolor(FG)


def _no_data(ax, text: str):
    ax.text(0.5, 0.5, text, ha="center", va="center",
            transform=ax.transAxes, color="gray")
    ax.set_xticks([])
    ax.set_yticks([])


def _save(fig: Figure, path: str | Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    FigureCanvasAgg(fig)
    fig.savefig(path, dpi=100, facecolor=fig.get_facecolor())
    return path


def _axis_formatter(v, _):
    return f"{v/1000:.0f}k" if abs(v) >= 1000 else f"{v:.0f}"


def render_bucket_chart(
    buckets: list[Bucket],
    color_map: dict[str, str],
    path: str | Path,
    hidden: Iterable[str] = (),
) -> Path:
    """Stacked expense bars per category, one bar per bucket."""
    fig = Figure(figsize=(10, 4), tight_layout=True)
    ax = fig.add_subplot(111)
    _style_ax(ax, fig)

    keys = bucket_keys(buckets, hidden)
    if not buckets or not keys:
        _no_data(ax, "No data")
        return _save(fig, path)

    x = list(range(len(buckets)))
    bottoms = [0.0] * len(buckets)
    for key in keys:
        values = [b.per_category_expense.get(key, 0.0) for b in buckets]
        ax.bar(x, values, 0.6, bottom=bottoms, label=key,
               color=color_map.get(key, UNKNOWN_CATEGORY_COLOR))
        bottoms = [a + v for a, v in zip(bottoms, values)]

    labels = [b.label for b in buckets]
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45 if any("~" in s for s in labels) else 0, ha="right")
    ax.yaxis.set_major_formatter(_axis_formatter)
    ax.legend(fontsize=8, loc="upper left")
    return _save(fig, path)


def render_breakdown_pie(
    breakdown: list[CategorySummary], path: str | Path, title: str = ""
) -> Path:
    """Donut chart of a category breakdown."""
    fig = Figure(figsize=(4, 4), tight_layout=True)
    ax = fig.add_subplot(111)
    _style_ax(ax, fig)

    total = sum(s.amount for s in breakdown)
    if not breakdown or total == 0:
        _no_data(ax, "No data")
        return _save(fig, path)

    ax.pie(
        [s.amount for s in breakdown],
        colors=[s.color for s in breakdown],
        labels=[s.category for s in breakdown],
        startangle=90,
        wedgeprops={"width": 0.5},
        textprops={"fontsize": 8, "color": FG},
    )
    ax.set_aspect("equal")
    if title:
        ax.set_title(title, color=FG, fontsize=10)
    return _save(fig, path)
