from __future__ import annotations

import plotly.graph_objects as go

from noteflow_api.task_rules import CATEGORY_COLORS
from noteflow_ui.constants import CATEGORY_LABELS, DUE_TONE_COLORS
from noteflow_ui.theme import get_active_theme, mood_palette


def style_figure(fig, title, height=300, grid_axis="y"):
    """Transparent background, theme text colours, grid lines only on grid_axis."""
    _, theme = get_active_theme()
    axis = {"zeroline": False, "gridcolor": theme["plot_grid"], "tickfont": {"color": theme["text_soft"]}}
    fig.update_layout(
        title={"text": title, "font": {"size": 16, "color": theme["text_main"]}},
        font={"color": theme["text_main"]},
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        margin={"l": 40, "r": 20, "t": 40, "b": 30},
        height=height,
        xaxis={**axis, "showgrid": grid_axis in ("x", "both")},
        yaxis={**axis, "showgrid": grid_axis in ("y", "both")},
    )
    return fig


def category_completion_chart(frame, mood):
    palette = mood_palette(mood)
    labels = [CATEGORY_LABELS.get(value, value) for value in frame["category"]]
    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=labels,
            y=frame["completed"],
            name="Completed",
            marker_color=palette["primary"],
        )
    )
    fig.add_trace(
        go.Bar(
            x=labels,
            y=frame["open"],
            name="Open",
            marker_color=[CATEGORY_COLORS.get(value, "#6B7280") for value in frame["category"]],
            opacity=0.45,
        )
    )
    fig.update_layout(barmode="stack", legend=dict(orientation="h", y=-0.2))
    return style_figure(fig, "Tasks by category")


def due_bucket_chart(frame):
    colors = [DUE_TONE_COLORS.get(bucket, "#9CA3AF") for bucket in frame["bucket"]]
    fig = go.Figure(
        go.Bar(
            x=[bucket.title() for bucket in frame["bucket"]],
            y=frame["tasks"],
            marker_color=colors,
            hovertemplate="%{x}: %{y} open<extra></extra>",
        )
    )
    return style_figure(fig, "Open tasks by due date")


def completion_donut(completed, total, mood):
    palette = mood_palette(mood)
    _, theme = get_active_theme()
    remaining = max(total - completed, 0)
    fig = go.Figure(
        go.Pie(
            values=[completed, remaining] if total else [0, 1],
            labels=["Done", "Open"],
            hole=0.7,
            marker=dict(colors=[palette["primary"], theme["plot_grid"]]),
            textinfo="none",
            sort=False,
        )
    )
    rate = round(completed / total * 100) if total else 0
    fig.update_layout(
        showlegend=False,
        annotations=[dict(text=f"{rate}%", x=0.5, y=0.5, showarrow=False, font=dict(size=26))],
    )
    return style_figure(fig, "Completion", height=260)
