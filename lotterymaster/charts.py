"""
Plotly figures built from Statistics Engine output.

    trend_figure      : drawn value per period (number_statistics)
    frequency_figure  : count per number (frequency_distribution)
    gap_figure        : current vs average gap per number (number_statistics)
"""
import plotly.graph_objects as go

from .analysis import ZONE_STYLES


def _title(result: dict, kind: str) -> str:
    return f"{result['game']} {result['zone']} {kind} (last {result['period_count']} draws)"


def trend_figure(stats: dict) -> go.Figure:
    style = ZONE_STYLES[stats["zone"]]
    points = stats["trend"]
    fig = go.Figure(go.Scatter(
        x=[p.position for p in points],
        y=[p.value for p in points],
        mode="lines+markers",
        name=style["trend"],
        line=dict(color=style["color"], width=2),
        fill="tozeroy",
        fillcolor=style["fill"],
        hovertemplate="Draw %{x}<br>Number: %{y}<extra></extra>",
    ))
    fig.update_layout(
        title=_title(stats, "Trend"),
        xaxis_title="Draw",
        yaxis_title="Number",
        template="plotly_dark",
        height=400,
    )
    return fig


def frequency_figure(distribution: dict) -> go.Figure:
    style = ZONE_STYLES[distribution["zone"]]
    df = distribution["dataframe"]
    fig = go.Figure(go.Bar(
        x=df["number"],
        y=df["frequency"],
        marker_color=style["color"],
        hovertemplate="Number %{x}<br>Count: %{y}<extra></extra>",
    ))
    fig.update_layout(
        title=_title(distribution, "Frequency"),
        xaxis_title="Number",
        yaxis_title="Frequency",
        template="plotly_dark",
        height=400,
    )
    uniformity = distribution.get("uniformity")
    if uniformity:
        fig.add_annotation(x=0.02, y=0.98, xref="paper", yref="paper",
                           text=f"Chi-squared p = {uniformity['chi2_pvalue']:.4f}",
                           showarrow=False, font=dict(size=11))
    return fig


def gap_figure(stats: dict) -> go.Figure:
    df = stats["dataframe"]
    overdue = (df["average_gap"] > 0) & (df["current_gap"] > df["average_gap"])
    colors = ["#E74C3C" if flag else "#3498DB" for flag in overdue]

    fig = go.Figure()
    fig.add_trace(go.Bar(x=df["number"], y=df["current_gap"],
                         name="Current Gap", marker_color=colors))
    fig.add_trace(go.Scatter(x=df["number"], y=df["average_gap"],
                             mode="lines", name="Average Gap",
                             line=dict(color="#FFE66D", width=2)))
    fig.update_layout(title=_title(stats, "Current Gap vs Average Gap"),
                      xaxis_title="Number", yaxis_title="Draws",
                      template="plotly_dark", height=400,
                      barmode="overlay")
    return fig
