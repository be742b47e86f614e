# utils/charts.py
import pandas as pd
import plotly.express as px

from controllers.counter import CountSnapshot
from utils.formatting import STATUS_COLORS

KIND_COLORS = {
    "Teams": "#EA580C",     # orange-600
    "Projects": "#9333EA",  # purple-600
    "Tasks": "#16A34A",     # green-600
    "Users": "#2563EB",     # blue-600
}


def counts_df(snapshot: CountSnapshot) -> pd.DataFrame:
    return pd.DataFrame(
        [{"Collection": kind.title(), "Records": n} for kind, n in snapshot.as_dict().items()],
        columns=["Collection", "Records"],
    )


def build_counts_figure(snapshot: CountSnapshot):
    df = counts_df(snapshot)
    fig = px.bar(df, x="Collection", y="Records", color="Collection",
                 color_discrete_map=KIND_COLORS, text="Records")
    fig.update_layout(showlegend=False, margin=dict(l=20, r=20, t=10, b=30), height=260)
    fig.update_xaxes(title=None)
    fig.update_yaxes(title=None, rangemode="tozero")
    return fig


def build_status_figure(breakdown: pd.DataFrame):
    if breakdown.empty:
        return None
    fig = px.pie(breakdown, names="Status", values="Tasks", color="Status",
                 color_discrete_map=STATUS_COLORS, hole=0.45)
    fig.update_layout(margin=dict(l=10, r=10, t=10, b=10), height=240, legend_title_text="Status")
    return fig
