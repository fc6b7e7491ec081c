"""
Correlation Heatmap

Renders a CorrelationMatrix as an interactive plotly heatmap. Both axes use
the matrix's column order; the y-axis is reversed so the diagonal runs from
the top-left corner and the computed lower triangle sits below it.
"""

from pathlib import Path
from typing import Optional, Union
import logging

import plotly.graph_objects as go

from credit_prep.components.correlation import CorrelationMatrix
from credit_prep.config.schema import HeatmapConfig


logger = logging.getLogger(__name__)


def build_heatmap(
    matrix: CorrelationMatrix,
    config: Optional[HeatmapConfig] = None,
) -> go.Figure:
    """Build the heatmap figure for a correlation matrix.

    Args:
        matrix: Matrix to plot; NaN cells are left blank.
        config: Title, size and colour scale. Defaults to HeatmapConfig().

    Returns:
        plotly Figure with a single Heatmap trace.
    """
    config = config or HeatmapConfig()

    fig = go.Figure(
        data=go.Heatmap(
            z=matrix.values,
            x=matrix.columns,
            y=matrix.columns,
            colorscale=config.colorscale,
            zmin=-1,
            zmax=1,
            zmid=0,
            hoverongaps=False,
            colorbar=dict(title="r"),
        )
    )
    fig.update_layout(
        title=config.title,
        width=config.width,
        height=config.height,
        xaxis=dict(tickangle=-45),
        yaxis=dict(autorange="reversed"),
    )
    return fig


def save_heatmap(fig: go.Figure, path: Union[str, Path]) -> Path:
    """Write a figure as a standalone HTML file.

    Args:
        fig: Figure to write.
        path: Output .html path; parent directories are created.

    Returns:
        Path written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.write_html(str(path), include_plotlyjs="cdn")
    logger.info("REPORT | Heatmap written to %s", path)
    return path
