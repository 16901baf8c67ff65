"""
Visualisation
=============

Modules:
    - charts: Chart catalogue and PNG rendering
"""

from bikeshare.viz.charts import CHARTS, ChartSpec, get_chart_spec, render_chart

__all__ = [
    "CHARTS",
    "ChartSpec",
    "get_chart_spec",
    "render_chart",
]
