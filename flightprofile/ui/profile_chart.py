"""ProfileChart - Plotly rendering of a projected elevation profile.

Draws a ProjectionState in its own pixel space:
- Sky background over the drawable area
- Terrain silhouette polygon
- Gray waypoint lines from the cruise line down to the ground
- Red rounded max elevation line, black/yellow cruise altitude line
- Waypoint idents and altitude labels
- Aircraft marker when the simulator is connected

The y axis is reversed so pixel coordinates can be used unchanged.
"""

import logging
from typing import Optional

import plotly.graph_objects as go

from flightprofile.constants import ChartConfig, ProfileConfig
from flightprofile.model.elevation_leg import ElevationLegList
from flightprofile.model.position import Position
from flightprofile.model.projection import ProjectionState

logger = logging.getLogger(__name__)


class ProfileChart:
    """Renders elevation profiles using Plotly.

    Example:
        chart = ProfileChart()
        leg_list, projection = controller.snapshot()
        fig = chart.render(projection=projection, leg_list=leg_list)
    """

    def __init__(
        self,
        width: int = ChartConfig.DEFAULT_WIDTH,
        height: int = ChartConfig.DEFAULT_HEIGHT,
    ) -> None:
        """Initialize profile chart renderer.

        Args:
            width: Fallback chart width in pixels (placeholder only)
            height: Fallback chart height in pixels (placeholder only)
        """
        self.width = width
        self.height = height

    def render(
        self,
        projection: Optional[ProjectionState],
        leg_list: ElevationLegList,
        aircraft: Optional[Position] = None,
        aircraft_distance_nm: Optional[float] = None,
    ) -> go.Figure:
        """Render the projected profile.

        Args:
            projection: Pixel geometry, None renders the placeholder
            leg_list: Profile the projection was built from (labels)
            aircraft: Aircraft position for the marker label
            aircraft_distance_nm: Aircraft along-route distance for the marker label

        Returns:
            Plotly Figure object.
        """
        if projection is None or leg_list.is_empty:
            return self.render_placeholder()

        x0 = ProfileConfig.LEFT_MARGIN_PX
        y0 = ProfileConfig.TOP_MARGIN_PX
        w = projection.width - x0 * 2
        h = projection.height - y0

        fig = go.Figure()
        self._configure_layout(fig=fig, width=projection.width, height=projection.height)
        fig.add_shape(
            type="rect",
            x0=x0,
            y0=0,
            x1=x0 + w,
            y1=h + y0,
            fillcolor=ChartConfig.SKY_COLOR,
            line=dict(width=0),
            layer="below",
        )

        for wpx in projection.waypoint_x:
            fig.add_shape(
                type="line",
                x0=wpx,
                y0=projection.flightplan_y,
                x1=wpx,
                y1=y0 + h,
                line=dict(color=ChartConfig.WAYPOINT_LINE_COLOR, width=2),
            )

        xs = [pt[0] for pt in projection.polygon]
        ys = [pt[1] for pt in projection.polygon]
        fig.add_trace(
            go.Scatter(
                x=xs,
                y=ys,
                fill="toself",
                fillcolor=ChartConfig.TERRAIN_COLOR,
                line=dict(color="black", width=1),
                mode="lines",
                name="Terrain",
                hoverinfo="skip",
            )
        )

        fig.add_shape(
            type="line",
            x0=x0,
            y0=projection.max_alt_y,
            x1=x0 + w,
            y1=projection.max_alt_y,
            line=dict(color=ChartConfig.MAX_ELEVATION_COLOR, width=4),
        )
        fig.add_shape(
            type="line",
            x0=x0,
            y0=projection.flightplan_y,
            x1=x0 + w,
            y1=projection.flightplan_y,
            line=dict(color=ChartConfig.FLIGHTPLAN_COLOR, width=6),
        )
        fig.add_shape(
            type="line",
            x0=x0,
            y0=projection.flightplan_y,
            x1=x0 + w,
            y1=projection.flightplan_y,
            line=dict(color=ChartConfig.FLIGHTPLAN_HIGHLIGHT_COLOR, width=2),
        )

        for waypoint, wpx in zip(leg_list.waypoints, projection.waypoint_x):
            fig.add_annotation(
                x=wpx,
                y=projection.flightplan_y + 18,
                text=f"<b>{waypoint.ident}</b>",
                showarrow=False,
                font=dict(size=10),
            )

        start_alt = leg_list.waypoints[0].altitude
        dest_alt = leg_list.waypoints[-1].altitude
        self._add_label(fig, x=x0 - 8, y=projection.start_alt_y, text=f"{start_alt:,.0f} ft", xanchor="right")
        self._add_label(fig, x=x0 + w + 4, y=projection.dest_alt_y, text=f"{dest_alt:,.0f} ft", xanchor="left")
        self._add_label(
            fig,
            x=x0 - 8,
            y=projection.max_alt_y + 5,
            text=f"{projection.max_route_elevation_ft:,.0f} ft",
            xanchor="right",
            color=ChartConfig.MAX_ELEVATION_COLOR,
        )
        self._add_label(
            fig,
            x=x0 - 8,
            y=projection.flightplan_y + 5,
            text=f"{projection.flightplan_alt_ft:,.0f} ft",
            xanchor="right",
        )

        if projection.aircraft_point is not None:
            acx, acy = projection.aircraft_point
            fig.add_trace(
                go.Scatter(
                    x=[acx],
                    y=[acy],
                    mode="markers",
                    marker=dict(symbol="triangle-right", size=16, color=ChartConfig.AIRCRAFT_COLOR),
                    name="Aircraft",
                    hoverinfo="skip",
                )
            )
            if aircraft is not None and aircraft.is_valid:
                lines = [f"{aircraft.altitude:.0f} ft"]
                if aircraft_distance_nm is not None:
                    lines.append(f"{aircraft_distance_nm:.0f} nm")
                self._add_label(fig, x=acx, y=acy + 20, text="<br>".join(lines), xanchor="center")

        return fig

    def render_placeholder(self, width: Optional[int] = None, height: Optional[int] = None) -> go.Figure:
        """Render the "No Route loaded." state."""
        width = width or self.width
        height = height or self.height
        x0 = ProfileConfig.LEFT_MARGIN_PX
        y0 = ProfileConfig.TOP_MARGIN_PX
        w = width - x0 * 2
        h = height - y0

        fig = go.Figure()
        self._configure_layout(fig=fig, width=width, height=height)
        fig.add_shape(
            type="rect",
            x0=x0,
            y0=0,
            x1=x0 + w,
            y1=h + y0,
            fillcolor=ChartConfig.SKY_COLOR,
            line=dict(width=0),
            layer="below",
        )
        self._add_label(fig, x=x0 + w / 4, y=y0 + h / 2, text=ProfileConfig.NO_ROUTE_TEXT, xanchor="left")
        return fig

    @staticmethod
    def _configure_layout(fig: go.Figure, width: int, height: int) -> None:
        fig.update_layout(
            width=width,
            height=height,
            showlegend=False,
            margin=dict(l=0, r=0, t=0, b=0),
            plot_bgcolor=ChartConfig.BACKGROUND_COLOR,
            xaxis=dict(range=[0, width], visible=False, fixedrange=True),
            yaxis=dict(range=[height, 0], visible=False, fixedrange=True),
        )

    @staticmethod
    def _add_label(
        fig: go.Figure,
        x: float,
        y: float,
        text: str,
        xanchor: str,
        color: str = "black",
    ) -> None:
        fig.add_annotation(
            x=x,
            y=y,
            text=f"<b>{text}</b>",
            showarrow=False,
            xanchor=xanchor,
            font=dict(color=color, size=11),
            bgcolor="white",
        )
