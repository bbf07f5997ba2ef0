# visualization/plot_generator.py
import plotly.graph_objects as go
import folium
from typing import List, Optional, Tuple
import logging
import html

from config import config
from data.models import ChartSeries, FloatDataset, FloatRecord, Found
from search.series_extractor import series_to_frame
from utils.helpers import ArgoHelpers
from .view_binding import ViewState

logger = logging.getLogger(__name__)

FIELD_LABELS = {
    'temperature': 'Temperature (°C)',
    'salinity': 'Salinity (PSU)',
}

FIELD_COLORS = {
    'temperature': '#d62728',
    'salinity': '#1f77b4',
}


class FloatPlotGenerator:
    def __init__(self):
        self.template = config.get('visualization.default_theme', 'plotly_white')
        self.height = int(config.get('visualization.plot_height', 450))
        self.default_center = tuple(config.get('map.default_center', [0.0, 0.0]))
        self.default_zoom = int(config.get('map.default_zoom', 2))
        self.marker_radius = int(config.get('map.marker_radius', 5))
        self.marker_color = config.get('map.marker_color', 'red')
        self.highlight_color = config.get('map.highlight_color', 'blue')

    def create_profile_plot(self, series: ChartSeries, field: str, float_id: Optional[str] = None) -> go.Figure:
        """Field value against depth, surface at the top"""
        label = FIELD_LABELS[field]
        if not series:
            return self._create_empty_plot(f"No {field} data available")

        df = series_to_frame(series, 'pressure', field)

        fig = go.Figure(
            go.Scatter(
                x=df[field],
                y=df['pressure'],
                mode='lines+markers',
                name=label,
                line=dict(color=FIELD_COLORS[field], width=2),
                marker=dict(size=5)
            )
        )

        title = f"{label} vs Depth"
        if float_id:
            title = f"Float {float_id}: {title}"

        fig.update_layout(
            title=title,
            xaxis_title=label,
            yaxis_title="Pressure (dbar)",
            yaxis=dict(autorange='reversed'),
            height=self.height,
            template=self.template
        )
        return fig

    def create_time_series_plot(self, series: ChartSeries, field: str, float_id: Optional[str] = None) -> go.Figure:
        """Surface value of a float over time"""
        label = FIELD_LABELS[field]
        if not series:
            return self._create_empty_plot(f"No {field} time series available")

        df = series_to_frame(series, 'sample_time', field)

        fig = go.Figure(
            go.Scatter(
                x=df['sample_time'],
                y=df[field],
                mode='lines+markers',
                name=label,
                line=dict(color=FIELD_COLORS[field], width=2),
                marker=dict(size=4)
            )
        )

        title = f"{label} over Time"
        if float_id:
            title = f"Float {float_id}: {title}"

        fig.update_layout(
            title=title,
            xaxis_title="Date",
            yaxis_title=label,
            height=self.height,
            template=self.template
        )
        return fig

    def create_float_map(self, dataset: Optional[FloatDataset], view_state: Optional[ViewState] = None) -> folium.Map:
        """One circle marker per record, the searched float highlighted"""
        view_state = view_state or ViewState()
        markers = self.build_markers(dataset, view_state)
        if not markers:
            return self._create_empty_map(self.default_center)

        focus = view_state.focus

        m = folium.Map(
            location=list(focus.center) if focus else list(self.default_center),
            zoom_start=focus.zoom if focus else self.default_zoom,
            tiles='OpenStreetMap',
            control_scale=True
        )

        for float_id, record, highlighted in markers:
            self._add_record_marker(m, float_id, record, highlighted)

        if focus is None:
            bounds = [[record.latitude, record.longitude] for _, record, _ in markers]
            m.fit_bounds(bounds)

        return m

    def build_markers(self, dataset: Optional[FloatDataset],
                      view_state: Optional[ViewState] = None) -> List[Tuple[str, FloatRecord, bool]]:
        """(float id, record, highlighted) for every record with coordinates.

        Only the record the lookup matched is highlighted.
        """
        result = view_state.result if view_state else None
        target = result.record if isinstance(result, Found) else None

        markers = []
        for float_id, records in (dataset or {}).items():
            for record in records:
                if record.latitude is None or record.longitude is None:
                    continue
                highlighted = (
                    target is not None
                    and record is target
                    and float_id == view_state.highlighted_id
                )
                markers.append((float_id, record, highlighted))
        return markers

    def _add_record_marker(self, map_obj: folium.Map, float_id: str, record: FloatRecord, highlighted: bool):
        color = self.highlight_color if highlighted else self.marker_color
        folium.CircleMarker(
            location=[record.latitude, record.longitude],
            radius=self.marker_radius * 2 if highlighted else self.marker_radius,
            color=color,
            fill=True,
            fillColor=color,
            fillOpacity=0.8,
            popup=folium.Popup(self.create_record_popup(float_id, record), max_width=400),
            tooltip=html.escape(f"Float {float_id}")
        ).add_to(map_obj)

    def create_record_popup(self, float_id: str, record: FloatRecord) -> str:
        """Popup HTML with the location and the depth-wise measurement table"""
        popup_parts = [
            f"<b>Argo ID:</b> {html.escape(str(float_id))}",
            f"<b>Lat:</b> {ArgoHelpers.format_coordinate(record.latitude)}",
            f"<b>Lng:</b> {ArgoHelpers.format_coordinate(record.longitude)}",
        ]
        if record.sample_time is not None:
            popup_parts.append(f"<b>Time:</b> {record.sample_time:%Y-%m-%d %H:%M}")

        rows = []
        for depth_label, sample in record.samples():
            rows.append(
                "<tr>"
                f"<td>{html.escape(depth_label)}</td>"
                f"<td>{ArgoHelpers.format_value(sample.pressure, 1)}</td>"
                f"<td>{ArgoHelpers.format_value(sample.temperature)}</td>"
                f"<td>{ArgoHelpers.format_value(sample.salinity)}</td>"
                "</tr>"
            )

        table = (
            '<table style="font-size: 12px; border-collapse: collapse; width: 100%">'
            "<thead><tr>"
            "<th>Depth</th><th>Pressure (dbar)</th><th>Temp (°C)</th><th>Salinity (PSU)</th>"
            "</tr></thead>"
            f"<tbody>{''.join(rows)}</tbody>"
            "</table>"
        )

        return (
            '<div style="max-height: 200px; overflow-y: auto">'
            + "<br>".join(popup_parts)
            + "<hr><b>Depth-wise measurements:</b>"
            + table
            + "</div>"
        )

    def _create_empty_map(self, center: Tuple[float, float] = (0, 0)) -> folium.Map:
        """Create empty map with informative message"""
        m = folium.Map(location=list(center), zoom_start=self.default_zoom, tiles='OpenStreetMap')

        folium.Marker(
            list(center),
            icon=folium.DivIcon(html='<div style="color: red; font-size: 16px;">No data available</div>')
        ).add_to(m)

        return m

    def _create_empty_plot(self, message: str = "No data available") -> go.Figure:
        """Create empty plot with message"""
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper", yref="paper",
            x=0.5, y=0.5, xanchor='center', yanchor='middle',
            showarrow=False,
            font=dict(size=16, color="red")
        )
        fig.update_layout(
            plot_bgcolor='white',
            height=self.height,
            xaxis=dict(showgrid=False, zeroline=False, showticklabels=False),
            yaxis=dict(showgrid=False, zeroline=False, showticklabels=False)
        )
        return fig
