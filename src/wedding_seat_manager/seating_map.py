"""Interactive seating map built with networkx and pyvis."""
from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

import networkx as nx
from pyvis.network import Network

from .models import TABLE_CAPACITY, Table, TableStatus, occupancy, status_label

PRESENT_COLOR = "#3CB371"
ABSENT_COLOR = "#FF6B6B"
EMPTY_SEAT_COLOR = "#555555"
STATUS_COLOR = {
    TableStatus.EMPTY: "#C23B22",
    TableStatus.IN_PROGRESS: "#779ECB",
    TableStatus.COMPLETE: "#77DD77",
}

# ---------------------------
# Public API
# ---------------------------

def build_seating_graph(
    tables: Sequence[Table],
    layout: str = "round",
    show_empty_seats: bool = False,
    canvas_size: Tuple[int, int] = (1600, 1000),
) -> nx.Graph:
    """
    Build a graph with one node per table and one per shown seat.

    Seat nodes are placed around their table and linked to it. Guests are
    coloured by presence; tables by occupancy status.
    """
    width, height = canvas_size
    centers = _compute_table_centers([t.id for t in tables], width, height)

    G = nx.Graph()
    for table in tables:
        cx, cy = centers[table.id]
        status = status_label(table)
        G.add_node(
            f"table:{table.id}",
            label=table.label,
            title=f"<b>{table.label}</b><br>{occupancy(table)}/{TABLE_CAPACITY} seated<br>{status.value}",
            color=STATUS_COLOR[status],
            x=cx,
            y=cy,
            physics=False,
            shape="box",
        )

        seats = [s for s in table.seats if show_empty_seats or s.is_assigned]
        coords = _seat_coordinates(cx, cy, len(seats), layout)
        for seat, (x, y) in zip(seats, coords):
            node_id = f"seat:{seat.id}"
            if seat.is_assigned:
                color = PRESENT_COLOR if seat.status == "present" else ABSENT_COLOR
                label = seat.guest_name
            else:
                color = EMPTY_SEAT_COLOR
                label = f"Seat {seat.seat_no}"
            G.add_node(
                node_id,
                label=label,
                title=_node_tooltip(seat.guest_name, table.label, seat.seat_no, seat.status),
                color=color,
                x=x,
                y=y,
                physics=False,
                shape="dot",
                size=14,
            )
            G.add_edge(f"table:{table.id}", node_id, color="#A9A9A9", width=1)
    return G


def generate_seating_map(tables: Sequence[Table], **kwargs) -> str:
    """Return the seating map as a standalone HTML string."""
    G = build_seating_graph(tables, **kwargs)
    net = Network(height="700px", width="100%", bgcolor="#111111", font_color="#EEEEEE")
    net.toggle_physics(False)  # positions are fixed
    net.from_nx(G)
    return _inject_legend_html(net.generate_html())

# ---------------------------
# Internals
# ---------------------------

def _compute_table_centers(table_ids: List[str], width: int, height: int) -> Dict[str, Tuple[int, int]]:
    """
    Place table centers on a grid inside the canvas area.
    """
    if not table_ids:
        return {}
    n = len(table_ids)
    cols = max(1, int(math.ceil(math.sqrt(n))))
    rows = int(math.ceil(n / cols))
    margin = 120
    step_x = max(1, width - 2 * margin) // cols
    step_y = max(1, height - 2 * margin) // rows

    centers: Dict[str, Tuple[int, int]] = {}
    for idx, table_id in enumerate(table_ids):
        r, c = divmod(idx, cols)
        centers[table_id] = (margin + c * step_x + step_x // 2, margin + r * step_y + step_y // 2)
    return centers


def _seat_coordinates(cx: int, cy: int, n: int, layout: str) -> List[Tuple[int, int]]:
    if n == 0:
        return []
    if layout == "rectangle":
        # Two long sides facing each other
        per_side = int(math.ceil(n / 2))
        spacing = 36
        left = cx - (per_side - 1) * spacing // 2
        pts = [(left + i * spacing, cy - 50) for i in range(per_side)]
        pts += [(left + i * spacing, cy + 50) for i in range(n - per_side)]
        return pts
    r = 70
    pts = []
    for i in range(n):
        theta = 2 * math.pi * i / n
        pts.append((int(cx + r * math.cos(theta)), int(cy + r * math.sin(theta))))
    return pts


def _node_tooltip(name, table: str, seat_no: str, status: str) -> str:
    if not name:
        return f"Seat {seat_no}<br>Table: {table}<br>Unassigned"
    return (
        f"<b>{name}</b><br>"
        f"Table: {table}<br>"
        f"Seat: {seat_no}<br>"
        f"Status: {status}"
    )


def _inject_legend_html(html: str) -> str:
    css = """
    <style>
    .legend-box{
      position:absolute;right:12px;bottom:12px;
      background:#222;color:#eee;border:1px solid #444;border-radius:8px;
      padding:8px 12px;font-family:system-ui, -apple-system, Segoe UI, Roboto, Arial;font-size:12px;
      z-index:10;
    }
    .legend-swatch{display:inline-block;width:12px;height:12px;margin-right:6px;vertical-align:middle;border:1px solid #444;}
    </style>
    """
    legend = f"""
    {css}
    <div class="legend-box">
      <div><span class="legend-swatch" style="background:{PRESENT_COLOR}"></span>present</div>
      <div><span class="legend-swatch" style="background:{ABSENT_COLOR}"></span>absent</div>
      <div><span class="legend-swatch" style="background:{STATUS_COLOR[TableStatus.COMPLETE]}"></span>full table</div>
      <div><span class="legend-swatch" style="background:{STATUS_COLOR[TableStatus.IN_PROGRESS]}"></span>filling</div>
      <div><span class="legend-swatch" style="background:{STATUS_COLOR[TableStatus.EMPTY]}"></span>empty table</div>
    </div>
    """
    return html.replace("</body>", legend + "</body>", 1)
