"""
Design snapshot serialization.

A snapshot holds the routing resource graph, placed site pins, nets and the
edges committed to each net. Files ending in ``.gz`` are gzip compressed.

Layout::

    {
      "format": "holdfix design",
      "version": "1.0",
      "design": "top",
      "nodes": [{"id": "INT_X0Y0/SS1", "kind": "single", "length": 1}, ...],
      "edges": [["INT_X0Y0/SS1", "INT_X0Y1/NN2"], ...],
      "sites": [{"name": "SLICE_X0Y0", "clock_region": [0, 0]}, ...],
      "pins": [{"site": "SLICE_X0Y0", "name": "AQ", "node": "...", "output": true,
                "fabric_entry": "...", "dedicated": false}, ...],
      "carry_links": [["SLICE_X0Y0.COUT", "SLICE_X0Y1.CIN"]],
      "nets": [{"name": "n1", "type": "wire", "source": "SLICE_X0Y0.AQ",
                "alternate_source": null, "sinks": ["SLICE_X1Y0.A1"],
                "route": [["a", "b"], ...]}]
    }
"""

import gzip
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Union

from ..domain.models.device import NodeKind, SitePin
from ..domain.models.netlist import Net, NetType
from ..shared.exceptions import DesignLoadError, ValidationError
from .device.memory_topology import MemoryTopology
from .persistence.memory_route_store import MemoryRouteStore

logger = logging.getLogger(__name__)

SNAPSHOT_FORMAT = "holdfix design"
SNAPSHOT_VERSION = "1.0"


@dataclass
class DesignSnapshot:
    """A loaded design: topology plus nets and their committed routes."""
    name: str
    topology: MemoryTopology
    routes: MemoryRouteStore


def load_design(path: Union[str, Path]) -> DesignSnapshot:
    """Load a design snapshot.

    Raises:
        DesignLoadError: If the file cannot be read or is inconsistent
    """
    path = Path(path)
    try:
        opener = gzip.open if path.suffix == ".gz" else open
        with opener(path, 'rt', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise DesignLoadError(f"Cannot read design snapshot: {e}", file_path=str(path)) from e

    if data.get("format") != SNAPSHOT_FORMAT:
        raise DesignLoadError(f"Not a design snapshot (format={data.get('format')!r})",
                              file_path=str(path))
    if data.get("version") != SNAPSHOT_VERSION:
        logger.warning(f"Snapshot version {data.get('version')} differs from {SNAPSHOT_VERSION}")

    try:
        snapshot = design_from_dict(data)
    except (KeyError, ValueError, TypeError, ValidationError) as e:
        raise DesignLoadError(f"Inconsistent design snapshot: {e}", file_path=str(path)) from e

    logger.info(f"Loaded design {snapshot.name}: {len(snapshot.topology.nodes)} nodes, "
                f"{len(snapshot.routes.nets())} nets")
    return snapshot


def design_from_dict(data: Dict[str, Any]) -> DesignSnapshot:
    topology = MemoryTopology()
    for node in data.get("nodes", []):
        topology.add_node(node["id"], NodeKind(node["kind"]), node.get("length"))
    for start, end in data.get("edges", []):
        topology.add_edge(start, end)
    for site in data.get("sites", []):
        column, row = site["clock_region"]
        topology.add_site(site["name"], column, row)

    pins: Dict[str, SitePin] = {}
    for pin in data.get("pins", []):
        site_pin = topology.add_pin(
            topology.sites[pin["site"]], pin["name"], pin["node"],
            is_output=pin.get("output", False),
            fabric_entry=pin.get("fabric_entry"),
            dedicated=pin.get("dedicated", False)
        )
        pins[site_pin.full_name] = site_pin
    for carry_out, carry_in in data.get("carry_links", []):
        topology.link_carry(pins[carry_out], pins[carry_in])

    routes = MemoryRouteStore()
    for net in data.get("nets", []):
        source = pins[net["source"]] if net.get("source") else None
        alternate = pins[net["alternate_source"]] if net.get("alternate_source") else None
        edges = [topology.add_edge(start, end) for start, end in net.get("route", [])]
        routes.add_net(
            Net(
                name=net["name"],
                source=source,
                sinks=[pins[name] for name in net.get("sinks", [])],
                alternate_source=alternate,
                net_type=NetType(net.get("type", "wire"))
            ),
            edges
        )

    return DesignSnapshot(data.get("design", "design"), topology, routes)


def design_to_dict(snapshot: DesignSnapshot) -> Dict[str, Any]:
    topology = snapshot.topology
    pins: Dict[str, SitePin] = {}
    for net in snapshot.routes.nets():
        for pin in [net.source, net.alternate_source] + list(net.sinks):
            if pin is not None:
                pins[pin.full_name] = pin
    for carry_out, carry_in in topology.carry_links().items():
        pins[carry_out.full_name] = carry_out
        pins[carry_in.full_name] = carry_in

    def edge_list(edges) -> List[List[str]]:
        return sorted([edge.start, edge.end] for edge in edges)

    return {
        "format": SNAPSHOT_FORMAT,
        "version": SNAPSHOT_VERSION,
        "timestamp": datetime.now().isoformat(),
        "design": snapshot.name,
        "nodes": [
            {"id": node.id, "kind": node.kind.value, "length": node.length}
            for node in sorted(topology.nodes.values(), key=lambda n: n.id)
        ],
        "edges": edge_list(topology.edges),
        "sites": [
            {"name": site.name, "clock_region": [site.clock_region.column, site.clock_region.row]}
            for site in sorted(topology.sites.values(), key=lambda s: s.name)
        ],
        "pins": [
            {
                "site": pin.site.name,
                "name": pin.name,
                "node": pin.node_id,
                "output": pin.is_output,
                "fabric_entry": topology.fabric_entry_id(pin),
                "dedicated": pin.dedicated,
            }
            for pin in sorted(pins.values(), key=lambda p: p.full_name)
        ],
        "carry_links": sorted(
            [carry_out.full_name, carry_in.full_name]
            for carry_out, carry_in in topology.carry_links().items()
        ),
        "nets": [
            {
                "name": net.name,
                "type": net.net_type.value,
                "source": net.source.full_name if net.source else None,
                "alternate_source": net.alternate_source.full_name if net.alternate_source else None,
                "sinks": [sink.full_name for sink in net.sinks],
                "route": edge_list(snapshot.routes.committed_edges(net)),
            }
            for net in snapshot.routes.nets()
        ],
    }


def save_design(snapshot: DesignSnapshot, path: Union[str, Path]) -> None:
    """Write a design snapshot, gzip compressed when the path ends in .gz."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    opener = gzip.open if path.suffix == ".gz" else open
    with opener(path, 'wt', encoding='utf-8') as f:
        json.dump(design_to_dict(snapshot), f, indent=1)
    logger.info(f"Wrote design {snapshot.name} to {path}")
