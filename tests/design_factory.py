"""In-memory test designs shared by the holdfix test suite."""
from types import SimpleNamespace
from typing import Iterable

from holdfix.domain.models.device import NodeKind
from holdfix.domain.models.netlist import Net, NetType
from holdfix.infrastructure.device.memory_topology import MemoryTopology
from holdfix.infrastructure.persistence.memory_route_store import MemoryRouteStore

# Node ids of the hold design
SRC = "SLICE_X0Y0/AQ"
OUT = "INT_X0Y0/LOGIC_OUTS_A"
QUAD_A = "INT_X1Y0/NN4_A"
IMUX_S2 = "INT_X5Y0/IMUX_S2"
S2_PIN = "SLICE_X5Y0/A1"
LONG_A = "INT_X1Y0/LONG_A"
QUAD_B = "INT_X4Y0/NN4_B"
IMUX_S1 = "INT_X6Y0/IMUX_S1"
S1_PIN = "SLICE_X6Y0/B1"

DETOURS = {
    "double": ("INT_X2Y0/EE2_A", NodeKind.DOUBLE),
    "long": ("INT_X3Y0/LONG_B", NodeKind.LONG),
    "bounce": ("INT_X0Y0/BOUNCE_A", NodeKind.BOUNCE),
}


def build_hold_design(detours: Iterable[str] = ("double", "long"),
                      with_local_net: bool = True,
                      with_clock_net: bool = True) -> SimpleNamespace:
    """Small design with one cross clock region net of two sinks.

    With the default weighting, sink S2 (SLICE_X5Y0.A1) measures 43 via a
    quad wire and sink S1 (SLICE_X6Y0.B1) measures 163 via a long line. The
    named detours are device edges from the driver entry to S2's fabric
    entry that are not part of the committed route.
    """
    topology = MemoryTopology()
    routes = MemoryRouteStore()

    src_site = topology.add_site("SLICE_X0Y0", 0, 0)
    s2_site = topology.add_site("SLICE_X5Y0", 1, 0)
    s1_site = topology.add_site("SLICE_X6Y0", 1, 0)

    topology.add_node(SRC, NodeKind.PIN_OUTPUT)
    topology.add_node(OUT, NodeKind.BOUNCE)
    topology.add_node(QUAD_A, NodeKind.QUAD)
    topology.add_node(IMUX_S2, NodeKind.PINFEED)
    topology.add_node(S2_PIN, NodeKind.PIN_INPUT)
    topology.add_node(LONG_A, NodeKind.LONG)
    topology.add_node(QUAD_B, NodeKind.QUAD)
    topology.add_node(IMUX_S1, NodeKind.PINFEED)
    topology.add_node(S1_PIN, NodeKind.PIN_INPUT)

    route = [
        topology.add_edge(SRC, OUT),
        topology.add_edge(OUT, QUAD_A),
        topology.add_edge(QUAD_A, IMUX_S2),
        topology.add_edge(IMUX_S2, S2_PIN),
        topology.add_edge(OUT, LONG_A),
        topology.add_edge(LONG_A, QUAD_B),
        topology.add_edge(QUAD_B, IMUX_S1),
        topology.add_edge(IMUX_S1, S1_PIN),
    ]
    for name in detours:
        node_id, kind = DETOURS[name]
        topology.add_node(node_id, kind)
        topology.add_edge(OUT, node_id)
        topology.add_edge(node_id, IMUX_S2)

    source = topology.add_pin(src_site, "AQ", SRC, is_output=True, fabric_entry=OUT)
    s2 = topology.add_pin(s2_site, "A1", S2_PIN, fabric_entry=IMUX_S2)
    s1 = topology.add_pin(s1_site, "B1", S1_PIN, fabric_entry=IMUX_S1)
    net = routes.add_net(Net("n_hold", source=source, sinks=[s1, s2]), route)

    design = SimpleNamespace(topology=topology, routes=routes, net=net,
                             source=source, s1=s1, s2=s2, local=None, clock=None)

    if with_local_net:
        dst_site = topology.add_site("SLICE_X1Y0", 0, 0)
        topology.add_node("SLICE_X0Y0/BQ", NodeKind.PIN_OUTPUT)
        topology.add_node("INT_X0Y0/LOGIC_OUTS_B", NodeKind.BOUNCE)
        topology.add_node("INT_X0Y0/EE1", NodeKind.SINGLE)
        topology.add_node("INT_X1Y0/IMUX_C1", NodeKind.PINFEED)
        topology.add_node("SLICE_X1Y0/C1", NodeKind.PIN_INPUT)
        local_route = [
            topology.add_edge("SLICE_X0Y0/BQ", "INT_X0Y0/LOGIC_OUTS_B"),
            topology.add_edge("INT_X0Y0/LOGIC_OUTS_B", "INT_X0Y0/EE1"),
            topology.add_edge("INT_X0Y0/EE1", "INT_X1Y0/IMUX_C1"),
            topology.add_edge("INT_X1Y0/IMUX_C1", "SLICE_X1Y0/C1"),
        ]
        local_source = topology.add_pin(src_site, "BQ", "SLICE_X0Y0/BQ", is_output=True,
                                        fabric_entry="INT_X0Y0/LOGIC_OUTS_B")
        local_sink = topology.add_pin(dst_site, "C1", "SLICE_X1Y0/C1", fabric_entry="INT_X1Y0/IMUX_C1")
        design.local = routes.add_net(Net("n_local", source=local_source, sinks=[local_sink]), local_route)

    if with_clock_net:
        bufg_site = topology.add_site("BUFGCE_X0Y0", 0, 0)
        topology.add_node("BUFGCE_X0Y0/O", NodeKind.PIN_OUTPUT)
        topology.add_node("SLICE_X5Y0/CLK", NodeKind.PIN_INPUT)
        clock_source = topology.add_pin(bufg_site, "O", "BUFGCE_X0Y0/O", is_output=True)
        clock_sink = topology.add_pin(s2_site, "CLK", "SLICE_X5Y0/CLK")
        design.clock = routes.add_net(Net("clk", source=clock_source, sinks=[clock_sink]))

    return design


def build_carry_design(with_alternate: bool = True) -> SimpleNamespace:
    """Carry chain net whose COUT also feeds a fabric routed sink.

    The fabric sink is driven through the alternate DMUX output, 23 long.
    """
    topology = MemoryTopology()
    routes = MemoryRouteStore()

    lower = topology.add_site("SLICE_X0Y1", 0, 0)
    upper = topology.add_site("SLICE_X0Y2", 0, 0)
    remote = topology.add_site("SLICE_X3Y1", 1, 0)

    topology.add_node("SLICE_X0Y1/COUT", NodeKind.PIN_OUTPUT)
    topology.add_node("SLICE_X0Y2/CIN", NodeKind.PIN_INPUT)
    topology.add_node("SLICE_X0Y1/DMUX", NodeKind.PIN_OUTPUT)
    topology.add_node("INT_X0Y1/LOGIC_OUTS_D", NodeKind.BOUNCE)
    topology.add_node("INT_X1Y1/EE2", NodeKind.DOUBLE)
    topology.add_node("INT_X3Y1/IMUX_A", NodeKind.PINFEED)
    topology.add_node("SLICE_X3Y1/A1", NodeKind.PIN_INPUT)

    route = [
        topology.add_edge("SLICE_X0Y1/COUT", "SLICE_X0Y2/CIN"),
        topology.add_edge("SLICE_X0Y1/DMUX", "INT_X0Y1/LOGIC_OUTS_D"),
        topology.add_edge("INT_X0Y1/LOGIC_OUTS_D", "INT_X1Y1/EE2"),
        topology.add_edge("INT_X1Y1/EE2", "INT_X3Y1/IMUX_A"),
        topology.add_edge("INT_X3Y1/IMUX_A", "SLICE_X3Y1/A1"),
    ]

    cout = topology.add_pin(lower, "COUT", "SLICE_X0Y1/COUT", is_output=True, dedicated=True)
    cin = topology.add_pin(upper, "CIN", "SLICE_X0Y2/CIN", dedicated=True)
    dmux = topology.add_pin(lower, "DMUX", "SLICE_X0Y1/DMUX", is_output=True,
                            fabric_entry="INT_X0Y1/LOGIC_OUTS_D")
    a1 = topology.add_pin(remote, "A1", "SLICE_X3Y1/A1", fabric_entry="INT_X3Y1/IMUX_A")
    topology.link_carry(cout, cin)

    net = routes.add_net(
        Net("carry", source=cout, sinks=[cin, a1],
            alternate_source=dmux if with_alternate else None, net_type=NetType.WIRE),
        route
    )
    return SimpleNamespace(topology=topology, routes=routes, net=net,
                           cout=cout, cin=cin, dmux=dmux, a1=a1)
