"""Decomposition of routed nets into point-to-point connections."""
import logging
from typing import Dict, Optional

from ..models.connection import Connection, NetWrapper
from ..models.device import ResourceNode, SitePin
from ..models.netlist import Net
from ...application.interfaces.route_accessor import RouteAccessor
from ...application.interfaces.topology_oracle import TopologyOracle
from ...shared.exceptions import NetModelError

logger = logging.getLogger(__name__)


class NetWrapperBuilder:
    """Builds a fresh NetWrapper each time a net's connections are enumerated."""

    def __init__(self, oracle: TopologyOracle, routes: RouteAccessor):
        self.oracle = oracle
        self.routes = routes
        self._next_wrapper_id = 0
        self._next_connection_id = 0

    def build(self, net: Net) -> NetWrapper:
        """Create one connection per sink pin of the net.

        Raises:
            NetModelError: A dedicated carry output feeds a fabric sink and
                the net has no alternate source, or the driver cannot be
                projected onto the fabric.
        """
        wrapper = NetWrapper(self._next_wrapper_id, net)
        self._next_wrapper_id += 1

        primary = self.routes.source_pin(net)
        if primary is None:
            raise NetModelError(f"Net {net.name} has no source pin", net_id=net.name)

        # Fabric entry of each effective driver, resolved once per net
        driver_entries: Dict[SitePin, Optional[ResourceNode]] = {}

        for sink in self.routes.sink_pins(net):
            source = self._effective_driver(net, primary, sink)
            connection = Connection(self._next_connection_id, source, sink, wrapper)
            self._next_connection_id += 1

            sink_entry = self.oracle.fabric_entry_for(sink)
            if sink_entry is None:
                # Dedicated wiring, e.g. COUT -> CIN within a carry chain
                connection.direct = True
            else:
                if source not in driver_entries:
                    driver_entries[source] = self.oracle.fabric_entry_for(source)
                source_entry = driver_entries[source]
                if source_entry is None:
                    raise NetModelError(
                        f"Driver {source} of net {net.name} has no fabric entry "
                        f"but sink {sink} is fabric routed",
                        net_id=net.name, pin=source.full_name
                    )
                connection.source_node = self.oracle.get_or_create_entry(source_entry, exclusive_source=True)
                connection.sink_node = self.oracle.get_or_create_entry(sink_entry)
                connection.direct = False

            wrapper.add_connection(connection)

        logger.debug(f"Net {net.name}: {len(wrapper.connections)} connections, "
                     f"{len(wrapper.routable_connections)} fabric routed")
        return wrapper

    def _effective_driver(self, net: Net, primary: SitePin, sink: SitePin) -> SitePin:
        if not self.oracle.requires_alternate_source(primary, sink):
            return primary
        alternate = self.routes.alternate_source_pin(net)
        if alternate is None:
            raise NetModelError(
                f"Null alternate source for carry-out connection {primary} -> {sink} "
                f"of net {net.name}",
                net_id=net.name, pin=primary.full_name
            )
        return alternate
