"""Command-line interface for sngraph."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

from sngraph.config import DEFAULT_GENERATION, DEFAULT_RADIO, GenerationConfig, load_config
from sngraph.errors import SensorNetworkError
from sngraph.flow.builders import FlowGranularity
from sngraph.logging import get_logger, level_from_flags, set_global_log_level
from sngraph.model.energy import RadioEnergyModel
from sngraph.model.network import SensorNetwork
from sngraph.model.nodes import DataNode, StorageNode

logger = get_logger(__name__)


def _format_table(headers: List[str], rows: List[List[Any]], min_width: int = 4) -> str:
    """Format rows as a simple ASCII table indented by three spaces."""
    if not rows:
        return ""

    all_data = [headers] + [[str(item) for item in row] for row in rows]
    col_widths = [
        max(min_width, max(len(row[i]) for row in all_data)) for i in range(len(headers))
    ]

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{item:<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(all_data[0])]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    lines.extend(format_row(row) for row in all_data[1:])
    return "\n".join(lines)


def _load_settings(config_path: Optional[Path]) -> Tuple[RadioEnergyModel, GenerationConfig]:
    if config_path is None:
        return RadioEnergyModel(DEFAULT_RADIO), DEFAULT_GENERATION
    radio, generation = load_config(config_path)
    logger.debug("Loaded configuration from %s: %s, %s", config_path, radio, generation)
    return RadioEnergyModel(radio), generation


def _load_network(
    path: Path,
    cost_model: RadioEnergyModel,
    packets: Optional[int] = None,
    capacity: Optional[int] = None,
) -> SensorNetwork:
    return SensorNetwork.from_file(
        path, overflow_packets=packets, storage_capacity=capacity, cost_model=cost_model
    )


def _print_summary(network: SensorNetwork, detail: bool = False) -> None:
    print("\nSENSOR NETWORK")
    print("-" * 30)
    print(f"   Field: {network.width:g} x {network.length:g} m")
    print(f"   Transmission range: {network.transmission_range:g} m")
    print(f"   Nodes: {network.sensor_node_count}")
    print(f"     Data: {network.data_node_count}")
    print(f"     Storage: {network.storage_node_count}")
    print(f"     Transition: {network.transition_node_count}")
    print(f"   Overflow packets: {network.total_demand()}")
    print(f"   Storage capacity: {network.total_capacity()}")
    print(f"   Connected: {'yes' if network.is_connected() else 'no'}")
    print(f"   Feasible: {'yes' if network.is_feasible() else 'no'}")

    if detail:
        rows = []
        for node in network.nodes:
            if isinstance(node, DataNode):
                extra = f"{node.overflow_packets} pkts @ {node.overflow_packet_value}"
            elif isinstance(node, StorageNode):
                extra = f"cap {node.capacity}"
            else:
                extra = ""
            rows.append(
                [
                    node.uuid,
                    node.name,
                    f"{node.x:.2f}",
                    f"{node.y:.2f}",
                    len(network.neighbors(node)),
                    extra,
                ]
            )
        print("\n   Nodes:")
        print(_format_table(["UUID", "Name", "X", "Y", "Degree", "Payload"], rows))


def _cmd_generate(args: argparse.Namespace, cost_model: RadioEnergyModel, config: GenerationConfig) -> None:
    network = SensorNetwork.generate(
        args.width,
        args.length,
        args.nodes,
        args.range,
        args.data_nodes,
        args.packets,
        args.storage_nodes,
        args.capacity,
        max_value=args.max_value,
        min_value=args.min_value,
        cost_model=cost_model,
        seed=args.seed,
        config=config,
    )
    _print_summary(network)
    if args.output is not None:
        network.save(args.output)
    if args.flow is not None:
        network.export_flow_network(args.flow, args.granularity)


def _cmd_inspect(args: argparse.Namespace, cost_model: RadioEnergyModel) -> None:
    network = _load_network(args.network, cost_model, args.packets, args.capacity)
    _print_summary(network, detail=args.detail)


def _cmd_export(args: argparse.Namespace, cost_model: RadioEnergyModel) -> None:
    network = _load_network(args.network, cost_model, args.packets, args.capacity)
    problem = network.export_flow_network(args.output, args.granularity)
    print(f"Flow network: {problem.node_count} nodes, {problem.arc_count} arcs")


def _cmd_path(args: argparse.Namespace, cost_model: RadioEnergyModel) -> None:
    network = _load_network(args.network, cost_model)
    try:
        src = network.get_node_by_name(args.source)
        dst = network.get_node_by_name(args.target)
    except KeyError as exc:
        logger.error(exc.args[0])
        sys.exit(1)
    path = network.min_cost_path(src, dst)
    print(" -> ".join(node.name for node in path))
    print(f"Cost: {network.min_cost(src, dst)}")


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {value}")
    return value


def _add_load_overrides(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--packets",
        type=_non_negative_int,
        default=None,
        help="Override overflow packets per data node",
    )
    parser.add_argument(
        "--capacity",
        type=_non_negative_int,
        default=None,
        help="Override storage node capacity",
    )


def _add_granularity(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--granularity",
        choices=[g.value for g in FlowGranularity],
        default=FlowGranularity.PACKET.value,
        help="One flow vertex per packet (default) or per data node",
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``sngraph`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="sngraph",
        description="Generate, inspect and export wireless sensor networks.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--quiet", action="store_true", help="Only log warnings and errors")
    parser.add_argument(
        "--config", type=Path, default=None, help="YAML file with radio/generation settings"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{generate,inspect,export,path}",
        help="Available commands",
    )

    gen_parser = subparsers.add_parser("generate", help="Generate a random network")
    gen_parser.add_argument("--width", type=float, required=True, help="Field width (m)")
    gen_parser.add_argument("--length", type=float, required=True, help="Field length (m)")
    gen_parser.add_argument("--nodes", type=int, required=True, help="Total node count")
    gen_parser.add_argument("--range", type=float, required=True, help="Transmission range (m)")
    gen_parser.add_argument("--data-nodes", type=int, required=True, help="Data node count")
    gen_parser.add_argument("--packets", type=int, required=True, help="Packets per data node")
    gen_parser.add_argument(
        "--storage-nodes", type=int, required=True, help="Storage node count"
    )
    gen_parser.add_argument("--capacity", type=int, required=True, help="Storage capacity")
    gen_parser.add_argument("--max-value", type=int, required=True, help="Max packet value")
    gen_parser.add_argument("--min-value", type=int, default=1, help="Min packet value")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    gen_parser.add_argument("--output", "-o", type=Path, default=None, help="Save as .sn file")
    gen_parser.add_argument("--flow", type=Path, default=None, help="Write DIMACS flow file")
    _add_granularity(gen_parser)

    inspect_parser = subparsers.add_parser("inspect", help="Summarize an .sn network")
    inspect_parser.add_argument("network", type=Path, help="Path to .sn file")
    inspect_parser.add_argument(
        "--detail", "-d", action="store_true", help="Show the node table"
    )
    _add_load_overrides(inspect_parser)

    export_parser = subparsers.add_parser("export", help="Export the min-cost flow problem")
    export_parser.add_argument("network", type=Path, help="Path to .sn file")
    export_parser.add_argument("output", type=Path, help="DIMACS output path")
    _add_granularity(export_parser)
    _add_load_overrides(export_parser)

    path_parser = subparsers.add_parser("path", help="Show the min-cost path between nodes")
    path_parser.add_argument("network", type=Path, help="Path to .sn file")
    path_parser.add_argument("source", help="Source node name, e.g. DN01")
    path_parser.add_argument("target", help="Target node name, e.g. SN01")

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)
    set_global_log_level(level_from_flags(args.verbose, args.quiet))

    try:
        cost_model, generation = _load_settings(args.config)
        if args.command == "generate":
            _cmd_generate(args, cost_model, generation)
        elif args.command == "inspect":
            _cmd_inspect(args, cost_model)
        elif args.command == "export":
            _cmd_export(args, cost_model)
        elif args.command == "path":
            _cmd_path(args, cost_model)
    except SensorNetworkError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        sys.exit(1)


if __name__ == "__main__":
    main()
