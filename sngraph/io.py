"""Reading and writing the ``.sn`` sensor network text format.

Format (whitespace separated, one record per line)::

    <width> <length> <transmission_range>
    <packets_per_data_node> <storage_capacity>
    <node_count>
    <type> <x> <y> [values...]        (node_count lines)

``type`` is ``d`` (data), ``s`` (storage) or ``t`` (transition). A data line
carries either one shared packet value or exactly ``packets_per_data_node``
per-packet values; storage and transition lines carry nothing after ``y``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Sequence, Tuple, TypeVar, Union

from sngraph.errors import ConfigurationError, NetworkWriteError, ParseError
from sngraph.logging import get_logger
from sngraph.model.nodes import DataNode, NodeKind

if TYPE_CHECKING:
    from sngraph.model.network import SensorNetwork

LOGGER = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SnNodeRecord:
    """One node line of an ``.sn`` file."""

    kind: NodeKind
    x: float
    y: float
    values: Tuple[int, ...] = ()

    def packet_values(self, packets_per_node: int) -> List[int]:
        """Per-packet values, expanding a single shared value."""
        if len(self.values) == 1:
            return [self.values[0]] * packets_per_node
        return list(self.values)


@dataclass
class SnDocument:
    """Parsed contents of an ``.sn`` file."""

    width: float
    length: float
    transmission_range: float
    packets_per_node: int
    storage_capacity: int
    nodes: List[SnNodeRecord] = field(default_factory=list)


class _Reader:
    """Tokenizes lines and reports errors with the file and line number."""

    def __init__(self, path: Path, lines: Sequence[str]) -> None:
        self.path = path
        self.lines = lines
        self.line_no = 0

    def next_tokens(self, what: str) -> List[str]:
        if self.line_no >= len(self.lines):
            raise ConfigurationError(
                f"unexpected end of file, expected {what}",
                path=self.path,
                line=self.line_no + 1,
            )
        tokens = self.lines[self.line_no].split()
        self.line_no += 1
        return tokens

    def expect(self, tokens: List[str], count: int, what: str) -> None:
        if len(tokens) != count:
            raise ConfigurationError(
                f"expected {what} ({count} values), found {len(tokens)}",
                path=self.path,
                line=self.line_no,
            )

    def convert(self, token: str, cast: Callable[[str], T], what: str) -> T:
        try:
            return cast(token)
        except ValueError:
            raise ParseError(
                f"invalid {what} '{token}'", path=self.path, line=self.line_no
            ) from None

    def non_negative(self, value: Union[int, float], what: str) -> None:
        if value < 0:
            raise ConfigurationError(
                f"{what} must be non-negative, got {value}",
                path=self.path,
                line=self.line_no,
            )


def _parse_node(reader: _Reader, tokens: List[str], packets_per_node: int) -> SnNodeRecord:
    if len(tokens) < 3:
        raise ConfigurationError(
            f"invalid node line '{' '.join(tokens)}'", path=reader.path, line=reader.line_no
        )
    try:
        kind = NodeKind(tokens[0])
    except ValueError:
        raise ParseError(
            f"unknown node type '{tokens[0]}'", path=reader.path, line=reader.line_no
        ) from None

    x = reader.convert(tokens[1], float, "x coordinate")
    y = reader.convert(tokens[2], float, "y coordinate")
    values = tuple(reader.convert(tok, int, "packet value") for tok in tokens[3:])

    if kind is NodeKind.DATA:
        if len(values) not in (1, packets_per_node):
            raise ConfigurationError(
                f"data node needs 1 or {packets_per_node} packet values, "
                f"found {len(values)}",
                path=reader.path,
                line=reader.line_no,
            )
    elif values:
        raise ConfigurationError(
            f"'{kind.value}' node takes no values, found {len(values)}",
            path=reader.path,
            line=reader.line_no,
        )
    return SnNodeRecord(kind=kind, x=x, y=y, values=values)


def read_sn(path: Union[str, Path]) -> SnDocument:
    """Parse an ``.sn`` file.

    Raises:
        ConfigurationError: If the file is missing, empty, truncated, or has a
            malformed line or a wrong node count.
        ParseError: If a node type or numeric field cannot be interpreted.
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigurationError("file doesn't exist", path=path)
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except UnicodeDecodeError as exc:
        raise ConfigurationError(
            f"file is not valid UTF-8 text: {exc.reason}", path=path
        ) from exc
    except OSError as exc:
        raise ConfigurationError(f"cannot read file: {exc.strerror}", path=path) from exc
    if not any(line.strip() for line in lines):
        raise ConfigurationError("file is empty", path=path)

    reader = _Reader(path, lines)

    tokens = reader.next_tokens("width, length and transmission range")
    reader.expect(tokens, 3, "width, length and transmission range")
    width, length, transmission_range = (
        reader.convert(tok, float, name)
        for tok, name in zip(tokens, ("width", "length", "transmission range"))
    )

    tokens = reader.next_tokens("packets per node and storage capacity")
    reader.expect(tokens, 2, "packets per node and storage capacity")
    packets_per_node = reader.convert(tokens[0], int, "packets per node")
    storage_capacity = reader.convert(tokens[1], int, "storage capacity")
    reader.non_negative(packets_per_node, "packets per node")
    reader.non_negative(storage_capacity, "storage capacity")

    tokens = reader.next_tokens("node count")
    reader.expect(tokens, 1, "node count")
    node_count = reader.convert(tokens[0], int, "node count")
    reader.non_negative(node_count, "node count")

    document = SnDocument(
        width=width,
        length=length,
        transmission_range=transmission_range,
        packets_per_node=packets_per_node,
        storage_capacity=storage_capacity,
    )
    for index in range(node_count):
        tokens = reader.next_tokens(f"node line {index + 1} of {node_count}")
        document.nodes.append(_parse_node(reader, tokens, packets_per_node))

    for extra in lines[reader.line_no :]:
        reader.line_no += 1
        if extra.strip():
            raise ConfigurationError(
                f"unexpected content after {node_count} node lines",
                path=path,
                line=reader.line_no,
            )

    LOGGER.debug("Parsed '%s': %d nodes", path, node_count)
    return document


def format_sn(network: "SensorNetwork") -> List[str]:
    """Render ``network`` as ``.sn`` lines (without trailing newlines)."""
    lines = [
        "%f %f %f" % (network.width, network.length, network.transmission_range),
        "%d %d" % (network.packets_per_node, network.storage_capacity),
        "%d" % len(network.nodes),
    ]
    for node in network.nodes:
        line = "%s %f %f" % (node.kind.value, node.x, node.y)
        if isinstance(node, DataNode):
            if node.has_uniform_value():
                line += " %d" % node.overflow_packet_value
            else:
                line += " " + " ".join("%d" % v for v in node.packet_values)
        lines.append(line)
    return lines


def write_sn(network: "SensorNetwork", path: Union[str, Path]) -> None:
    """Save ``network`` to ``path`` in ``.sn`` format.

    Raises:
        NetworkWriteError: If the file cannot be created or written.
    """
    text = "\n".join(format_sn(network)) + "\n"
    try:
        with open(path, "w", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise NetworkWriteError(path, exc.strerror or str(exc)) from exc
    LOGGER.info("Saved sensor network in file '%s'", path)
