"""Domain model for the exported metadata graph."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .ids import node_id


class NodeType(str, Enum):
    """Kinds of metadata objects represented as graph nodes."""

    CONFIGURATION = "CONFIGURATION"
    CATALOG = "CATALOG"
    DOCUMENT = "DOCUMENT"
    ENUM = "ENUM"
    CONSTANT = "CONSTANT"
    REGISTER = "REGISTER"
    BUSINESS_PROCESS = "BUSINESS_PROCESS"
    TASK = "TASK"
    COMMON_MODULE = "COMMON_MODULE"
    COMMAND_GROUP = "COMMAND_GROUP"
    COMMAND = "COMMAND"
    ATTRIBUTE = "ATTRIBUTE"
    DIMENSION = "DIMENSION"
    RESOURCE = "RESOURCE"
    FORM = "FORM"
    TABLE = "TABLE"
    QUERY = "QUERY"
    REPORT = "REPORT"
    DATA_PROCESSOR = "DATA_PROCESSOR"
    EXTERNAL_DATA_SOURCE = "EXTERNAL_DATA_SOURCE"
    EXCHANGE_PLAN = "EXCHANGE_PLAN"
    CHART_OF_ACCOUNTS = "CHART_OF_ACCOUNTS"
    CHART_OF_CHARACTERISTIC_TYPES = "CHART_OF_CHARACTERISTIC_TYPES"
    CHART_OF_CALCULATION_TYPES = "CHART_OF_CALCULATION_TYPES"
    FILTER_CRITERION = "FILTER_CRITERION"
    INFORMATION_REGISTER = "INFORMATION_REGISTER"
    ACCUMULATION_REGISTER = "ACCUMULATION_REGISTER"
    ACCOUNTING_REGISTER = "ACCOUNTING_REGISTER"
    CALCULATION_REGISTER = "CALCULATION_REGISTER"
    DOCUMENT_JOURNAL = "DOCUMENT_JOURNAL"
    ROLE = "ROLE"
    SUBSYSTEM = "SUBSYSTEM"
    LANGUAGE = "LANGUAGE"
    STYLE_ITEM = "STYLE_ITEM"
    STYLE = "STYLE"
    ACCOUNTING_FLAG = "ACCOUNTING_FLAG"
    BOT = "BOT"
    COLUMN = "COLUMN"
    COMMON_ATTRIBUTE = "COMMON_ATTRIBUTE"
    COMMON_COMMAND = "COMMON_COMMAND"
    COMMON_FORM = "COMMON_FORM"
    COMMON_PICTURE = "COMMON_PICTURE"
    COMMON_TEMPLATE = "COMMON_TEMPLATE"
    DEFINED_TYPE = "DEFINED_TYPE"
    DOCUMENT_NUMERATOR = "DOCUMENT_NUMERATOR"
    ENUM_VALUE = "ENUM_VALUE"
    EVENT_SUBSCRIPTION = "EVENT_SUBSCRIPTION"
    EXTERNAL_DATA_PROCESSOR = "EXTERNAL_DATA_PROCESSOR"
    EXTERNAL_DATA_SOURCE_TABLE = "EXTERNAL_DATA_SOURCE_TABLE"
    EXTERNAL_DATA_SOURCE_TABLE_FIELD = "EXTERNAL_DATA_SOURCE_TABLE_FIELD"
    EXTERNAL_REPORT = "EXTERNAL_REPORT"
    EXT_DIMENSION_ACCOUNTING_FLAG = "EXT_DIMENSION_ACCOUNTING_FLAG"
    FUNCTIONAL_OPTION = "FUNCTIONAL_OPTION"
    FUNCTIONAL_OPTIONS_PARAMETER = "FUNCTIONAL_OPTIONS_PARAMETER"
    HTTP_SERVICE = "HTTP_SERVICE"
    HTTP_SERVICE_METHOD = "HTTP_SERVICE_METHOD"
    HTTP_SERVICE_URL_TEMPLATE = "HTTP_SERVICE_URL_TEMPLATE"
    INTEGRATION_SERVICE = "INTEGRATION_SERVICE"
    INTEGRATION_SERVICE_CHANNEL = "INTEGRATION_SERVICE_CHANNEL"
    INTERFACE = "INTERFACE"
    PALETTE_COLOR = "PALETTE_COLOR"
    RECALCULATION = "RECALCULATION"
    SCHEDULED_JOB = "SCHEDULED_JOB"
    SEQUENCE = "SEQUENCE"
    SESSION_PARAMETER = "SESSION_PARAMETER"
    SETTINGS_STORAGE = "SETTINGS_STORAGE"
    STANDARD_ATTRIBUTE = "STANDARD_ATTRIBUTE"
    STANDARD_TABULAR_SECTION = "STANDARD_TABULAR_SECTION"
    TABULAR_SECTION = "TABULAR_SECTION"
    TASK_ADDRESSING_ATTRIBUTE = "TASK_ADDRESSING_ATTRIBUTE"
    TEMPLATE = "TEMPLATE"
    WEB_SERVICE = "WEB_SERVICE"
    WS_OPERATION = "WS_OPERATION"
    WS_OPERATION_PARAMETER = "WS_OPERATION_PARAMETER"
    WS_REFERENCE = "WS_REFERENCE"
    XDTO_PACKAGE = "XDTO_PACKAGE"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "NodeType":
        """Return the member named ``value`` or :attr:`UNKNOWN`."""

        if isinstance(value, NodeType):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.UNKNOWN


class EdgeType(str, Enum):
    """Relationship kinds between metadata nodes."""

    CONTAINS = "CONTAINS"
    RELATED_TO = "RELATED_TO"
    CHILDREN = "CHILDREN"
    ATTRIBUTE = "ATTRIBUTE"
    ACCESS = "ACCESS"

    @classmethod
    def parse(cls, value: Any) -> "EdgeType":
        """Return the member named ``value``; raise :class:`ValueError` otherwise."""

        if isinstance(value, EdgeType):
            return value
        return cls(str(value).strip().upper())


class NodeVariant(str, Enum):
    """Discriminant for the node variants stored under the shared tag."""

    CONFIGURATION = "ConfigurationNode"
    MD_OBJECT = "MDObjectNode"


class EdgeVariant(str, Enum):
    """Discriminant for the edge variants."""

    BASE = "BaseEdge"
    ATTRIBUTE = "AttributeEdge"
    ACCESS = "AccessEdge"


@dataclass(frozen=True)
class GraphNode:
    """A metadata object exported as a vertex."""

    id: str
    uid: str
    name: str
    synonym: str
    type: NodeType
    variant: NodeVariant = NodeVariant.MD_OBJECT

    @classmethod
    def md_object(cls, uid: str, name: str, synonym: str, type: NodeType) -> "GraphNode":
        return cls(
            id=node_id(uid),
            uid=uid,
            name=name,
            synonym=synonym,
            type=type,
            variant=NodeVariant.MD_OBJECT,
        )

    @classmethod
    def configuration(cls, uid: str, name: str, synonym: str) -> "GraphNode":
        return cls(
            id=node_id(uid),
            uid=uid,
            name=name,
            synonym=synonym,
            type=NodeType.CONFIGURATION,
            variant=NodeVariant.CONFIGURATION,
        )


@dataclass(frozen=True)
class GraphEdge:
    """A directed, typed relationship between two nodes.

    ``attribute_name`` is only meaningful for :attr:`EdgeVariant.ATTRIBUTE`
    and ``rights`` only for :attr:`EdgeVariant.ACCESS`.
    """

    source_id: str
    target_id: str
    type: EdgeType
    variant: EdgeVariant = EdgeVariant.BASE
    attribute_name: str = ""
    rights: str = ""

    @property
    def key(self) -> Tuple[str, str, EdgeType]:
        """Identity of the edge in the store."""

        return self.source_id, self.target_id, self.type

    @classmethod
    def create(cls, source_id: str, target_id: str, type: EdgeType) -> "GraphEdge":
        if type is EdgeType.ATTRIBUTE:
            return cls.attribute(source_id, target_id, "")
        if type is EdgeType.ACCESS:
            return cls.access(source_id, target_id, "")
        return cls(source_id=source_id, target_id=target_id, type=type)

    @classmethod
    def contains(cls, source_id: str, target_id: str) -> "GraphEdge":
        return cls(source_id=source_id, target_id=target_id, type=EdgeType.CONTAINS)

    @classmethod
    def children(cls, source_id: str, target_id: str) -> "GraphEdge":
        return cls(source_id=source_id, target_id=target_id, type=EdgeType.CHILDREN)

    @classmethod
    def related(cls, source_id: str, target_id: str) -> "GraphEdge":
        return cls(source_id=source_id, target_id=target_id, type=EdgeType.RELATED_TO)

    @classmethod
    def attribute(cls, source_id: str, target_id: str, attribute_name: str) -> "GraphEdge":
        return cls(
            source_id=source_id,
            target_id=target_id,
            type=EdgeType.ATTRIBUTE,
            variant=EdgeVariant.ATTRIBUTE,
            attribute_name=attribute_name,
        )

    @classmethod
    def access(cls, source_id: str, target_id: str, rights: str) -> "GraphEdge":
        return cls(
            source_id=source_id,
            target_id=target_id,
            type=EdgeType.ACCESS,
            variant=EdgeVariant.ACCESS,
            rights=rights,
        )


@dataclass
class GraphQuery:
    """Filter description for node searches.

    ``node_types`` are OR-matched, ``properties`` AND-matched; ``edge_types``
    only restrict the edges fetched alongside the nodes.
    """

    node_types: Optional[Iterable[NodeType]] = None
    edge_types: Optional[Iterable[EdgeType]] = None
    properties: Optional[Mapping[str, Any]] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass
class GraphSearchResult:
    """Nodes plus the edges connecting them."""

    nodes: List[GraphNode] = field(default_factory=list)
    edges: List[GraphEdge] = field(default_factory=list)
    total_count: int = 0

    @classmethod
    def empty(cls) -> "GraphSearchResult":
        return cls()


@dataclass
class GraphStatistics:
    total_nodes: int = 0
    total_edges: int = 0
    nodes_by_type: Dict[NodeType, int] = field(default_factory=dict)
    edges_by_type: Dict[EdgeType, int] = field(default_factory=dict)


@dataclass
class ExportResult:
    """Outcome of exporting one configuration into the store."""

    success: bool
    configuration_id: Optional[str] = None
    nodes_count: int = 0
    edges_count: int = 0
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        """Return the camel-cased payload exposed to API consumers."""

        return {
            "success": self.success,
            "configurationId": self.configuration_id,
            "nodesCount": self.nodes_count,
            "edgesCount": self.edges_count,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


__all__ = [
    "EdgeType",
    "EdgeVariant",
    "ExportResult",
    "GraphEdge",
    "GraphNode",
    "GraphQuery",
    "GraphSearchResult",
    "GraphStatistics",
    "NodeType",
    "NodeVariant",
]
