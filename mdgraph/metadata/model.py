"""Read-only object model of a source metadata configuration.

The walker only needs a narrow slice of the configuration: identity of every
object, subsystem nesting and content, role rights, functional option and
exchange plan content, event subscription sources and attribute value types.
Objects are addressed by references of the form ``<Kind>.<Name>``, for example
``Catalog.Goods``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional

from ..graph.model import NodeType


class MDOType(str, Enum):
    """Metadata object kinds; values are the names used in references."""

    CONFIGURATION = "Configuration"
    ACCOUNTING_FLAG = "AccountingFlag"
    ACCOUNTING_REGISTER = "AccountingRegister"
    ACCUMULATION_REGISTER = "AccumulationRegister"
    ATTRIBUTE = "Attribute"
    BOT = "Bot"
    BUSINESS_PROCESS = "BusinessProcess"
    CALCULATION_REGISTER = "CalculationRegister"
    CATALOG = "Catalog"
    CHART_OF_ACCOUNTS = "ChartOfAccounts"
    CHART_OF_CALCULATION_TYPES = "ChartOfCalculationTypes"
    CHART_OF_CHARACTERISTIC_TYPES = "ChartOfCharacteristicTypes"
    COLUMN = "Column"
    COMMAND = "Command"
    COMMAND_GROUP = "CommandGroup"
    COMMON_ATTRIBUTE = "CommonAttribute"
    COMMON_COMMAND = "CommonCommand"
    COMMON_FORM = "CommonForm"
    COMMON_MODULE = "CommonModule"
    COMMON_PICTURE = "CommonPicture"
    COMMON_TEMPLATE = "CommonTemplate"
    CONSTANT = "Constant"
    DATA_PROCESSOR = "DataProcessor"
    DEFINED_TYPE = "DefinedType"
    DIMENSION = "Dimension"
    DOCUMENT = "Document"
    DOCUMENT_JOURNAL = "DocumentJournal"
    DOCUMENT_NUMERATOR = "DocumentNumerator"
    ENUM = "Enum"
    ENUM_VALUE = "EnumValue"
    EVENT_SUBSCRIPTION = "EventSubscription"
    EXCHANGE_PLAN = "ExchangePlan"
    EXTERNAL_DATA_PROCESSOR = "ExternalDataProcessor"
    EXTERNAL_DATA_SOURCE = "ExternalDataSource"
    EXTERNAL_DATA_SOURCE_TABLE = "ExternalDataSourceTable"
    EXTERNAL_DATA_SOURCE_TABLE_FIELD = "ExternalDataSourceTableField"
    EXTERNAL_REPORT = "ExternalReport"
    EXT_DIMENSION_ACCOUNTING_FLAG = "ExtDimensionAccountingFlag"
    FILTER_CRITERION = "FilterCriterion"
    FORM = "Form"
    FUNCTIONAL_OPTION = "FunctionalOption"
    FUNCTIONAL_OPTIONS_PARAMETER = "FunctionalOptionsParameter"
    HTTP_SERVICE = "HTTPService"
    HTTP_SERVICE_METHOD = "HTTPServiceMethod"
    HTTP_SERVICE_URL_TEMPLATE = "HTTPServiceURLTemplate"
    INFORMATION_REGISTER = "InformationRegister"
    INTEGRATION_SERVICE = "IntegrationService"
    INTEGRATION_SERVICE_CHANNEL = "IntegrationServiceChannel"
    INTERFACE = "Interface"
    LANGUAGE = "Language"
    PALETTE_COLOR = "PaletteColor"
    RECALCULATION = "Recalculation"
    REPORT = "Report"
    RESOURCE = "Resource"
    ROLE = "Role"
    SCHEDULED_JOB = "ScheduledJob"
    SEQUENCE = "Sequence"
    SESSION_PARAMETER = "SessionParameter"
    SETTINGS_STORAGE = "SettingsStorage"
    STANDARD_ATTRIBUTE = "StandardAttribute"
    STANDARD_TABULAR_SECTION = "StandardTabularSection"
    STYLE = "Style"
    STYLE_ITEM = "StyleItem"
    SUBSYSTEM = "Subsystem"
    TABULAR_SECTION = "TabularSection"
    TASK = "Task"
    TASK_ADDRESSING_ATTRIBUTE = "TaskAddressingAttribute"
    TEMPLATE = "Template"
    WEB_SERVICE = "WebService"
    WS_OPERATION = "WSOperation"
    WS_OPERATION_PARAMETER = "WSOperationParameter"
    WS_REFERENCE = "WSReference"
    XDTO_PACKAGE = "XDTOPackage"

    @classmethod
    def parse(cls, value: str) -> "MDOType":
        """Accept either the reference name (``Catalog``) or the member name (``CATALOG``)."""

        text = value.strip()
        folded = text.lower()
        for member in cls:
            if member.value.lower() == folded or member.name.lower() == folded:
                return member
        raise ValueError(f"Unknown metadata kind: {value!r}")

    def to_node_type(self) -> NodeType:
        return NodeType.parse(self.name)


# Type-name suffixes of reference and object types (``CatalogRef``,
# ``DocumentObject``, ``InformationRegisterRecordSet`` ...).
_TYPE_SUFFIXES = ("RecordManager", "RecordSet", "RecordKey", "Manager", "Object", "Ref", "List", "Selection")


def make_ref(kind: MDOType, name: str) -> str:
    return f"{kind.value}.{name}"


@dataclass(frozen=True)
class ValueType:
    """One entry of a value-type description.

    ``kind`` is set for metadata types (``CatalogRef.Goods``) and ``None``
    for primitive types (``String``).
    """

    name: str
    kind: Optional[MDOType] = None

    @classmethod
    def parse(cls, name: str) -> "ValueType":
        prefix, dot, _ = name.partition(".")
        if not dot:
            return cls(name=name)
        for suffix in ("",) + _TYPE_SUFFIXES:
            if suffix and not prefix.endswith(suffix):
                continue
            candidate = prefix[: len(prefix) - len(suffix)] if suffix else prefix
            try:
                return cls(name=name, kind=MDOType.parse(candidate))
            except ValueError:
                continue
        return cls(name=name)

    @property
    def is_metadata(self) -> bool:
        return self.kind is not None

    def reference(self) -> Optional[str]:
        """Return the ``<Kind>.<Name>`` reference this type points at, if any.

        Defined types name a category of objects and never resolve.
        """

        if self.kind is None or self.kind is MDOType.DEFINED_TYPE:
            return None
        chunks = self.name.split(".")
        if len(chunks) != 2:
            return None
        return make_ref(self.kind, chunks[1])


@dataclass(frozen=True)
class ValueTypeDescription:
    types: tuple[ValueType, ...] = ()

    @classmethod
    def of(cls, *names: str) -> "ValueTypeDescription":
        return cls(types=tuple(ValueType.parse(name) for name in names))

    def metadata_types(self) -> Iterator[ValueType]:
        return (item for item in self.types if item.is_metadata)


@dataclass
class Attribute:
    name: str
    value_type: ValueTypeDescription = field(default_factory=ValueTypeDescription)
    uuid: str = ""


@dataclass
class TabularSection:
    name: str
    attributes: List[Attribute] = field(default_factory=list)
    uuid: str = ""


@dataclass
class MDObject:
    """A top-level metadata object.

    ``attributes`` holds every attribute-like member (attributes,
    dimensions, resources); objects that own none leave it empty.
    """

    uuid: str
    name: str
    kind: MDOType
    synonym: str = ""
    attributes: List[Attribute] = field(default_factory=list)
    tabular_sections: List[TabularSection] = field(default_factory=list)

    @property
    def mdo_ref(self) -> str:
        return make_ref(self.kind, self.name)

    @property
    def is_attribute_owner(self) -> bool:
        return bool(self.attributes or self.tabular_sections)


@dataclass
class Subsystem(MDObject):
    kind: MDOType = MDOType.SUBSYSTEM
    content: List[str] = field(default_factory=list)
    subsystems: List["Subsystem"] = field(default_factory=list)


@dataclass
class Right:
    name: str
    value: bool = False


@dataclass
class ObjectRights:
    """Rights granted by a role on the object referenced by ``name``."""

    name: str
    rights: List[Right] = field(default_factory=list)

    def granted(self) -> List[str]:
        return [right.name for right in self.rights if right.value]


@dataclass
class Role(MDObject):
    kind: MDOType = MDOType.ROLE
    object_rights: List[ObjectRights] = field(default_factory=list)


@dataclass
class FunctionalOption(MDObject):
    kind: MDOType = MDOType.FUNCTIONAL_OPTION
    content: List[str] = field(default_factory=list)


@dataclass
class ExchangePlanItem:
    metadata: str
    auto_record: bool = False


@dataclass
class ExchangePlan(MDObject):
    kind: MDOType = MDOType.EXCHANGE_PLAN
    content: List[ExchangePlanItem] = field(default_factory=list)


@dataclass
class EventSubscription(MDObject):
    kind: MDOType = MDOType.EVENT_SUBSCRIPTION
    value_type: ValueTypeDescription = field(default_factory=ValueTypeDescription)


@dataclass
class Configuration:
    """Root of a metadata tree.

    ``children`` lists every top-level object, top-level subsystems included;
    nested subsystems are reachable only through their parents.
    """

    uuid: str
    name: str
    synonym: str = ""
    children: List[MDObject] = field(default_factory=list)

    def _of_type(self, cls) -> list:
        return [child for child in self.children if isinstance(child, cls)]

    @property
    def subsystems(self) -> List[Subsystem]:
        return self._of_type(Subsystem)

    @property
    def roles(self) -> List[Role]:
        return self._of_type(Role)

    @property
    def functional_options(self) -> List[FunctionalOption]:
        return self._of_type(FunctionalOption)

    @property
    def exchange_plans(self) -> List[ExchangePlan]:
        return self._of_type(ExchangePlan)

    @property
    def event_subscriptions(self) -> List[EventSubscription]:
        return self._of_type(EventSubscription)


__all__ = [
    "Attribute",
    "Configuration",
    "EventSubscription",
    "ExchangePlan",
    "ExchangePlanItem",
    "FunctionalOption",
    "MDOType",
    "MDObject",
    "ObjectRights",
    "Right",
    "Role",
    "Subsystem",
    "TabularSection",
    "ValueType",
    "ValueTypeDescription",
    "make_ref",
]
