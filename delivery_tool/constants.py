"""Global constants for delivery-tool"""

APP_NAME = "delivery-tool"
LOG_FORMAT = "%(message)s"

# Project identification
PROJECT_CONFIG_FILE = ".delivery-tool.yaml"
USER_PLUGIN_DIR = ".delivery-tool/plugins"

# Persisted project document
DEFAULT_XML_ROOT_FORMAT = "ReleaseFabProject"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

XML_DELIVERIES = "deliveries"
XML_DELIVERY = "delivery"
XML_COMPONENTS = "components"
XML_COMPONENT = "component"
XML_IMPORTERS = "importers"
XML_IMPORTER = "importer"
XML_ASSIGNER = "assigner"
XML_PARAMETERS = "parameters"
XML_PARAMETER = "parameter"
XML_DELIVERY_INFORMATION = "deliveryInformation"
XML_CONTENT = "content"
XML_STRING = "string"
XML_ERROR = "error"
XML_CREATION_REPORT = "creationReport"

XML_ATTR_NAME = "name"
XML_ATTR_VERSION = "version"
XML_ATTR_INTEGRATOR = "integrator"
XML_ATTR_CREATED = "created"
XML_ATTR_RELEVANT = "relevant"
XML_ATTR_NUMBER = "number"
XML_ATTR_IS_NEW = "isNew"

# Creation report annotations
XML_ATTR_DELIVERY = "delivery"
XML_ATTR_COMPONENT = "component"
XML_ATTR_IMPORTER = "importer"
XML_ATTR_ASSIGNER = "assigner"

# DocBook vocabulary
DOCBOOK_PUBLIC_ID = "-//OASIS//DTD DocBook XML V4.5//EN"
DOCBOOK_SYSTEM_ID = "http://www.oasis-open.org/docbook/xml/4.5/docbookx.dtd"

XML_ARTICLE = "article"
XML_SECTION = "section"
XML_TITLE = "title"
XML_SUBTITLE = "subtitle"
XML_PARA = "para"
XML_TABLE = "table"
XML_TGROUP = "tgroup"
XML_COLSPEC = "colspec"
XML_THEAD = "thead"
XML_TBODY = "tbody"
XML_ROW = "row"
XML_ENTRY = "entry"
XML_EMPHASIS = "emphasis"
XML_LITERALLAYOUT = "literallayout"

XML_ATTR_CONFORMANCE = "conformance"
XML_ATTR_PGWIDE = "pgwide"
XML_ATTR_TABSTYLE = "tabstyle"
XML_ATTR_COLS = "cols"
XML_ATTR_COLNUM = "colnum"
XML_ATTR_COLWIDTH = "colwidth"
XML_ATTR_ROLE = "role"

CONFORMANCE_DIRECTSTART = "directstart"
TABSTYLE_SMALLFONT = "smallfont"
COLWIDTH_WIDE = "6000*"
COLWIDTH_NARROW = "3000*"
COLWIDTH_ID = "2000*"
PARA_COMPONENT = "Component"
EMPTY_SECTION_MESSAGE = "N/A"

# Empty information markers
EMPTY_VALUE = "-"

# Settings keys
VIEW_ORDER = "view_order"
EXPORT_ORDER = "export_order"

DEFAULT_COMMIT_TEMPLATE = (
    "{short description}\n\n"
    "Item: {itemID}\n"
    "API change: {yes}\n"
    "Internal: {internal doc}\n"
    "External: {external doc}\n"
    "Reviewer: {reviewer}"
)

# Execution
COMMAND_TIMEOUT = 10  # seconds
HASH_LENGTH = 8

# Random assignment defaults
DEFAULT_RANDOM_MIN = 1
DEFAULT_RANDOM_MAX = 255


# Error codes
class ErrorCode:
    INTERNAL_ERROR = "DL001"
    INVALID_PARAMETERS = "DL002"
    VERSION_CONTROL_ERROR = "DL003"
    ALM_ERROR = "DL004"
    NOT_FOUND = "DL005"
    UNKNOWN_STRATEGY = "DL006"
    PERSISTENCE_ERROR = "DL007"
    CONFIG_FORMAT_ERROR = "DL008"
    PROJECT_NOT_FOUND = "DL009"
    INTERNAL_RUNTIME_ERROR = "DL100"
    VERSION_CONTROL_RUNTIME_ERROR = "DL101"
    ALM_RUNTIME_ERROR = "DL102"
    DELIVERY_CREATION_FAILED = "DL103"


# Environment variables
ENV_CONFIG_PATH = "DELIVERY_TOOL_CONFIG"
ENV_PROJECT_ROOT = "PROJECT_ROOT"

# Display constants
EMOJI_SUCCESS = "✓"
EMOJI_ERROR = "✗"
EMOJI_WARNING = "⚠"
