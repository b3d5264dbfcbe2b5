from .conl import (
    ConlDecodeError,
    ConlError,
    ConlLexicalError,
    ConlParser,
    ConlStructureError,
    NextShape,
    ParserConfig,
    SchemaViolationError,
    parse,
)
from .serializer import ConlSerializer, escape_value, serialize
from .values import Array, MultilineScalar, Scalar, Table, TableArray, Value, from_python, to_python
from .schema import (
    Credits,
    Product,
    ProductMetadata,
    RateType,
    StampMetadata,
    StampType,
    metadata_from_value,
    metadata_to_value,
)
from .records import dumps_metadata, loads_metadata
from .rates import PostalRates, RateHistory, dumps_rates, loads_rates
from .backend import ConlBackend, PlainConlBackend
from .output_parser import ConlOutputParser

__all__ = [
    "parse",
    "serialize",
    "escape_value",
    "ConlParser",
    "ConlSerializer",
    "ParserConfig",
    "NextShape",
    "ConlError",
    "ConlDecodeError",
    "ConlLexicalError",
    "ConlStructureError",
    "SchemaViolationError",
    "Value",
    "Scalar",
    "MultilineScalar",
    "Array",
    "Table",
    "TableArray",
    "to_python",
    "from_python",
    "StampMetadata",
    "Credits",
    "Product",
    "ProductMetadata",
    "RateType",
    "StampType",
    "metadata_from_value",
    "metadata_to_value",
    "loads_metadata",
    "dumps_metadata",
    "loads_rates",
    "dumps_rates",
    "RateHistory",
    "PostalRates",
    "ConlBackend",
    "PlainConlBackend",
    "ConlOutputParser",
]
