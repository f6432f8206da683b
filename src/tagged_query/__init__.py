"""Tagged Query - compile tagged records into query clauses and headers."""

from tagged_query.accessor import Accessor
from tagged_query.compiler import QueryCompiler
from tagged_query.errors import (
    AccessError,
    CompilationError,
    InvalidArgumentError,
    InvalidCombinationError,
    TagDeclarationError,
)
from tagged_query.metadata import MetadataProvider
from tagged_query.parsing import RecordParser, RecordRegistry
from tagged_query.range import Range
from tagged_query.tags import (
    FROM_PARAM,
    TO_PARAM,
    AliasAs,
    AliasAsSelf,
    Between,
    CustomName,
    GreaterOrEqual,
    GreaterThan,
    Ignore,
    InRange,
    IsNotNull,
    IsNull,
    LessOrEqual,
    LessThan,
    Like,
    NotEqual,
    NotLike,
    OutRange,
    TableAlias,
    Tag,
    TagKind,
    TagRole,
    WrapName,
    WrapValue,
)
from tagged_query.types import FieldDescriptor, Record, RecordDescriptor
from tagged_query.validator import (
    FORBIDDEN_COMBINATIONS,
    ExclusivityValidator,
    ForbiddenCombinationTable,
)

__all__ = [
    # Main API
    "QueryCompiler",
    "RecordParser",
    "RecordRegistry",
    "Range",
    # Collaborators
    "MetadataProvider",
    "Accessor",
    "ExclusivityValidator",
    "ForbiddenCombinationTable",
    "FORBIDDEN_COMBINATIONS",
    # Descriptors
    "FieldDescriptor",
    "RecordDescriptor",
    "Record",
    # Tags
    "Tag",
    "TagKind",
    "TagRole",
    "FROM_PARAM",
    "TO_PARAM",
    "Ignore",
    "TableAlias",
    "CustomName",
    "AliasAs",
    "AliasAsSelf",
    "WrapName",
    "WrapValue",
    "IsNull",
    "IsNotNull",
    "Between",
    "InRange",
    "OutRange",
    "GreaterThan",
    "GreaterOrEqual",
    "LessThan",
    "LessOrEqual",
    "NotEqual",
    "Like",
    "NotLike",
    # Errors
    "CompilationError",
    "InvalidCombinationError",
    "InvalidArgumentError",
    "AccessError",
    "TagDeclarationError",
]

__version__ = "0.1.0"
