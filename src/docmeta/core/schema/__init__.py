from docmeta.core.schema.field_type import FieldType
from docmeta.core.schema.field_rule import FieldRule
from docmeta.core.schema.schema import MetadataSchema, DEFAULT_SCHEMA, build_default_schema

__all__ = ["FieldType", "FieldRule", "MetadataSchema", "DEFAULT_SCHEMA", "build_default_schema"]
