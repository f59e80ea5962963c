"""Structural mapping of records, sequences and mappings."""

from record_mapper.mapping.fields import FieldDescriptor, FieldMatch, describe_fields, match_fields
from record_mapper.mapping.mapper import Mapper

__all__ = ["FieldDescriptor", "FieldMatch", "Mapper", "describe_fields", "match_fields"]
