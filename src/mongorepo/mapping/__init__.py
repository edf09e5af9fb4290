"""
Mapping between pydantic models and MongoDB documents.

- NotMapped / IgnoreMapping: markers excluding fields from storage
- ClassMap / MemberMap: per-type mapping description, frozen once built
- DocumentMapper: builds class maps from registered conventions and
  converts models to documents and back
"""

from mongorepo.mapping.class_map import ID_ELEMENT_NAME, ClassMap, MemberMap
from mongorepo.mapping.markers import IgnoreMapping, NotMapped, is_excluded
from mongorepo.mapping.mapper import ClassMapInitializer, DocumentMapper, default_mapper

__all__ = [
    # Markers
    "NotMapped",
    "IgnoreMapping",
    "is_excluded",
    # Class maps
    "ClassMap",
    "MemberMap",
    "ID_ELEMENT_NAME",
    # Mapper
    "ClassMapInitializer",
    "DocumentMapper",
    "default_mapper",
]
