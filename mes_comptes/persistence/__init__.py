"""
Persistence Package

Codec, schema normaliser and the load/save facade.
"""

from mes_comptes.persistence.codec import (
    DecodeFailure,
    DecodeFailureKind,
    Decoded,
    decode,
    encode,
    parse_plain_json,
)
from mes_comptes.persistence.normalizer import (
    CategoryFormat,
    DataShape,
    NormalizationResult,
    migrate_categories,
    normalize,
    normalize_detailed,
)
from mes_comptes.persistence.service import (
    PersistenceService,
    create_blob_store,
    create_persistence_service,
)

__all__ = [
    # Codec
    "DecodeFailure",
    "DecodeFailureKind",
    "Decoded",
    "decode",
    "encode",
    "parse_plain_json",
    # Normalizer
    "CategoryFormat",
    "DataShape",
    "NormalizationResult",
    "migrate_categories",
    "normalize",
    "normalize_detailed",
    # Facade
    "PersistenceService",
    "create_blob_store",
    "create_persistence_service",
]
