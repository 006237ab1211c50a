"""
Route templates - tokenizer, hierarchy builder, extraction engine.

Templates use ``:name`` for parameters and ``:name?`` for optional ones::

    /products/:category?/:subcategory?/:productId
"""

from .ast_nodes import ParamSegment, RouteTemplate, SegmentKind, StaticSegment
from .tokenizer import split_path, tokenize
from .hierarchy import (
    NestedParameter,
    RelationshipAnalysis,
    analyze_relationships,
    build_hierarchy,
    detect_cycles,
    iter_tree,
)
from .extraction import ExtractionResult, extract, extract_nested_parameters
from .builder import build_url

__all__ = [
    # AST
    "RouteTemplate",
    "StaticSegment",
    "ParamSegment",
    "SegmentKind",
    # Tokenizer
    "tokenize",
    "split_path",
    # Hierarchy
    "NestedParameter",
    "build_hierarchy",
    "iter_tree",
    "RelationshipAnalysis",
    "analyze_relationships",
    "detect_cycles",
    # Extraction
    "ExtractionResult",
    "extract",
    "extract_nested_parameters",
    # Builder
    "build_url",
]
