# --- tmap_lib/__init__.py ---
from .assembler import BLOCK_SIZE, MapAssembler, build_map_from_file
from .errors import (
    DuplicateKey,
    InvalidSpan,
    MapBuilderError,
    OutOfOrderExtension,
    PaletteError,
    UnclassifiedRegionMembership,
    UnrecognizedColor,
)
from .palette import DEFAULT_PALETTE, ColorClassifier, ItemKind, Palette, RegionTag
from .schema import MapData, dumps, load_json, loads, save_json
from .span import Span, Span2d, SpanBuilder
