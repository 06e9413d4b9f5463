from .typeracer_spider import (
    TypeRacerTextsSpider,
    extract_fields,
    extract_id_from_line,
    extract_ids,
)

__all__ = [
    "TypeRacerTextsSpider",
    "extract_fields",
    "extract_id_from_line",
    "extract_ids",
]
