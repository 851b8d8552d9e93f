from .links import (
    Aria2Config,
    LinkRecord,
    PushFailure,
    PushOutcome,
    RowExtraction,
    RowLinkGroup,
    ScanContext,
    ScanResult,
    new_link_id,
)

__all__ = [
    "Aria2Config",
    "LinkRecord",
    "PushFailure",
    "PushOutcome",
    "RowExtraction",
    "RowLinkGroup",
    "ScanContext",
    "ScanResult",
    "new_link_id",
]
