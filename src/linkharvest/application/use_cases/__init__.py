from .push_links import PushLinksUseCase
from .scan_page import ScanPageUseCase

__all__ = ["PushLinksUseCase", "ScanPageUseCase"]
