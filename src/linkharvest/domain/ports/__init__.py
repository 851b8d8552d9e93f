from .download_manager import DownloadManagerPort
from .page_fetcher import PageFetcherPort

__all__ = [
    "DownloadManagerPort",
    "PageFetcherPort",
]
