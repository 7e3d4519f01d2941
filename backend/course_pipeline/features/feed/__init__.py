"""
Course feed module.

Usage:
    from course_pipeline.features.feed import CourseFeedClient, FeedReconciler

Components:
- CourseFeedClient / GpxDownloader: HTTP access to the feed and its GPX files
- FeedItem / FeedPage: Raw feed records
- FeedReconciler: Diffs the feed against persisted courses
"""

from .config import FeedConfig
from .schemas import FeedItem, FeedPage, parse_feed_body
from .client import (
    CourseFeedClient,
    GpxDownloader,
    FeedError,
    FeedAPIError,
    FeedFormatError,
    GpxDownloadError,
)
from .reconciler import FeedReconciler, ItemSkipped, CollectedFeed

__all__ = [
    # Config
    "FeedConfig",
    # Schemas
    "FeedItem",
    "FeedPage",
    "parse_feed_body",
    # Client
    "CourseFeedClient",
    "GpxDownloader",
    "FeedError",
    "FeedAPIError",
    "FeedFormatError",
    "GpxDownloadError",
    # Reconciler
    "FeedReconciler",
    "ItemSkipped",
    "CollectedFeed",
]
