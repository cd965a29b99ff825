from src.downloaders.base import BaseDownloadStrategy
from src.downloaders.http_downloader import HttpDownloader
from src.downloaders.youtube_stream import YouTubeStreamDownloader

__all__ = ['BaseDownloadStrategy', 'HttpDownloader', 'YouTubeStreamDownloader']
