"""
Laracasts-Downloader - crawl the Laracasts catalog and download every lesson for offline viewing.

The crawl runs once and is cached in a manifest file:
- 🏷️ Tags are discovered from the public index page
- 📚 Series pages are expanded into their individual episodes
- 📝 The resolved lesson URLs are written to lessons.txt

Every run then logs in and downloads what is missing:
- 🎥 Videos are named from the server's Content-Disposition header
- 📁 Series episodes are grouped into one directory per series
- ⏭️ Files already on disk with the expected size are skipped
"""

__version__ = "1.0.0"
__author__ = "Community Contributors"
__description__ = "Download all Laracasts lessons and series episodes for offline viewing"
