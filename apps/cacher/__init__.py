"""
Cacher App - Playlist and XMLTV Cache Daemon

Responsibilities:
- Fetch the playlist (M3U) and optional XMLTV metadata from their upstream URLs
- Stream each download into a temporary file under the cache root
- Atomically replace the published copy once a download completes
- Retry failed downloads with a fixed 30s delay (bounded budget per run)
- Catch-up run at startup (before 19:00 local), then nightly runs at 05:30

Output:
- <cache_dir>/ilovetv.m3u
- <cache_dir>/xmltv.xml

The published files are served over HTTP by services.api.
"""
