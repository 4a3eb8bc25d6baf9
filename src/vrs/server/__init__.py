"""HTTP server for Video Range Server.

Thin aiohttp wiring around the streaming, transcode and cache packages.
"""
