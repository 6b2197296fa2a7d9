"""
Shared service utilities.

- http.py - requests session with retry, timeout and User-Agent for dataset downloads
"""
