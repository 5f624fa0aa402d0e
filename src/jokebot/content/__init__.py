"""
Content sources.

- jokes.py: Joke type, HTTP joke API provider, formatting, fallback jokes
- offline.py: deterministic provider for runs without network access
"""
