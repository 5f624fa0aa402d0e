"""
jokebot: delivers a joke to chat subscribers on a per-user interval.

Subpackages:
- subscribers: Subscriber entity, SQLite store, subscription mutations
- delivery: eligibility engine, pacing policy, delivery loop, scheduling trigger
- content: joke providers (HTTP API, offline) and fallback jokes
- connectors: console and Matrix transports
- cli: composition root, commands, entrypoint
"""

__version__ = "0.1.0"
