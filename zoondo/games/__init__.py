"""
Games module - Tribe sets playable by the engine.

Each set has its own subpackage with:
- Card and tribe definitions
- Power plugins
- A catalog factory
"""
