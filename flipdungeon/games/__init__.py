"""
Games module - Game content and setup.

Each game mode has its own subpackage with:
- Class and shop definitions (the Catalog)
- Location and encounter generation
- Quest templates
- New-game setup
"""
