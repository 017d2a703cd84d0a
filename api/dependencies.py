"""FastAPI dependency injection functions."""

from fastapi import Depends

from api.config import Settings, get_settings
from parsers.fountain import FountainParser


async def get_settings_dependency() -> Settings:
    """Get application settings."""
    return get_settings()


async def get_fountain_parser(
    settings: Settings = Depends(get_settings_dependency),
) -> FountainParser:
    """Get a parser configured with the settings' defaults."""
    return FountainParser(settings.parser_options(), max_size=settings.max_document_bytes)
