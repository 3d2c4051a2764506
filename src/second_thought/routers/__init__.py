"""API routers.

Includes routes for:
- /analyze - Purchase analysis for a product
- /extract - Product extraction from scraped page fields, site selector profiles
- /cooldowns - Cool-down start, check, list and cancel
- /profiles - User profile lookup and create-or-update
- /track - Engagement, cool-down and profile events
"""
from second_thought.routers.analyze import router as analyze_router
from second_thought.routers.cooldowns import router as cooldowns_router
from second_thought.routers.extract import router as extract_router
from second_thought.routers.profiles import router as profiles_router
from second_thought.routers.track import router as track_router

__all__ = [
    "analyze_router",
    "extract_router",
    "cooldowns_router",
    "profiles_router",
    "track_router",
]
