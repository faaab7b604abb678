"""
Schemas module - Pydantic models for request/response validation.
"""
from consultant_tracker.schemas.schemas import *  # noqa: F401,F403
