"""
Routers Module

API routers for the Voice Calc application.
"""

from .calculator import router as calculator_router
from .voice import router as voice_router

__all__ = ["calculator_router", "voice_router"]
