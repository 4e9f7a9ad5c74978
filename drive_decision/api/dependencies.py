"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from drive_decision.config import settings
from drive_decision.domain.policy import DecisionPolicy
from drive_decision.infrastructure.clients.narrator import NarratorClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_policy() -> DecisionPolicy:
    """Provide the configured decision policy"""
    return settings.policy


def get_narrator_client() -> NarratorClient:
    """Provide narrative generator client instance"""
    return NarratorClient()
