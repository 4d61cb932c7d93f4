"""Shared dependencies for API routes."""

from fastapi import Request

from services.engine import MatchingEngine


def get_engine(request: Request) -> MatchingEngine:
    return request.app.state.engine
