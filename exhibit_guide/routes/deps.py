"""Accessors for the per-app services stored on app.state by create_app()."""

from fastapi import Request

from exhibit_guide.config import Settings
from exhibit_guide.generation import ContentGenerator
from exhibit_guide.llm import ChatProvider
from exhibit_guide.storage import Storage


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_generator(request: Request) -> ContentGenerator:
    return request.app.state.generator


def get_provider(request: Request) -> ChatProvider:
    return request.app.state.provider


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
