"""Shared fixtures."""

from typing import Optional

import pytest

from expensewise.agents import CategorizationAgent
from expensewise.audit import AuditLogger
from expensewise.categorization import ResponseNormalizer
from expensewise.config import AvatarSettings, GoogleAISettings
from expensewise.orchestrator import CategorizationFlow
from expensewise.services.image import AvatarService
from helpers import FakeImageService, FakeModel, RecordingLogger


@pytest.fixture
def avatar_service():
    return AvatarService(settings=AvatarSettings())


@pytest.fixture
def recording_logger():
    return RecordingLogger()


@pytest.fixture
def audit_logger(recording_logger):
    return AuditLogger(logger=recording_logger)


@pytest.fixture
def make_flow(avatar_service, audit_logger):
    """Build a flow around a fake model and a fake image service."""

    def _make(
        text=None,
        error=None,
        api_key: Optional[str] = "test-key",
        image_url: Optional[str] = None,
        image_configured: bool = False,
    ):
        model = FakeModel(text=text, error=error)
        image_service = FakeImageService(url=image_url, configured=image_configured)
        agent = CategorizationAgent(
            settings=GoogleAISettings(api_key=api_key),
            model=model,
        )
        normalizer = ResponseNormalizer(
            image_service=image_service,
            avatar_service=avatar_service,
            audit_logger=audit_logger,
        )
        flow = CategorizationFlow(
            agent=agent,
            normalizer=normalizer,
            audit_logger=audit_logger,
        )
        return flow, model, image_service

    return _make
