"""Shared fixtures for the test suite."""

import copy
from datetime import datetime
from pathlib import Path

import pytest
from omegaconf import OmegaConf

from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.utils.timestamp import FixedClock

FIXTURES_PATH = Path(__file__).parent / "fixtures"
SAMPLE_RESUME_PATH = FIXTURES_PATH / "sample_resume.yaml"

# 1x1 transparent PNG
TINY_PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
)


@pytest.fixture
def sample_data():
    """Raw persisted-layout dict of the sample résumé (a fresh copy per test)."""
    return OmegaConf.to_container(OmegaConf.load(SAMPLE_RESUME_PATH), resolve=True)


@pytest.fixture
def sample_resume(sample_data):
    return ResumeDocument.from_dict(sample_data)


@pytest.fixture
def make_resume(sample_data):
    """Factory building a document from the sample with top-level fields overridden."""

    def _make(**overrides):
        data = copy.deepcopy(sample_data)
        data.update(overrides)
        return ResumeDocument.from_dict(data)

    return _make


@pytest.fixture
def minimal_resume():
    """Only a name: every section is empty."""
    return ResumeDocument.from_dict({"personalInfo": {"fullName": "Solo Person"}})


@pytest.fixture
def fixed_clock():
    return FixedClock(datetime(2025, 3, 4, 5, 6, 7, 890000))


@pytest.fixture
def tiny_png():
    """Bare base64 payload of a 1x1 PNG."""
    return TINY_PNG_BASE64
