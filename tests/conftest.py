"""
Shared pytest fixtures for repodiff tests.

Provides a repository descriptor, run options and an in-memory fake of the
hosted contents API built on httpx.MockTransport.
"""

import io
from pathlib import Path
from typing import Any, Dict

import pytest
from rich.console import Console

from repodiff.config import RepositoryDescriptor, RunOptions
from repodiff.reporting import ReportSink

from .fakes import API_URL, REPOSITORY, FakeRemote


@pytest.fixture
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def descriptor() -> RepositoryDescriptor:
    return RepositoryDescriptor(name=REPOSITORY, files=["src"], ignore=[])


@pytest.fixture
def make_options(tmp_path: Path):
    """Factory for RunOptions rooted at the test's tmp_path."""

    def _make(**overrides) -> RunOptions:
        values: Dict[str, Any] = {
            "token": "test-token",
            "local_root": tmp_path,
            "api_url": API_URL,
        }
        values.update(overrides)
        return RunOptions(**values)

    return _make


@pytest.fixture
def console_output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_reporter(console_output: io.StringIO):
    def _make(verbose: bool = False) -> ReportSink:
        console = Console(file=console_output, width=200, color_system=None)
        return ReportSink(console=console, verbose=verbose)

    return _make
