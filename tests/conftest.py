#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Pytest bootstrap for local package imports.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


class RecordingTraceSink:
    def __init__(self):
        self.errors = []

    def __call__(self, error):
        self.errors.append(error)


@pytest.fixture
def trace_sink():
    return RecordingTraceSink()


@pytest.fixture(autouse=True)
def _reset_cached_config():
    from funcbridge.config import set_config

    set_config(None)
    yield
    set_config(None)
