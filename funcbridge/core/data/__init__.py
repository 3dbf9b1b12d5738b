#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Data types and codecs shared across funcbridge.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

from .codec import Base64Codec, BinaryCodec, EnvelopeSerializer, is_binary

__all__ = [
    "Base64Codec",
    "BinaryCodec",
    "EnvelopeSerializer",
    "is_binary",
]
