#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Single source of truth for the funcbridge package version.

Author: Silan Hu (silan.hu@u.nus.edu)
"""

__version__ = "0.3.0"
