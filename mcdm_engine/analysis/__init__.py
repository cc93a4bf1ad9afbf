# -*- coding: utf-8 -*-
"""
Analysis Module
===============

Agreement between rankings produced by different methods.
"""

from .agreement import AgreementResult, compare_rankings

__all__ = [
    'AgreementResult', 'compare_rankings',
]
