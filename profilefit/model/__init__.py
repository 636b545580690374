"""
profilefit Model Module
=======================

Component types, the name -> constructor registry, fit settings, and the
ModelObject that assembles components into a composite profile.

Usage:
    from profilefit.model import build_registry, assemble_model

    registry = build_registry(zero_point=25.0)
    model = assemble_model(spec, registry=registry, zero_point=25.0)
"""

from .registry import (
    ComponentRegistry,
    build_registry,
    format_function_list,
    format_function_parameters,
)
from .model_object import ModelObject, assemble_model
from .options import FitSettings, apply_config_options

__all__ = [
    'ComponentRegistry',
    'build_registry',
    'format_function_list',
    'format_function_parameters',
    'ModelObject',
    'assemble_model',
    'FitSettings',
    'apply_config_options',
]
