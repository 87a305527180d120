"""
sol_bindgen - sol2 binding generation engine for C++ declarations

This package turns the flat, ordered export records of one module (as
produced by a source-declaration extractor) into a single C++ source file
that registers classes, functions, enums, constants and STL container
instantiations with a sol2 Lua state.
"""

from .records import (
    ExportRecord, RecordSet, RecordKind, PropertyAccess, ClassFlavor, ContainerKind,
    validate_record,
)
from .codegen import CodeGen
from .errors import StructuralError
from .namespaces import NamespaceResolver, NamespaceTable
from .members import MemberAggregator, OrderedRecordSet
from .constructors import ConstructorSynthesizer
from .properties import PropertyAccessorSynthesizer
from .operators import OperatorMapper
from .containers import ContainerBindingSynthesizer
from .batching import ArgumentBudgetBatcher, UsertypeLayout, BindingEntry
from .plan import ClassBindingPlan, ClassPlanBuilder
from .func import FuncGenerator
from .enum import EnumGenerator
from .generator import Generator, GenerationOptions, GenerationResult, GenerationStats

__all__ = [
    'ExportRecord', 'RecordSet', 'RecordKind', 'PropertyAccess', 'ClassFlavor', 'ContainerKind',
    'validate_record',
    'CodeGen',
    'StructuralError',
    'NamespaceResolver', 'NamespaceTable',
    'MemberAggregator', 'OrderedRecordSet',
    'ConstructorSynthesizer',
    'PropertyAccessorSynthesizer',
    'OperatorMapper',
    'ContainerBindingSynthesizer',
    'ArgumentBudgetBatcher', 'UsertypeLayout', 'BindingEntry',
    'ClassBindingPlan', 'ClassPlanBuilder',
    'FuncGenerator',
    'EnumGenerator',
    'Generator', 'GenerationOptions', 'GenerationResult', 'GenerationStats',
]
