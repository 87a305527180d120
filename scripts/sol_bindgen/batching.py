"""
Usertype emission module

sol2's new_usertype() is variadic, and compilers give up on very long
argument packs. Small usertypes are registered in one call; larger ones get a
minimal registration call followed by one index assignment per member.
"""

from dataclasses import dataclass, field
from typing import Optional

from .codegen import CodeGen, as_identifier, quoted
from .errors import StructuralError

MAX_REGISTRATION_ARGS = 20

SINGLE_CALL = 'single'
TWO_PHASE = 'two_phase'


@dataclass
class BindingEntry:
    """One bound member: a quoted Lua name or a meta function, and its value"""
    key: str
    value: str

    @classmethod
    def named(cls, lua_name: str, value: str) -> 'BindingEntry':
        return cls(quoted(lua_name), value)


@dataclass
class UsertypeLayout:
    """Everything a new_usertype<T>() registration needs, in emission order"""
    namespace_handle: str
    cpp_type: str
    lua_name: str
    constructors: str
    inheritance: Optional[str] = None
    entries: list[BindingEntry] = field(default_factory=list)

    def bound_names(self) -> set[str]:
        return {entry.key for entry in self.entries}


def registration_cost(layout: UsertypeLayout) -> int:
    """Arguments the single-call form would pass to new_usertype()"""
    cost = 1
    if layout.inheritance:
        cost += 2
    return cost + 2 * len(layout.entries)


class ArgumentBudgetBatcher:
    """Chooses and writes the single-call or two-phase form of a usertype"""

    def __init__(self, max_args: int = MAX_REGISTRATION_ARGS):
        self.max_args = max_args
        self._handles: set[str] = set()

    def strategy(self, layout: UsertypeLayout) -> str:
        if registration_cost(layout) <= self.max_args:
            return SINGLE_CALL
        return TWO_PHASE

    def generate(self, layout: UsertypeLayout, gen: CodeGen, strategy: Optional[str] = None) -> str:
        """Write the registration; returns the strategy used"""
        strategy = strategy or self.strategy(layout)
        if strategy == SINGLE_CALL:
            bound = self._gen_single_call(layout, gen)
        else:
            bound = self._gen_two_phase(layout, gen)
        if bound != layout.bound_names():
            raise StructuralError(
                f"usertype '{layout.lua_name}' bound {sorted(bound)}, "
                f'expected {sorted(layout.bound_names())}')
        return strategy

    def handle_name(self, lua_name: str, suffix: str = '_type') -> str:
        """Unique local variable name for a registered usertype or table"""
        base = as_identifier(lua_name) + suffix
        handle = base
        counter = 2
        while handle in self._handles:
            handle = f'{base}{counter}'
            counter += 1
        self._handles.add(handle)
        return handle

    def reset(self):
        self._handles.clear()

    def _opening(self, layout: UsertypeLayout) -> str:
        return (f'{layout.namespace_handle}.new_usertype<{layout.cpp_type}>'
                f'({quoted(layout.lua_name)},')

    def _gen_single_call(self, layout: UsertypeLayout, gen: CodeGen) -> set[str]:
        args = [layout.constructors]
        if layout.inheritance:
            args.append(layout.inheritance)
        args.extend(f'{entry.key}, {entry.value}' for entry in layout.entries)

        gen.line(self._opening(layout))
        gen.indent()
        for i, arg in enumerate(args):
            gen.line(arg if i == len(args) - 1 else arg + ',')
        gen.dedent()
        gen.line(');')
        return {entry.key for entry in layout.entries}

    def _gen_two_phase(self, layout: UsertypeLayout, gen: CodeGen) -> set[str]:
        handle = self.handle_name(layout.lua_name)
        args = [layout.constructors]
        if layout.inheritance:
            args.append(layout.inheritance)

        gen.line(f'auto {handle} = {self._opening(layout)}')
        gen.indent()
        for i, arg in enumerate(args):
            gen.line(arg if i == len(args) - 1 else arg + ',')
        gen.dedent()
        gen.line(');')

        bound = set()
        for entry in layout.entries:
            gen.line(f'{handle}[{entry.key}] = {entry.value};')
            bound.add(entry.key)
        return bound
