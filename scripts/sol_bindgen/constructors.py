"""
Constructor binding module

Builds the sol::constructors<...>() declarator that opens every usertype
registration.
"""

from typing import Optional

from .codegen import normalize_whitespace, last_segment
from .records import ExportRecord

EMPTY_CONSTRUCTORS = 'sol::constructors<>()'


class ConstructorSynthesizer:
    """Deduplicates constructor overloads by normalized signature"""

    def signatures(self, class_qualified: str, constructors: list[ExportRecord]) -> list[str]:
        """Distinct 'Class(T1, T2)' signatures in first-seen order"""
        seen: dict[str, None] = {}
        for ctor in constructors:
            if not self.is_eligible(ctor, class_qualified):
                continue
            params = ', '.join(normalize_whitespace(p) for p in ctor.parameter_types)
            seen.setdefault(f'{class_qualified}({params})', None)
        return list(seen)

    def declarator(self, class_qualified: str, constructors: Optional[list[ExportRecord]]) -> str:
        """sol::constructors<...>() for the given overloads; empty when none qualify"""
        if not constructors:
            return EMPTY_CONSTRUCTORS
        signatures = self.signatures(class_qualified, constructors)
        if not signatures:
            return EMPTY_CONSTRUCTORS
        return f"sol::constructors<{', '.join(signatures)}>()"

    @staticmethod
    def is_eligible(ctor: ExportRecord, class_qualified: str) -> bool:
        """Deleted, copy and move constructors cannot be called from Lua"""
        if ctor.attributes.get('deleted') == 'true':
            return False
        if len(ctor.parameter_types) != 1:
            return True
        param = normalize_whitespace(ctor.parameter_types[0]).replace(' ', '')
        class_name = last_segment(class_qualified)
        for spelling in (class_qualified, class_name):
            if param in (f'const{spelling}&', f'{spelling}&', f'{spelling}&&'):
                return False
        return True
