"""
Operator binding module

Maps C++ operator overloads onto sol2 meta functions.
"""

from typing import Optional

META_FUNCTIONS = {
    '+': 'sol::meta_function::addition',
    '-': 'sol::meta_function::subtraction',
    '*': 'sol::meta_function::multiplication',
    '/': 'sol::meta_function::division',
    '==': 'sol::meta_function::equal_to',
    '<': 'sol::meta_function::less_than',
    '<=': 'sol::meta_function::less_than_or_equal_to',
    '>': 'sol::meta_function::greater_than',
    '>=': 'sol::meta_function::greater_than_or_equal_to',
    '[]': 'sol::meta_function::index',
    '()': 'sol::meta_function::call',
}


def operator_symbol(name: str) -> str:
    """operator+ -> +, 'operator []' -> []"""
    if name.startswith('operator'):
        name = name[len('operator'):]
    return name.replace(' ', '')


class OperatorMapper:
    """Closed operator table; anything else (=, ->, &, != ...) has no mapping"""

    def map(self, operator_name: str) -> Optional[str]:
        return META_FUNCTIONS.get(operator_symbol(operator_name))
