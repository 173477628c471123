from typing import Any, Tuple

from .errors import MalformedExpression

BRACKETS = {'(': ')', '[': ']', '{': '}'}
CLOSERS = set(BRACKETS.values())
STRING = '"'


def check_expression(expression: str, path: Tuple[Any, ...] = ()) -> str:
    """Cheap well-formedness check for raw Terraform expression text.

    Only delimiters are checked: brackets must balance and string literals
    (including ``${...}`` template splices inside them) must terminate. This
    is not a Terraform grammar check. Returns the expression unchanged.
    """
    if not isinstance(expression, str) or not expression.strip():
        raise MalformedExpression("empty expression", path)

    stack = []
    i = 0
    n = len(expression)
    while i < n:
        ch = expression[i]
        top = stack[-1] if stack else None
        if top == STRING:
            if ch == '\\':
                i += 2
                continue
            if expression.startswith(('$${', '%%{'), i):
                i += 3
                continue
            if ch == STRING:
                stack.pop()
            elif ch in '$%' and expression.startswith('{', i + 1):
                stack.append('}')
                i += 2
                continue
        elif ch == STRING:
            stack.append(STRING)
        elif ch in BRACKETS:
            stack.append(BRACKETS[ch])
        elif ch in CLOSERS:
            if top != ch:
                raise MalformedExpression(f"unexpected '{ch}' at offset {i} in {expression!r}", path)
            stack.pop()
        i += 1

    if stack:
        if stack[-1] == STRING:
            raise MalformedExpression(f"unterminated string literal in {expression!r}", path)
        raise MalformedExpression(f"missing '{stack[-1]}' in {expression!r}", path)
    return expression
