r"""Compile the ``{{ }}`` template dialect into Jinja2 syntax.

The dialect has three constructs:

* ``{{#each list as item}} ... {{/each}}`` (optionally ``as item, index``);
* ``{{#if condition}} ... {{/if}}``;
* ``{{ expression }}``.

Every ``{{ ... }}`` token is classified once, block markers first, so a block
delimiter is never mistaken for an output expression. Open and close markers
are paired with an explicit stack, which makes same-kind nesting well defined
and turns unbalanced markers into :class:`~shork.errors.DialectSyntaxError`.
Expressions are passed through to Jinja2 unchanged and rendered raw; the
render environment does not autoescape.

Example
-------
>>> DialectCompiler().compile("{{#if user.isLoggedIn}}<p>Welcome</p>{{/if}}")
'{% if user.isLoggedIn %}<p>Welcome</p>{% endif %}'
"""

from __future__ import annotations

import re

from shork.errors import DialectSyntaxError

TOKEN_PATTERN = re.compile(r"\{\{\s*(.*?)\s*\}\}")
EACH_PATTERN = re.compile(r"#each\s+(.+?)\s+as\s+(.+)", re.DOTALL)
IF_PATTERN = re.compile(r"#if\s+(.+)", re.DOTALL)
IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_]\w*$")


class DialectCompiler:
    """Rewrite dialect tokens into Jinja2 statements and expressions."""

    def compile(self, html: str) -> str:
        """Return ``html`` with every dialect token rewritten.

        Parameters
        ----------
        html : str
            Markup already free of component tags.

        Returns
        -------
        str
            A Jinja2 template source.

        Raises
        ------
        DialectSyntaxError
            If a block is malformed, unknown, closed by the wrong marker, or
            left open.
        """
        stack: list[tuple[str, int]] = []

        def _repl(match: re.Match[str]) -> str:
            content = match.group(1)
            line = html.count("\n", 0, match.start()) + 1
            if content.startswith("#"):
                return self._open_block(content, line, stack)
            if content.startswith("/"):
                return self._close_block(content, line, stack)
            if not content:
                msg = "Empty expression"
                raise DialectSyntaxError(msg, line=line)
            return f"{{{{ {content} }}}}"

        compiled = TOKEN_PATTERN.sub(_repl, html)
        if stack:
            kind, line = stack[-1]
            msg = f"Unclosed {{{{#{kind}}}}} block"
            raise DialectSyntaxError(msg, line=line)
        return compiled

    def _open_block(
        self, content: str, line: int, stack: list[tuple[str, int]]
    ) -> str:
        if each := EACH_PATTERN.fullmatch(content):
            source, targets = each.group(1).strip(), each.group(2)
            stack.append(("each", line))
            return self._for_statement(source, targets, line)
        if condition := IF_PATTERN.fullmatch(content):
            stack.append(("if", line))
            return f"{{% if {condition.group(1).strip()} %}}"
        msg = f"Unknown or malformed block '{{{{{content}}}}}'"
        raise DialectSyntaxError(msg, line=line)

    @staticmethod
    def _for_statement(source: str, targets: str, line: int) -> str:
        names = [name.strip() for name in targets.split(",")]
        if len(names) > 2 or not all(IDENTIFIER_PATTERN.match(n) for n in names):
            msg = f"Invalid each binding '{targets.strip()}'"
            raise DialectSyntaxError(msg, line=line)
        statement = f"{{% for {names[0]} in {source} %}}"
        if len(names) == 2:
            statement += f"{{% set {names[1]} = loop.index0 %}}"
        return statement

    @staticmethod
    def _close_block(content: str, line: int, stack: list[tuple[str, int]]) -> str:
        kind = content[1:].strip()
        if kind not in {"each", "if"}:
            msg = f"Unknown closing marker '{{{{{content}}}}}'"
            raise DialectSyntaxError(msg, line=line)
        if not stack:
            msg = f"{{{{/{kind}}}}} without a matching opening block"
            raise DialectSyntaxError(msg, line=line)
        open_kind, open_line = stack.pop()
        if open_kind != kind:
            msg = (
                f"{{{{/{kind}}}}} closes the {{{{#{open_kind}}}}} block "
                f"opened on line {open_line}"
            )
            raise DialectSyntaxError(msg, line=line)
        return "{% endfor %}" if kind == "each" else "{% endif %}"


__all__ = ["DialectCompiler"]
