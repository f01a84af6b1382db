"""
Line tokenizer

Splits an input line into tokens, separates ``--flag`` tokens from positional
ones and merges both into a per-parameter mapping.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List

from cmdseam.commands.descriptor import CommandDescriptor

# A token is a run of non-space characters and double-quoted spans.
# An unterminated quote swallows the rest of the line.
_TOKEN_RE = re.compile(r'(?:[^\s"]+|"[^"]*"?)+')


def tokenize(line: str) -> List[str]:
    """Split ``line`` on whitespace outside double quotes and strip the quotes

    >>> tokenize('say "hello world" --to=bob')
    ['say', 'hello world', '--to=bob']
    """
    return [match.group(0).replace('"', '') for match in _TOKEN_RE.finditer(line)]


@dataclass
class SplitArguments:
    """Tokens after the command name, split into flags and positionals"""
    flags: Dict[str, str] = field(default_factory=dict)
    positionals: List[str] = field(default_factory=list)


def split_flags(tokens: List[str]) -> SplitArguments:
    """Separate ``--key=value`` / ``--key value`` flags from positional tokens

    ``--key`` followed by another ``--`` token or the end of the line binds an
    empty string. A bare ``--`` makes every following token positional.
    Single-dash tokens such as ``-5`` stay positional.
    """
    result = SplitArguments()
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == "--":
            result.positionals.extend(tokens[i + 1:])
            break
        if token.startswith("--") and len(token) > 2:
            key, sep, value = token[2:].partition("=")
            if not sep:
                if i + 1 < len(tokens) and not tokens[i + 1].startswith("--"):
                    value = tokens[i + 1]
                    i += 1
                else:
                    value = ""
            result.flags[key] = value
        else:
            result.positionals.append(token)
        i += 1
    return result


def merge_arguments(descriptor: CommandDescriptor, args: SplitArguments) -> Dict[str, str]:
    """Build the per-parameter raw value mapping

    Flags win. Positional tokens then fill the positional parameters that no
    flag bound, in declaration order. Surplus tokens are dropped.

    A slot bound by a flag consumes no token, unlike minimist-style parsers
    that advance the positional index regardless: with positional ``a`` and
    ``b``, ``add --a=1 2`` binds ``b`` to ``2`` here instead of leaving it unset.
    """
    values = {param.name: args.flags[param.name]
              for param in descriptor.parameters if param.name in args.flags}

    leftovers = iter(args.positionals)
    for param in descriptor.positional_parameters:
        if param.name in values:
            continue
        token = next(leftovers, None)
        if token is None:
            break
        values[param.name] = token
    return values
