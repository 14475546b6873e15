import re
from typing import Iterable, Dict, Any


def re_flags(flags_str: str) -> int:
    """
    Convert a flags string (e.g., 'IGNORECASE|DOTALL') into combined re flags.

    Args:
        flags_str: String containing flag names separated by '|'.

    Returns:
        Combined re flags integer.
    """
    flags = 0
    if not flags_str:
        return flags
    for part in flags_str.split('|'):
        p = part.strip().upper()
        if p == 'IGNORECASE':
            flags |= re.IGNORECASE
        elif p == 'DOTALL':
            flags |= re.DOTALL
        elif p == 'MULTILINE':
            flags |= re.MULTILINE
    return flags


def apply_regex_rules(text: str, rules: Iterable[Dict[str, Any]], logger=None, label: str = '') -> str:
    """
    Apply a list of ``{"name", "regex", "replacement", "flags"}`` rules in order.

    Args:
        text: Text to rewrite.
        rules: Rule dictionaries as stored in the JSON rule files.
        logger: Optional logger; each rule that changes the text is logged at DEBUG.
        label: Context for the log line (e.g. ``default_values[postgres]``).

    Returns:
        The rewritten text.
    """
    for rule in rules:
        pattern = rule.get('regex', '')
        if not pattern:
            continue
        old_text = text
        text = re.sub(pattern, rule.get('replacement', ''), text, flags=re_flags(rule.get('flags', '')))
        if logger is not None and text != old_text:
            logger.debug("Applied rule '%s' from %s: %r -> %r", rule.get('name', 'Unnamed Rule'), label, old_text, text)
    return text
