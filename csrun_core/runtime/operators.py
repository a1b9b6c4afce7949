# ==========================================
# OPERATORS & STRING CONVERSION
# ==========================================

def _cs_str(value):
    """Convert a value to text the way script code expects to see it."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "True" if value else "False"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _cs_add(left, right):
    """``+``: string concatenation when either side is a string, otherwise addition."""
    if isinstance(left, str) or isinstance(right, str):
        return _cs_str(left) + _cs_str(right)
    return left + right


def _is_integer(value):
    return isinstance(value, int) and not isinstance(value, bool)


def _cs_div(left, right):
    """``/``: integer division truncates toward zero."""
    if _is_integer(left) and _is_integer(right):
        quotient = abs(left) // abs(right)
        return quotient if (left >= 0) == (right >= 0) else -quotient
    return left / right


def _cs_mod(left, right):
    """``%``: the remainder takes the sign of the dividend."""
    if _is_integer(left) and _is_integer(right):
        return left - right * _cs_div(left, right)
    return _math.fmod(left, right)


def _cs_format(template, args):
    """Substitute ``{0}``, ``{1}``... placeholders."""
    def replace(match):
        return _cs_str(args[int(match.group(1))])
    return _re.sub(r"\{(\d+)\}", replace, _cs_str(template))
