# ==========================================
# CONVERSIONS & HELPERS
# ==========================================

class Convert:
    """Value conversions."""

    @staticmethod
    def ToInt32(value):
        if isinstance(value, str):
            return int(value.strip())
        if isinstance(value, float):
            # Rounds half to even
            return int(round(value))
        return int(value)

    @staticmethod
    def ToDouble(value):
        if isinstance(value, str):
            return float(value.strip())
        return float(value)

    @staticmethod
    def ToBoolean(value):
        if isinstance(value, str):
            text = value.strip().lower()
            if text == "true":
                return True
            if text == "false":
                return False
            raise ValueError(f"String '{value}' was not recognized as a valid Boolean.")
        return bool(value)

    @staticmethod
    def ToString(value):
        return _cs_str(value)


class Math:
    """Numeric helpers."""
    PI = _math.pi
    E = _math.e

    @staticmethod
    def Abs(value):
        return abs(value)

    @staticmethod
    def Max(left, right):
        return max(left, right)

    @staticmethod
    def Min(left, right):
        return min(left, right)

    @staticmethod
    def Sqrt(value):
        return _math.sqrt(value)

    @staticmethod
    def Pow(base, exponent):
        return _math.pow(base, exponent)

    @staticmethod
    def Floor(value):
        return float(_math.floor(value))

    @staticmethod
    def Ceiling(value):
        return float(_math.ceil(value))

    @staticmethod
    def Round(value, digits=0):
        return round(value, digits)


class String:
    """Static string helpers (``string.Join(...)`` in scripts)."""
    Empty = ""

    @staticmethod
    def Join(separator, values):
        return _cs_str(separator).join(_cs_str(v) for v in values)

    @staticmethod
    def Format(template, *args):
        return _cs_format(template, args)

    @staticmethod
    def IsNullOrEmpty(value):
        return value is None or value == ""

    @staticmethod
    def Concat(*values):
        return "".join(_cs_str(v) for v in values)
