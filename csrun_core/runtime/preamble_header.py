# ==========================================
# CSRUN RUNTIME
# ==========================================
import sys
import math as _math
import re as _re
from typing import Any, List
