from enum import Enum


class CTIndication(str, Enum):
    SURVEILLANCE = "Surveillance"  # positive class
    OTHER_REASONS = "Other Reasons"


class WarningCode(str, Enum):
    NEGATIVE_VALUE_CLAMPED = "NEGATIVE_VALUE_CLAMPED"
    CUTOFF_OUT_OF_RANGE = "CUTOFF_OUT_OF_RANGE"
