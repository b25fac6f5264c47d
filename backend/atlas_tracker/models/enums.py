from enum import Enum

class Modality(str, Enum):
    INTRAMUSCULAR = "im"
    SUBCUTANEOUS = "subq"

class Laterality(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"
    CENTER = "Center"

class RotationRating(str, Enum):
    INSUFFICIENT = "Insufficient"
    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"

class CompoundCategory(str, Enum):
    SUPPLEMENT = "supplement"
    PED = "ped"
    PEPTIDE = "peptide"
    MEDICINE = "medicine"
