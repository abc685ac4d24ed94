from enum import Enum


class Specialty(str, Enum):
    """Specialties offered in the add-doctor form."""
    GENERAL_PHYSICIAN = "General Physician"
    INTERNAL_MEDICINE = "Internal Medicine"
    CARDIOLOGY = "Cardiology"
    DERMATOLOGY = "Dermatology"
    PEDIATRICS = "Pediatrics"
    ORTHOPEDICS = "Orthopedics"
    NEUROLOGY = "Neurology"
    PSYCHIATRY = "Psychiatry"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"


class City(str, Enum):
    """Supported cities."""
    MUMBAI = "Mumbai"
    DELHI = "Delhi"
    BANGALORE = "Bangalore"
    PUNE = "Pune"
    CHENNAI = "Chennai"
    HYDERABAD = "Hyderabad"
    KOLKATA = "Kolkata"
    AHMEDABAD = "Ahmedabad"


# Paths on the external backend (same paths are exposed locally by the proxy)
ADD_DOCTOR_PATH = "/api/add-doctor"
LIST_DOCTORS_PATH = "/api/list-doctor-with-filter"

ADD_DOCTOR_FAILED = "Failed to add doctor"
ADD_DOCTOR_FALLBACK = "Failed to add doctor. Please try again."
FETCH_DOCTORS_FAILED = "Failed to fetch doctors"

# Longest integer accepted from the add-doctor form
MAX_INT_DIGITS = 18
