"""Structured registry of recognized laboratories.

Each entry carries the name variants seen on real reports, the region it
operates in, the accession-number format it prints (when known) and the
provincial health card its patients present.
"""

import re
import unicodedata
from typing import Literal

from pydantic import BaseModel, ConfigDict

Country = Literal["CA", "US", "UK", "INTL"]

# Words too generic to identify a laboratory on their own.
GENERIC_LAB_WORDS = frozenset(
    {
        "lab",
        "labs",
        "laboratory",
        "laboratories",
        "medical",
        "clinic",
        "hospital",
        "health",
        "diagnostics",
        "services",
        "test",
        "inc",
    }
)


class RecognizedLab(BaseModel):
    """A laboratory whose reports count toward verification."""

    model_config = ConfigDict(frozen=True)

    id: str
    canonical_name: str
    variations: tuple[str, ...] = ()
    abbreviations: tuple[str, ...] = ()
    region: str
    country: Country
    accession_format: str | None = None
    health_card_type: str | None = None

    def accepts_accession(self, accession_number: str) -> bool:
        """Whether an accession number matches this lab's printed format."""
        if not self.accession_format:
            return False
        compact = re.sub(r"[\s-]", "", accession_number or "").upper()
        return re.fullmatch(self.accession_format, compact) is not None


LAB_REGISTRY: tuple[RecognizedLab, ...] = (
    # Canada - Ontario
    RecognizedLab(
        id="lifelabs-on",
        canonical_name="LifeLabs",
        variations=(
            "LifeLabs",
            "Life Labs",
            "LifeLabs Medical Laboratory",
            "LifeLabs Medical Laboratories",
            "LifeLabs Medical Lab",
            "LifeLabs Laboratory",
            "LifeLabs Ontario",
            "LifeLabs Medical Laboratory Services",
            "LifeLabs Inc",
        ),
        abbreviations=("LL",),
        region="ON",
        country="CA",
        accession_format=r"^L\d{7,10}$",
        health_card_type="OHIP",
    ),
    RecognizedLab(
        id="pho",
        canonical_name="Public Health Ontario",
        variations=(
            "Public Health Ontario",
            "Public Health Ontario Laboratory",
            "Public Health Ontario Laboratories",
            "Public Health Ontario Lab",
            "Ontario Public Health Laboratory",
            "Ontario Public Health Lab",
            "PHO Laboratory",
            "PHO Lab",
        ),
        abbreviations=("PHO", "PHOL"),
        region="ON",
        country="CA",
        accession_format=r"^PH\d{6,8}$",
        health_card_type="OHIP",
    ),
    RecognizedLab(
        id="dynacare-on",
        canonical_name="Dynacare",
        variations=(
            "Dynacare",
            "Dynacare Medical Laboratory",
            "Dynacare Medical Laboratories",
            "Dynacare Laboratory",
            "Dynacare Lab",
            "Dynacare Inc",
        ),
        abbreviations=("DC",),
        region="ON",
        country="CA",
        accession_format=r"^[A-Z]{2,3}\d{6,10}$",
        health_card_type="OHIP",
    ),
    RecognizedLab(
        id="gamma-dynacare",
        canonical_name="Gamma-Dynacare",
        variations=(
            "Gamma-Dynacare",
            "Gamma Dynacare",
            "Gamma-Dynacare Medical Laboratories",
            "Gamma-Dynacare Medical Laboratory",
            "Gamma-Dynacare Lab",
        ),
        abbreviations=("GDC", "GDML"),
        region="ON",
        country="CA",
        accession_format=r"^[A-Z]{2,3}\d{6,10}$",
        health_card_type="OHIP",
    ),
    RecognizedLab(
        id="medlabs",
        canonical_name="MedLabs",
        variations=("MedLabs", "Med Labs", "MedLabs Inc", "MedLabs Diagnostics"),
        region="ON",
        country="CA",
        health_card_type="OHIP",
    ),
    RecognizedLab(
        id="hassle-free-clinic",
        canonical_name="Hassle Free Clinic",
        variations=(
            "Hassle Free Clinic",
            "Hassle-Free Clinic",
            "Hassle Free Clinic Lab",
            "HFC Toronto",
        ),
        abbreviations=("HFC",),
        region="ON",
        country="CA",
        health_card_type="OHIP",
    ),
    RecognizedLab(
        id="mapletree-medical",
        canonical_name="Mapletree Medical",
        variations=("Mapletree Medical", "Mapletree Medical Lab", "Mapletree Lab"),
        region="ON",
        country="CA",
        health_card_type="OHIP",
    ),
    # Canada - British Columbia
    RecognizedLab(
        id="lifelabs-bc",
        canonical_name="LifeLabs BC",
        variations=(
            "LifeLabs BC",
            "LifeLabs British Columbia",
            "Life Labs BC",
            "LifeLabs Vancouver",
            "LifeLabs Victoria",
        ),
        abbreviations=("LL BC",),
        region="BC",
        country="CA",
        accession_format=r"^L\d{7,10}$",
        health_card_type="MSP",
    ),
    RecognizedLab(
        id="bccdc",
        canonical_name="BC Centre for Disease Control",
        variations=(
            "BC Centre for Disease Control",
            "BC Center for Disease Control",
            "British Columbia Centre for Disease Control",
            "BC CDC",
            "BC CDC Laboratory",
            "BCCDC Laboratory",
            "BCCDC Public Health Laboratory",
        ),
        abbreviations=("BCCDC", "BC CDC"),
        region="BC",
        country="CA",
        health_card_type="MSP",
    ),
    RecognizedLab(
        id="vgh",
        canonical_name="Vancouver General Hospital",
        variations=(
            "Vancouver General Hospital",
            "Vancouver General Hospital Laboratory",
            "VGH Laboratory",
            "VGH Lab",
        ),
        abbreviations=("VGH",),
        region="BC",
        country="CA",
        health_card_type="MSP",
    ),
    # Canada - Alberta
    RecognizedLab(
        id="dynalife",
        canonical_name="DynaLIFE",
        variations=(
            "DynaLIFE",
            "Dyna LIFE",
            "DynaLIFE Medical Labs",
            "DynaLIFE Medical Laboratory",
            "DynaLIFE Dx",
            "DynaLIFE Edmonton",
        ),
        abbreviations=("DL",),
        region="AB",
        country="CA",
        accession_format=r"^DL\d{6,8}$",
        health_card_type="AHCIP",
    ),
    RecognizedLab(
        id="apl",
        canonical_name="Alberta Precision Laboratories",
        variations=(
            "Alberta Precision Laboratories",
            "Alberta Precision Labs",
            "Alberta Precision Laboratory",
            "APL Laboratory",
            "APL Lab",
        ),
        abbreviations=("APL",),
        region="AB",
        country="CA",
        health_card_type="AHCIP",
    ),
    RecognizedLab(
        id="calgary-lab-services",
        canonical_name="Calgary Lab Services",
        variations=(
            "Calgary Lab Services",
            "Calgary Laboratory Services",
            "CLS Laboratory",
            "CLS Lab",
        ),
        abbreviations=("CLS",),
        region="AB",
        country="CA",
        health_card_type="AHCIP",
    ),
    # Canada - Prairies and Quebec
    RecognizedLab(
        id="roy-romanow",
        canonical_name="Roy Romanow Provincial Laboratory",
        variations=(
            "Roy Romanow Provincial Laboratory",
            "Roy Romanow Provincial Lab",
            "Saskatchewan Disease Control Laboratory",
        ),
        abbreviations=("RRPL",),
        region="SK",
        country="CA",
        health_card_type="SHSP",
    ),
    RecognizedLab(
        id="cadham",
        canonical_name="Cadham Provincial Laboratory",
        variations=("Cadham Provincial Laboratory", "Cadham Provincial Lab", "Cadham Lab"),
        abbreviations=("CPL MB",),
        region="MB",
        country="CA",
        health_card_type="MHSIP",
    ),
    RecognizedLab(
        id="biron",
        canonical_name="Biron",
        variations=(
            "Biron",
            "Biron Groupe Sante",
            "Biron Health Group",
            "Biron Laboratoire",
            "Biron Medical Laboratory",
            "Groupe Biron",
        ),
        region="QC",
        country="CA",
        health_card_type="RAMQ",
    ),
    # United States
    RecognizedLab(
        id="quest-diagnostics",
        canonical_name="Quest Diagnostics",
        variations=(
            "Quest Diagnostics",
            "Quest Diagnostics Incorporated",
            "Quest Diagnostics Inc",
            "Quest Diagnostics LLC",
            "Quest Diagnostics Clinical Laboratories",
            "Quest Labs",
        ),
        abbreviations=("Quest", "QD"),
        region="NJ",
        country="US",
        accession_format=r"^\d{10,12}$",
    ),
    RecognizedLab(
        id="labcorp",
        canonical_name="LabCorp",
        variations=(
            "LabCorp",
            "Laboratory Corporation of America",
            "Laboratory Corporation of America Holdings",
            "Lab Corp",
            "LabCorp Diagnostics",
        ),
        abbreviations=("LCA",),
        region="NC",
        country="US",
        accession_format=r"^\d{8,12}$",
    ),
    RecognizedLab(
        id="bioreference-laboratories",
        canonical_name="BioReference Laboratories",
        variations=(
            "BioReference Laboratories",
            "BioReference Labs",
            "Bio Reference Laboratories",
            "GenPath Diagnostics",
        ),
        abbreviations=("BRL",),
        region="NJ",
        country="US",
        accession_format=r"^\d{8,12}$",
    ),
    RecognizedLab(
        id="arup-laboratories",
        canonical_name="ARUP Laboratories",
        variations=(
            "ARUP Laboratories",
            "ARUP Labs",
            "ARUP Reference Laboratories",
            "Associated Regional and University Pathologists",
        ),
        abbreviations=("ARUP",),
        region="UT",
        country="US",
        accession_format=r"^\d{8,10}$",
    ),
    RecognizedLab(
        id="mayo-clinic-laboratories",
        canonical_name="Mayo Clinic Laboratories",
        variations=(
            "Mayo Clinic Laboratories",
            "Mayo Clinic Labs",
            "Mayo Medical Laboratories",
            "Mayo Reference Services",
        ),
        abbreviations=("MCL",),
        region="MN",
        country="US",
        accession_format=r"^[A-Z]{0,3}\d{7,12}$",
    ),
    RecognizedLab(
        id="sonic-healthcare-usa",
        canonical_name="Sonic Healthcare USA",
        variations=("Sonic Healthcare USA", "Sonic Healthcare", "Sonic Clinical Labs"),
        region="TX",
        country="US",
    ),
    RecognizedLab(
        id="clinical-pathology-laboratories",
        canonical_name="Clinical Pathology Laboratories",
        variations=(
            "Clinical Pathology Laboratories",
            "Clinical Pathology Labs",
            "CPL Laboratories",
            "CPL Labs",
        ),
        abbreviations=("CPL",),
        region="TX",
        country="US",
        accession_format=r"^\d{8,12}$",
    ),
    # United Kingdom
    RecognizedLab(
        id="nhs-blood-and-transplant",
        canonical_name="NHS Blood and Transplant",
        variations=(
            "NHS Blood and Transplant",
            "NHS Blood & Transplant",
            "NHSBT Laboratory",
            "NHS Blood Service",
        ),
        abbreviations=("NHSBT",),
        region="UK",
        country="UK",
    ),
    RecognizedLab(
        id="uk-health-security-agency",
        canonical_name="UK Health Security Agency",
        variations=(
            "UK Health Security Agency",
            "UKHSA Laboratory",
            "Public Health England",
            "PHE Laboratory",
        ),
        abbreviations=("UKHSA", "PHE"),
        region="UK",
        country="UK",
    ),
)


def _fold(text: str) -> str:
    """Lowercase, drop diacritics and collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return " ".join(stripped.lower().split())


def _contains_words(haystack: str, needle: str) -> bool:
    return f" {needle} " in f" {haystack} "


def find_lab_by_name(raw_name: str | None) -> RecognizedLab | None:
    """Match a raw laboratory name to a registry entry.

    Tries an exact abbreviation, then an exact name or variation, then a
    whole-word containment in either direction. Inputs made only of generic
    words ("Medical Lab") never match by containment.
    """
    if not raw_name or not raw_name.strip():
        return None
    name = _fold(raw_name)

    for lab in LAB_REGISTRY:
        if any(_fold(abbr) == name for abbr in lab.abbreviations):
            return lab

    for lab in LAB_REGISTRY:
        if _fold(lab.canonical_name) == name:
            return lab
        if any(_fold(variation) == name for variation in lab.variations):
            return lab

    specific = any(word not in GENERIC_LAB_WORDS for word in name.split())
    for lab in LAB_REGISTRY:
        for variation in lab.variations:
            folded = _fold(variation)
            if _contains_words(name, folded):
                return lab
            if specific and len(name) >= 4 and _contains_words(folded, name):
                return lab
    return None


def get_lab_by_id(lab_id: str) -> RecognizedLab | None:
    return next((lab for lab in LAB_REGISTRY if lab.id == lab_id), None)


def get_labs_by_region(region: str) -> list[RecognizedLab]:
    return [lab for lab in LAB_REGISTRY if lab.region == region]


def get_health_card_type(region: str) -> str | None:
    """Health card presented in a region, e.g. ``"OHIP"`` for ``"ON"``."""
    lab = next((lab for lab in LAB_REGISTRY if lab.region == region), None)
    return lab.health_card_type if lab else None
