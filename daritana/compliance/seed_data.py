"""Bundled UBBL 1984 clause table used to seed the clause database.

Covers the clauses with numeric limits on building type, height, floor
area or occupancy, plus a selection of documentary clauses that apply
without thresholds.
"""

from __future__ import annotations

from daritana.compliance.clauses import Clause, Requirement

_RESIDENTIAL_COMMERCIAL = ["residential", "commercial", "mixed-use", "high-rise", "low-rise"]
_NON_RESIDENTIAL = ["commercial", "industrial", "institutional", "assembly", "high-rise"]

SEED_CLAUSES: list[Clause] = [
    # -- Part I: Preliminary ---------------------------------------------------
    Clause(
        id="ubbl-1",
        title="Citation",
        description="These By-laws may be cited as the Uniform Building By-Laws 1984.",
        section="Part I",
        category="mandatory",
        applicable_types=["*"],
        keywords=["citation", "title", "reference"],
        explainers={
            "en": "Official name of the Malaysian building regulations, used in "
                  "plan submissions, approvals and professional reports.",
            "ms": "Nama rasmi peraturan bangunan Malaysia yang digunakan dalam "
                  "penyerahan pelan, kelulusan dan laporan profesional.",
        },
    ),
    Clause(
        id="ubbl-2",
        title="Interpretation",
        description="Definitions of terms used throughout the by-laws.",
        section="Part I",
        category="mandatory",
        applicable_types=["*"],
        keywords=["definitions", "interpretation"],
    ),
    # -- Part II: Submission of plans -----------------------------------------
    Clause(
        id="ubbl-3",
        title="Submission of plans",
        description="Plans shall be submitted to the local authority for approval "
                    "before commencement of building operations.",
        section="Part II",
        category="mandatory",
        applicable_types=["*"],
        keywords=["plans", "approval", "local authority", "submission"],
        explainers={
            "en": "Architectural, structural and M&E drawings with calculations "
                  "must be approved before work starts on site.",
        },
    ),
    Clause(
        id="ubbl-7",
        title="Notice of commencement",
        description="Written notice to the local authority before commencement of "
                    "building operations.",
        section="Part II",
        category="mandatory",
        applicable_types=["*"],
        keywords=["notice", "commencement"],
    ),
    # -- Part III: Space, light and ventilation -------------------------------
    Clause(
        id="ubbl-39",
        title="Natural lighting and ventilation",
        description="Every room shall be provided with natural lighting and "
                    "ventilation through windows of at least 10% of floor area.",
        section="Part III",
        category="mandatory",
        applicable_types=_RESIDENTIAL_COMMERCIAL,
        keywords=["lighting", "ventilation", "windows"],
    ),
    Clause(
        id="ubbl-42",
        title="Minimum area of dwellings",
        description="A dwelling shall have a total floor area of not less than 36 m².",
        section="Part III",
        category="mandatory",
        applicable_types=["residential"],
        requirements=[
            Requirement(parameter="floor_area", comparator="at_least", threshold=36),
        ],
        severity="major",
        recommendation="Increase the dwelling floor area to at least 36 m².",
        keywords=["floor area", "dwelling", "habitable"],
    ),
    # -- Part V: Structural requirements --------------------------------------
    Clause(
        id="ubbl-53",
        title="Loads on structures",
        description="Buildings shall be designed to carry dead, imposed and wind "
                    "loads in accordance with the applicable standards.",
        section="Part V",
        category="mandatory",
        applicable_types=["*"],
        keywords=["structural", "loads", "wind"],
    ),
    # -- Part VI: Constructional requirements ---------------------------------
    Clause(
        id="ubbl-124",
        title="Lifts",
        description="Buildings exceeding four storeys (about 18 m) above or below "
                    "the main access level shall be provided with lifts; low-rise "
                    "buildings are classified below this height.",
        section="Part VI",
        category="conditional",
        applicable_types=["low-rise"],
        requirements=[
            Requirement(parameter="building_height", comparator="in_range", threshold=[0, 18]),
        ],
        severity="major",
        recommendation="Provide lifts or reclassify the building as high-rise.",
        keywords=["lifts", "storeys", "height"],
    ),
    Clause(
        id="ubbl-124A",
        title="High-rise classification",
        description="High-rise requirements apply to buildings of 18 m and above.",
        section="Part VI",
        category="conditional",
        applicable_types=["high-rise"],
        requirements=[
            Requirement(parameter="building_height", comparator="at_least", threshold=18),
        ],
        recommendation="Confirm the building height or classify the building as low-rise.",
        keywords=["high-rise", "classification", "height"],
    ),
    # -- Part VII: Fire requirements ------------------------------------------
    Clause(
        id="ubbl-136",
        title="Compartment size",
        description="Buildings without automatic sprinklers shall be divided into "
                    "compartments not exceeding 7000 m² of floor area.",
        section="Part VII",
        category="mandatory",
        applicable_types=["commercial", "mixed-use"],
        requirements=[
            Requirement(parameter="floor_area", comparator="at_most", threshold=7000),
        ],
        severity="critical",
        recommendation="Subdivide the floor area into fire compartments or install "
                       "automatic sprinklers.",
        keywords=["fire", "compartment", "sprinkler", "floor area"],
        explainers={
            "en": "Compartmentation limits fire spread; larger floors need "
                  "sprinklers or fire-rated separating walls.",
            "ms": "Pemetakan mengehadkan rebakan api; lantai yang lebih besar "
                  "memerlukan pemercik atau dinding pemisah kalis api.",
        },
    ),
    Clause(
        id="ubbl-137",
        title="Industrial compartment size",
        description="Factory and storage buildings shall be compartmented at "
                    "4500 m² of floor area unless sprinkler protected.",
        section="Part VII",
        category="mandatory",
        applicable_types=["industrial"],
        requirements=[
            Requirement(parameter="floor_area", comparator="at_most", threshold=4500),
        ],
        severity="critical",
        recommendation="Add compartment walls or sprinkler protection to the "
                       "industrial floor area.",
        keywords=["fire", "compartment", "industrial", "factory"],
    ),
    Clause(
        id="ubbl-140",
        title="Fire appliance access",
        description="Buildings shall be provided with access for fire appliances "
                    "of not less than 6 m width.",
        section="Part VII",
        category="mandatory",
        applicable_types=_NON_RESIDENTIAL,
        keywords=["fire", "access", "appliance", "road"],
    ),
    Clause(
        id="ubbl-168",
        title="Single staircase buildings",
        description="A single staircase is permitted only where the building does "
                    "not exceed 12 m in height and 50 occupants.",
        section="Part VII",
        category="conditional",
        applicable_types=["residential", "low-rise"],
        requirements=[
            Requirement(parameter="building_height", comparator="at_most", threshold=12),
            Requirement(parameter="occupancy", comparator="at_most", threshold=50),
        ],
        severity="critical",
        recommendation="Provide a second protected staircase as an alternative "
                       "means of escape.",
        keywords=["fire", "escape", "staircase", "occupancy"],
        explainers={
            "en": "Above these limits occupants need two independent escape "
                  "routes so that one blocked stair does not trap them.",
            "ms": "Melebihi had ini penghuni memerlukan dua laluan keluar "
                  "berasingan supaya tangga yang tersekat tidak memerangkap mereka.",
        },
    ),
    Clause(
        id="ubbl-172",
        title="Emergency exit signs",
        description="Storey exits and access to such exits shall be marked by "
                    "readily visible signs.",
        section="Part VII",
        category="mandatory",
        applicable_types=_NON_RESIDENTIAL + ["mixed-use"],
        keywords=["fire", "exit", "signs", "emergency lighting"],
    ),
    Clause(
        id="ubbl-178",
        title="Exits for assembly buildings",
        description="Places of assembly with more than 1000 occupants require "
                    "additional exits and a fire safety plan.",
        section="Part VII",
        category="conditional",
        applicable_types=["assembly"],
        requirements=[
            Requirement(parameter="occupancy", comparator="at_most", threshold=1000),
        ],
        severity="critical",
        recommendation="Provide additional exits and submit a fire safety plan for "
                       "the assembly occupancy.",
        keywords=["assembly", "exits", "occupancy", "fire"],
    ),
    # -- Part VIII: Fire alarms, detection and extinguishment -----------------
    Clause(
        id="ubbl-225",
        title="Fire detection and extinguishment",
        description="Every building shall be served by fire detection and "
                    "extinguishment facilities appropriate to its size and use.",
        section="Part VIII",
        category="mandatory",
        applicable_types=["*"],
        keywords=["fire", "detection", "alarm", "extinguisher"],
    ),
    Clause(
        id="ubbl-228",
        title="Sprinkler valves",
        description="Sprinkler systems in high-rise buildings shall be designed "
                    "for buildings up to 150 m without intermediate pump stages.",
        section="Part VIII",
        category="recommended",
        applicable_types=["high-rise"],
        requirements=[
            Requirement(parameter="building_height", comparator="at_most", threshold=150),
        ],
        recommendation="Provide intermediate sprinkler pump stages for the "
                       "additional height.",
        keywords=["sprinkler", "high-rise", "pump"],
    ),
    # -- Part IX: Special requirements ----------------------------------------
    Clause(
        id="ubbl-34A",
        title="Facilities for disabled persons",
        description="Buildings to which the public has access shall provide "
                    "ramps, accessible toilets and parking for disabled persons.",
        section="Part IX",
        category="mandatory",
        applicable_types=["commercial", "institutional", "assembly"],
        keywords=["accessibility", "disabled", "ramps", "oku"],
    ),
    Clause(
        id="ubbl-250",
        title="Institutional occupant load",
        description="Hospitals and schools exceeding 500 occupants shall provide "
                    "staged evacuation facilities.",
        section="Part IX",
        category="conditional",
        applicable_types=["institutional"],
        requirements=[
            Requirement(parameter="occupancy", comparator="at_most", threshold=500),
        ],
        severity="major",
        recommendation="Provide refuge areas and a staged evacuation plan.",
        keywords=["institutional", "hospital", "school", "evacuation"],
    ),
]
