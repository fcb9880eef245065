"""Reference specifications for named major surface combatants.

Figures are public open-source approximations (full-load displacement in
metric tons, maximum speed in knots, typical embarked air wing).
"""

from mda.models.base import ShipTypeEnum

SHIP_CATALOG: list[dict] = [
    {
        "name": "USS Gerald R. Ford",
        "aliases": ("CVN-78", "Gerald Ford", "Ford"),
        "country": "US",
        "ship_class": "Gerald R. Ford-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 100000,
        "max_speed_knots": 30.0,
        "armament": ("RIM-162 ESSM", "RIM-116 RAM", "Phalanx CIWS"),
        "fixed_wing_aircraft": 60,
        "helicopters": 15,
    },
    {
        "name": "USS Nimitz",
        "aliases": ("CVN-68",),
        "country": "US",
        "ship_class": "Nimitz-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 100000,
        "max_speed_knots": 31.5,
        "armament": ("RIM-7 Sea Sparrow", "RIM-116 RAM", "Phalanx CIWS"),
        "fixed_wing_aircraft": 55,
        "helicopters": 12,
    },
    {
        "name": "USS Abraham Lincoln",
        "aliases": ("CVN-72", "Abraham Lincoln"),
        "country": "US",
        "ship_class": "Nimitz-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 100000,
        "max_speed_knots": 31.5,
        "armament": ("RIM-7 Sea Sparrow", "RIM-116 RAM", "Phalanx CIWS"),
        "fixed_wing_aircraft": 55,
        "helicopters": 12,
    },
    {
        "name": "USS Theodore Roosevelt",
        "aliases": ("CVN-71", "Theodore Roosevelt"),
        "country": "US",
        "ship_class": "Nimitz-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 104600,
        "max_speed_knots": 31.5,
        "armament": ("RIM-7 Sea Sparrow", "RIM-116 RAM", "Phalanx CIWS"),
        "fixed_wing_aircraft": 55,
        "helicopters": 12,
    },
    {
        "name": "USS America",
        "aliases": ("LHA-6",),
        "country": "US",
        "ship_class": "America-class",
        "type": ShipTypeEnum.AMPHIBIOUS,
        "displacement_tons": 45000,
        "max_speed_knots": 22.0,
        "armament": ("RIM-162 ESSM", "RIM-116 RAM", "Phalanx CIWS"),
        "fixed_wing_aircraft": 20,
        "helicopters": 12,
    },
    {
        "name": "Liaoning",
        "aliases": ("CV-16", "CNS Liaoning"),
        "country": "CN",
        "ship_class": "Type 001",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 60900,
        "max_speed_knots": 30.0,
        "armament": ("HQ-10 SAM", "Type 1130 CIWS"),
        "fixed_wing_aircraft": 24,
        "helicopters": 12,
    },
    {
        "name": "Shandong",
        "aliases": ("CV-17", "CNS Shandong"),
        "country": "CN",
        "ship_class": "Type 002",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 66000,
        "max_speed_knots": 31.0,
        "armament": ("HQ-10 SAM", "Type 1130 CIWS"),
        "fixed_wing_aircraft": 32,
        "helicopters": 12,
    },
    {
        "name": "Fujian",
        "aliases": ("CV-18", "CNS Fujian"),
        "country": "CN",
        "ship_class": "Type 003",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 80000,
        "max_speed_knots": 31.0,
        "armament": ("HQ-10 SAM", "Type 1130 CIWS"),
        "fixed_wing_aircraft": 40,
        "helicopters": 12,
    },
    {
        "name": "Nanchang",
        "aliases": ("101", "CNS Nanchang"),
        "country": "CN",
        "ship_class": "Type 055",
        "type": ShipTypeEnum.DESTROYER,
        "displacement_tons": 13000,
        "max_speed_knots": 30.0,
        "armament": ("112-cell VLS (HHQ-9, YJ-18, YJ-21)", "130 mm gun", "Type 1130 CIWS"),
        "fixed_wing_aircraft": 0,
        "helicopters": 2,
    },
    {
        "name": "Admiral Kuznetsov",
        "aliases": ("Admiral Flota Sovetskogo Soyuza Kuznetsov", "Kuznetsov"),
        "country": "RU",
        "ship_class": "Project 1143.5",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 58600,
        "max_speed_knots": 29.0,
        "armament": ("3K95 Kinzhal SAM", "Kashtan CIWS", "AK-630"),
        "fixed_wing_aircraft": 18,
        "helicopters": 12,
    },
    {
        "name": "Pyotr Velikiy",
        "aliases": ("Pyotr Veliky", "Peter the Great"),
        "country": "RU",
        "ship_class": "Kirov-class",
        "type": ShipTypeEnum.CRUISER,
        "displacement_tons": 25000,
        "max_speed_knots": 32.0,
        "armament": ("P-700 Granit", "S-300F Fort", "Kashtan CIWS"),
        "fixed_wing_aircraft": 0,
        "helicopters": 3,
    },
    {
        "name": "Charles de Gaulle",
        "aliases": ("R91", "FS Charles de Gaulle"),
        "country": "FR",
        "ship_class": "Charles de Gaulle-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 42500,
        "max_speed_knots": 27.0,
        "armament": ("Aster 15", "Mistral", "20 mm guns"),
        "fixed_wing_aircraft": 30,
        "helicopters": 5,
    },
    {
        "name": "HMS Queen Elizabeth",
        "aliases": ("R08", "Queen Elizabeth"),
        "country": "UK",
        "ship_class": "Queen Elizabeth-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 65000,
        "max_speed_knots": 25.0,
        "armament": ("Phalanx CIWS", "30 mm DS30M"),
        "fixed_wing_aircraft": 24,
        "helicopters": 14,
    },
    {
        "name": "HMS Prince of Wales",
        "aliases": ("R09", "Prince of Wales"),
        "country": "UK",
        "ship_class": "Queen Elizabeth-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 65000,
        "max_speed_knots": 25.0,
        "armament": ("Phalanx CIWS", "30 mm DS30M"),
        "fixed_wing_aircraft": 24,
        "helicopters": 14,
    },
    {
        "name": "INS Vikrant",
        "aliases": ("R11", "Vikrant"),
        "country": "IN",
        "ship_class": "Vikrant-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 45000,
        "max_speed_knots": 28.0,
        "armament": ("Barak 8", "AK-630", "76 mm OTO Melara"),
        "fixed_wing_aircraft": 26,
        "helicopters": 10,
    },
    {
        "name": "Cavour",
        "aliases": ("C550", "ITS Cavour"),
        "country": "IT",
        "ship_class": "Cavour-class",
        "type": ShipTypeEnum.CARRIER,
        "displacement_tons": 30000,
        "max_speed_knots": 29.0,
        "armament": ("Aster 15", "76 mm Oto Melara", "25 mm guns"),
        "fixed_wing_aircraft": 10,
        "helicopters": 12,
    },
    {
        "name": "Juan Carlos I",
        "aliases": ("L61", "SPS Juan Carlos I"),
        "country": "ES",
        "ship_class": "Juan Carlos I-class",
        "type": ShipTypeEnum.AMPHIBIOUS,
        "displacement_tons": 26000,
        "max_speed_knots": 21.0,
        "armament": ("20 mm Oerlikon", "12.7 mm machine guns"),
        "fixed_wing_aircraft": 10,
        "helicopters": 12,
    },
]

# Hull/navy prefixes stripped before name comparison
HULL_PREFIXES: frozenset[str] = frozenset({
    "USS", "HMS", "CNS", "PLAN", "RFS", "FS", "FNS", "INS", "JS", "ROKS",
    "HMAS", "HMCS", "FGS", "ITS", "SPS", "TCG", "IRIS", "PNS", "NAE",
})
