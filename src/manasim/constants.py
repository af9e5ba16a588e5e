# src/manasim/constants.py
COLORS = ("W", "U", "B", "R", "G")
COLORLESS = "C"
ANY = "any"

SUBTYPE_TO_COLOR = {"Plains": "W", "Island": "U", "Swamp": "B", "Mountain": "R", "Forest": "G"}
COLOR_TO_SUBTYPE = {c: t for t, c in SUBTYPE_TO_COLOR.items()}

# play_land / activate_fetch_lands (turn is the 0-based turn index)
SHOCK_UNTAPPED_LAST_TURN = 6
MDFC_UNTAPPED_LAST_TURN = 4
DEFAULT_SHOCK_LIFE = 2
DEFAULT_MDFC_LIFE = 3
CLASSIC_FETCH_LIFE = 1

# calculate_battlefield_damage
COIN_FLIP_DAMAGE = 1.5
PAIN_LAND_LAST_TURN = 5

# calculate_mana_availability
MOX_CONDITIONS_IGNORED_FROM_TURN = 2   # turn index; Mox Opal / Mox Amber assumed online
METALCRAFT_ARTIFACTS = 3
TEMPLE_MIN_LANDS = 5
COFFERS_ACTIVATION = 2
