# src/manasim/engine/rounds.py
from manasim.model.card import DrawSpell
from manasim.model.game import GameState
from manasim.engine.damage import upkeep_damage
from manasim.engine.setup import draw
from manasim.utils.logging import TurnLog

def _untap(g: GameState) -> None:
    # untap + summoning sickness wears off; Mana Vault and the Monoliths stay tapped
    for p in g.battlefield:
        if not getattr(p.card, "doesnt_untap", False):
            p.tapped = False
        p.summoning_sick = False

def _upkeep(g: GameState, rec: TurnLog) -> None:
    dmg = upkeep_damage(g.battlefield)
    if dmg.total > 0:
        g.lose_life(dmg.total, rec)
        for msg in dmg.breakdown:
            rec.emit(msg)

    if not getattr(g.cfg, "include_draw_spells", True):
        return
    disabled = g.cfg.disabled_draw_spells
    for p in list(g.battlefield):
        card = p.card
        if not isinstance(card, DrawSpell) or not card.stays_on_battlefield or card.name in disabled:
            continue
        full = int(card.per_turn)
        n = full + (1 if g.rng.random() < card.per_turn - full else 0)
        drawn = draw(g, n)
        if drawn:
            rec.emit(f"{card.name}: drew {len(drawn)} card{'s' if len(drawn) != 1 else ''}")

def start_of_turn(g: GameState) -> TurnLog:
    g.turn += 1
    rec = g.begin_turn_log()

    _untap(g)
    _upkeep(g, rec)

    # no draw on the play, except commander
    if g.turn > 1 or g.cfg.commander_mode:
        for c in draw(g, 1):
            rec.emit(f"Drew: {c.name}")
    return rec

def end_of_turn(g: GameState, rec: TurnLog) -> None:
    """Discard down to hand size: excess lands first when flooded, else the priciest spells."""
    limit = g.cfg.hand_size
    excess = len(g.hand) - limit
    if excess <= 0:
        return

    flooded = len(g.zones.lands_in_play()) >= g.cfg.flood_lands
    order = sorted(
        g.hand,
        key=lambda c: (0 if (c.is_land == flooded) else 1, -c.cmc),
    )
    for c in order[:excess]:
        g.hand.remove(c)
        g.graveyard.append(c)
        rec.emit(f"Discarded {c.name} (hand size)")
