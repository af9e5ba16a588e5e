"""
Shared pytest fixtures and card factories for the manasim tests.

Factories build the small classified card records the engine works on:
basics, nonbasic lands of any archetype, mana rocks, dorks and ramp spells.
Tests import the factories through the `cards` fixture so they stay plain
pytest without helper-module path tricks.
"""

import random
from types import SimpleNamespace

import pytest

from manasim.config import Config
from manasim.constants import COLOR_TO_SUBTYPE
from manasim.engine.costs import total_cost
from manasim.model.card import (
    Card, DrawSpell, Exploration, FetchAbility, Land, LandArchetype as LA,
    ManaArtifact, ManaCreature, RampSpell, Ritual,
)
from manasim.model.game import GameState
from manasim.model.zones import Permanent
from manasim.utils.logging import TurnLog


# =============================================================================
# Card factories
# =============================================================================

def basic(color, name=None):
    subtype = COLOR_TO_SUBTYPE[color]
    return Land(name=name or subtype, produces=(color,), is_basic=True, subtypes=(subtype,))


def land(name, produces, archetype=LA.PLAIN, **kw):
    return Land(name=name, produces=tuple(produces), archetype=archetype, **kw)


def fetch(name="Polluted Delta", colors=("U", "B"), **kw):
    return Land(name=name, archetype=LA.FETCH, fetch=FetchAbility(colors=tuple(colors), **kw))


def spell(name, mana_cost):
    return Card(name=name, cmc=total_cost(mana_cost), mana_cost=mana_cost)


def artifact(name, mana_cost="{1}", produces=("C",), **kw):
    return ManaArtifact(name=name, cmc=total_cost(mana_cost), mana_cost=mana_cost,
                        produces=tuple(produces), **kw)


def creature(name="Llanowar Elves", mana_cost="{G}", produces=("G",), **kw):
    return ManaCreature(name=name, cmc=total_cost(mana_cost), mana_cost=mana_cost,
                        produces=tuple(produces), **kw)


def ramp(name="Cultivate", mana_cost="{2}{G}", **kw):
    return RampSpell(name=name, cmc=total_cost(mana_cost), mana_cost=mana_cost, **kw)


def exploration(name="Azusa, Lost but Seeking", mana_cost="{2}{G}", **kw):
    return Exploration(name=name, cmc=total_cost(mana_cost), mana_cost=mana_cost, **kw)


def ritual(name="Dark Ritual", mana_cost="{B}", **kw):
    return Ritual(name=name, cmc=total_cost(mana_cost), mana_cost=mana_cost, **kw)


def draw_spell(name="Divination", mana_cost="{2}{U}", **kw):
    return DrawSpell(name=name, cmc=total_cost(mana_cost), mana_cost=mana_cost, **kw)


def perms(*cards, **kw):
    return [Permanent(c, **kw) for c in cards]


@pytest.fixture
def cards():
    """Namespace of the card factories above."""
    return SimpleNamespace(
        basic=basic, land=land, fetch=fetch, spell=spell, artifact=artifact,
        creature=creature, ramp=ramp, exploration=exploration, ritual=ritual,
        draw_spell=draw_spell, perms=perms,
    )


# =============================================================================
# Game fixtures
# =============================================================================

@pytest.fixture
def log():
    return TurnLog(turn=1)


@pytest.fixture
def game():
    """Empty game with default config; tests fill the zones they need."""
    return GameState(cfg=Config(), rng=random.Random(7))
