"""Dealer and auto-play decision policies."""

from charlie.strategy.autoplay import Action, AutoPlayStrategy, should_hit, up_card_value
from charlie.strategy.dealer import dealer_should_draw, is_dealer_charlie

__all__ = [
    "Action",
    "AutoPlayStrategy",
    "should_hit",
    "up_card_value",
    "dealer_should_draw",
    "is_dealer_charlie",
]
