"""Tests for hand evaluation."""

from hypothesis import given

from charlie.cards import Card, Rank, Suit
from charlie.hand import Hand, HandValue, evaluate
from conftest import cards, hand, hand_strategy


class TestEvaluate:
    """Tests for the evaluate function."""

    def test_empty(self):
        """Test that no cards total zero and are hard."""
        assert evaluate([]) == HandValue(total=0, is_soft=False)

    def test_soft_17(self):
        """Test that A-6 is soft 17."""
        assert evaluate(cards("AS", "6H")) == HandValue(total=17, is_soft=True)

    def test_ace_demoted(self):
        """Test that A-6-K demotes the ace to a hard 17."""
        assert evaluate(cards("AS", "6H", "KD")) == HandValue(total=17, is_soft=False)

    def test_two_aces_and_nine(self):
        """Test that A-A-9 is soft 21 (one ace demoted, one kept)."""
        assert evaluate(cards("AS", "AH", "9D")) == HandValue(total=21, is_soft=True)

    def test_pair_of_aces(self):
        """Test that A-A is soft 12."""
        assert evaluate(cards("AS", "AH")) == HandValue(total=12, is_soft=True)

    def test_all_aces_demoted(self):
        """Test that demoting every ace leaves a hard hand."""
        assert evaluate(cards("AS", "AH", "KD", "QC")) == HandValue(total=22, is_soft=False)

    def test_face_cards_count_ten(self):
        """Test face card values."""
        assert evaluate(cards("JS", "QH", "KD")).total == 30

    def test_accepts_any_iterable(self):
        """Test that a generator of cards can be evaluated."""
        assert evaluate(c for c in cards("5S", "6H")).total == 11

    def test_does_not_mutate(self):
        """Test that evaluation leaves the cards untouched."""
        held = cards("AS", "AH", "9D")
        before = list(held)
        evaluate(held)
        assert held == before

    def test_str(self):
        """Test string form."""
        assert str(HandValue(17, True)) == "soft 17"
        assert str(HandValue(17, False)) == "17"

    @given(hand_strategy())
    def test_pure_and_idempotent(self, h):
        """Test that repeated evaluation returns identical results."""
        before = list(h.cards)
        first = evaluate(h.cards)
        second = evaluate(h.cards)
        assert first == second
        assert h.cards == before
        assert first.total >= 0

    @given(hand_strategy())
    def test_no_ace_is_hard(self, h):
        """Test that hands without aces are never soft."""
        no_aces = [c for c in h.cards if not c.is_ace]
        assert not evaluate(no_aces).is_soft

    @given(hand_strategy())
    def test_soft_hand_never_busts(self, h):
        """Test that a soft total is at most 21."""
        value = evaluate(h.cards)
        if value.is_soft:
            assert value.total <= 21

    @given(hand_strategy())
    def test_total_matches_counting_aces_as_one(self, h):
        """Test that the total is the hard count, plus 10 exactly when soft."""
        hard = sum(1 if c.is_ace else c.base_value for c in h.cards)
        value = evaluate(h.cards)
        assert value.total == hard + (10 if value.is_soft else 0)


class TestHand:
    """Tests for the Hand class."""

    def test_empty_hand(self, empty_hand):
        """Test empty hand properties."""
        assert len(empty_hand) == 0
        assert empty_hand.value == 0
        assert not empty_hand.is_soft
        assert not empty_hand.is_blackjack
        assert not empty_hand.is_busted
        assert empty_hand.up_card is None

    def test_add_card(self, empty_hand):
        """Test adding cards to hand."""
        empty_hand.add_card(Card(Rank.TEN, Suit.SPADES))
        assert len(empty_hand) == 1
        assert empty_hand.value == 10
        assert empty_hand.up_card == Card(Rank.TEN, Suit.SPADES)

    def test_hard_hand_value(self, hard_16_hand):
        """Test hard hand value calculation."""
        assert hard_16_hand.value == 16
        assert not hard_16_hand.is_soft

    def test_soft_hand_value(self, soft_17_hand):
        """Test soft hand value calculation."""
        assert soft_17_hand.value == 17
        assert soft_17_hand.is_soft

    def test_blackjack(self, blackjack_hand):
        """Test blackjack detection."""
        assert blackjack_hand.is_blackjack
        assert blackjack_hand.value == 21
        assert "BLACKJACK" in str(blackjack_hand)

    def test_not_blackjack_three_cards(self):
        """Test that 21 with 3+ cards is not blackjack."""
        h = hand("7S", "7H", "7C")
        assert h.value == 21
        assert not h.is_blackjack

    def test_bust(self, bust_hand):
        """Test bust detection."""
        assert bust_hand.is_busted
        assert bust_hand.value == 26
        assert "BUST" in str(bust_hand)

    def test_soft_to_hard_transition(self):
        """Test ace switching from 11 to 1."""
        h = hand("AS")
        assert h.value == 11
        assert h.is_soft

        h.add_card(Card(Rank.FIVE, Suit.HEARTS))
        assert h.value == 16
        assert h.is_soft

        h.add_card(Card(Rank.EIGHT, Suit.CLUBS))
        assert h.value == 14
        assert not h.is_soft

    def test_charlie(self):
        """Test six-card Charlie detection."""
        h = hand("2S", "2H", "3C", "3D", "4S", "AH")
        assert h.value == 15
        assert h.is_charlie

    def test_six_card_bust_is_not_charlie(self):
        """Test that a busted six-card hand is not a Charlie."""
        h = hand("2S", "2H", "3C", "3D", "KS", "QH")
        assert h.is_busted
        assert not h.is_charlie

    def test_clear(self, soft_17_hand):
        """Test clearing a hand."""
        soft_17_hand.clear()
        assert len(soft_17_hand) == 0

    def test_str_soft(self, soft_17_hand):
        """Test string form of a soft hand."""
        assert "(soft 17)" in str(soft_17_hand)
